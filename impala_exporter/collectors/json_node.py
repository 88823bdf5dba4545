"""Tagged wrapper over decoded JSON values with total, non-raising accessors."""

import math
from enum import Enum
from typing import Any, Dict, List, Optional


class JsonKind(Enum):
    """Shape of a decoded JSON value."""

    OBJECT = "object"
    ARRAY = "array"
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    NULL = "null"
    MISSING = "missing"


def _kind_of(value: Any) -> JsonKind:
    # bool is checked before int since bool subclasses int
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, dict):
        return JsonKind.OBJECT
    if isinstance(value, (list, tuple)):
        return JsonKind.ARRAY
    if value is None:
        return JsonKind.NULL
    return JsonKind.MISSING


class JsonNode:
    """
    One node of a decoded JSON document.

    Every accessor returns either a value of the requested type or an
    absence indicator (``None``, an empty container, or a MISSING node),
    so navigation never raises regardless of the document shape.
    """

    __slots__ = ("_value", "kind")

    def __init__(self, value: Any = None, kind: Optional[JsonKind] = None):
        self._value = value
        self.kind = kind if kind is not None else _kind_of(value)

    @classmethod
    def missing(cls) -> "JsonNode":
        return cls(None, JsonKind.MISSING)

    @property
    def is_missing(self) -> bool:
        return self.kind is JsonKind.MISSING

    @property
    def raw(self) -> Any:
        return self._value

    def get(self, key: str, ignore_case: bool = False) -> "JsonNode":
        """
        Return the child at ``key`` or a MISSING node.

        Args:
            key: Object member name
            ignore_case: Fall back to a case-insensitive match when the
                exact key is absent

        Returns:
            JsonNode: Child node, MISSING if this is not an object or the
            key is absent
        """
        if self.kind is not JsonKind.OBJECT:
            return JsonNode.missing()
        if key in self._value:
            return JsonNode(self._value[key])
        if ignore_case:
            lowered = key.lower()
            for name, value in self._value.items():
                if isinstance(name, str) and name.lower() == lowered:
                    return JsonNode(value)
        return JsonNode.missing()

    def index(self, position: int) -> "JsonNode":
        if self.kind is not JsonKind.ARRAY:
            return JsonNode.missing()
        if -len(self._value) <= position < len(self._value):
            return JsonNode(self._value[position])
        return JsonNode.missing()

    def as_float(self) -> Optional[float]:
        """Finite float value; NaN, infinities and out-of-range ints count as absent."""
        if self.kind is not JsonKind.NUMBER:
            return None
        try:
            number = float(self._value)
        except OverflowError:
            return None
        if not math.isfinite(number):
            return None
        return number

    def as_str(self) -> Optional[str]:
        if self.kind is not JsonKind.STRING:
            return None
        return self._value

    def as_dict(self) -> Optional[Dict[str, Any]]:
        if self.kind is not JsonKind.OBJECT:
            return None
        return self._value

    def as_list(self) -> List["JsonNode"]:
        """Return array items wrapped as nodes, empty for non-arrays."""
        if self.kind is not JsonKind.ARRAY:
            return []
        return [JsonNode(item) for item in self._value]

    def __repr__(self) -> str:
        return f"JsonNode({self.kind.value}, {self._value!r})"
