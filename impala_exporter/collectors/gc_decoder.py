"""Structural decoding of the JVM garbage-collector bean."""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .json_node import JsonKind, JsonNode


@dataclass(frozen=True)
class PoolUsage:
    """Memory usage of one pool, in bytes."""

    used: float = 0.0
    max: float = 0.0
    committed: float = 0.0
    init: float = 0.0


@dataclass(frozen=True)
class GCMeasurement:
    """Last GC duration plus pool usages around that collection."""

    duration: float = 0.0
    pool_usages_after: List[PoolUsage] = field(default_factory=list)
    pool_usages_before: List[PoolUsage] = field(default_factory=list)


class GCFieldDecoder:
    """
    Decode the ``LastGcInfo`` block of a GarbageCollector bean.

    Every field is decoded on its own: a field of unexpected shape falls
    back to its default (0.0 or an empty list) and never aborts sibling
    fields. The JVM omits ``LastGcInfo`` entirely until the first
    collection has run, which yields an all-default measurement.
    """

    LAST_GC_INFO = "LastGcInfo"
    DURATION = "duration"
    USAGE_AFTER = "memoryUsageAfterGc"
    USAGE_BEFORE = "memoryUsageBeforeGc"
    USAGE_FIELDS = ("used", "max", "committed", "init")

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def decode(self, record: Any) -> GCMeasurement:
        """
        Decode one bean record.

        Args:
            record: Bean record as decoded from JSON (any shape)

        Returns:
            GCMeasurement: Decoded measurement with defaults for absent fields
        """
        info = JsonNode(record).get(self.LAST_GC_INFO, ignore_case=True)
        if info.as_dict() is None:
            self._skipped(self.LAST_GC_INFO, info)

        duration_node = info.get(self.DURATION, ignore_case=True)
        duration = duration_node.as_float()
        if duration is None:
            self._skipped(self.DURATION, duration_node)
            duration = 0.0

        return GCMeasurement(
            duration=duration,
            pool_usages_after=self._decode_usages(info, self.USAGE_AFTER),
            pool_usages_before=self._decode_usages(info, self.USAGE_BEFORE),
        )

    def _decode_usages(self, info: JsonNode, key: str) -> List[PoolUsage]:
        node = info.get(key, ignore_case=True)
        if node.kind is not JsonKind.ARRAY:
            self._skipped(key, node)
            return []

        usages = []
        for position, entry in enumerate(node.as_list()):
            usage = self._decode_usage(entry)
            if usage is None:
                self._skipped(f"{key}[{position}]", entry)
                continue
            usages.append(usage)
        return usages

    def _decode_usage(self, entry: JsonNode) -> Optional[PoolUsage]:
        # Entries are {"key": pool, "value": {...}}; a bare usage object is also accepted
        value = entry.get("value")
        if value.as_dict() is None:
            value = entry
        if value.as_dict() is None:
            return None

        numbers = {}
        for name in self.USAGE_FIELDS:
            number = value.get(name).as_float()
            if number is None:
                self._skipped(name, value.get(name))
                number = 0.0
            numbers[name] = number
        return PoolUsage(**numbers)

    def _skipped(self, field_name: str, node: JsonNode) -> None:
        self.logger.debug(
            f"Field {field_name} decoded to default",
            extra={"field": field_name, "kind": node.kind.value}
        )
