"""Name-keyed index over the ``beans`` list of a JMX snapshot."""

import logging
from typing import Any, Dict, Iterable, Optional


class RecordIndex:
    """Mapping from bean name to bean record."""

    def __init__(self, records: Dict[str, Dict[str, Any]]):
        self._records = records

    @classmethod
    def build(
        cls,
        records: Iterable[Any],
        logger: Optional[logging.Logger] = None
    ) -> "RecordIndex":
        """
        Index records by their ``name`` field.

        Records that are not objects or lack a string ``name`` are skipped.
        When several records share a name the last one wins.

        Args:
            records: Decoded bean records in snapshot order
            logger: Optional logger for skipped records

        Returns:
            RecordIndex: Index over the named records
        """
        logger = logger or logging.getLogger(__name__)
        indexed: Dict[str, Dict[str, Any]] = {}
        skipped = 0

        for position, record in enumerate(records):
            name = record.get("name") if isinstance(record, dict) else None
            if not isinstance(name, str):
                skipped += 1
                logger.debug(f"Skipping bean #{position} without a string name")
                continue
            indexed[name] = record

        if skipped:
            logger.info(f"Skipped {skipped} unnamed bean(s) while indexing")

        return cls(indexed)

    def lookup(self, name: str) -> Optional[Dict[str, Any]]:
        """Return the record named ``name`` or None when absent."""
        return self._records.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._records

    def __len__(self) -> int:
        return len(self._records)

    def names(self):
        return list(self._records)
