"""Metric data structures shared by the scrape pipeline."""

from dataclasses import dataclass, field
from typing import Dict, Tuple


# Order matches the exposition order of the exporter
METRIC_NAMES: Tuple[str, ...] = (
    "totalCommitedAfterGc",
    "totalInitAfterGc",
    "totalUsedAfterGc",
    "totalMaxAfterGc",
    "totalCommitedBeforeGc",
    "totalInitBeforeGc",
    "totalUsedBeforeGc",
    "totalMaxBeforeGc",
    "duration",
)


@dataclass(frozen=True)
class NodeTarget:
    """One monitored Impala daemon."""

    identifier: str
    snapshot_url: str


@dataclass
class AggregateResult:
    """Per-node totals produced by one successful scrape."""

    node_identifier: str
    totals: Dict[str, float]


@dataclass(frozen=True)
class ScrapeSnapshot:
    """All successful node results of a single scrape cycle."""

    results: Tuple[AggregateResult, ...] = field(default_factory=tuple)
    failed_nodes: Tuple[str, ...] = field(default_factory=tuple)

    def by_node(self) -> Dict[str, AggregateResult]:
        return {result.node_identifier: result for result in self.results}

    def __len__(self) -> int:
        return len(self.results)
