"""Prometheus exposition of scrape snapshots."""

import asyncio
import logging
from typing import Iterator, List, Optional

from prometheus_client import CollectorRegistry
from prometheus_client.core import GaugeMetricFamily
from prometheus_client.metrics_core import Metric

from ..collectors.coordinator import ScrapeCoordinator
from ..config.models import ExporterConfig
from ..utils.metrics import METRIC_NAMES, ScrapeSnapshot


NODE_LABEL = "ip"
CLUSTER_LABEL = "cluster"


class MetricSnapshotPublisher:
    """
    Custom Prometheus collector backed by a ScrapeCoordinator.

    Each pull runs one full scrape cycle and renders the resulting snapshot
    as fresh gauge families. Nodes that failed the cycle are simply absent.
    """

    def __init__(
        self,
        config: ExporterConfig,
        coordinator: ScrapeCoordinator,
        logger: logging.Logger
    ):
        self.config = config
        self.coordinator = coordinator
        self.logger = logger.getChild(self.__class__.__name__)

    def metric_name(self, metric: str) -> str:
        """Fully-qualified metric name, e.g. impala_jmx_duration."""
        parts = [self.config.namespace, self.config.subsystem, metric]
        return "_".join(part for part in parts if part)

    def _families(self) -> List[GaugeMetricFamily]:
        return [
            GaugeMetricFamily(
                self.metric_name(metric),
                f"JMX metric {metric}",
                labels=[NODE_LABEL, CLUSTER_LABEL]
            )
            for metric in METRIC_NAMES
        ]

    def describe(self) -> Iterator[Metric]:
        """Yield empty families so registration does not trigger a scrape."""
        return iter(self._families())

    def collect(self) -> Iterator[Metric]:
        """Run one scrape cycle and yield its gauges."""
        snapshot = self.scrape()
        return iter(self.render(snapshot))

    def scrape(self) -> ScrapeSnapshot:
        # Called from the exposition server thread, which has no running loop
        return asyncio.run(self.coordinator.collect())

    def render(self, snapshot: ScrapeSnapshot) -> List[GaugeMetricFamily]:
        """
        Convert a snapshot into gauge families.

        Args:
            snapshot: Result of one scrape cycle

        Returns:
            List[GaugeMetricFamily]: One family per metric name, one sample
            per node that succeeded
        """
        families = self._families()
        for _, result in sorted(snapshot.by_node().items()):
            for family, metric in zip(families, METRIC_NAMES):
                family.add_metric(
                    [result.node_identifier, self.config.cluster],
                    result.totals.get(metric, 0.0)
                )
        return families

    def register(self, registry: Optional[CollectorRegistry] = None) -> CollectorRegistry:
        """Register on ``registry`` (a fresh one by default) and return it."""
        registry = registry if registry is not None else CollectorRegistry()
        registry.register(self)
        return registry
