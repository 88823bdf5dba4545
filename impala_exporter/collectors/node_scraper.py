"""Fetch-decode-aggregate sequence for a single Impala daemon."""

import json
import logging
from typing import Any, List

import httpx

from ..utils.errors import DecodeFailed, FetchFailed, MetricNotFound
from ..utils.metrics import AggregateResult, NodeTarget
from .aggregator import reduce_measurement
from .gc_decoder import GCFieldDecoder
from .record_index import RecordIndex


DEFAULT_TARGET_BEAN = "java.lang:type=GarbageCollector,name=PS MarkSweep"


class NodeScraper:
    """Scrape one node's ``/jmx`` snapshot into an AggregateResult."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        logger: logging.Logger,
        target_bean: str = DEFAULT_TARGET_BEAN
    ):
        """
        Initialize node scraper.

        Args:
            client: Shared HTTP client; owns timeouts and connection pooling
            logger: Logger instance
            target_bean: Exact name of the GarbageCollector bean to read
        """
        self.client = client
        self.logger = logger.getChild(self.__class__.__name__)
        self.target_bean = target_bean
        self.decoder = GCFieldDecoder(self.logger)

    async def scrape(self, target: NodeTarget) -> AggregateResult:
        """
        Scrape one node.

        Args:
            target: Node to scrape

        Returns:
            AggregateResult: Totals tagged with the node identifier

        Raises:
            FetchFailed: Transport error or non-2xx status
            DecodeFailed: Body is not a JMX snapshot
            MetricNotFound: Target bean absent from the snapshot
        """
        body = await self._fetch(target)
        beans = self._decode_snapshot(target, body)

        index = RecordIndex.build(beans, self.logger)
        record = index.lookup(self.target_bean)
        if record is None:
            raise MetricNotFound(
                target.identifier,
                f"Bean {self.target_bean!r} not found among {len(index)} beans"
            )

        measurement = self.decoder.decode(record)
        totals = reduce_measurement(measurement)

        return AggregateResult(node_identifier=target.identifier, totals=totals)

    async def _fetch(self, target: NodeTarget) -> bytes:
        try:
            response = await self.client.get(target.snapshot_url)
        except httpx.HTTPError as e:
            raise FetchFailed(
                target.identifier,
                f"Request to {target.snapshot_url} failed: {e.__class__.__name__}: {e}"
            ) from e

        if not response.is_success:
            raise FetchFailed(
                target.identifier,
                f"HTTP {response.status_code} from {target.snapshot_url}"
            )
        return response.content

    @staticmethod
    def _decode_snapshot(target: NodeTarget, body: bytes) -> List[Any]:
        try:
            payload = json.loads(body)
        except (ValueError, RecursionError) as e:
            raise DecodeFailed(target.identifier, f"Invalid JSON body: {e.__class__.__name__}: {e}") from e

        beans = payload.get("beans") if isinstance(payload, dict) else None
        if not isinstance(beans, list):
            raise DecodeFailed(target.identifier, "Snapshot has no 'beans' list")
        return beans
