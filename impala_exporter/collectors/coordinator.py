"""Bounded fan-out of node scrapes into one snapshot per cycle."""

import asyncio
import logging
import time
from typing import List, Optional, Sequence

import httpx

from ..config.models import ExporterConfig
from ..utils.errors import ScrapeError
from ..utils.metrics import AggregateResult, NodeTarget, ScrapeSnapshot
from ..utils.status import ScrapeOutcome
from .base import BaseCollector, safe_collect
from .node_scraper import NodeScraper


class ScrapeCoordinator(BaseCollector):
    """Runs one NodeScraper per target under a concurrency cap."""

    def __init__(
        self,
        config: ExporterConfig,
        logger: logging.Logger,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize scrape coordinator.

        Args:
            config: Exporter configuration (targets, worker cap, timeout)
            logger: Logger instance
            transport: Optional httpx transport, used to fake nodes in tests
        """
        super().__init__(config, logger)
        self.transport = transport

    async def collect(
        self,
        targets: Optional[Sequence[NodeTarget]] = None,
        max_concurrency: Optional[int] = None
    ) -> ScrapeSnapshot:
        """
        Scrape all targets and wait for every task to finish.

        Args:
            targets: Nodes to scrape (default: configured nodes)
            max_concurrency: In-flight scrape cap (default: configured workers)

        Returns:
            ScrapeSnapshot: One result per node that scraped successfully
        """
        targets = list(self.config.targets() if targets is None else targets)
        max_concurrency = self.config.num_workers if max_concurrency is None else max_concurrency
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be positive, got {max_concurrency}")

        return await self._run_cycle(targets, max_concurrency)

    @safe_collect
    async def _run_cycle(
        self,
        targets: List[NodeTarget],
        max_concurrency: int
    ) -> ScrapeSnapshot:
        """Fan out, wait for every task, merge successes."""
        # Nodes without a URL never take a worker slot
        active = [target for target in targets if target.snapshot_url]
        if len(active) < len(targets):
            self.logger.debug(f"Skipping {len(targets) - len(active)} target(s) without URL")

        if not active:
            self.logger.info("No nodes configured for scraping")
            return ScrapeSnapshot()

        start_time = time.time()
        semaphore = asyncio.Semaphore(max_concurrency)

        async with httpx.AsyncClient(
            timeout=self.config.request_timeout_s,
            transport=self.transport
        ) as client:
            scraper = NodeScraper(client, self.logger, self.config.target_bean)

            async def bounded(target: NodeTarget) -> AggregateResult:
                async with semaphore:
                    return await scraper.scrape(target)

            tasks = [bounded(target) for target in active]
            outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        results: List[AggregateResult] = []
        failed: List[str] = []
        for target, outcome in zip(active, outcomes):
            if isinstance(outcome, ScrapeError):
                failed.append(target.identifier)
                self.logger.warning(
                    f"Scrape failed: {outcome}",
                    extra={"node": target.identifier, "outcome": outcome.outcome.value}
                )
            elif isinstance(outcome, BaseException):
                failed.append(target.identifier)
                self.logger.error(
                    f"Unexpected error scraping {target.identifier}: {outcome}",
                    exc_info=outcome,
                    extra={"node": target.identifier}
                )
            else:
                results.append(outcome)
                self.logger.debug(
                    f"Scraped {target.identifier}",
                    extra={
                        "node": target.identifier,
                        "outcome": ScrapeOutcome.SUCCESS.value,
                        "totals": outcome.totals,
                    }
                )

        self.logger.info(
            f"Scrape cycle finished: {len(results)}/{len(active)} node(s) in "
            f"{(time.time() - start_time) * 1000:.0f}ms",
            extra={
                "succeeded": len(results),
                "failed_nodes": failed,
            }
        )
        return ScrapeSnapshot(results=tuple(results), failed_nodes=tuple(failed))
