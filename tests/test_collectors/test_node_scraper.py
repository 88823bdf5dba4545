"""Tests for NodeScraper."""

import httpx
import pytest

from impala_exporter.collectors.node_scraper import NodeScraper
from impala_exporter.utils.errors import DecodeFailed, FetchFailed, MetricNotFound
from impala_exporter.utils.metrics import NodeTarget
from impala_exporter.utils.status import ScrapeOutcome

from conftest import gc_bean, jmx_body, make_transport


TARGET = NodeTarget(identifier="10.0.0.1", snapshot_url="http://10.0.0.1:25000/jmx")


async def scrape_with(routes, logger, target=TARGET):
    async with httpx.AsyncClient(transport=make_transport(routes)) as client:
        return await NodeScraper(client, logger).scrape(target)


@pytest.mark.asyncio
async def test_scrape_success(scenario_a_bean, logger):
    """Test a well-formed snapshot yields tagged totals."""
    result = await scrape_with({"10.0.0.1": jmx_body(scenario_a_bean)}, logger)

    assert result.node_identifier == "10.0.0.1"
    assert result.totals["totalUsedAfterGc"] == 30.0
    assert result.totals["duration"] == 1.5


@pytest.mark.asyncio
async def test_scrape_http_500(logger):
    """Test non-2xx status raises FetchFailed."""
    with pytest.raises(FetchFailed) as excinfo:
        await scrape_with({"10.0.0.1": httpx.Response(500, text="boom")}, logger)

    assert excinfo.value.node == "10.0.0.1"
    assert excinfo.value.outcome is ScrapeOutcome.FETCH_FAILED
    assert "HTTP 500" in str(excinfo.value)


@pytest.mark.asyncio
async def test_scrape_transport_error(logger):
    """Test connection errors raise FetchFailed."""
    with pytest.raises(FetchFailed):
        await scrape_with({"10.0.0.1": httpx.ConnectError("connection refused")}, logger)


@pytest.mark.asyncio
async def test_scrape_timeout(logger):
    """Test timeouts raise FetchFailed."""
    with pytest.raises(FetchFailed):
        await scrape_with({"10.0.0.1": httpx.ReadTimeout("timed out")}, logger)


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    b"<html>not json</html>",
    b"",
    b"[1, 2, 3]",
    b'{"beans": {"name": "x"}}',
    b'{"items": []}',
    b"[" * 100000 + b"]" * 100000,
])
async def test_scrape_malformed_body(body, logger):
    """Test bodies that are not JMX snapshots raise DecodeFailed."""
    with pytest.raises(DecodeFailed) as excinfo:
        await scrape_with({"10.0.0.1": body}, logger)

    assert excinfo.value.outcome is ScrapeOutcome.DECODE_FAILED


@pytest.mark.asyncio
async def test_scrape_metric_not_found(logger):
    """Test a snapshot without the GC bean raises MetricNotFound."""
    with pytest.raises(MetricNotFound) as excinfo:
        await scrape_with({"10.0.0.1": jmx_body()}, logger)

    assert excinfo.value.outcome is ScrapeOutcome.METRIC_NOT_FOUND


@pytest.mark.asyncio
async def test_scrape_custom_target_bean(logger):
    """Test the target bean name is configurable."""
    bean = gc_bean(duration=4, name="java.lang:type=GarbageCollector,name=G1 Old Generation")
    async with httpx.AsyncClient(transport=make_transport({"10.0.0.1": jmx_body(bean)})) as client:
        scraper = NodeScraper(
            client, logger, target_bean="java.lang:type=GarbageCollector,name=G1 Old Generation"
        )
        result = await scraper.scrape(TARGET)

    assert result.totals["duration"] == 4.0
