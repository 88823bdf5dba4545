"""Shared pytest configuration and fixtures."""

import json

import httpx
import pytest

from impala_exporter.config.models import ExporterConfig
from impala_exporter.utils.logger import setup_logger


GC_BEAN = "java.lang:type=GarbageCollector,name=PS MarkSweep"


def usage_entry(pool, used, max_, committed, init):
    """One element of memoryUsageAfterGc / memoryUsageBeforeGc."""
    return {
        "key": pool,
        "value": {"used": used, "max": max_, "committed": committed, "init": init},
    }


def gc_bean(after=None, before=None, duration=0, name=GC_BEAN):
    """GarbageCollector bean shaped like an Impala /jmx response."""
    return {
        "name": name,
        "modelerType": "sun.management.GarbageCollectorImpl",
        "LastGcInfo": {
            "GcThreadCount": 8,
            "duration": duration,
            "endTime": 7269,
            "id": 2,
            "memoryUsageAfterGc": after or [],
            "memoryUsageBeforeGc": before or [],
            "startTime": 7260,
        },
        "CollectionCount": 2,
        "CollectionTime": 21,
        "Valid": True,
    }


def jmx_body(*beans):
    """Serialized /jmx response body."""
    filler = {"name": "java.lang:type=Memory", "Verbose": False}
    return json.dumps({"beans": [filler, *beans]}).encode()


@pytest.fixture
def logger():
    """Create logger for tests."""
    return setup_logger("test", "DEBUG")


@pytest.fixture
def scenario_a_bean():
    """GC bean from the two-pool reference scenario."""
    return gc_bean(
        after=[
            usage_entry("PS Eden Space", 10, 100, 50, 5),
            usage_entry("PS Old Gen", 20, 200, 60, 5),
        ],
        duration=1.5,
    )


@pytest.fixture
def config():
    """Exporter configuration with three daemons."""
    return ExporterConfig(nodes=["10.0.0.1", "10.0.0.2", "10.0.0.3"], num_workers=3)


def make_transport(routes):
    """
    MockTransport answering by host.

    Args:
        routes: host -> httpx.Response, bytes body (HTTP 200), or Exception
    """
    def handler(request):
        answer = routes.get(request.url.host)
        if answer is None:
            return httpx.Response(404)
        if isinstance(answer, Exception):
            raise answer
        if isinstance(answer, httpx.Response):
            return answer
        return httpx.Response(200, content=answer)

    return httpx.MockTransport(handler)
