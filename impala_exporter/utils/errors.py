"""Per-node scrape errors.

All of these are local to a single node's scrape task. The coordinator
catches them at the task boundary, logs them, and drops the node from the
current snapshot.
"""

from .status import ScrapeOutcome


class ScrapeError(Exception):
    """Base class for a failed node scrape."""

    outcome = ScrapeOutcome.FETCH_FAILED

    def __init__(self, node: str, message: str):
        super().__init__(f"[{node}] {message}")
        self.node = node
        self.message = message


class FetchFailed(ScrapeError):
    """Transport error or non-2xx HTTP status."""

    outcome = ScrapeOutcome.FETCH_FAILED


class DecodeFailed(ScrapeError):
    """Response body is not a JSON object holding a ``beans`` list."""

    outcome = ScrapeOutcome.DECODE_FAILED


class MetricNotFound(ScrapeError):
    """Target bean is absent from an otherwise well-formed snapshot."""

    outcome = ScrapeOutcome.METRIC_NOT_FOUND
