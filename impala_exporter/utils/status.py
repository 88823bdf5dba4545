"""Scrape outcome enumeration."""

from enum import Enum


class ScrapeOutcome(Enum):
    """Terminal state of one node scrape within a cycle."""

    SUCCESS = "success"
    FETCH_FAILED = "fetch_failed"
    DECODE_FAILED = "decode_failed"
    METRIC_NOT_FOUND = "metric_not_found"
