"""Reduce per-pool GC usages into fixed per-node totals."""

from typing import Dict, Iterable

from .gc_decoder import GCMeasurement, PoolUsage
from ..utils.metrics import METRIC_NAMES


def _sum_usages(usages: Iterable[PoolUsage], suffix: str) -> Dict[str, float]:
    totals = {
        f"totalUsed{suffix}": 0.0,
        f"totalCommited{suffix}": 0.0,
        f"totalInit{suffix}": 0.0,
        f"totalMax{suffix}": 0.0,
    }
    for usage in usages:
        totals[f"totalUsed{suffix}"] += usage.used
        totals[f"totalCommited{suffix}"] += usage.committed
        totals[f"totalInit{suffix}"] += usage.init
        totals[f"totalMax{suffix}"] += usage.max
    return totals


def reduce_measurement(measurement: GCMeasurement) -> Dict[str, float]:
    """
    Collapse a GC measurement into the nine exported totals.

    Sums used/committed/init/max across all pools after and before the
    last collection. An empty pool list sums to 0. Duration passes through.

    Args:
        measurement: Decoded GC measurement

    Returns:
        Dict[str, float]: Totals keyed by metric name, in export order
    """
    totals = {}
    totals.update(_sum_usages(measurement.pool_usages_after, "AfterGc"))
    totals.update(_sum_usages(measurement.pool_usages_before, "BeforeGc"))
    totals["duration"] = float(measurement.duration)
    return {name: totals[name] for name in METRIC_NAMES}
