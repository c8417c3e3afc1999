"""Prometheus metrics for settlement runs, share rejections and request latency"""

from typing import List
from prometheus_client import Counter, Histogram, Gauge

from evenly.domain.models import Settlement

# Settlement metrics
settlement_runs_counter = Counter(
    "evenly_settlement_runs_total",
    "Total settlement calculations",
)

settlement_transfers_histogram = Histogram(
    "evenly_settlement_transfers",
    "Transfers produced per settlement calculation",
    buckets=[0, 1, 2, 3, 5, 8, 13, 21],
)

# Itemizer metrics
share_rejections_counter = Counter(
    "evenly_share_rejections_total",
    "Rejected item share assignments",
    ["reason"],  # invalid_share | share_exceeded
)

# Ledger size
receipts_gauge = Gauge(
    "evenly_receipts_stored",
    "Receipts currently held in the ledger",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_settlements(settlements: List[Settlement]) -> float:
    """Record a settlement run and return the total amount transferred"""
    settlement_runs_counter.inc()
    settlement_transfers_histogram.observe(len(settlements))
    return round(sum(s.amount for s in settlements), 2)
