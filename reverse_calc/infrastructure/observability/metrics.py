"""Prometheus metrics for proposal outcomes, schedule lengths and balance discrepancies"""

from prometheus_client import Counter, Histogram

# Proposal metrics
proposal_counter = Counter(
    "reverse_calc_proposals_total",
    "Total proposals evaluated",
    ["outcome"],  # complete | empty | invalid | non_terminating
)

schedule_days_histogram = Histogram(
    "reverse_calc_schedule_days",
    "Business days until a proposal is paid off",
    buckets=[20, 60, 120, 180, 250, 350, 500],
)

balance_discrepancy_counter = Counter(
    "reverse_calc_balance_discrepancies_total",
    "Positions whose manual balance disagrees with the funded-date estimate",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_proposal(total_days: int, discrepancy_count: int) -> None:
    """Record a successfully evaluated proposal"""
    if total_days == 0:
        proposal_counter.labels(outcome="empty").inc()
    else:
        proposal_counter.labels(outcome="complete").inc()
        schedule_days_histogram.observe(total_days)

    if discrepancy_count:
        balance_discrepancy_counter.inc(discrepancy_count)


def record_failure(outcome: str) -> None:
    proposal_counter.labels(outcome=outcome).inc()
