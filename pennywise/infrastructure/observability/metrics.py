"""Prometheus metrics for billing cycle usage and attribution rules"""

from prometheus_client import Counter, Histogram

# Billing cycle metrics
cycles_generated_counter = Counter(
    "pennywise_cycles_generated_total",
    "Billing cycles generated for cards",
    ["card_kind"],  # credit_card | cash | cheque
)

attribution_counter = Counter(
    "pennywise_attribution_total",
    "Transactions attributed to a reporting period",
    ["rule"],  # cycle | month_fallback
)

# Payment method metrics
config_deactivations_counter = Counter(
    "pennywise_config_deactivations_total",
    "Payment method configs soft-deactivated",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_cycles_generated(card_kind: str, count: int) -> None:
    if count > 0:
        cycles_generated_counter.labels(card_kind=card_kind).inc(count)


def record_attribution(cycle_attributed: int, total: int) -> None:
    """Record how many transactions were attributed via a card cycle vs calendar month"""
    if cycle_attributed:
        attribution_counter.labels(rule="cycle").inc(cycle_attributed)
    if total - cycle_attributed:
        attribution_counter.labels(rule="month_fallback").inc(total - cycle_attributed)
