"""Prometheus metrics for ledger writes, portfolio activity and webhook performance"""

from prometheus_client import Counter, Histogram

# Write metrics
write_counter = Counter(
    "finplanner_writes_total",
    "Ledger writes by entity, action and outcome",
    ["entity", "action", "outcome"],  # outcome: success | failure
)

installment_group_counter = Counter(
    "finplanner_installment_groups_total",
    "Installment purchases split into monthly records",
    ["size"],  # 2-3, 4-6, 7-12, 13+
)

investment_buy_counter = Counter(
    "finplanner_investment_buys_total",
    "Investment purchases by branch",
    ["branch"],  # merged | new
)

# Webhook metrics
webhook_latency_histogram = Histogram(
    "webhook_latency_seconds",
    "Notification webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

webhook_failure_counter = Counter(
    "webhook_failures_total",
    "Failed webhook deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_write(entity: str, action: str, success: bool = True) -> None:
    outcome = "success" if success else "failure"
    write_counter.labels(entity=entity, action=action, outcome=outcome).inc()


def record_installment_group(total_installments: int) -> None:
    """Bucket installment counts for distribution analysis"""
    if total_installments <= 3:
        size = "2-3"
    elif total_installments <= 6:
        size = "4-6"
    elif total_installments <= 12:
        size = "7-12"
    else:
        size = "13+"

    installment_group_counter.labels(size=size).inc()


def record_investment_buy(merged: bool) -> None:
    investment_buy_counter.labels(branch="merged" if merged else "new").inc()
