"""Prometheus metrics for monitoring classifications, override attempts and risk zones"""

from prometheus_client import Counter, Histogram

# Classification metrics
expense_scored_counter = Counter(
    "rigidity_expense_scored_total",
    "Total expenses scored",
    ["rigidity"],  # FIXED | FLEXIBLE (effective)
)

override_outcome_counter = Counter(
    "rigidity_override_outcome_total",
    "Override requests by outcome",
    ["outcome"],  # tightened | reason_too_short | blocked_by_hard_signals | honored
)

# Report metrics
report_zone_counter = Counter(
    "rigidity_report_overall_zone_total",
    "Monthly reports by overall risk zone",
    ["zone"],  # OK | AMARELO | VERMELHO
)

unclassified_expense_counter = Counter(
    "rigidity_unclassified_expenses_total",
    "Expenses aggregated without a stored classification",
)

simulation_counter = Counter(
    "rigidity_simulation_total",
    "What-if simulations run",
    ["kind"],  # income_drop | growth
)

# Auth API metrics
auth_failures_counter = Counter(
    "auth_lookup_failures_total",
    "Failed auth service calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_expense_scored(rigidity_effective: str, override_outcome: str) -> None:
    """Record classification metrics; requests without an override only count once"""
    expense_scored_counter.labels(rigidity=rigidity_effective).inc()
    if override_outcome != "no_override":
        override_outcome_counter.labels(outcome=override_outcome).inc()


def record_report(overall_status: str, unclassified_count: int) -> None:
    """Record report zone distribution and unclassified records seen"""
    report_zone_counter.labels(zone=overall_status).inc()
    if unclassified_count:
        unclassified_expense_counter.inc(unclassified_count)
