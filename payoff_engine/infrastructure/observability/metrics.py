"""Prometheus metrics for monitoring simulation outcomes, projections and validation failures"""

from prometheus_client import Counter, Histogram

# Simulation metrics
simulation_counter = Counter(
    "payoff_simulation_total",
    "Total payoff simulations run",
    ["strategy", "outcome"],  # outcome: converged | non_convergent
)

simulation_months_histogram = Histogram(
    "payoff_simulation_months",
    "Months to debt-free for converged simulations",
    buckets=[6, 12, 24, 36, 60, 120, 240, 600, 1200],
)

# Projection metrics
projection_counter = Counter(
    "projection_total",
    "Total debt-free projections computed",
    ["outcome"],  # projected | no_projection
)

# Input quality
validation_failure_counter = Counter(
    "validation_failures_total",
    "Engine inputs rejected by validation",
    ["error"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_simulation(strategy: str, months_to_debt_free: int | None) -> None:
    """Record simulation outcome and payoff horizon"""
    outcome = "converged" if months_to_debt_free is not None else "non_convergent"
    simulation_counter.labels(strategy=strategy, outcome=outcome).inc()

    if months_to_debt_free is not None:
        simulation_months_histogram.observe(months_to_debt_free)


def record_projection(months_remaining: int | None) -> None:
    """Record whether a projection could be produced"""
    outcome = "projected" if months_remaining is not None else "no_projection"
    projection_counter.labels(outcome=outcome).inc()


def record_validation_failure(error: Exception) -> None:
    """Count rejected inputs by exception type"""
    validation_failure_counter.labels(error=type(error).__name__).inc()
