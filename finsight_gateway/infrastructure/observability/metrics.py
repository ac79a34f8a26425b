"""Prometheus metrics for monitoring simulations, scoring outcomes and request latency"""

from typing import Sequence
from prometheus_client import Counter, Histogram

from finsight_gateway.domain.models import PayoffResult

# Simulation metrics
simulation_counter = Counter(
    "finsight_simulation_total",
    "Total debt payoff simulations run",
    ["outcome"],  # completed | capped | empty
)

best_strategy_counter = Counter(
    "finsight_best_strategy_total",
    "Lowest-interest strategy per simulation",
    ["strategy"],  # avalanche | snowball | hybrid
)

simulation_failure_counter = Counter(
    "finsight_simulation_failures_total",
    "Payoff simulations that failed unexpectedly",
)

# Scoring metrics
diversification_score_histogram = Histogram(
    "finsight_diversification_score",
    "Income diversification scores issued",
    buckets=[0, 25, 40, 60, 80, 100],
)

scoring_fallback_counter = Counter(
    "finsight_scoring_fallback_total",
    "Diversification scores replaced by the neutral default after an error",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_simulation(results: Sequence[PayoffResult], best_strategy: str | None, max_months: int) -> None:
    """Record simulation outcome and which strategy came out cheapest"""
    if not results:
        simulation_counter.labels(outcome="empty").inc()
        return

    capped = any(r.months_to_payoff >= max_months and r.monthly_payments[-1].remaining_balance > 0 for r in results)
    simulation_counter.labels(outcome="capped" if capped else "completed").inc()

    if best_strategy is not None:
        best_strategy_counter.labels(strategy=best_strategy).inc()


def record_diversification(overall_score: int, fallback: bool) -> None:
    diversification_score_histogram.observe(overall_score)
    if fallback:
        scoring_fallback_counter.inc()
