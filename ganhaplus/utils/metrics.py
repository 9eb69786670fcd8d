"""
Prometheus-based metrics for production monitoring.
Provides /metrics endpoint for scraping.
"""
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import APIRouter, Response


# Counters
rewards_credited_total = Counter(
    "rewards_credited_total",
    "Total credited rewards",
    ["category"],  # anuncio, tarefa, compartilhamento
)

rewards_rejected_total = Counter(
    "rewards_rejected_total",
    "Total rejected reward requests",
    ["category", "reason"],  # daily_limit, window, amount_mismatch
)

ledger_amount_total = Counter(
    "ledger_amount_total",
    "Total amount (AOA) credited through rewards",
    ["category"],
)

withdrawals_total = Counter(
    "withdrawals_total",
    "Withdrawal requests by outcome",
    ["status"],  # pending, rejected_funds, paid
)

login_attempts_total = Counter(
    "login_attempts_total",
    "Login attempts by outcome",
    ["status"],  # ok, invalid, rate_limited
)

# Histograms
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration",
    ["method", "status"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5],
)


# Metrics endpoint router
router = APIRouter()


@router.get("/metrics")
def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint for scraping."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )


class WalletMetrics:
    """Thin helpers so services don't repeat label names."""

    def inc_reward_credited(self, category: str, amount: int) -> None:
        rewards_credited_total.labels(category=category).inc()
        ledger_amount_total.labels(category=category).inc(amount)

    def inc_reward_rejected(self, category: str, reason: str) -> None:
        rewards_rejected_total.labels(category=category, reason=reason).inc()

    def inc_withdrawal(self, status: str) -> None:
        withdrawals_total.labels(status=status).inc()

    def inc_login(self, status: str) -> None:
        login_attempts_total.labels(status=status).inc()

    def observe_request(self, method: str, status: int, seconds: float) -> None:
        http_request_duration_seconds.labels(method=method, status=str(status)).observe(seconds)


metrics = WalletMetrics()
