"""
Prometheus metrics for the chat gateway.

- Chat request metrics (count by requested provider, strategy and outcome)
- Provider call metrics (count and latency per upstream vendor)
- Usage log write metrics (success/error)
- Pending background task gauge, refreshed on each scrape
"""

import logging
import time
from contextlib import contextmanager

from prometheus_client import Counter, Gauge, Histogram

logger = logging.getLogger(__name__)

# ==================== Chat Request Metrics ====================
chat_requests_total = Counter(
    "chat_requests_total",
    "Total chat requests by requested provider, strategy and status",
    ["provider", "strategy", "status"],
)

chat_request_duration_seconds = Histogram(
    "chat_request_duration_seconds",
    "Chat request duration in seconds, inclusive of every provider attempt",
    ["strategy"],
    buckets=(0.1, 0.5, 1, 2.5, 5, 10, 25, 60),
)

# ==================== Provider Metrics ====================
provider_requests_total = Counter(
    "provider_requests_total",
    "Total upstream provider calls by provider, model and status",
    ["provider", "model", "status"],
)

provider_request_duration_seconds = Histogram(
    "provider_request_duration_seconds",
    "Upstream provider call duration in seconds",
    ["provider", "model"],
    buckets=(0.1, 0.5, 1, 2.5, 5, 10, 25, 60),
)

# ==================== Usage Log Metrics ====================
usage_log_writes_total = Counter(
    "usage_log_writes_total",
    "Total ai_logs insert attempts by status",
    ["status"],
)

# ==================== Background Task Metrics ====================
background_tasks_pending = Gauge(
    "background_tasks_pending",
    "Usage log tasks scheduled but not yet finished",
)


@contextmanager
def track_provider_call(provider: str, model: str):
    """Context manager recording one upstream call. Exceptions propagate."""
    start_time = time.time()
    status = "success"
    try:
        yield
    except Exception:
        status = "error"
        raise
    finally:
        duration = time.time() - start_time
        provider_request_duration_seconds.labels(provider=provider, model=model).observe(duration)
        provider_requests_total.labels(provider=provider, model=model, status=status).inc()


def record_chat_request(provider: str, strategy: str, status: str, duration: float) -> None:
    chat_requests_total.labels(provider=provider, strategy=strategy, status=status).inc()
    chat_request_duration_seconds.labels(strategy=strategy).observe(duration)


def record_usage_log_write(status: str) -> None:
    usage_log_writes_total.labels(status=status).inc()


def set_pending_background_tasks(count: int) -> None:
    background_tasks_pending.set(count)
