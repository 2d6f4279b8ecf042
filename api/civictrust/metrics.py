import time
from contextlib import contextmanager

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi.responses import Response

# Score recomputation metrics
score_recomputations = Counter(
    "civictrust_score_recomputations_total",
    "Total score recomputations",
    ["kind", "status"],  # kind: reputation | trust_score | rankings; status: success | error
)

score_recompute_duration = Histogram(
    "civictrust_score_recompute_duration_seconds",
    "Time to recompute and persist one derived score",
    ["kind"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

# HTTP request metrics (from middleware)
http_requests = Counter(
    "civictrust_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status_code"],
)

http_request_duration = Histogram(
    "civictrust_http_request_duration_seconds",
    "HTTP request duration",
    ["method", "path"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


async def metrics_endpoint():
    """FastAPI endpoint handler that returns Prometheus metrics."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@contextmanager
def observe_recompute(kind: str):
    """Time one recomputation and count it as success or error."""
    start = time.monotonic()
    try:
        yield
    except Exception:
        score_recomputations.labels(kind=kind, status="error").inc()
        raise
    finally:
        score_recompute_duration.labels(kind=kind).observe(time.monotonic() - start)
    score_recomputations.labels(kind=kind, status="success").inc()
