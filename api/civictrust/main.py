from contextlib import asynccontextmanager

import redis.asyncio as aioredis
from fastapi import FastAPI

from civictrust.config import settings
from civictrust.logging_config import configure_logging
from civictrust.metrics import metrics_endpoint
from civictrust.middleware.logging_middleware import RequestLoggingMiddleware
from civictrust.routers import leaderboard, members, organizations


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)

    # Redis is only needed for per-entity recompute locking
    app.state.redis = None
    if settings.redis_url:
        app.state.redis = aioredis.from_url(
            settings.redis_url, encoding="utf-8", decode_responses=True
        )
    try:
        yield
    finally:
        if app.state.redis is not None:
            await app.state.redis.aclose()


app = FastAPI(title="CivicTrust API", version="0.1.0", lifespan=lifespan)

app.add_middleware(RequestLoggingMiddleware)

app.include_router(members.router)
app.include_router(leaderboard.router)
app.include_router(organizations.router)

# Prometheus metrics endpoint
app.get("/metrics")(metrics_endpoint)


@app.get("/health")
async def health_check():
    return {"status": "ok"}
