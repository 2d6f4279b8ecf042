from typing import Annotated, Optional

import redis.asyncio as aioredis
from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from civictrust.database import get_db
from civictrust.services.errors import DataUnavailableError, NotFoundError, ScoringError

DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_redis(request: Request) -> Optional[aioredis.Redis]:
    """Inject the Redis client from app.state, or None when Redis is not configured."""
    return getattr(request.app.state, "redis", None)


RedisClient = Annotated[Optional[aioredis.Redis], Depends(get_redis)]


def scoring_http_error(exc: ScoringError) -> HTTPException:
    """Map a scoring failure onto the HTTP status the caller should see.

    Not-found is always surfaced as 404. A store outage is 503 so screens
    show their loading/fallback state instead of a zero score.
    """
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=f"{exc.kind.capitalize()} not found")
    if isinstance(exc, DataUnavailableError):
        return HTTPException(status_code=503, detail="Score data temporarily unavailable")
    return HTTPException(status_code=500, detail="Score computation failed")
