"""Optional per-entity serialization of score recomputation.

By default recomputation is best-effort: two concurrent recomputes for the
same organization both read the pre-update rows and the second UPDATE wins.
With RECOMPUTE_LOCK_ENABLED=true and a Redis connection, the read-aggregate-
write cycle for one entity runs under a Redis lock keyed by kind and id, so
concurrent recomputes for that entity run one after another. Different
entities never contend.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import redis.asyncio as aioredis
import structlog
from redis.exceptions import LockError, RedisError

from civictrust.config import settings
from civictrust.services.errors import DataUnavailableError

log = structlog.get_logger(__name__)


def lock_key(kind: str, entity_id) -> str:
    return f"recompute:{kind}:{entity_id}"


@asynccontextmanager
async def recompute_guard(
    redis_client: Optional[aioredis.Redis],
    kind: str,
    entity_id,
) -> AsyncIterator[None]:
    """Hold the recompute lock for one entity, or nothing when disabled.

    Raises:
        DataUnavailableError: Redis could not be reached, or the lock
            was not acquired before recompute_lock_timeout_seconds elapsed.
    """
    if redis_client is None or not settings.recompute_lock_enabled:
        yield
        return

    timeout = settings.recompute_lock_timeout_seconds
    lock = redis_client.lock(
        lock_key(kind, entity_id),
        timeout=timeout,
        blocking_timeout=timeout,
    )
    try:
        acquired = await lock.acquire()
    except RedisError as exc:
        raise DataUnavailableError(f"recompute lock for {kind} {entity_id}: {exc}") from exc
    if not acquired:
        raise DataUnavailableError(f"timed out waiting for recompute lock on {kind} {entity_id}")

    try:
        yield
    finally:
        try:
            await lock.release()
        except LockError:
            # Lock expired under us; the write already happened
            log.warning("recompute_lock_expired", kind=kind, entity_id=str(entity_id))
        except RedisError as exc:
            log.warning(
                "recompute_lock_release_failed",
                kind=kind,
                entity_id=str(entity_id),
                error=str(exc),
            )
