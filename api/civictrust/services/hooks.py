"""Post-mutation recompute hooks.

Mutation handlers do not call scorers directly. After a qualifying write
they dispatch an ActivityEvent and the handlers registered for that event
recompute the affected cached scores:

    rating_submitted, interaction_recorded -> organization trust score
    petition_created, comment_posted       -> author reputation
    vote_cast                              -> voter and petition author reputation

The rating and interaction events are dispatched by routers.organizations.
The petition, comment and vote events belong to the petition, comment and
vote handlers of the wider app, which own those writes; this service only
registers the recompute side.

Handlers run sequentially in registration order. A failing handler is
logged and its exception propagates to the dispatcher's caller; handlers
after it do not run. Nothing is retried.

Usage:
    @listens_for(ActivityEvent.rating_submitted)
    async def rescore(db, *, organization_id, redis_client=None, **_):
        ...

    await dispatch(db, ActivityEvent.rating_submitted, organization_id=org.id)
"""

import enum
from collections import defaultdict
from typing import Any, Awaitable, Callable, Optional

import redis.asyncio as aioredis
import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from civictrust.services.reputation import update_member_reputation
from civictrust.services.trust import compute_organization_trust_score

log = structlog.get_logger(__name__)

Handler = Callable[..., Awaitable[Any]]


class ActivityEvent(str, enum.Enum):
    rating_submitted = "rating_submitted"
    interaction_recorded = "interaction_recorded"
    petition_created = "petition_created"
    vote_cast = "vote_cast"
    comment_posted = "comment_posted"


_handlers: dict[ActivityEvent, list[Handler]] = defaultdict(list)


def listens_for(event: ActivityEvent) -> Callable[[Handler], Handler]:
    """Decorator registering ``fn`` as a handler for ``event``."""

    def decorator(fn: Handler) -> Handler:
        _handlers[event].append(fn)
        return fn

    return decorator


def handlers_for(event: ActivityEvent) -> list[Handler]:
    return list(_handlers.get(event, []))


async def dispatch(
    db: AsyncSession,
    event: ActivityEvent,
    redis_client: Optional[aioredis.Redis] = None,
    **payload,
) -> list[Any]:
    """Run every handler registered for ``event`` and collect their results."""
    results = []
    for handler in handlers_for(event):
        try:
            results.append(await handler(db, redis_client=redis_client, **payload))
        except Exception:
            log.error(
                "hook_handler_failed",
                activity_event=event.value,
                handler=handler.__name__,
                exc_info=True,
            )
            raise
    return results


@listens_for(ActivityEvent.rating_submitted)
@listens_for(ActivityEvent.interaction_recorded)
async def rescore_organization(db, *, organization_id, redis_client=None, **_):
    return await compute_organization_trust_score(db, organization_id, redis_client=redis_client)


@listens_for(ActivityEvent.petition_created)
@listens_for(ActivityEvent.comment_posted)
async def rescore_author(db, *, member_id, redis_client=None, **_):
    return await update_member_reputation(db, member_id, redis_client=redis_client)


@listens_for(ActivityEvent.vote_cast)
async def rescore_vote_participants(
    db, *, member_id, petition_author_id=None, redis_client=None, **_
):
    scores = {member_id: await update_member_reputation(db, member_id, redis_client=redis_client)}
    if petition_author_id is not None and petition_author_id != member_id:
        scores[petition_author_id] = await update_member_reputation(
            db, petition_author_id, redis_client=redis_client
        )
    return scores
