"""Post activity fan-out job."""

from __future__ import annotations

import functools
import logging
from typing import Any

import inngest

from app.jobs.client import inngest_client
from app.schemas.events import PostCreatedData

logger = logging.getLogger(__name__)


def activity_action(event_name: str) -> str:
    """Return the action part of ``post/<action>``, or ``unknown``."""
    _, _, action = event_name.partition("/")
    return action or "unknown"


async def log_post_activity(action: str, post_id: str, author_id: str, title: str) -> dict[str, Any]:
    logger.info(
        "post activity action=%s post=%s author=%s title=%s",
        action,
        post_id,
        author_id,
        title,
    )
    return {"logged": True}


@inngest_client.create_function(
    fn_id="notify-post-activity",
    trigger=inngest.TriggerEvent(event="post/created"),
)
async def notify_post_activity(ctx: inngest.Context) -> dict[str, Any]:
    """Record post activity. Follower notifications would hang off this step."""
    action = activity_action(ctx.event.name)
    data = PostCreatedData.model_validate(dict(ctx.event.data))

    result = await ctx.step.run(
        "log-post-activity",
        functools.partial(
            log_post_activity,
            action,
            data.post_id,
            data.author_id,
            data.title,
        ),
    )

    return {
        "action": action,
        "post_id": data.post_id,
        "logged": result["logged"],
    }
