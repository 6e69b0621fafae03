"""Welcome sequence for newly created users."""

from __future__ import annotations

import asyncio
import functools
import logging
from datetime import timedelta
from typing import Any

import inngest

from app.config import settings
from app.jobs.client import inngest_client
from app.schemas.events import UserCreatedData
from app.services.user_service import UserService
from app.utils.errors import AppError
from app.utils.supabase_client import get_service_client
from app.utils.time import now_utc

logger = logging.getLogger(__name__)


def tips_delay() -> timedelta:
    return timedelta(seconds=settings.welcome_tips_delay_seconds)


async def fetch_profile(uid: str) -> dict[str, Any]:
    """Load the stored profile with the service-role client.

    The Supabase client is synchronous, so the lookup runs in a worker
    thread to keep the serving event loop free.
    """
    service = UserService(get_service_client())
    try:
        profile = await asyncio.to_thread(service.get_user_profile, uid)
    except AppError as exc:
        logger.error("failed to fetch user profile uid=%s error=%s", uid, exc.message)
        raise
    return profile.model_dump(mode="json")


async def send_welcome_email(email: str, display_name: str) -> dict[str, Any]:
    # Delivery is simulated; swap in a mail provider here.
    logger.info("sending welcome email to=%s name=%s", email, display_name)
    return {"sent": True, "timestamp": now_utc().isoformat()}


async def send_onboarding_tips(email: str) -> dict[str, Any]:
    logger.info("sending onboarding tips to=%s", email)
    return {"sent": True, "timestamp": now_utc().isoformat()}


@inngest_client.create_function(
    fn_id="welcome-new-user",
    trigger=inngest.TriggerEvent(event="user/created"),
)
async def welcome_new_user(ctx: inngest.Context) -> dict[str, Any]:
    """Send a welcome email, wait, then follow up with onboarding tips."""
    data = UserCreatedData.model_validate(dict(ctx.event.data))
    logger.info(
        "processing new user welcome uid=%s method=%s",
        data.uid,
        data.sign_up_method,
    )

    profile = await ctx.step.run(
        "fetch-user-profile",
        functools.partial(fetch_profile, data.uid),
    )
    welcome = await ctx.step.run(
        "send-welcome-email",
        functools.partial(send_welcome_email, profile["email"], profile["display_name"]),
    )

    await ctx.step.sleep("wait-before-tips", tips_delay())

    tips = await ctx.step.run(
        "send-onboarding-tips",
        functools.partial(send_onboarding_tips, profile["email"]),
    )

    return {
        "uid": data.uid,
        "welcome_email_sent": welcome["sent"],
        "onboarding_tips_sent": tips["sent"],
    }
