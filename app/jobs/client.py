"""Inngest client and typed event publishing."""

from __future__ import annotations

import logging
from typing import Any

import inngest
from pydantic import ValidationError

from app.config import settings
from app.schemas.events import EVENT_SCHEMAS
from app.utils.errors import AppError, EventPublishError, InvalidInputError

logger = logging.getLogger(__name__)

inngest_client = inngest.Inngest(
    app_id=settings.inngest_app_id,
    event_key=settings.inngest_event_key,
    signing_key=settings.inngest_signing_key,
    is_production=settings.is_production,
    logger=logging.getLogger("app.jobs"),
)


def build_event(name: str, data: dict[str, Any]) -> inngest.Event:
    """Validate ``data`` against the schema registered for ``name``."""
    schema = EVENT_SCHEMAS.get(name)
    if schema is None:
        raise InvalidInputError(f"Unknown event: {name}")
    try:
        payload = schema.model_validate(data).model_dump(mode="json")
    except ValidationError as exc:
        raise InvalidInputError(f"Invalid payload for {name}: {exc.errors()[0]['msg']}") from exc
    return inngest.Event(name=name, data=payload)


def send_event(name: str, data: dict[str, Any]) -> list[str]:
    """Publish one event and return the ids assigned by Inngest."""
    event = build_event(name, data)
    try:
        ids = inngest_client.send_sync(event)
    except Exception as exc:
        logger.error("event publish failed name=%s error=%s", name, exc)
        raise EventPublishError(name) from exc
    logger.info("event published name=%s ids=%s", name, ids)
    return list(ids)


def emit(name: str, data: dict[str, Any]) -> list[str]:
    """Best-effort publish for request handlers.

    The write that triggered the event has already succeeded, so invalid
    payloads and delivery failures are logged and do not fail the request.
    """
    if not settings.enable_event_publishing:
        logger.debug("event publishing disabled, skipped %s", name)
        return []
    try:
        return send_event(name, data)
    except AppError as exc:
        logger.warning("event %s not delivered: %s", name, exc.__cause__ or exc.message)
        return []
