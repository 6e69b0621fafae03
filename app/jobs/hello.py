"""Smoke-test job for the Inngest wiring."""

from __future__ import annotations

from datetime import timedelta
from typing import Any

import inngest

from app.jobs.client import inngest_client
from app.schemas.events import HelloWorldData


WAIT_A_MOMENT = timedelta(seconds=1)


def greeting(email: str) -> str:
    return f"Hello {email}!"


@inngest_client.create_function(
    fn_id="hello-world",
    trigger=inngest.TriggerEvent(event="test/hello.world"),
)
async def hello_world(ctx: inngest.Context) -> dict[str, Any]:
    """Wait a moment, then greet the address in the event."""
    data = HelloWorldData.model_validate(dict(ctx.event.data))
    await ctx.step.sleep("wait-a-moment", WAIT_A_MOMENT)
    return {"message": greeting(data.email)}
