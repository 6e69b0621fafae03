"""Background job functions served to Inngest."""

from app.jobs.client import emit, inngest_client, send_event
from app.jobs.hello import hello_world
from app.jobs.post_activity import notify_post_activity
from app.jobs.welcome import welcome_new_user

FUNCTIONS = [
    hello_world,
    welcome_new_user,
    notify_post_activity,
]

__all__ = [
    "FUNCTIONS",
    "emit",
    "hello_world",
    "inngest_client",
    "notify_post_activity",
    "send_event",
    "welcome_new_user",
]
