"""Publish a typed workflow event to Inngest from the command line."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments."""
    from app.schemas.events import EVENT_SCHEMAS

    parser = argparse.ArgumentParser(
        description="Send one event to the configured Inngest environment.",
    )
    parser.add_argument(
        "name",
        type=str,
        choices=sorted(EVENT_SCHEMAS),
        help="Event name, e.g. test/hello.world.",
    )
    parser.add_argument(
        "--data",
        type=str,
        default=None,
        help="JSON object with the event payload.",
    )
    parser.add_argument(
        "--email",
        type=str,
        default=None,
        help="Shortcut for test/hello.world: the address to greet.",
    )
    return parser.parse_args()


def build_payload(name: str, raw_data: str | None, email: str | None) -> dict:
    """Return the event payload from ``--data`` or the ``--email`` shortcut."""
    if raw_data:
        payload = json.loads(raw_data)
        if not isinstance(payload, dict):
            raise ValueError("--data must be a JSON object")
        return payload
    if name == "test/hello.world" and email:
        return {"email": email}
    raise ValueError("--data is required for this event")


def main() -> None:
    """CLI entry point."""
    args = parse_args()
    payload = build_payload(args.name, args.data, args.email)

    from app.jobs.client import send_event

    ids = send_event(args.name, payload)
    print(f"Sent {args.name}: {', '.join(ids) or '(no ids returned)'}")


if __name__ == "__main__":
    main()
