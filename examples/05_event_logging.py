#!/usr/bin/env python3
"""
05_event_logging.py - Request lifecycle events

Demonstrates:
- Subscribing to every request event type on the client emitter
- Correlating events of one request by request_id
- Event model fields for started/retrying/completed/failed

Note: Requires internet connection to run
"""

import asyncio
from datetime import datetime

from httpflow import FlowClient, FlowError
from httpflow.events import RequestEvent, RequestEventType


def on_event(event: RequestEvent) -> None:
    ts = datetime.now().strftime("%H:%M:%S.%f")[:-3]
    detail = ""
    if event.event_type == RequestEventType.RETRYING:
        detail = f"retry={event.retry} delay={event.delay_seconds:.2f}s"
    elif event.event_type == RequestEventType.COMPLETED:
        detail = f"status={event.status_code} attempts={event.attempts}"
    elif event.event_type == RequestEventType.FAILED:
        detail = f"error={event.error.exc_type}"
    print(f"[{ts}] {event.event_type:<18} | {event.request_id[:8]}... | {detail}")


async def main() -> None:
    async with FlowClient() as client:
        for event_type in RequestEventType:
            client.emitter.on(event_type, on_event)

        await client.target("https://httpbin.org/json").get()
        try:
            await client.target("https://httpbin.org/status/503", retries=2, delay=0.2).get()
        except FlowError:
            pass


if __name__ == "__main__":
    asyncio.run(main())
