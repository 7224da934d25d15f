#!/usr/bin/env python3
"""
02_retry_handling.py - Per-target retries with linear backoff

Demonstrates:
- Retry budget and delay on a target
- Subscribing to request.retrying events
- RetryFailedError once the budget is spent
- Unwrapped errors when retries are disabled

Note: This example intentionally uses failing URLs to demonstrate retry behaviour.
Requires internet connection to run.
"""

import asyncio
from datetime import datetime

from httpflow import FlowClient, RetryFailedError, UnsupportedStatusCodeError
from httpflow.events import RequestRetryingEvent


def on_retry(event: RequestRetryingEvent) -> None:
    ts = datetime.now().strftime("%H:%M:%S.%f")[:-3]
    print(
        f"  [{ts}] Retry {event.retry}/{event.max_retries} "
        f"in {event.delay_seconds:.2f}s (error: {event.error.message})"
    )


async def main() -> None:
    async with FlowClient() as client:
        client.emitter.on("request.retrying", on_retry)

        print("GET /status/500 with retries=3, delay=0.3s (linear)")
        try:
            await client.target("https://httpbin.org/status/500", retries=3, delay=0.3).get()
        except RetryFailedError as exc:
            print(f"Gave up: {exc}")
            print(f"Last error: {exc.last_error!r}\n")

        print("GET /status/404 with retries disabled")
        try:
            await client.target("https://httpbin.org/status/404").get()
        except UnsupportedStatusCodeError as exc:
            print(f"Failed immediately with status {exc.status_code}")


if __name__ == "__main__":
    asyncio.run(main())
