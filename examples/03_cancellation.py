#!/usr/bin/env python3
"""
03_cancellation.py - Cancelling a subscription mid-flight

Demonstrates:
- Push-style subscribe with on_next/on_error/on_completed
- Cancelling an in-flight request; no callback fires afterwards
- Cancelling from another thread

Note: Requires internet connection to run
"""

import asyncio
import threading

from httpflow import FlowClient


async def main() -> None:
    async with FlowClient() as client:
        flow = client.target("https://httpbin.org/delay/5").get()

        subscription = flow.subscribe(
            on_next=lambda value: print("unexpected value"),
            on_error=lambda error: print(f"unexpected error: {error}"),
            on_completed=lambda: print("unexpected completion"),
        )
        await asyncio.sleep(0.5)
        subscription.cancel()
        subscription.cancel()  # Idempotent
        print(f"Cancelled on loop: {subscription.state}")

        other = flow.subscribe(on_next=lambda value: print("unexpected value"))
        await asyncio.sleep(0.5)
        worker = threading.Thread(target=other.cancel)
        worker.start()
        await asyncio.to_thread(worker.join)
        await asyncio.sleep(0.1)
        print(f"Cancelled from thread: {other.state}, running: {client.active_requests}")


if __name__ == "__main__":
    asyncio.run(main())
