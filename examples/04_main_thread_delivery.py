#!/usr/bin/env python3
"""
04_main_thread_delivery.py - Deliver results to a synchronous "main" thread

Demonstrates:
- Running the client loop on a background thread
- Subscribing from the main thread
- QueueScheduler: callbacks run on the thread that drains the queue
- Parsers running on the client's background executor

Note: Requires internet connection to run
"""

import asyncio
import threading

from httpflow import FlowClient, QueueScheduler


def main() -> None:
    loop = asyncio.new_event_loop()
    ready = threading.Event()
    client = FlowClient()

    async def serve() -> None:
        await client.open()
        ready.set()
        while client.is_open:
            await asyncio.sleep(0.05)

    thread = threading.Thread(target=loop.run_until_complete, args=(serve(),))
    thread.start()
    ready.wait()

    main_queue = QueueScheduler()
    results: list[str] = []

    def parse(data: bytes) -> str:
        return f"{len(data)} bytes parsed on {threading.current_thread().name}"

    def show(value: tuple) -> None:
        text, _headers = value
        results.append(f"{text}, delivered on {threading.current_thread().name}")

    flow = client.target("https://httpbin.org/uuid").get(parser=parse)
    subscription = flow.subscribe(
        on_next=show,
        on_error=lambda error: results.append(f"error: {error}"),
        scheduler=main_queue,
    )
    main_queue.run_until(lambda: subscription.done, timeout=30.0)
    print("\n".join(results))

    asyncio.run_coroutine_threadsafe(client.close(), loop).result()
    thread.join()
    loop.close()


if __name__ == "__main__":
    main()
