#!/usr/bin/env python3
"""
01_basic_request.py - Build a target and await its flow

Demonstrates:
- FlowClient as an async context manager
- Accumulating headers and query parameters on a Target
- Awaiting a flow for the (value, headers) pair
- Default parsers: JSON for GET, text for POST, nothing for HEAD

Note: Requires internet connection to run
"""

import asyncio
import json

from httpflow import create_app
from httpflow.config import Environment, Settings


async def main() -> None:
    app = create_app(Settings(environment=Environment.DEVELOPMENT))

    async with app.client(default_headers={"User-Agent": "httpflow-example"}) as client:
        target = client.target("https://httpbin.org/get").parameters({"page": 1, "q": "flow"})

        value, headers = await target.header("Accept", "application/json").get()
        print(f"GET args: {value['args']}")
        print(f"Content-Type: {headers.get('content-type')}")

        form, _ = await client.target("https://httpbin.org/post").post(
            "payload=1001",
            parser=lambda data: json.loads(data)["form"]["payload"],
        )
        print(f"POST echoed payload: {form}")

        body, headers = await client.target("https://httpbin.org/get").head()
        print(f"HEAD body: {body!r}, Content-Length: {headers.get('content-length')}")


if __name__ == "__main__":
    asyncio.run(main())
