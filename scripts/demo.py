#!/usr/bin/env python3
"""
Demo script for the offline cache.

Runs the lifecycle against a simulated origin (an httpx mock transport),
then takes the network away to show the offline behaviour of each route.
"""

import asyncio
import dataclasses

import httpx

from offline_cache.config import get_settings
from offline_cache.entities import InterceptedRequest
from offline_cache.errors import NetworkFailure
from offline_cache.repositories import HttpxFetcher, InMemoryClientHost, InMemoryStoreRegistry
from offline_cache.services import LifecycleController

ORIGIN = "http://demo.local"

PAGES = {
    "/": b"<html>ZenFlow home</html>",
    "/index.html": b"<html>ZenFlow shell</html>",
    "/manifest.json": b'{"name": "ZenFlow"}',
    "/app.js": b"console.log('breathe in')",
    "/api/sessions": b'{"sessions": 3}',
}

network_up = True


def origin(request: httpx.Request) -> httpx.Response:
    """Simulated network: the demo origin plus any CDN host."""
    if not network_up:
        raise httpx.ConnectError("network unreachable", request=request)
    if request.url.host == "demo.local":
        body = PAGES.get(request.url.path)
        return httpx.Response(200, content=body) if body else httpx.Response(404)
    return httpx.Response(200, content=f"/* {request.url} */".encode())


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def show(controller: LifecycleController, url: str, destination: str = "") -> None:
    route = controller.router.route(InterceptedRequest("GET", url, destination))
    label = f"{route.rule}/{route.strategy.value}" if route else "pass-through"
    try:
        response = await controller.handle(InterceptedRequest("GET", url, destination))
    except NetworkFailure as e:
        print(f"  ✗ {url:<50} [{label}] {e.message}")
        return
    print(f"  ✓ {url:<50} [{label}] {response.status} {response.body[:40]!r}")


async def main() -> None:
    settings = dataclasses.replace(
        get_settings(),
        origin_url=ORIGIN,
        static_assets=("./", "./index.html", "./manifest.json"),
    )
    fetcher = HttpxFetcher(timeout=5.0, transport=httpx.MockTransport(origin))
    controller = LifecycleController.create(settings, InMemoryStoreRegistry(), fetcher, InMemoryClientHost())

    print_section("Install and activate")
    await controller.install()
    print(f"  State: {controller.state.value}")
    print(f"  Stores: {await controller.store_names()}")

    print_section("Online")
    for url, destination in [
        (f"{ORIGIN}/app.js", "script"),
        (f"{ORIGIN}/api/sessions", ""),
        ("https://fonts.gstatic.com/font.woff2", "font"),
    ]:
        await show(controller, url, destination)
    await controller.writer.drain()

    print_section("Offline")
    global network_up
    network_up = False
    for url, destination in [
        (f"{ORIGIN}/app.js", "script"),
        (f"{ORIGIN}/api/sessions", ""),
        (f"{ORIGIN}/api/other", ""),
        ("https://fonts.gstatic.com/font.woff2", "font"),
        (f"{ORIGIN}/settings", "document"),
        (f"{ORIGIN}/avatar.png", "image"),
        (f"{ORIGIN}/other.js", "script"),
    ]:
        await show(controller, url, destination)

    print_section("Clear")
    result = await controller.clear_all()
    print(f"  success={result.success} deleted={list(result.deleted)}")

    await controller.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
