# File: tests/conftest.py
from __future__ import annotations

from collections import Counter
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any, Dict, List, Tuple

import pytest
import pytest_asyncio
from aiohttp import web

from site_mapper.config import CrawlerConfig
from site_mapper.logger import configure

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def html_page(*hrefs: str) -> Handler:
    """Handler serving an HTML page with one anchor per href."""
    body = "<html><body>" + "".join(f'<a href="{h}">{h}</a>' for h in hrefs) + "</body></html>"

    async def handle(_):
        return web.Response(text=body, content_type="text/html")

    return handle


def status_page(status: int) -> Handler:
    async def handle(_):
        return web.Response(status=status, text="thou shall not pass")

    return handle


def _as_handler(page) -> Handler:
    """A route value is a handler, an HTTP status code, or a list of hrefs for an HTML page."""
    if callable(page):
        return page
    if isinstance(page, int):
        return status_page(page)
    return html_page(*page)


@pytest.fixture(autouse=True)
def _reset_logging():
    """CLI tests rebind the handler to CliRunner streams; restore stderr afterwards."""
    yield
    configure(level="INFO")


@pytest.fixture()
def basic_config() -> CrawlerConfig:
    return CrawlerConfig(max_concurrency=2, timeout=2.0, user_agent="TestAgent/1.0")


@pytest_asyncio.fixture
async def serve(unused_tcp_port_factory) -> AsyncIterator[Callable[[Dict[str, Any]], Awaitable[Tuple[str, Counter]]]]:
    """
    Factory fixture: start an aiohttp app for the given ``{path: page}`` routes.

    Returns the base URL and a Counter of hits per request path.
    """
    runners: List[web.AppRunner] = []

    async def _start(routes: Dict[str, Any]) -> Tuple[str, Counter]:
        hits: Counter = Counter()

        @web.middleware
        async def count_hits(request, handler):
            hits[request.path] += 1
            return await handler(request)

        app = web.Application(middlewares=[count_hits])
        for path, page in routes.items():
            app.router.add_get(path, _as_handler(page))

        runner = web.AppRunner(app)
        await runner.setup()
        runners.append(runner)
        port = unused_tcp_port_factory()
        site = web.TCPSite(runner, "127.0.0.1", port)
        await site.start()
        return f"http://127.0.0.1:{port}", hits

    try:
        yield _start
    finally:
        for runner in runners:
            await runner.cleanup()
