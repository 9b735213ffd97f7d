"""Shared fixtures for unit tests: an in-process fake gateway."""
import asyncio
from typing import Any

import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer


class FakeGateway:
    """Scriptable gateway recording every request it receives."""

    def __init__(self):
        self.base_url = ""
        self.calls: list[tuple[str, str, Any]] = []
        self._routes: dict[tuple[str, str], tuple[int, Any, float]] = {}

    def reply(self, method: str, path: str, payload: Any, status: int = 200, delay: float = 0.0) -> None:
        """Script the response for METHOD path. A str or bytes payload is sent as is."""
        self._routes[(method, path)] = (status, payload, delay)

    def paths(self) -> list[str]:
        return [path for _, path, _ in self.calls]

    async def handle(self, request: web.Request) -> web.Response:
        body = None
        if request.can_read_body:
            body = await request.json()
        self.calls.append((request.method, request.path, body))

        route = self._routes.get((request.method, request.path))
        if route is None:
            return web.json_response({"detail": f"No route for {request.path}"}, status=404)

        status, payload, delay = route
        if delay:
            await asyncio.sleep(delay)
        if isinstance(payload, bytes):
            return web.Response(body=payload, status=status, content_type="application/json")
        if isinstance(payload, str):
            return web.Response(text=payload, status=status)
        return web.json_response(payload, status=status)


@pytest_asyncio.fixture
async def fake_gateway():
    """Start a fake gateway on a local port."""
    gateway = FakeGateway()
    app = web.Application()
    app.router.add_route("*", "/{tail:.*}", gateway.handle)

    server = TestServer(app)
    await server.start_server()
    gateway.base_url = f"http://{server.host}:{server.port}"

    yield gateway

    await server.close()
