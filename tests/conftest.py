"""Root pytest configuration and shared fixtures."""

from __future__ import annotations

import asyncio
import copy
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, List

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from event_pipeline.config import runtime

SOURCE_EVENTS: Dict[int, Dict[str, Any]] = {
    1: {
        "id": 1,
        "name": "Southampton v Bournemouth",
        "time": "2017-08-20:15:00:00Z",
        "Markets": [101, 102],
    },
    2: {
        "id": 2,
        "name": "Arsenal v Bournemouth",
        "time": "2017-08-20:15:00:00Z",
        "markets": [102],
    },
    3: {
        "id": 3,
        "name": "Southampton v Arsenal",
        "time": "2017-08-21:15:00:00Z",
        "Markets": [101],
    },
}

SOURCE_MARKETS: Dict[int, Dict[str, Any]] = {
    101: {
        "id": "101",
        "type": "win-draw-win",
        "options": [
            {"id": "10101", "name": "Southampton", "odds": "3/5"},
            {"id": "10102", "name": "Draw", "odds": "4/5"},
            {"id": "10103", "name": "Bournemouth", "odds": "5/1"},
        ],
    },
    102: {
        "id": "102",
        "type": "win-draw-win",
        "options": [
            {"id": "10201", "name": "Southampton", "odds": "3/5"},
            {"id": "10202", "name": "Draw", "odds": "4/5"},
            {"id": "10203", "name": "Bournemouth", "odds": "5/1"},
        ],
    },
}


@pytest.fixture(autouse=True)
def reset_runtime_defaults(monkeypatch):
    """Keep developer .env files out of the tests."""
    monkeypatch.setattr(runtime, "_DOTENV_CANDIDATES", ())
    runtime._DEFAULT_VALUES = None
    yield
    runtime._DEFAULT_VALUES = None


@pytest.fixture
def source_events() -> Dict[int, Dict[str, Any]]:
    return copy.deepcopy(SOURCE_EVENTS)


@pytest.fixture
def source_markets() -> Dict[int, Dict[str, Any]]:
    return copy.deepcopy(SOURCE_MARKETS)


@dataclass
class FakeServices:
    """State behind the fake source and store HTTP services."""

    ids: List[Any]
    events: Dict[int, Any]
    markets: Dict[int, Any]
    list_status: int = 200
    store_status: int = 200
    stored: "asyncio.Queue[Dict[str, Any]]" = field(default_factory=asyncio.Queue)
    requests: List[str] = field(default_factory=list)
    base_url: str = ""


def _build_app(state: FakeServices) -> web.Application:
    async def list_events(request: web.Request) -> web.Response:
        state.requests.append(request.path)
        if state.list_status != 200:
            return web.Response(status=state.list_status, text="unavailable")
        return web.json_response(state.ids)

    async def get_event(request: web.Request) -> web.Response:
        state.requests.append(request.path)
        event = state.events.get(int(request.match_info["event_id"]))
        if event is None:
            return web.Response(status=404, text="not found")
        if isinstance(event, str):
            return web.Response(text=event, content_type="application/json")
        return web.json_response(event)

    async def get_market(request: web.Request) -> web.Response:
        state.requests.append(request.path)
        market = state.markets.get(int(request.match_info["market_id"]))
        if market is None:
            return web.Response(status=404, text="not found")
        return web.json_response(market)

    async def post_event(request: web.Request) -> web.Response:
        state.requests.append(request.path)
        body = await request.json()
        if state.store_status == 200:
            await state.stored.put(body)
        return web.Response(status=state.store_status)

    app = web.Application()
    app.router.add_get("/football/events", list_events)
    app.router.add_get("/football/events/{event_id}", get_event)
    app.router.add_get("/football/markets/{market_id}", get_market)
    app.router.add_post("/event", post_event)
    return app


@pytest.fixture
def fake_services(source_events, source_markets):
    """Return an async context manager serving the feed and the store on one local server."""

    @asynccontextmanager
    async def _serve(ids=(), events=None, markets=None, **overrides):
        state = FakeServices(
            ids=list(ids),
            events=source_events if events is None else events,
            markets=source_markets if markets is None else markets,
            **overrides,
        )
        server = TestServer(_build_app(state))
        await server.start_server()
        state.base_url = str(server.make_url("/")).rstrip("/")
        try:
            yield state
        finally:
            await server.close()

    return _serve
