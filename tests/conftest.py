"""Shared test fixtures for the push-dispatch test suite."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import httpx
import pytest

from push_dispatch.config.settings import DatabaseEngine
from push_dispatch.models import Base, NotificationToken

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from push_dispatch.datastore.client import Datastore


@pytest.fixture
def app_config():
    """Provide a test AppConfig with in-memory storage and a fake gateway URL."""
    from push_dispatch.config.settings import AppConfig, DatabaseConfig, GatewayConfig

    return AppConfig(
        debug=True,
        db=DatabaseConfig(
            engine=DatabaseEngine.SQLITE,
            dsn="sqlite+aiosqlite:///:memory:",
        ),
        gateway=GatewayConfig(url="https://push.test/--/api/v2/push/send"),
    )


@pytest.fixture
async def datastore(app_config) -> AsyncIterator[Datastore]:
    """Open an in-memory datastore with the token table created."""
    from push_dispatch.datastore.client import Datastore

    ds = Datastore(app_config.db)
    await ds.open(base=Base)
    yield ds
    await ds.close()


@pytest.fixture
def seed_tokens(datastore):
    """Return a coroutine that inserts token rows.

    Each row is ``(token, status, is_for_test)`` or
    ``(token, status, is_for_test, notified)``.
    """

    async def _seed(*rows: tuple) -> None:
        async with datastore.session() as session:
            for row in rows:
                token, status, is_for_test, *rest = row
                session.add(
                    NotificationToken(
                        push_token=token,
                        status=str(status),
                        is_for_test=is_for_test,
                        notified=rest[0] if rest else False,
                    )
                )
            await session.commit()

    return _seed


@pytest.fixture
def load_token(datastore):
    """Return a coroutine fetching a token row by primary key."""

    async def _load(token: str) -> NotificationToken | None:
        async with datastore.session() as session:
            return await session.get(NotificationToken, token)

    return _load


@pytest.fixture
async def make_gateway(app_config) -> AsyncIterator[Callable]:
    """Build gateway clients whose HTTP calls go to a handler function."""
    from push_dispatch.gateway.client import PushGatewayClient

    clients: list[PushGatewayClient] = []

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> PushGatewayClient:
        gateway = PushGatewayClient(app_config.gateway)
        gateway._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(gateway)
        return gateway

    yield _make
    for gateway in clients:
        await gateway.close()


@pytest.fixture
def accept_all() -> Callable[[httpx.Request], httpx.Response]:
    """Gateway handler answering ``ok`` for every message in the request."""

    def _handler(request: httpx.Request) -> httpx.Response:
        messages = json.loads(request.content)
        return httpx.Response(200, json={"data": [{"status": "ok"} for _ in messages]})

    return _handler
