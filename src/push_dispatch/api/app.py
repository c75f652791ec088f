"""FastAPI application factory — HTTP entry point for event hooks."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from fastapi import Body, FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest
from starlette.responses import Response

from push_dispatch import __version__
from push_dispatch.config.settings import AppConfig
from push_dispatch.datastore.client import Datastore, run_auto_migrate
from push_dispatch.errors.push_errors import PushDispatchError
from push_dispatch.gateway.client import PushGatewayClient
from push_dispatch.hooks.registry import HookRegistry, register_push_hooks
from push_dispatch.metrics.collector import DispatchMetrics
from push_dispatch.notifications.service import PushNotificationService

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the datastore and gateway on startup, close them on shutdown."""
    config: AppConfig = app.state.config
    datastore = Datastore(config.db)
    gateway: PushGatewayClient = app.state.gateway

    try:
        await datastore.open()
        await run_auto_migrate(datastore.engine)
        if not gateway.is_connected:
            await gateway.connect()

        service = PushNotificationService(
            datastore,
            gateway,
            config.gateway,
            metrics=app.state.metrics if config.metrics.enabled else None,
        )
        hooks = HookRegistry()
        register_push_hooks(hooks, service)

        app.state.datastore = datastore
        app.state.service = service
        app.state.hooks = hooks
        logger.info("Push dispatch service started (gateway %s)", gateway.url)
        yield
    finally:
        await gateway.close()
        await datastore.close()
        logger.info("Push dispatch service shut down")


def _serialize(result: Any) -> Any:
    to_dict = getattr(result, "to_dict", None)
    return to_dict() if callable(to_dict) else result


def create_app(
    *,
    config: AppConfig | None = None,
    gateway: PushGatewayClient | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        config: Optional AppConfig. If *None*, a default config is created
            from environment variables.
        gateway: Optional pre-built gateway client (tests inject one backed
            by a mock transport).
    """
    if config is None:
        config = AppConfig()

    app = FastAPI(
        title="push-dispatch",
        version=__version__,
        description="Push notification dispatch with per-token delivery tracking",
        lifespan=_lifespan,
    )
    app.state.config = config
    app.state.gateway = gateway or PushGatewayClient(config.gateway)
    app.state.metrics = DispatchMetrics()

    @app.exception_handler(PushDispatchError)
    async def _push_error_handler(request: Request, exc: PushDispatchError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"code": exc.code, "message": exc.message},
        )

    @app.get("/health", tags=["base"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/metrics", tags=["base"], include_in_schema=False)
    async def metrics_endpoint() -> Response:
        """Prometheus metrics endpoint."""
        return Response(
            content=generate_latest(app.state.metrics.registry),
            media_type="text/plain; version=0.0.4; charset=utf-8",
        )

    @app.post("/v1/hooks/{event}", tags=["hooks"])
    async def trigger_hook(
        event: str,
        request: Request,
        payload: dict[str, Any] | None = Body(default=None),  # noqa: B008
    ) -> dict[str, Any]:
        """Emit *event* with the request body as payload."""
        hooks: HookRegistry = request.app.state.hooks
        results = await hooks.emit_strict(event, payload or {})
        return {"event": event, "results": [_serialize(r) for r in results]}

    return app
