"""Application entry point for the push dispatch hook server."""

from __future__ import annotations

import os

import uvicorn

from push_dispatch.config.settings import ServerConfig


def main() -> None:
    """Start the hook server."""
    server = ServerConfig()
    reload = os.getenv("PUSHDISPATCH_RELOAD", "false").lower() in ("1", "true", "yes")
    uvicorn.run(
        "push_dispatch.api.app:create_app",
        factory=True,
        host=server.host,
        port=server.port,
        reload=reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
