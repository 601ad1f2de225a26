from __future__ import annotations

import os
import uvicorn

from ..config.defaults import SERVICE_DEFAULT_HOST, SERVICE_DEFAULT_PORT


def _parse_port(value: str | None, default: int) -> int:
    """Best-effort parse of a port from string, falling back to a sane default."""
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def main() -> None:
    """Start the development server for the answer relay FastAPI app.

    - ANSWER_RELAY_HOST: interface to bind (default "127.0.0.1")
    - ANSWER_RELAY_PORT: port to bind (default 8091)
    - ANSWER_RELAY_RELOAD: "true"/"false" to toggle auto-reload (default True)
    """
    host = os.getenv("ANSWER_RELAY_HOST", SERVICE_DEFAULT_HOST)
    port = _parse_port(os.getenv("ANSWER_RELAY_PORT"), SERVICE_DEFAULT_PORT)

    reload_env = os.getenv("ANSWER_RELAY_RELOAD")
    reload_enabled = True if reload_env is None else reload_env.lower() == "true"

    uvicorn.run(
        "answer_relay.service.app:app",
        host=host,
        port=port,
        reload=reload_enabled,
    )


if __name__ == "__main__":
    main()
