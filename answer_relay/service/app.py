"""HTTP surface for the answer pipeline.

``POST /api/message`` feeds a JSON envelope to :meth:`Coordinator.handle` and
returns the response envelope unchanged; transport-level success is always
HTTP 200 and the outcome lives in ``success``.
"""
from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from answer_relay.base.credentials import mask_secret
from answer_relay.base.dto import ResponseEnvelope
from answer_relay.base.errors import AnswerError, ErrorKind
from answer_relay.base.http import aclose_all_clients
from answer_relay.bus.coordinator import Coordinator
from answer_relay.config.defaults import (
    SERVICE_CORS_DEFAULT_ORIGINS,
    STORAGE_KEY_PROVIDER,
    STORAGE_KEY_SECRET,
)

from .app_parts.app_core import SettingsBody, build_coordinator

# Actions answered only in-process; the stored secret never leaves over HTTP.
IN_PROCESS_ACTIONS = frozenset({"getCredential"})


def create_app(coordinator: Optional[Coordinator] = None) -> FastAPI:
    """Build the FastAPI application around ``coordinator``.

    Pooled HTTP clients are closed when the application shuts down.
    """

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        await aclose_all_clients()

    app = FastAPI(title="Answer Relay", version="0.1.0", lifespan=lifespan)
    app.state.coordinator = coordinator or build_coordinator()

    cors_origins_env = os.getenv("ANSWER_RELAY_CORS_ORIGINS", SERVICE_CORS_DEFAULT_ORIGINS)
    allow_origins = [o.strip() for o in cors_origins_env.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/health")
    def health() -> Dict[str, Any]:
        """Check the health status of the service."""
        return {"ok": True}

    @app.post("/api/message")
    async def post_message(request: Request, envelope: Any = Body(default=None)) -> Dict[str, Any]:
        """Dispatch one message envelope to the Coordinator."""
        coord: Coordinator = request.app.state.coordinator
        action = envelope.get("action") if isinstance(envelope, dict) else None
        if isinstance(action, str) and action in IN_PROCESS_ACTIONS:
            err = AnswerError(
                kind=ErrorKind.FORMAT_MISMATCH,
                message=f"Action {action} is not available over HTTP",
                provider="service",
            )
            return ResponseEnvelope.fail(err).to_wire()
        return await coord.handle(envelope if isinstance(envelope, dict) else {})

    @app.post("/api/settings")
    async def post_settings(body: SettingsBody, request: Request) -> Dict[str, Any]:
        """Store the secret and provider selection, optionally verifying first."""
        coord: Coordinator = request.app.state.coordinator
        if body.verify and not await coord.verify_credential(body.apiKey, body.provider):
            return {"ok": False, "error": "Verification failed. Please check your API key."}
        coord.save_credential(body.apiKey, body.provider)
        return {"ok": True, STORAGE_KEY_SECRET: mask_secret(body.apiKey.strip())}

    @app.get("/api/settings")
    async def get_settings(request: Request) -> Dict[str, Any]:
        """Return the provider selection and the masked secret."""
        coord: Coordinator = request.app.state.coordinator
        secret = (await coord.handle({"action": "getCredential"})).get("result", {}).get("apiKey", "")
        return {
            "ok": True,
            STORAGE_KEY_SECRET: mask_secret(secret),
            STORAGE_KEY_PROVIDER: coord.stored_provider().value,
        }

    return app


app = create_app()


def get_app() -> FastAPI:
    """Return the module-level FastAPI application instance."""
    return app
