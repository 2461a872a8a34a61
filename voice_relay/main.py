"""
FastAPI server relaying a browser voice UI and SIP calls to the OpenAI Realtime API.

This module builds the application that issues ephemeral tokens to the browser,
receives SIP call webhooks from the provider, and forwards accept, refer and
reject requests for those calls. Accepted calls are watched by a background
call monitor.

Configuration is read once in `create_app` and injected into every handler
through a RelayContext stored on `app.state`.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from voice_relay.bot.call_monitor import CallMonitorRegistry
from voice_relay.config.constants import LOGGER_NAME
from voice_relay.config.logging_config import configure_logging
from voice_relay.config.settings import RelaySettings
from voice_relay.context import RelayContext, get_context
from voice_relay.handlers.sip_handlers import handle_refer, handle_reject, handle_webhook
from voice_relay.handlers.token_handlers import handle_legacy_token, handle_token
from voice_relay.services.provider_client import RealtimeProviderClient

logger = logging.getLogger(LOGGER_NAME)

APP_TITLE = "Voice Agent Relay"
APP_DESCRIPTION = "Token issuance and SIP call relay for the OpenAI Realtime API"
APP_VERSION = "1.0.0"


async def read_json(request: Request) -> Any:
    """Decode a JSON request body, returning None when it is empty or malformed."""
    try:
        return await request.json()
    except ValueError:
        logger.warning(f"Request to {request.url.path} did not carry a JSON body")
        return None


def create_app(
    settings: Optional[RelaySettings] = None,
    provider: Optional[RealtimeProviderClient] = None,
    monitors: Optional[CallMonitorRegistry] = None,
) -> FastAPI:
    """
    Build the relay application.

    Args:
        settings: Relay settings; read from the environment when omitted
        provider: Provider REST client; built from settings when omitted
        monitors: Call monitor registry; built from settings when omitted

    Returns:
        The configured FastAPI application
    """
    settings = settings or RelaySettings.from_env()
    context = RelayContext(
        settings=settings,
        provider=provider or RealtimeProviderClient(settings),
        monitors=monitors or CallMonitorRegistry(settings),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"{APP_TITLE} starting; API key configured: {settings.api_key_configured}")
        if settings.webhook_url:
            logger.info(f"SIP webhook URL: {settings.webhook_url}")
        yield
        await context.monitors.shutdown()
        await context.provider.aclose()
        logger.info(f"{APP_TITLE} stopped")

    app = FastAPI(
        title=APP_TITLE,
        description=APP_DESCRIPTION,
        version=APP_VERSION,
        lifespan=lifespan,
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root():
        """Describe the service and list its endpoints."""
        return {
            "name": APP_TITLE,
            "description": APP_DESCRIPTION,
            "version": APP_VERSION,
            "endpoints": {
                "/api/health": "Health check endpoint",
                "/api/token": "Ephemeral client token",
                "/api/sip/setup": "SIP webhook setup instructions",
                "/api/sip/webhook": "SIP call webhook receiver",
                "/api/sip/calls/{call_id}/refer": "Transfer a call",
                "/api/sip/calls/{call_id}/reject": "Reject a call",
            },
        }

    @app.get("/api/health")
    async def health_check():
        """Report that the server is running, independent of provider availability."""
        return {
            "status": "ok",
            "message": "Voice Agent Backend Server is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.post("/api/token")
    async def token(context: RelayContext = Depends(get_context)):
        return await handle_token(context)

    @app.post("/api/generate-ephemeral-token")
    async def generate_ephemeral_token(context: RelayContext = Depends(get_context)):
        return await handle_legacy_token(context)

    @app.get("/api/sip/setup")
    async def sip_setup(context: RelayContext = Depends(get_context)):
        """Render the values to enter in the provider and SIP trunk configuration."""
        s = context.settings
        return {
            "configured": s.api_key_configured,
            "project_id": s.openai_project_id,
            "webhook_url": s.webhook_url,
            "sip_uri": s.sip_uri,
            "webhook_events": ["realtime.call.incoming"],
        }

    @app.post("/api/sip/webhook")
    async def sip_webhook(request: Request, context: RelayContext = Depends(get_context)):
        return await handle_webhook(await read_json(request), context)

    @app.post("/api/sip/calls/{call_id}/refer")
    async def refer_call(
        call_id: str,
        request: Request,
        context: RelayContext = Depends(get_context),
    ):
        return await handle_refer(call_id, await read_json(request), context)

    @app.post("/api/sip/calls/{call_id}/reject")
    async def reject_call(call_id: str, context: RelayContext = Depends(get_context)):
        return await handle_reject(call_id, context)

    return app


_settings = RelaySettings.from_env()
configure_logging(_settings.log_level)
app = create_app(_settings)


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting server on http://{_settings.host}:{_settings.port}")
    uvicorn.run(app, host=_settings.host, port=_settings.port, http="h11")
