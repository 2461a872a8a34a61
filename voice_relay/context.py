"""
Per-application context shared by every request handler.
"""

from dataclasses import dataclass

from fastapi import Request

from voice_relay.bot.call_monitor import CallMonitorRegistry
from voice_relay.config.settings import RelaySettings
from voice_relay.services.provider_client import RealtimeProviderClient


@dataclass
class RelayContext:
    """Settings and provider-facing collaborators injected into handlers."""

    settings: RelaySettings
    provider: RealtimeProviderClient
    monitors: CallMonitorRegistry


def get_context(request: Request) -> RelayContext:
    """FastAPI dependency returning the context installed by create_app."""
    return request.app.state.context
