"""
Request handlers for the relay's HTTP endpoints.

Key components:
- sip_handlers: Incoming-call webhook (accept and monitor), refer and reject.
- token_handlers: Ephemeral client-token issuance for the browser.

Every handler takes the RelayContext explicitly and returns a JSONResponse;
exceptions are converted to JSON error bodies at the handler boundary.
"""

from voice_relay.handlers.sip_handlers import (
    accept_incoming_call,
    handle_refer,
    handle_reject,
    handle_webhook,
)
from voice_relay.handlers.token_handlers import handle_legacy_token, handle_token

__all__ = [
    "accept_incoming_call",
    "handle_legacy_token",
    "handle_refer",
    "handle_reject",
    "handle_token",
    "handle_webhook",
]
