"""
Constants and configuration values used throughout the application.

This module defines constants that are used across different parts of the relay,
providing a centralized location for provider endpoints, event names and the
scripted agent behaviour.
"""

# Logger name used throughout the application
LOGGER_NAME = "voice_relay"

# Provider endpoints
DEFAULT_API_BASE = "https://api.openai.com/v1"
DEFAULT_REALTIME_URL = "wss://api.openai.com/v1/realtime"
DEFAULT_REALTIME_MODEL = "gpt-realtime"
SIP_DOMAIN = "sip.api.openai.com"

# Outbound request timeout in seconds
DEFAULT_PROVIDER_TIMEOUT = 30.0

# Webhook event types
EVENT_CALL_INCOMING = "realtime.call.incoming"

# Call ids that identify a webhook configuration test rather than a real call
SENTINEL_CALL_IDS = frozenset({"", "test", "undefined"})

# Agent behaviour
DEFAULT_AGENT_INSTRUCTIONS = (
    "You are a helpful voice assistant answering a phone call. "
    "Keep answers short and speak naturally."
)
DEFAULT_AGENT_GREETING = "Say to the user: 'Thank you for calling, how can I help you today?'"
