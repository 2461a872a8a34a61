"""
Configuration module for the voice relay.

This module provides centralized configuration management for the relay,
including constants, logging setup, and environment-based settings.

Key components:
- constants: Provider endpoints, webhook event names and default agent behaviour.
- logging_config: Console and rotating-file logging for the application logger.
- settings: The RelaySettings model, built once from the environment and
  injected into every request handler.

Usage examples:
```python
from voice_relay.config.settings import RelaySettings
from voice_relay.config.logging_config import configure_logging

settings = RelaySettings.from_env()
logger = configure_logging(settings.log_level)
logger.info(f"Webhook URL: {settings.webhook_url}")
```
"""

from voice_relay.config.settings import RelaySettings

__all__ = ["RelaySettings"]
