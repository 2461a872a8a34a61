"""
Bot module for monitoring accepted calls over the provider's realtime WebSocket.

Key components:
- CallMonitor: One WebSocket per accepted call; sends the scripted greeting and
  logs every event until the provider closes the connection.
- CallMonitorRegistry: Runs monitors as detached asyncio tasks keyed by call id
  and lets shutdown code and tests cancel or await them.

Usage examples:
```python
from voice_relay.bot import CallMonitorRegistry

monitors = CallMonitorRegistry(settings)
monitors.start("rtc_123")
await monitors.wait("rtc_123", timeout=5)
await monitors.shutdown()
```
"""

from voice_relay.bot.call_monitor import CallMonitor, CallMonitorRegistry

__all__ = ["CallMonitor", "CallMonitorRegistry"]
