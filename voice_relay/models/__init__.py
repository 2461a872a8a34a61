"""
Models module for the payloads the relay receives and sends.

Key components:
- sip_schemas: Webhook call events, the call identifier derived from them, and
  the acceptance and refer bodies sent back to the provider.
- openai_schemas: Client-secret request and response shapes and the realtime
  `response.create` frame pushed by the call monitor.

Usage examples:
```python
from voice_relay.models.sip_schemas import CallEvent

event = CallEvent.model_validate(
    {"type": "realtime.call.incoming", "data": {"call_id": "rtc_123"}}
)
print(event.data.call_id)
```
"""

from voice_relay.models.openai_schemas import (
    ClientSecretRequest,
    ClientSecretSession,
    EphemeralToken,
    ResponseCreateMessage,
)
from voice_relay.models.sip_schemas import (
    AcceptanceDirective,
    CallEvent,
    CallEventData,
    CallIdentifier,
    ReferRequest,
    SipHeader,
)
