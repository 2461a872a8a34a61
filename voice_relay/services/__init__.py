"""
Services module for talking to the realtime provider.

Key components:
- provider_client: RealtimeProviderClient, the bearer-authenticated REST client
  for ephemeral credentials and call accept, refer and reject requests.
- call_identifier: Helpers that derive the call id and project id from a
  webhook call event and recognise sentinel test call ids.

Usage examples:
```python
from voice_relay.config.settings import RelaySettings
from voice_relay.services.provider_client import RealtimeProviderClient

client = RealtimeProviderClient(RelaySettings.from_env())
token = await client.create_client_secret()
await client.aclose()
```
"""

from voice_relay.services.call_identifier import (
    extract_call_identifier,
    extract_project_id,
    is_sentinel_call_id,
)
from voice_relay.services.provider_client import RealtimeProviderClient

__all__ = [
    "RealtimeProviderClient",
    "extract_call_identifier",
    "extract_project_id",
    "is_sentinel_call_id",
]
