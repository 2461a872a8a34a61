"""
Pydantic models for SIP webhook events and call-control payloads.

The provider delivers call-lifecycle notifications as `{type, data}` JSON
objects. Only the fields the relay reads are declared; everything else in
`data` is kept so it can be logged.
"""

import logging
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from voice_relay.config.constants import LOGGER_NAME, SENTINEL_CALL_IDS

logger = logging.getLogger(LOGGER_NAME)


class SipHeader(BaseModel):
    """A single SIP header forwarded with the call event."""

    name: str
    value: Optional[str] = ""


class CallEventData(BaseModel):
    """Payload of a call event."""

    model_config = ConfigDict(extra="allow")

    call_id: Optional[str] = None
    project_id: Optional[str] = None
    sip_headers: List[SipHeader] = Field(default_factory=list)

    @field_validator("sip_headers", mode="before")
    @classmethod
    def drop_unreadable_headers(cls, v: Any) -> List[Any]:
        """Skip header entries that are not `{name, value}` strings instead of failing the event."""
        if v is None:
            return []
        if not isinstance(v, list):
            logger.warning(f"Ignoring sip_headers of type {type(v).__name__}")
            return []

        headers = []
        for entry in v:
            try:
                headers.append(SipHeader.model_validate(entry))
            except ValidationError:
                logger.warning(f"Ignoring unreadable SIP header: {entry!r}")
        return headers


class CallEvent(BaseModel):
    """Webhook notification describing a call-lifecycle event."""

    model_config = ConfigDict(extra="allow")

    type: str = ""
    data: CallEventData = Field(default_factory=CallEventData)


class CallIdentifier(BaseModel):
    """Call and project ids derived from one webhook delivery."""

    call_id: Optional[str] = None
    project_id: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.call_id is not None and self.call_id.strip() not in SENTINEL_CALL_IDS


class AcceptanceDirective(BaseModel):
    """Body sent to the provider to accept an incoming call."""

    type: Literal["realtime"] = "realtime"
    instructions: str
    model: str


class ReferRequest(BaseModel):
    """Body of a refer request: where to transfer the call."""

    target_uri: Optional[str] = Field(None, description="SIP or tel URI to transfer to")
