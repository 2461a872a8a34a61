"""
Pydantic models for the provider's REST and realtime message structures.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ClientSecretSession(BaseModel):
    """Session block of a client-secret request."""
    type: str = "realtime"
    model: str


class ClientSecretRequest(BaseModel):
    """Request body for minting an ephemeral client secret."""
    session: ClientSecretSession


class EphemeralToken(BaseModel):
    """Short-lived credential handed to the browser."""
    model_config = ConfigDict(extra="allow")

    value: str
    expires_at: Optional[int] = None


class ResponseCreateMessage(BaseModel):
    """Realtime `response.create` event asking the agent to speak."""
    type: str = "response.create"
    response: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def with_instructions(cls, instructions: str) -> "ResponseCreateMessage":
        return cls(response={"instructions": instructions})
