"""
REST client for the realtime provider.

Issues the ephemeral-credential request and the accept, refer and reject
call-control requests. Each operation is a single request: a non-2xx answer is
logged and raised as ProviderError, and nothing is retried.
"""

import logging
from typing import Any, Optional

import httpx

from voice_relay.config.constants import LOGGER_NAME
from voice_relay.config.settings import RelaySettings
from voice_relay.errors import ConfigurationError, ProviderError
from voice_relay.models.openai_schemas import (
    ClientSecretRequest,
    ClientSecretSession,
    EphemeralToken,
)
from voice_relay.models.sip_schemas import AcceptanceDirective

logger = logging.getLogger(LOGGER_NAME)

MISSING_API_KEY_MESSAGE = "OPENAI_API_KEY not found in environment variables"


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class RealtimeProviderClient:
    """
    Client for the provider's realtime REST endpoints.
    """

    def __init__(
        self,
        settings: RelaySettings,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings
        self._client = http_client
        self._owns_client = http_client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.settings.provider_timeout)
            self._owns_client = True
        return self._client

    def _headers(self) -> dict:
        if not self.settings.openai_api_key:
            raise ConfigurationError(MISSING_API_KEY_MESSAGE)
        return {
            "Authorization": f"Bearer {self.settings.openai_api_key}",
            "Content-Type": "application/json",
        }

    def _url(self, path: str) -> str:
        return f"{self.settings.api_base.rstrip('/')}/{path.lstrip('/')}"

    async def _post(self, operation: str, path: str, json: Any = None) -> httpx.Response:
        headers = self._headers()
        url = self._url(path)
        logger.debug(f"{operation}: POST {url}")

        response = await self._get_client().post(url, headers=headers, json=json)

        if not response.is_success:
            body = _response_body(response)
            logger.error(f"{operation} failed: {response.status_code} {body}")
            raise ProviderError(operation, response.status_code, body)

        logger.debug(f"{operation} succeeded with status {response.status_code}")
        return response

    async def create_client_secret(self) -> EphemeralToken:
        """
        Mint an ephemeral client secret for a browser session.

        Returns:
            EphemeralToken with the secret value and its expiry
        """
        request = ClientSecretRequest(
            session=ClientSecretSession(model=self.settings.realtime_model)
        )
        response = await self._post(
            "create_client_secret", "realtime/client_secrets", request.model_dump()
        )
        return EphemeralToken.model_validate(response.json())

    async def accept_call(self, call_id: str, directive: AcceptanceDirective) -> None:
        """Accept an incoming SIP call with the given agent configuration."""
        await self._post(
            "accept_call", f"realtime/calls/{call_id}/accept", directive.model_dump()
        )
        logger.info(f"Call {call_id} accepted")

    async def refer_call(self, call_id: str, target_uri: str) -> None:
        """Transfer a call to another SIP or tel address."""
        await self._post(
            "refer_call", f"realtime/calls/{call_id}/refer", {"target_uri": target_uri}
        )
        logger.info(f"Call {call_id} referred to {target_uri}")

    async def reject_call(self, call_id: str) -> None:
        """Reject an incoming call."""
        await self._post("reject_call", f"realtime/calls/{call_id}/reject")
        logger.info(f"Call {call_id} rejected")

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None
