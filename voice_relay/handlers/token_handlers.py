"""
Issues ephemeral client tokens for the browser.

The browser never sees the long-lived API key; it asks the relay for a
short-lived secret and opens its realtime session with that.
"""

import logging
import traceback

from fastapi.responses import JSONResponse

from voice_relay.config.constants import LOGGER_NAME
from voice_relay.context import RelayContext
from voice_relay.errors import ConfigurationError, ProviderError
from voice_relay.handlers.responses import error_response

logger = logging.getLogger(LOGGER_NAME)


async def handle_token(context: RelayContext) -> JSONResponse:
    """
    Mint an ephemeral token.

    Returns:
        `{value, expires_at}` on success, otherwise a 500 with an `error` field
    """
    try:
        logger.info("Generating ephemeral token")
        token = await context.provider.create_client_secret()
        logger.info("Ephemeral token generated")
        return JSONResponse({"value": token.value, "expires_at": token.expires_at})
    except ConfigurationError as e:
        logger.error(str(e))
        return error_response(str(e))
    except ProviderError as e:
        return error_response(
            f"OpenAI API error: {e.status_code} - {e.body}", details=e.to_details()
        )
    except Exception as e:
        logger.error(f"Error generating ephemeral token: {e}")
        logger.debug(f"Token error details: {traceback.format_exc()}")
        return error_response("Failed to generate ephemeral token", details=str(e))


async def handle_legacy_token(context: RelayContext) -> JSONResponse:
    """
    Mint an ephemeral token in the shape the browser client reads.

    Provider failures keep the provider's status code.
    """
    try:
        token = await context.provider.create_client_secret()
        return JSONResponse({
            "success": True,
            "ephemeralToken": token.value,
            "expiresAt": token.expires_at,
        })
    except ConfigurationError as e:
        return error_response(str(e))
    except ProviderError as e:
        return error_response(
            f"OpenAI API error: {e.status_code} - {e.body}", status_code=e.status_code
        )
    except Exception as e:
        logger.error(f"Error generating ephemeral token: {e}")
        return error_response("Failed to generate ephemeral token", details=str(e))
