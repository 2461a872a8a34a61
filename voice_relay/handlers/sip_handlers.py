"""
Handles SIP webhook deliveries and call-control requests.

An incoming-call webhook is answered by accepting the call with the fixed agent
configuration and then starting a call monitor in the background. Refer and
reject are independent single requests keyed by call id. The provider owns the
call state; the relay only asks for transitions.

Every path answers with a JSON body. Failures end the current request with a
500 and are never retried.
"""

import logging
import traceback
from typing import Any, Optional

from fastapi.responses import JSONResponse
from pydantic import ValidationError

from voice_relay.config.constants import EVENT_CALL_INCOMING, LOGGER_NAME
from voice_relay.context import RelayContext
from voice_relay.errors import ConfigurationError, InvalidCallIdError, ProviderError
from voice_relay.handlers.responses import error_response
from voice_relay.models.sip_schemas import AcceptanceDirective, CallEvent, ReferRequest
from voice_relay.services.call_identifier import (
    extract_call_identifier,
    is_sentinel_call_id,
)

logger = logging.getLogger(LOGGER_NAME)


def build_acceptance_directive(context: RelayContext) -> AcceptanceDirective:
    return AcceptanceDirective(
        instructions=context.settings.agent_instructions,
        model=context.settings.realtime_model,
    )


def validate_call_id(call_id: Optional[str]) -> str:
    if is_sentinel_call_id(call_id):
        raise InvalidCallIdError(call_id)
    return call_id.strip()


async def handle_webhook(payload: Any, context: RelayContext) -> JSONResponse:
    """
    Process one webhook delivery.

    Args:
        payload: The decoded JSON body
        context: Settings, provider client and monitor registry

    Returns:
        A JSON response; 200 for acknowledgements and successful acceptance,
        500 for configuration, provider and unexpected failures
    """
    try:
        event = CallEvent.model_validate(payload)
        logger.info(f"Webhook received: {event.type or 'unknown'}")

        if event.type != EVENT_CALL_INCOMING:
            logger.info(f"Acknowledging webhook without action: {event.type}")
            return JSONResponse({"received": True, "type": event.type})

        identifier = extract_call_identifier(event.data)
        logger.info(
            f"Incoming call: call_id={identifier.call_id} project_id={identifier.project_id}"
        )

        if not identifier.is_valid:
            logger.info("Test webhook received, simulating call acceptance")
            return JSONResponse({
                "success": True,
                "simulated": True,
                "message": "Test webhook received - call acceptance simulated",
                "project_id": identifier.project_id,
            })

        return await accept_incoming_call(identifier.call_id, context)

    except ConfigurationError as e:
        logger.error(f"Configuration error handling webhook: {e}")
        return error_response(str(e))
    except ValidationError as e:
        logger.error(f"Invalid webhook payload: {e}")
        return error_response("Invalid webhook payload", details=str(e))
    except Exception as e:
        logger.error(f"Error processing webhook: {e}")
        logger.debug(f"Webhook error details: {traceback.format_exc()}")
        return error_response("Failed to process webhook", details=str(e))


async def accept_incoming_call(call_id: str, context: RelayContext) -> JSONResponse:
    """
    Accept a call and start monitoring it.

    When acceptance fails and a fallback target is configured the call is
    referred there instead.
    """
    try:
        await context.provider.accept_call(call_id, build_acceptance_directive(context))
    except ProviderError as e:
        fallback = context.settings.fallback_target_uri
        if not fallback:
            return error_response("Failed to accept call", details=e.to_details())

        logger.warning(f"[{call_id}] Accept failed, referring call to {fallback}")
        try:
            await context.provider.refer_call(call_id, fallback)
        except ProviderError as refer_error:
            return error_response(
                "Failed to accept or refer call",
                details={"accept": e.to_details(), "refer": refer_error.to_details()},
            )
        return JSONResponse({
            "success": True,
            "referred": True,
            "call_id": call_id,
            "target_uri": fallback,
            "message": f"Call could not be accepted and was referred to {fallback}",
        })

    context.monitors.start(call_id)
    return JSONResponse({
        "success": True,
        "call_id": call_id,
        "message": "Call accepted",
    })


async def handle_refer(call_id: Optional[str], payload: Any, context: RelayContext) -> JSONResponse:
    """Transfer a call to the `target_uri` given in the request body."""
    try:
        call_id = validate_call_id(call_id)
        request = ReferRequest.model_validate(payload if isinstance(payload, dict) else {})
        if not request.target_uri:
            return error_response("target_uri is required", status_code=400)

        await context.provider.refer_call(call_id, request.target_uri)
        return JSONResponse({
            "success": True,
            "message": f"Call {call_id} referred to {request.target_uri}",
        })
    except InvalidCallIdError:
        return error_response("A valid callId is required", status_code=400)
    except ValidationError as e:
        return error_response("Invalid refer request", status_code=400, details=str(e))
    except ConfigurationError as e:
        return error_response(str(e))
    except ProviderError as e:
        return error_response("Failed to refer call", details=e.to_details())
    except Exception as e:
        logger.error(f"Error referring call {call_id}: {e}")
        logger.debug(f"Refer error details: {traceback.format_exc()}")
        return error_response("Failed to refer call", details=str(e))


async def handle_reject(call_id: Optional[str], context: RelayContext) -> JSONResponse:
    """Reject an incoming call."""
    try:
        call_id = validate_call_id(call_id)
        await context.provider.reject_call(call_id)
        return JSONResponse({
            "success": True,
            "message": f"Call {call_id} rejected",
        })
    except InvalidCallIdError:
        return error_response("A valid callId is required", status_code=400)
    except ConfigurationError as e:
        return error_response(str(e))
    except ProviderError as e:
        return error_response("Failed to reject call", details=e.to_details())
    except Exception as e:
        logger.error(f"Error rejecting call {call_id}: {e}")
        logger.debug(f"Reject error details: {traceback.format_exc()}")
        return error_response("Failed to reject call", details=str(e))
