"""
Derive the call id and project id from a webhook call event.

The project id is taken from the explicit `project_id` field when present.
Otherwise it is recovered from the SIP `To` header, which the provider fills
with `sip:proj_...@sip.api.openai.com`. Extraction never raises.
"""

import logging
import re
from typing import Any, Dict, Optional, Pattern, Union

from pydantic import ValidationError

from voice_relay.config.constants import LOGGER_NAME, SENTINEL_CALL_IDS, SIP_DOMAIN
from voice_relay.models.sip_schemas import CallEventData, CallIdentifier

logger = logging.getLogger(LOGGER_NAME)

# Only the provider's own SIP domain is recognised
PROJECT_URI_PATTERN: Pattern = re.compile(
    r"sip:(proj_[A-Za-z0-9_\-]+)@" + re.escape(SIP_DOMAIN)
)

# SIP header names are case-insensitive
TO_HEADER = "to"


def _coerce(data: Union[CallEventData, Dict[str, Any], None]) -> Optional[CallEventData]:
    if data is None:
        return None
    if isinstance(data, CallEventData):
        return data
    try:
        return CallEventData.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Could not read call event data: {e}")
        return None


def extract_project_id(data: Union[CallEventData, Dict[str, Any], None]) -> Optional[str]:
    """
    Return the project id for a call event, or None when none can be found.

    Args:
        data: The `data` object of a call event

    Returns:
        The explicit project_id, else the id matched from the To header, else None
    """
    event_data = _coerce(data)
    if event_data is None:
        return None

    if event_data.project_id:
        return event_data.project_id

    for header in event_data.sip_headers:
        if header.name.strip().lower() != TO_HEADER:
            continue
        match = PROJECT_URI_PATTERN.search(header.value or "")
        if match:
            return match.group(1)

    return None


def extract_call_identifier(data: Union[CallEventData, Dict[str, Any], None]) -> CallIdentifier:
    """Build the CallIdentifier for a call event, with surrounding whitespace removed from the call id."""
    event_data = _coerce(data)
    call_id = event_data.call_id if event_data is not None else None
    if call_id is not None:
        call_id = call_id.strip()
    return CallIdentifier(call_id=call_id, project_id=extract_project_id(event_data))


def is_sentinel_call_id(call_id: Optional[str]) -> bool:
    """True for missing call ids and the placeholder values used by webhook tests."""
    return call_id is None or call_id.strip() in SENTINEL_CALL_IDS
