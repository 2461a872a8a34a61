"""
Unit tests for call identifier extraction.
"""

import pytest

from voice_relay.models.sip_schemas import CallEventData
from voice_relay.services.call_identifier import (
    extract_call_identifier,
    extract_project_id,
    is_sentinel_call_id,
)


def to_header(value):
    return {"name": "To", "value": value}


def test_explicit_project_id_wins_over_headers():
    data = {
        "call_id": "rtc_1",
        "project_id": "proj_explicit",
        "sip_headers": [to_header("sip:proj_from_header@sip.api.openai.com")],
    }
    assert extract_project_id(data) == "proj_explicit"


def test_project_id_from_to_header():
    data = {
        "call_id": "rtc_1",
        "sip_headers": [
            {"name": "From", "value": "sip:+15551234567@carrier.example.com"},
            to_header("<sip:proj_XYZ@sip.api.openai.com>;tag=abc"),
        ],
    }
    assert extract_project_id(data) == "proj_XYZ"


def test_to_header_with_transport_parameter():
    data = {"sip_headers": [to_header("sip:proj_a1b2_c3@sip.api.openai.com;transport=tls")]}
    assert extract_project_id(data) == "proj_a1b2_c3"


@pytest.mark.parametrize(
    "headers",
    [
        [],
        [{"name": "From", "value": "sip:proj_XYZ@sip.api.openai.com"}],
        [to_header("sip:+15551234567@carrier.example.com")],
        [to_header("sip:proj_XYZ@sip.other-provider.com")],
    ],
)
def test_no_project_id_returns_none(headers):
    assert extract_project_id({"call_id": "rtc_1", "sip_headers": headers}) is None


def test_malformed_data_never_raises():
    assert extract_project_id(None) is None
    assert extract_project_id({"sip_headers": "not-a-list"}) is None
    identifier = extract_call_identifier({"sip_headers": 42})
    assert identifier.call_id is None
    assert identifier.project_id is None


def test_extract_call_identifier_from_model():
    data = CallEventData(call_id="rtc_42", project_id="proj_1")
    identifier = extract_call_identifier(data)
    assert identifier.call_id == "rtc_42"
    assert identifier.project_id == "proj_1"
    assert identifier.is_valid is True


@pytest.mark.parametrize("call_id", [None, "", "test", "undefined", "  "])
def test_sentinel_call_ids(call_id):
    assert is_sentinel_call_id(call_id) is True
    assert extract_call_identifier({"call_id": call_id}).is_valid is False


def test_real_call_id_is_not_sentinel():
    assert is_sentinel_call_id("rtc_abc") is False


def test_to_header_name_is_case_insensitive():
    data = {"sip_headers": [{"name": "to", "value": "sip:proj_lower@sip.api.openai.com"}]}
    assert extract_project_id(data) == "proj_lower"


def test_call_id_whitespace_is_stripped():
    identifier = extract_call_identifier({"call_id": " rtc_1 "})
    assert identifier.call_id == "rtc_1"
    assert identifier.is_valid is True


def test_unreadable_headers_are_skipped():
    data = CallEventData.model_validate({
        "call_id": "rtc_1",
        "sip_headers": [
            {"name": "X-Foo", "value": 5},
            "garbage",
            {"value": "no name"},
            {"name": "To", "value": "sip:proj_kept@sip.api.openai.com"},
        ],
    })

    assert [header.name for header in data.sip_headers] == ["To"]
    assert extract_call_identifier(data).project_id == "proj_kept"
