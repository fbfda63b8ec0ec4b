"""Tests for WhatsAppAdapter: decode webhook changes and send via Cloud API."""

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from app.adapters.whatsapp import WhatsAppAdapter
from app.exceptions import DecodeFailure, SendFailure
from app.schemas.omnichannel import MessageStatus, Platform
from tests.fixtures.meta_fixtures import whatsapp_message_payload, whatsapp_status_payload


@pytest.fixture
def adapter():
    return WhatsAppAdapter(
        access_token="token-123",
        phone_id="PHONE_ID",
        api_url="https://graph.example.test/v19.0",
    )


def _response(status_code=200, body=None, text=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = body if body is not None else {}
    resp.text = text if text is not None else json.dumps(body or {})
    return resp


def test_decode_inbound_text_message(adapter):
    raw = json.dumps(whatsapp_message_payload()).encode()
    events = adapter.decode_inbound(raw)
    assert len(events) == 1
    event = events[0]
    assert event.platform == Platform.WHATSAPP
    assert event.sender_id == "6281234"
    assert event.sender_name == "Budi"
    assert event.text == "hello"
    assert event.content_type == "text"
    assert event.external_message_id == "wamid.HBgM001"
    assert event.timestamp is not None


def test_decode_inbound_keeps_payload_order(adapter):
    payload = whatsapp_message_payload()
    value = payload["entry"][0]["changes"][0]["value"]
    value["messages"].append(
        {"from": "6281234", "id": "wamid.HBgM002", "type": "text", "text": {"body": "again"}}
    )
    events = adapter.decode_inbound(payload)
    assert [e.external_message_id for e in events] == ["wamid.HBgM001", "wamid.HBgM002"]


def test_decode_inbound_non_text_message_has_empty_text(adapter):
    payload = whatsapp_message_payload()
    msg = payload["entry"][0]["changes"][0]["value"]["messages"][0]
    msg["type"] = "image"
    del msg["text"]
    events = adapter.decode_inbound(payload)
    assert events[0].text == ""
    assert events[0].content_type == "image"


def test_decode_inbound_skips_other_fields(adapter):
    payload = whatsapp_message_payload()
    payload["entry"][0]["changes"][0]["field"] = "account_update"
    assert adapter.decode_inbound(payload) == []


def test_decode_inbound_name_missing_without_matching_contact(adapter):
    payload = whatsapp_message_payload()
    payload["entry"][0]["changes"][0]["value"]["contacts"] = []
    assert adapter.decode_inbound(payload)[0].sender_name is None


def test_decode_inbound_invalid_json_raises(adapter):
    with pytest.raises(DecodeFailure):
        adapter.decode_inbound(b"{not json")


def test_decode_inbound_non_object_raises(adapter):
    with pytest.raises(DecodeFailure):
        adapter.decode_inbound(b"[1, 2]")


def test_decode_inbound_missing_message_id_raises(adapter):
    payload = whatsapp_message_payload()
    del payload["entry"][0]["changes"][0]["value"]["messages"][0]["id"]
    with pytest.raises(DecodeFailure):
        adapter.decode_inbound(payload)


def test_decode_statuses(adapter):
    statuses = adapter.decode_statuses(whatsapp_status_payload("wamid.OUT1", "read"))
    assert len(statuses) == 1
    assert statuses[0].external_message_id == "wamid.OUT1"
    assert statuses[0].status == MessageStatus.READ
    assert adapter.decode_inbound(whatsapp_status_payload("wamid.OUT1")) == []


def test_decode_statuses_ignores_unknown_status(adapter):
    assert adapter.decode_statuses(whatsapp_status_payload("wamid.OUT1", "deleted")) == []


@patch("app.adapters.base.requests.request")
def test_send_outbound_success(mock_request, adapter):
    mock_request.return_value = _response(
        body={"messaging_product": "whatsapp", "messages": [{"id": "wamid.SENT1"}]}
    )
    assert adapter.send_outbound("6281234", "Hi Budi") == "wamid.SENT1"

    args, kwargs = mock_request.call_args
    assert args == ("POST", "https://graph.example.test/v19.0/PHONE_ID/messages")
    assert kwargs["headers"]["Authorization"] == "Bearer token-123"
    assert kwargs["json"] == {
        "messaging_product": "whatsapp",
        "to": "6281234",
        "type": "text",
        "text": {"body": "Hi Budi"},
    }
    assert kwargs["timeout"] == 30


@patch("app.adapters.base.requests.request")
def test_send_outbound_http_error_carries_upstream_detail(mock_request, adapter):
    mock_request.return_value = _response(
        status_code=400, text='{"error": {"message": "Invalid parameter"}}'
    )
    with pytest.raises(SendFailure) as exc_info:
        adapter.send_outbound("6281234", "Hi")
    assert exc_info.value.upstream_status == 400
    assert "Invalid parameter" in exc_info.value.message


@patch("app.adapters.base.requests.request")
def test_send_outbound_transport_error(mock_request, adapter):
    mock_request.side_effect = requests.ConnectionError("connection refused")
    with pytest.raises(SendFailure):
        adapter.send_outbound("6281234", "Hi")


@patch("app.adapters.base.requests.request")
def test_send_outbound_missing_id(mock_request, adapter):
    mock_request.return_value = _response(body={"messages": []})
    with pytest.raises(SendFailure):
        adapter.send_outbound("6281234", "Hi")


def test_can_send_requires_phone_id():
    assert WhatsAppAdapter(access_token="t", phone_id="p").can_send
    assert not WhatsAppAdapter(access_token="t").can_send
    assert not WhatsAppAdapter(phone_id="p").can_send
