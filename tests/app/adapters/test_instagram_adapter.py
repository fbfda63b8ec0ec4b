"""Tests for InstagramAdapter."""

from unittest.mock import MagicMock, patch

import pytest

from app.adapters.instagram import InstagramAdapter
from app.exceptions import DecodeFailure, SendFailure
from app.schemas.omnichannel import Platform
from tests.fixtures.meta_fixtures import instagram_message_payload


@pytest.fixture
def adapter():
    return InstagramAdapter(access_token="ig-token", account_id="IG_ACCOUNT")


def test_decode_inbound(adapter):
    events = adapter.decode_inbound(instagram_message_payload())
    assert len(events) == 1
    event = events[0]
    assert event.platform == Platform.INSTAGRAM
    assert event.sender_id == "IGSID123"
    assert event.sender_name is None
    assert event.text == "hi there"
    assert event.external_message_id == "m_001"
    assert event.timestamp.year == 2023


def test_decode_inbound_skips_echo_and_non_message_items(adapter):
    payload = instagram_message_payload()
    messaging = payload["entry"][0]["messaging"]
    messaging.append(
        {
            "sender": {"id": "IG_ACCOUNT"},
            "recipient": {"id": "IGSID123"},
            "message": {"mid": "m_echo", "text": "our reply", "is_echo": True},
        }
    )
    messaging.append({"sender": {"id": "IGSID123"}, "read": {"mid": "m_001"}})
    events = adapter.decode_inbound(payload)
    assert [e.external_message_id for e in events] == ["m_001"]


def test_decode_inbound_missing_sender_raises(adapter):
    payload = instagram_message_payload()
    del payload["entry"][0]["messaging"][0]["sender"]
    with pytest.raises(DecodeFailure):
        adapter.decode_inbound(payload)


def test_decode_statuses_is_empty(adapter):
    assert adapter.decode_statuses(instagram_message_payload()) == []


@patch("app.adapters.base.requests.request")
def test_send_outbound(mock_request, adapter):
    resp = MagicMock(status_code=200)
    resp.json.return_value = {"recipient_id": "IGSID123", "message_id": "m_sent"}
    mock_request.return_value = resp

    assert adapter.send_outbound("IGSID123", "thanks!") == "m_sent"
    args, kwargs = mock_request.call_args
    assert args[1].endswith("/IG_ACCOUNT/messages")
    assert kwargs["json"] == {"recipient": {"id": "IGSID123"}, "message": {"text": "thanks!"}}


@patch("app.adapters.base.requests.request")
def test_send_outbound_error(mock_request, adapter):
    mock_request.return_value = MagicMock(status_code=500, text="upstream down")
    with pytest.raises(SendFailure) as exc_info:
        adapter.send_outbound("IGSID123", "thanks!")
    assert exc_info.value.upstream_status == 500


@patch("app.adapters.base.requests.request")
def test_get_user_profile(mock_request, adapter):
    resp = MagicMock(status_code=200)
    resp.json.return_value = {"id": "IGSID123", "username": "budi.ig", "name": "Budi"}
    mock_request.return_value = resp

    profile = adapter.get_user_profile("IGSID123")
    assert profile["username"] == "budi.ig"
    args, kwargs = mock_request.call_args
    assert args == ("GET", "https://graph.facebook.com/v19.0/IGSID123")
    assert kwargs["params"] == {"fields": "id,username,name,profile_picture_url"}
