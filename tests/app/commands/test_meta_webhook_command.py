"""Tests for MetaWebhookCommand."""

import json
from unittest.mock import MagicMock

import pytest

from app.commands.webhooks import MetaWebhookCommand, parse_platform
from app.config import get_settings
from app.exceptions import AuthenticationFailure, DecodeFailure, NotFoundError
from app.schemas.omnichannel import Platform
from tests.fixtures.meta_fixtures import whatsapp_status_payload


@pytest.fixture
def dispatcher():
    return MagicMock()


def test_parse_platform():
    assert parse_platform("WhatsApp") == Platform.WHATSAPP
    with pytest.raises(NotFoundError):
        parse_platform("sms")


def test_status_only_delivery_is_dispatched(dispatcher):
    command = MetaWebhookCommand({}, dispatcher, get_settings())
    body = json.dumps(whatsapp_status_payload("wamid.OUT1", "delivered")).encode()

    assert command.execute(Platform.WHATSAPP, body, None) == 0
    events, statuses = dispatcher.dispatch.call_args.args
    assert events == []
    assert statuses[0].external_message_id == "wamid.OUT1"


def test_empty_delivery_is_not_dispatched(dispatcher):
    command = MetaWebhookCommand({}, dispatcher, get_settings())
    body = json.dumps({"object": "instagram", "entry": []}).encode()
    assert command.execute(Platform.INSTAGRAM, body, None) == 0
    dispatcher.dispatch.assert_not_called()


def test_decode_failure_propagates(dispatcher):
    command = MetaWebhookCommand({}, dispatcher, get_settings())
    with pytest.raises(DecodeFailure):
        command.execute(Platform.WHATSAPP, b"nope", None)
    dispatcher.dispatch.assert_not_called()


def test_bad_signature_raises_401(dispatcher, monkeypatch):
    monkeypatch.setenv("META_APP_SECRET", "secret")
    command = MetaWebhookCommand({}, dispatcher, get_settings())
    with pytest.raises(AuthenticationFailure) as exc_info:
        command.execute(Platform.WHATSAPP, b"{}", "sha256=deadbeef")
    assert exc_info.value.status_code == 401


def test_verify_subscription(monkeypatch, dispatcher):
    monkeypatch.setenv("META_VERIFY_TOKEN", "tok")
    command = MetaWebhookCommand({}, dispatcher, get_settings())
    assert command.verify_subscription("subscribe", "tok", "abc") == "abc"
    with pytest.raises(AuthenticationFailure) as exc_info:
        command.verify_subscription("subscribe", "", "abc")
    assert exc_info.value.status_code == 403
