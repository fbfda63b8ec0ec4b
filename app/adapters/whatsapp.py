"""WhatsApp Cloud API adapter."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import ValidationError

from app.adapters.base import DEFAULT_GRAPH_API_URL, TIMEOUT_SECONDS, BasePlatformAdapter, RawPayload
from app.exceptions import DecodeFailure, SendFailure
from app.schemas.meta import WhatsAppWebhookPayload
from app.schemas.omnichannel import InboundEvent, MessageStatus, Platform, StatusEvent

MESSAGES_FIELD = "messages"


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
    except (TypeError, ValueError):
        return None


class WhatsAppAdapter(BasePlatformAdapter):
    """Decode WhatsApp webhook changes; send text via /{phone_id}/messages."""

    platform = Platform.WHATSAPP

    def __init__(
        self,
        access_token: Optional[str] = None,
        phone_id: Optional[str] = None,
        business_id: Optional[str] = None,
        api_url: str = DEFAULT_GRAPH_API_URL,
        timeout: float = TIMEOUT_SECONDS,
    ) -> None:
        super().__init__(access_token=access_token, api_url=api_url, timeout=timeout)
        self._phone_id = phone_id
        self._business_id = business_id

    @property
    def can_send(self) -> bool:
        return bool(self._access_token and self._phone_id)

    def _parse(self, raw_payload: RawPayload) -> WhatsAppWebhookPayload:
        data = self._load_json(raw_payload)
        try:
            return WhatsAppWebhookPayload.model_validate(data)
        except ValidationError as e:
            raise DecodeFailure(f"Invalid WhatsApp payload: {e}") from e

    def decode_inbound(self, raw_payload: RawPayload) -> list[InboundEvent]:
        """Flatten entry[].changes[field=messages].value.messages[] in payload order."""
        payload = self._parse(raw_payload)
        events: list[InboundEvent] = []
        for entry in payload.entry:
            for change in entry.changes:
                if change.field != MESSAGES_FIELD:
                    continue
                names = {
                    c.wa_id: c.profile.name for c in change.value.contacts if c.profile.name
                }
                for msg in change.value.messages:
                    events.append(
                        InboundEvent(
                            platform=Platform.WHATSAPP,
                            sender_id=msg.from_,
                            sender_name=names.get(msg.from_),
                            text=msg.text.body if msg.text else "",
                            content_type=msg.type,
                            external_message_id=msg.id,
                            timestamp=_parse_timestamp(msg.timestamp),
                        )
                    )
        return events

    def decode_statuses(self, raw_payload: RawPayload) -> list[StatusEvent]:
        payload = self._parse(raw_payload)
        known = {s.value for s in MessageStatus}
        statuses: list[StatusEvent] = []
        for entry in payload.entry:
            for change in entry.changes:
                if change.field != MESSAGES_FIELD:
                    continue
                for status in change.value.statuses:
                    if status.status not in known:
                        continue
                    statuses.append(
                        StatusEvent(
                            platform=Platform.WHATSAPP,
                            external_message_id=status.id,
                            status=MessageStatus(status.status),
                            recipient_id=status.recipient_id,
                        )
                    )
        return statuses

    def send_outbound(self, recipient_id: str, content: str) -> str:
        body = {
            "messaging_product": "whatsapp",
            "to": recipient_id,
            "type": "text",
            "text": {"body": content},
        }
        result = self._request("POST", f"{self._phone_id}/messages", json_body=body)
        messages = result.get("messages") or []
        if not messages or not messages[0].get("id"):
            raise SendFailure("WhatsApp API response has no message id")
        return str(messages[0]["id"])
