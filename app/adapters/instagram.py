"""Instagram Messaging adapter."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError

from app.adapters.base import DEFAULT_GRAPH_API_URL, TIMEOUT_SECONDS, BasePlatformAdapter, RawPayload
from app.exceptions import DecodeFailure, SendFailure
from app.schemas.meta import InstagramWebhookPayload
from app.schemas.omnichannel import InboundEvent, Platform

PROFILE_FIELDS = "id,username,name,profile_picture_url"


class InstagramAdapter(BasePlatformAdapter):
    """Decode entry[].messaging[] items; send DMs via /{account_id}/messages."""

    platform = Platform.INSTAGRAM

    def __init__(
        self,
        access_token: Optional[str] = None,
        account_id: Optional[str] = None,
        api_url: str = DEFAULT_GRAPH_API_URL,
        timeout: float = TIMEOUT_SECONDS,
    ) -> None:
        super().__init__(access_token=access_token, api_url=api_url, timeout=timeout)
        self._account_id = account_id

    @property
    def can_send(self) -> bool:
        return bool(self._access_token and self._account_id)

    def decode_inbound(self, raw_payload: RawPayload) -> list[InboundEvent]:
        data = self._load_json(raw_payload)
        try:
            payload = InstagramWebhookPayload.model_validate(data)
        except ValidationError as e:
            raise DecodeFailure(f"Invalid Instagram payload: {e}") from e

        events: list[InboundEvent] = []
        for entry in payload.entry:
            for item in entry.messaging:
                # Reactions, reads and echoes of our own sends carry no inbound message
                if item.message is None or item.message.is_echo:
                    continue
                ts = (
                    datetime.fromtimestamp(item.timestamp / 1000, tz=timezone.utc)
                    if item.timestamp
                    else None
                )
                events.append(
                    InboundEvent(
                        platform=Platform.INSTAGRAM,
                        sender_id=item.sender.id,
                        text=item.message.text or "",
                        content_type="text",
                        external_message_id=item.message.mid,
                        timestamp=ts,
                    )
                )
        return events

    def send_outbound(self, recipient_id: str, content: str) -> str:
        body = {
            "recipient": {"id": recipient_id},
            "message": {"text": content},
        }
        result = self._request("POST", f"{self._account_id}/messages", json_body=body)
        message_id = result.get("message_id")
        if not message_id:
            raise SendFailure("Instagram API response has no message_id")
        return str(message_id)

    def get_user_profile(self, user_id: str) -> dict[str, Any]:
        """Fetch an Instagram user's public profile. Raises SendFailure on API errors."""
        return self._request("GET", user_id, params={"fields": PROFILE_FIELDS})
