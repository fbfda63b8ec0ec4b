"""
Platform adapter interface.

Adapters encapsulate platform-specific logic: they decode raw webhook
payloads into canonical events and send outbound text through the partner
API. They hold credentials and nothing else.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any, Optional, Union

import requests

from app.exceptions import DecodeFailure, SendFailure
from app.schemas.omnichannel import InboundEvent, Platform, StatusEvent

DEFAULT_GRAPH_API_URL = "https://graph.facebook.com/v19.0"
TIMEOUT_SECONDS = 30

RawPayload = Union[bytes, str, dict[str, Any]]


class BasePlatformAdapter(ABC):
    """Contract for platform adapters. New platforms implement this interface."""

    platform: Platform

    def __init__(
        self,
        access_token: Optional[str] = None,
        api_url: str = DEFAULT_GRAPH_API_URL,
        timeout: float = TIMEOUT_SECONDS,
    ) -> None:
        self._access_token = access_token
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout

    @property
    def can_send(self) -> bool:
        """Whether this adapter holds the credentials needed for outbound calls."""
        return bool(self._access_token)

    @abstractmethod
    def decode_inbound(self, raw_payload: RawPayload) -> list[InboundEvent]:
        """Decode a webhook payload into zero or more inbound events. Raise DecodeFailure if invalid."""
        ...

    def decode_statuses(self, raw_payload: RawPayload) -> list[StatusEvent]:
        """Decode delivery-status updates. Platforms without them return []."""
        return []

    @abstractmethod
    def send_outbound(self, recipient_id: str, content: str) -> str:
        """Send a text message; return the partner-assigned message id. Raise SendFailure."""
        ...

    @staticmethod
    def _load_json(raw_payload: RawPayload) -> dict[str, Any]:
        if isinstance(raw_payload, dict):
            return raw_payload
        try:
            data = json.loads(raw_payload)
        except (ValueError, TypeError) as e:
            raise DecodeFailure(f"Invalid JSON payload: {e}") from e
        if not isinstance(data, dict):
            raise DecodeFailure("Webhook payload must be a JSON object")
        return data

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._access_token}",
        }

    def _request(
        self,
        method: str,
        path: str,
        *,
        json_body: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Call the Graph API; any transport error or non-2xx response raises SendFailure."""
        url = f"{self._api_url}/{path.lstrip('/')}"
        try:
            resp = requests.request(
                method,
                url,
                json=json_body,
                params=params,
                headers=self._headers(),
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise SendFailure(f"{self.platform.value} API request failed: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise SendFailure(
                f"{self.platform.value} API error",
                upstream_status=resp.status_code,
                upstream_body=resp.text,
            )
        try:
            return resp.json()
        except ValueError as e:
            raise SendFailure(
                f"{self.platform.value} API returned invalid JSON",
                upstream_status=resp.status_code,
                upstream_body=resp.text,
            ) from e
