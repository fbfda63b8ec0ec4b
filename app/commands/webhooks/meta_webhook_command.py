"""
Command handling Meta (WhatsApp / Instagram) webhook traffic.

Verification handshake, signature check, decode, and hand-off of decoded
events to the dispatcher. Persistence happens in the background; the
platform gets its acknowledgment as soon as the batch is accepted.
"""

from __future__ import annotations

import logging
from typing import Optional

from app.adapters import AdapterRegistry, build_adapter
from app.adapters.base import BasePlatformAdapter
from app.config import Settings, get_settings
from app.core.dispatcher import EventDispatcher
from app.core.signature import verify_signature
from app.exceptions import AuthenticationFailure, NotFoundError
from app.schemas.omnichannel import Platform

logger = logging.getLogger(__name__)

SUBSCRIBE_MODE = "subscribe"


def parse_platform(value: str) -> Platform:
    """Map a path segment to a Platform; unknown values are 404."""
    try:
        return Platform(value.lower())
    except ValueError as e:
        raise NotFoundError(f"Unknown platform: {value}") from e


class MetaWebhookCommand:
    """Verify, decode and dispatch one webhook delivery."""

    def __init__(
        self,
        adapters: AdapterRegistry,
        dispatcher: EventDispatcher,
        settings: Optional[Settings] = None,
    ) -> None:
        self.adapters = adapters
        self.dispatcher = dispatcher
        self.settings = settings or get_settings()

    def _decoder(self, platform: Platform) -> BasePlatformAdapter:
        # Decoding needs no credentials; fall back to a decode-only adapter
        return self.adapters.get(platform) or build_adapter(platform, self.settings)

    def verify_subscription(
        self,
        mode: Optional[str],
        token: Optional[str],
        challenge: Optional[str],
    ) -> str:
        """
        Answer Meta's subscription handshake.

        Returns:
            str: the challenge to echo back.

        Raises:
            AuthenticationFailure: 403 when mode or token do not match.
        """
        if mode == SUBSCRIBE_MODE and token and token == self.settings.meta_verify_token:
            logger.info("Webhook subscription verified")
            return challenge or ""
        logger.warning("Webhook verification rejected (mode=%s)", mode)
        raise AuthenticationFailure("Verification failed", status_code=403)

    def execute(
        self,
        platform: Platform,
        body: bytes,
        signature_header: Optional[str],
        *,
        verify: bool = True,
    ) -> int:
        """
        Process one delivery.

        Args:
            platform: Platform the delivery came from.
            body: Raw request body, exactly as received.
            signature_header: X-Hub-Signature-256 value, if any.
            verify: False for trusted internal forwarding.

        Returns:
            int: number of inbound message events accepted for processing.

        Raises:
            AuthenticationFailure: 401 on a bad or missing signature.
            DecodeFailure: 400 when the payload cannot be decoded.
            DispatcherSaturated: 503 when background processing is full.
        """
        if verify and not verify_signature(
            body,
            signature_header,
            self.settings.meta_app_secret,
            required=self.settings.signature_required,
        ):
            logger.warning("Invalid %s webhook signature", platform.value)
            raise AuthenticationFailure("Invalid signature")

        adapter = self._decoder(platform)
        events = adapter.decode_inbound(body)
        statuses = adapter.decode_statuses(body)
        if events or statuses:
            self.dispatcher.dispatch(events, statuses)
        logger.info(
            "Accepted %s webhook: %d message(s), %d status update(s)",
            platform.value,
            len(events),
            len(statuses),
        )
        return len(events)
