"""
Error taxonomy for ingestion and sending.

Each error carries the HTTP status it maps to; ``create_app`` registers a
single handler rendering ``{"detail": message}``.
"""

from __future__ import annotations

from typing import Optional


class OmnichannelError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthenticationFailure(OmnichannelError):
    """Bad or missing webhook signature (401) or verify token (403)."""

    def __init__(self, message: str, status_code: int = 401) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeFailure(OmnichannelError):
    status_code = 400


class ValidationFailure(OmnichannelError):
    status_code = 400


class ConfigurationError(OmnichannelError):
    status_code = 400


class NotFoundError(OmnichannelError):
    status_code = 404


class DispatcherSaturated(OmnichannelError):
    status_code = 503


class SendFailure(OmnichannelError):
    """Partner API rejected the call or could not be reached."""

    status_code = 502

    def __init__(
        self,
        message: str,
        upstream_status: Optional[int] = None,
        upstream_body: Optional[str] = None,
    ) -> None:
        detail = message
        if upstream_status is not None:
            detail = f"{message} (status: {upstream_status})"
        if upstream_body:
            detail = f"{detail}: {upstream_body[:500]}"
        super().__init__(detail)
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body
