"""
Meta webhook signature verification (X-Hub-Signature-256).

HMAC-SHA256 of the raw request body keyed with the app secret, hex encoded,
optionally prefixed with ``sha256=``.
"""

from __future__ import annotations

import hashlib
import hmac
from typing import Optional

SIGNATURE_HEADER = "X-Hub-Signature-256"
SIGNATURE_PREFIX = "sha256="


def compute_signature(body: bytes, secret: str) -> str:
    """Return the hex HMAC-SHA256 digest of body (no prefix)."""
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


def verify_signature(
    body: bytes,
    signature_header: Optional[str],
    secret: Optional[str],
    *,
    required: bool = False,
) -> bool:
    """
    Return True if the payload is authentic.

    With no secret configured, verification is skipped (True) unless
    ``required`` is set, in which case every request is rejected. Never raises.
    """
    if not secret:
        return not required
    if not signature_header:
        return False
    signature = signature_header
    if signature.startswith(SIGNATURE_PREFIX):
        signature = signature[len(SIGNATURE_PREFIX) :]
    expected = compute_signature(body, secret)
    return hmac.compare_digest(signature.encode("utf-8"), expected.encode("utf-8"))
