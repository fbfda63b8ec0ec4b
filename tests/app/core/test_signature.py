"""Tests for X-Hub-Signature-256 verification."""

import hashlib
import hmac

from app.core.signature import compute_signature, verify_signature

SECRET = "app-secret"
BODY = b'{"object":"whatsapp_business_account","entry":[]}'


def _sign(body: bytes, secret: str = SECRET) -> str:
    return "sha256=" + hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


def test_valid_signature():
    assert verify_signature(BODY, _sign(BODY), SECRET)


def test_valid_signature_without_prefix():
    assert verify_signature(BODY, compute_signature(BODY, SECRET), SECRET)


def test_flipped_body_byte_fails():
    signature = _sign(BODY)
    tampered = bytearray(BODY)
    tampered[5] ^= 0x01
    assert not verify_signature(bytes(tampered), signature, SECRET)


def test_wrong_secret_fails():
    assert not verify_signature(BODY, _sign(BODY, "other"), SECRET)


def test_missing_or_empty_header_fails():
    assert not verify_signature(BODY, None, SECRET)
    assert not verify_signature(BODY, "", SECRET)
    assert not verify_signature(BODY, "sha256=", SECRET)


def test_no_secret_skips_verification():
    assert verify_signature(BODY, None, None)
    assert verify_signature(BODY, "garbage", "")


def test_no_secret_rejects_when_required():
    assert not verify_signature(BODY, _sign(BODY), None, required=True)


def test_flipped_signature_hex_char_fails():
    signature = _sign(BODY)
    prefix, digest = signature[: len("sha256=")], signature[len("sha256=") :]
    for index in (0, len(digest) // 2, len(digest) - 1):
        flipped = "0" if digest[index] != "0" else "1"
        tampered = prefix + digest[:index] + flipped + digest[index + 1 :]
        assert not verify_signature(BODY, tampered, SECRET)
