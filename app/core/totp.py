"""RFC 6238 time-based one-time passwords for authenticator apps.

Secrets are base32 strings (what Google Authenticator and friends expect in
the ``otpauth://`` provisioning URI). HMAC-SHA1, 30 second steps and 6 digits
are the defaults every authenticator app supports.
"""
from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
import struct
import time
from urllib.parse import quote, urlencode

from app.core.config import settings


def generate_secret(num_bytes: int = 20) -> str:
    return base64.b32encode(secrets.token_bytes(num_bytes)).decode("ascii").rstrip("=")


def _decode_secret(secret: str) -> bytes:
    padded = secret.upper() + "=" * (-len(secret) % 8)
    return base64.b32decode(padded)


def hotp(secret: str, counter: int, digits: int | None = None) -> str:
    digits = digits or settings.MFA_TOTP_DIGITS
    digest = hmac.new(_decode_secret(secret), struct.pack(">Q", counter), hashlib.sha1).digest()
    offset = digest[-1] & 0x0F
    code = struct.unpack(">I", digest[offset:offset + 4])[0] & 0x7FFFFFFF
    return str(code % (10 ** digits)).zfill(digits)


def totp(secret: str, at: float | None = None, period: int | None = None) -> str:
    period = period or settings.MFA_TOTP_PERIOD
    moment = time.time() if at is None else at
    return hotp(secret, int(moment // period))


def verify_totp(secret: str, code: str, at: float | None = None, window: int = 1) -> bool:
    """Check ``code`` against the current step and ``window`` steps either side."""
    code = (code or "").strip()
    if not code.isdigit():
        return False
    period = settings.MFA_TOTP_PERIOD
    moment = time.time() if at is None else at
    counter = int(moment // period)
    return any(
        hmac.compare_digest(hotp(secret, counter + drift), code)
        for drift in range(-window, window + 1)
    )


def provisioning_uri(secret: str, account_name: str, issuer: str | None = None) -> str:
    issuer = issuer or settings.MFA_ISSUER
    label = quote(f"{issuer}:{account_name}")
    query = urlencode({
        "secret": secret,
        "issuer": issuer,
        "algorithm": "SHA1",
        "digits": settings.MFA_TOTP_DIGITS,
        "period": settings.MFA_TOTP_PERIOD,
    })
    return f"otpauth://totp/{label}?{query}"
