"""
TipShare Backend: Identity Tokens
===================================

What:  Issues and verifies signed, time-limited identity tokens.
How:   Compact JWT (header.payload.signature, base64url without padding)
       signed with HMAC-SHA256. Claims: userId, username, iat, exp.
Who:   IdentityService issues tokens at login; the bearer dependency in
       dependencies.py verifies them on every protected route.

Properties:
    - Stateless: verification never touches the store. A token stays valid
      until `exp` even if the user record changes, and cannot be revoked early.
    - The secret is passed in at construction. Two signers with different
      secrets never accept each other's tokens.
    - verify() returns None for every kind of invalid token. It does not raise.
"""

import base64
import binascii
import hashlib
import hmac
import json
import logging
import time
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
_HEADER = {"alg": ALGORITHM, "typ": "JWT"}


class Identity(BaseModel):
    """Caller identity extracted from a valid token."""

    user_id: str
    username: str


def _b64_url_encode(data: bytes) -> str:
    """Base64-url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64_url_decode(data: str) -> bytes:
    """
    Strict decode of unpadded base64-url text.

    Raises binascii.Error unless `data` is exactly what _b64_url_encode
    produces for the decoded bytes, so one token has one spelling.
    """
    padding = "=" * (-len(data) % 4)
    decoded = base64.b64decode(data + padding, altchars=b"-_", validate=True)
    if _b64_url_encode(decoded) != data:
        raise binascii.Error("Non-canonical base64url segment")
    return decoded


def _json_segment(obj: Dict[str, Any]) -> str:
    return _b64_url_encode(json.dumps(obj, separators=(",", ":")).encode("utf-8"))


# Every token this module issues starts with this exact segment
_HEADER_SEGMENT = _json_segment(_HEADER)


class TokenSigner:
    """
    HS256 token issuer and verifier bound to one secret.

    Args:
        secret: HMAC key. Must be non-empty.
        ttl_seconds: Validity window from issuance (default one hour).
        clock: Returns the current UNIX time in seconds. Tests pass a fake.
    """

    def __init__(
        self,
        secret: str,
        ttl_seconds: int = 3600,
        clock: Callable[[], float] = time.time,
    ):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        if ttl_seconds <= 0:
            raise ValueError("Token lifetime must be positive")
        self._key = secret.encode("utf-8")
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def _sign(self, signing_input: bytes) -> bytes:
        return hmac.new(self._key, signing_input, hashlib.sha256).digest()

    def issue(self, user_id: str, username: str) -> str:
        """
        Create a signed token for the given identity.

        Returns:
            str: `header.payload.signature`, to be sent as `Bearer <token>`.
        """
        issued_at = int(self._clock())
        claims = {
            "userId": user_id,
            "username": username,
            "iat": issued_at,
            "exp": issued_at + self.ttl_seconds,
        }
        signing_input = f"{_json_segment(_HEADER)}.{_json_segment(claims)}"
        signature = _b64_url_encode(self._sign(signing_input.encode("ascii")))
        return f"{signing_input}.{signature}"

    def verify(self, token: str) -> Optional[Identity]:
        """
        Check signature and expiry and extract the embedded identity.

        Returns:
            Identity on success; None when the token is malformed, signed
            with another key, uses another algorithm, lacks identity claims,
            or has expired.
        """
        if not token or not isinstance(token, str):
            return None

        parts = token.split(".")
        if len(parts) != 3:
            return None
        header_b64, payload_b64, signature_b64 = parts

        # The header is compared, never parsed: only HS256 as issued here
        if header_b64 != _HEADER_SEGMENT:
            return None

        try:
            payload_bytes = _b64_url_decode(payload_b64)
            actual_sig = _b64_url_decode(signature_b64)
        except (binascii.Error, ValueError):
            return None

        expected_sig = self._sign(f"{header_b64}.{payload_b64}".encode("ascii"))
        if not hmac.compare_digest(expected_sig, actual_sig):
            return None

        try:
            claims = json.loads(payload_bytes)
        except (ValueError, RecursionError):
            return None
        if not isinstance(claims, dict):
            return None

        user_id = claims.get("userId")
        username = claims.get("username")
        exp = claims.get("exp")
        if not isinstance(user_id, str) or not isinstance(username, str):
            return None
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            return None
        if exp <= self._clock():
            logger.debug("Rejected expired token for user %s", user_id)
            return None

        return Identity(user_id=user_id, username=username)
