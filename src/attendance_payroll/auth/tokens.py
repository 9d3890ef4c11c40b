"""
JWT issue and verify for API authentication.
Access tokens are sent on every request as ``Authorization: Bearer <token>``.
"""
from __future__ import annotations

import time
from typing import Optional

import jwt

JWT_ALGORITHM = "HS256"


class TokenCodec:
    def __init__(self, secret: str, *, ttl_seconds: int):
        self._secret = secret
        self._ttl = int(ttl_seconds)

    def encode_access(self, *, user_id: int, role: str) -> str:
        """Return a JWT access token string for the given user."""
        now = int(time.time())
        payload = {
            "sub": str(int(user_id)),
            "role": role,
            "type": "access",
            "iat": now,
            "exp": now + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    def decode(self, token: Optional[str]) -> Optional[dict]:
        """
        Decode and validate token. Returns payload dict or None if invalid/expired.
        """
        if not token or not isinstance(token, str):
            return None
        try:
            payload = jwt.decode(token.strip(), self._secret, algorithms=[JWT_ALGORITHM])
        except jwt.InvalidTokenError:
            return None
        if payload.get("type") != "access":
            return None
        return payload
