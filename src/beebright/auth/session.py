# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from itsdangerous import BadData, URLSafeTimedSerializer

from beebright.errors import InvalidToken

logger = logging.getLogger(__name__)

COOKIE_NAME = "token"
DEFAULT_MAX_AGE_SECONDS = 7200  # 2 hours
DEFAULT_SALT = "beebright.session.v1"


@dataclass(frozen=True)
class SessionData:
    username: str
    token_id: str
    issued_at: datetime
    expires_at: datetime


class RevocationList:
    """Token ids revoked on logout, kept only until the token would expire anyway."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._revoked: Dict[str, datetime] = {}

    def add(self, token_id: str, expires_at: datetime) -> None:
        now = datetime.now(timezone.utc)
        with self._lock:
            self._revoked = {k: v for k, v in self._revoked.items() if v > now}
            self._revoked[token_id] = expires_at

    def __contains__(self, token_id: object) -> bool:
        with self._lock:
            return token_id in self._revoked

    def __len__(self) -> int:
        with self._lock:
            return len(self._revoked)


class SessionManager:
    def __init__(
        self,
        secret: str,
        *,
        max_age: int = DEFAULT_MAX_AGE_SECONDS,
        salt: str = DEFAULT_SALT,
        revocation: Optional[RevocationList] = None,
    ) -> None:
        if not secret:
            raise ValueError("El secreto de sesión no puede estar vacío")
        self.max_age = int(max_age)
        self.revocation = revocation
        self._serializer = URLSafeTimedSerializer(secret_key=secret, salt=salt)

    def issue(self, username: str) -> str:
        return self._serializer.dumps({"u": username, "jti": secrets.token_urlsafe(8)})

    def verify(self, token: str) -> SessionData:
        if not token:
            raise InvalidToken("Token vacío")
        try:
            data, issued_at = self._serializer.loads(token, max_age=self.max_age, return_timestamp=True)
        except BadData as exc:
            raise InvalidToken(str(exc)) from exc

        if not isinstance(data, dict):
            raise InvalidToken("Payload inválido")
        u = str(data.get("u") or "").strip()
        jti = str(data.get("jti") or "").strip()
        if not u or not jti:
            raise InvalidToken("Payload inválido")

        expires_at = issued_at + timedelta(seconds=self.max_age)
        if datetime.now(timezone.utc) >= expires_at:
            raise InvalidToken("Token expirado")
        if self.revocation is not None and jti in self.revocation:
            raise InvalidToken("Token revocado")
        return SessionData(username=u, token_id=jti, issued_at=issued_at, expires_at=expires_at)

    def revoke(self, token: str) -> bool:
        """Revoke a token if revocation is enabled. Returns True when something was revoked."""
        if self.revocation is None or not token:
            return False
        try:
            sess = self.verify(token)
        except InvalidToken:
            return False
        self.revocation.add(sess.token_id, sess.expires_at)
        logger.info("Session revoked for username=%r", sess.username)
        return True
