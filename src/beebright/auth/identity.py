# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass

from beebright.auth.passwords import hash_password, verify_password
from beebright.config import Settings
from beebright.errors import ConfigError, InvalidCredentials

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminIdentity:
    username: str
    password_hash: str


def identity_from_settings(settings: Settings) -> AdminIdentity:
    """Build the admin identity once at startup.

    A pre-computed ADMIN_PASSWORD_HASH wins over a plain ADMIN_PASSWORD.
    """
    username = (settings.ADMIN_USER or "").strip()
    if not username:
        raise ConfigError("ADMIN_USER no puede estar vacío")
    if settings.ADMIN_PASSWORD_HASH:
        return AdminIdentity(username=username, password_hash=settings.ADMIN_PASSWORD_HASH.strip())
    if not settings.ADMIN_PASSWORD:
        raise ConfigError("Falta ADMIN_PASSWORD (o ADMIN_PASSWORD_HASH)")
    return AdminIdentity(username=username, password_hash=hash_password(settings.ADMIN_PASSWORD))


def authenticate(identity: AdminIdentity, username: str, password: str) -> AdminIdentity:
    u = username if isinstance(username, str) else ""
    p = password if isinstance(password, str) else ""
    # Hash check runs for every attempt, matching username or not
    password_ok = verify_password(identity.password_hash, p)
    if not hmac.compare_digest(u.encode("utf-8"), identity.username.encode("utf-8")) or not password_ok:
        logger.info("Login rejected for username=%r", u)
        raise InvalidCredentials("Credenciales inválidas")
    logger.info("Login accepted for username=%r", u)
    return identity
