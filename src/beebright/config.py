# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import secrets
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from beebright.errors import ConfigError

logger = logging.getLogger(__name__)

DEV_ORIGINS = [
    "http://127.0.0.1:5500",  # Live Server
    "http://localhost:5500",
    "http://localhost:5173",  # Vite
]
PROD_ORIGINS = ["https://beebright.netlify.app"]

DEV_ADMIN_PASSWORD = "123456"


class Environment(str, Enum):
    development = "development"
    production = "production"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_ENV: Environment = Field(default=Environment.development)
    SECRET_KEY: Optional[str] = Field(default=None)

    ADMIN_USER: str = Field(default="admin")
    ADMIN_PASSWORD: Optional[str] = Field(default=None)
    ADMIN_PASSWORD_HASH: Optional[str] = Field(default=None)

    SESSION_MAX_AGE: int = Field(default=7200)  # 2 hours
    SESSION_REVOCATION: bool = Field(default=False)

    DATABASE_URL: str = Field(default="sqlite:///data/beebright.db")

    EMAIL_HOST: str = Field(default="smtp.gmail.com")
    EMAIL_PORT: int = Field(default=587)
    EMAIL_USER: Optional[str] = Field(default=None)
    EMAIL_PASS: Optional[str] = Field(default=None)
    EMAIL_TO: Optional[str] = Field(default=None)

    CLOUD_NAME: Optional[str] = Field(default=None)
    CLOUD_KEY: Optional[str] = Field(default=None)
    CLOUD_SECRET: Optional[str] = Field(default=None)

    # Comma separated; empty means "use the per-environment defaults"
    ALLOWED_ORIGINS: str = Field(default="")
    PUBLIC_DIR: str = Field(default="public")

    LOG_LEVEL: str = Field(default="INFO")
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3000)
    RELOAD: bool = Field(default=False)

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == Environment.production

    @property
    def allowed_origins(self) -> List[str]:
        raw = [o.strip() for o in (self.ALLOWED_ORIGINS or "").split(",") if o.strip()]
        if raw:
            return raw
        return list(PROD_ORIGINS) if self.is_production else DEV_ORIGINS + PROD_ORIGINS

    @property
    def public_dir(self) -> Path:
        return Path(self.PUBLIC_DIR).resolve()

    @property
    def mail_recipient(self) -> Optional[str]:
        return self.EMAIL_TO or self.EMAIL_USER

    def validate_runtime(self) -> "Settings":
        """Check the keys needed to run and fill development fallbacks.

        Production refuses to start without a signing secret or admin password.
        Development gets a random per-process secret and the well-known local
        password, both announced with a warning.
        """
        missing = []
        if not self.SECRET_KEY:
            missing.append("SECRET_KEY")
        if not (self.ADMIN_PASSWORD or self.ADMIN_PASSWORD_HASH):
            missing.append("ADMIN_PASSWORD (o ADMIN_PASSWORD_HASH)")
        if self.SESSION_MAX_AGE <= 0:
            raise ConfigError("SESSION_MAX_AGE debe ser mayor que 0")

        if not missing:
            return self
        if self.is_production:
            raise ConfigError("Faltan variables de entorno: " + ", ".join(missing))

        if not self.SECRET_KEY:
            logger.warning("SECRET_KEY not set; using a random key (sessions end on restart)")
            self.SECRET_KEY = secrets.token_urlsafe(32)
        if not (self.ADMIN_PASSWORD or self.ADMIN_PASSWORD_HASH):
            logger.warning("ADMIN_PASSWORD not set; using the development default password")
            self.ADMIN_PASSWORD = DEV_ADMIN_PASSWORD
        return self
