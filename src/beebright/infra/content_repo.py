# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

from sqlalchemy import JSON, DateTime, String, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from beebright.errors import StoreError

logger = logging.getLogger(__name__)

SITE_CONTENT_KEY = "site-content"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class SiteContent(Base):
    __tablename__ = "site_content"

    id: Mapped[int] = mapped_column(primary_key=True)
    key: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    data: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)


class ContentStore:
    """Single-document store for the public site content."""

    def __init__(self, engine: Engine, *, key: str = SITE_CONTENT_KEY) -> None:
        self.engine = engine
        self.key = key
        self._sessions = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)

    def create_schema(self) -> None:
        url = self.engine.url
        if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            raise StoreError(f"No se pudo preparar la base de datos: {exc}") from exc

    def _row(self, db: Session) -> SiteContent | None:
        return db.execute(select(SiteContent).where(SiteContent.key == self.key)).scalar_one_or_none()

    def get(self) -> Dict[str, Any]:
        try:
            with self._sessions() as db:
                row = self._row(db)
                return dict(row.data or {}) if row else {}
        except SQLAlchemyError as exc:
            raise StoreError(f"Error leyendo contenido: {exc}") from exc

    def update(self, partial: Dict[str, Any]) -> None:
        """Upsert-merge: fields in ``partial`` replace stored ones, the rest are kept."""
        try:
            with self._sessions() as db:
                row = self._row(db)
                if row is None:
                    db.add(SiteContent(key=self.key, data=dict(partial)))
                else:
                    # New dict so the JSON column is flagged as changed
                    row.data = {**(row.data or {}), **partial}
                db.commit()
        except SQLAlchemyError as exc:
            raise StoreError(f"Error guardando contenido: {exc}") from exc
        logger.info("Site content updated fields=%s", sorted(partial))
