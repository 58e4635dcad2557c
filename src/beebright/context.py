# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Application context built once at startup and handed to every route.

Collaborators are plain attributes so tests can swap in doubles
(see ``tests/conftest.py``).
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request
from sqlalchemy import create_engine

from beebright.auth.identity import AdminIdentity, identity_from_settings
from beebright.auth.session import RevocationList, SessionManager
from beebright.config import Settings
from beebright.infra.content_repo import ContentStore
from beebright.infra.mailer import Mailer, SmtpMailer
from beebright.infra.media import CloudinaryUploader, ImageUploader
from beebright.services.contact_service import ContactService
from beebright.services.content_service import ContentService


@dataclass
class AppContext:
    settings: Settings
    identity: AdminIdentity
    sessions: SessionManager
    content: ContentService
    uploader: ImageUploader
    contact: ContactService


def build_context(
    settings: Settings,
    *,
    store: ContentStore | None = None,
    uploader: ImageUploader | None = None,
    mailer: Mailer | None = None,
) -> AppContext:
    settings.validate_runtime()

    if store is None:
        connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
        engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True, future=True, connect_args=connect_args)
        store = ContentStore(engine)
    store.create_schema()

    if uploader is None:
        uploader = CloudinaryUploader(
            cloud_name=settings.CLOUD_NAME,
            api_key=settings.CLOUD_KEY,
            api_secret=settings.CLOUD_SECRET,
        )
    if mailer is None:
        mailer = SmtpMailer(
            host=settings.EMAIL_HOST,
            port=settings.EMAIL_PORT,
            username=settings.EMAIL_USER,
            password=settings.EMAIL_PASS,
            sender=settings.EMAIL_USER,
        )

    sessions = SessionManager(
        settings.SECRET_KEY,
        max_age=settings.SESSION_MAX_AGE,
        revocation=RevocationList() if settings.SESSION_REVOCATION else None,
    )
    return AppContext(
        settings=settings,
        identity=identity_from_settings(settings),
        sessions=sessions,
        content=ContentService(store),
        uploader=uploader,
        contact=ContactService(mailer, recipient=settings.mail_recipient),
    )


def get_context(request: Request) -> AppContext:
    return request.app.state.ctx
