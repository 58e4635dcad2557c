# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Request

from beebright.auth.session import COOKIE_NAME, SessionData
from beebright.config import Settings
from beebright.context import AppContext, get_context
from beebright.errors import InvalidToken, Unauthorized

logger = logging.getLogger(__name__)

LOGIN_PAGE = "/login.html"
REJECTED = {"message": "No autorizado"}


def load_session(request: Request, ctx: AppContext) -> SessionData:
    """Return the session carried by the request cookie.

    Raises Unauthorized when no cookie was sent and InvalidToken when it does
    not verify.
    """
    token = request.cookies.get(COOKIE_NAME, "")
    if not token:
        raise Unauthorized("Falta la cookie de sesión")
    return ctx.sessions.verify(token)


def require_admin(request: Request, ctx: AppContext = Depends(get_context)) -> SessionData:
    try:
        return load_session(request, ctx)
    except (Unauthorized, InvalidToken) as exc:
        # Missing and invalid tokens get the same answer
        logger.debug("Gate rejected %s %s: %s", request.method, request.url.path, exc)
        raise HTTPException(status_code=403, detail=REJECTED)


def admin_page_user(request: Request, ctx: AppContext = Depends(get_context)) -> SessionData:
    try:
        return load_session(request, ctx)
    except (Unauthorized, InvalidToken) as exc:
        logger.debug("Admin page redirect for %s: %s", request.url.path, exc)
        raise HTTPException(status_code=303, headers={"Location": LOGIN_PAGE})


def cookie_settings(settings: Settings) -> dict:
    return {"httponly": True, "samesite": "none", "secure": settings.is_production}
