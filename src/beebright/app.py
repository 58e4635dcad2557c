# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import json
import logging
import os
from typing import Any, Optional

from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import Scope

from beebright.auth.identity import authenticate
from beebright.auth.session import COOKIE_NAME
from beebright.config import Settings
from beebright.context import AppContext, build_context, get_context
from beebright.errors import InvalidCredentials, StoreError, UploadError, RelayError, ValidationError
from beebright.permissions import admin_page_user, cookie_settings, require_admin

logger = logging.getLogger(__name__)


ADMIN_PAGES = {"admin.html"}


class PublicFiles(StaticFiles):
    """Static site that never serves the admin page; it lives behind ``/admin``."""

    async def get_response(self, path: str, scope: Scope):
        if os.path.basename(os.path.normpath(path)).lower() in ADMIN_PAGES:
            raise StarletteHTTPException(status_code=303, headers={"Location": "/admin"})
        return await super().get_response(path, scope)


async def _json_body(request: Request) -> Any:
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return None


def create_app(settings: Optional[Settings] = None, *, context: Optional[AppContext] = None) -> FastAPI:
    if context is None:
        context = build_context(settings or Settings())
    settings = context.settings

    app = FastAPI(title="Bee Bright backend", version="0.1.0")
    app.state.ctx = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        # Gate rejections carry a ready-made JSON body
        if isinstance(exc.detail, dict):
            return JSONResponse(exc.detail, status_code=exc.status_code, headers=exc.headers)
        return await http_exception_handler(request, exc)

    # ------------------ Auth ------------------

    @app.post("/api/login")
    async def login(request: Request, ctx: AppContext = Depends(get_context)):
        payload = await _json_body(request)
        if not isinstance(payload, dict):
            payload = {}
        try:
            await run_in_threadpool(authenticate, ctx.identity, payload.get("username"), payload.get("password"))
        except InvalidCredentials:
            return JSONResponse({"message": "Credenciales inválidas"}, status_code=401)
        token = ctx.sessions.issue(ctx.identity.username)
        resp = JSONResponse({"message": "Login exitoso"})
        resp.set_cookie(
            COOKIE_NAME,
            token,
            max_age=ctx.sessions.max_age,
            **cookie_settings(ctx.settings),
        )
        return resp

    @app.post("/api/logout")
    def logout(request: Request, ctx: AppContext = Depends(get_context)):
        ctx.sessions.revoke(request.cookies.get(COOKIE_NAME, ""))
        resp = JSONResponse({"message": "Sesión cerrada"})
        resp.delete_cookie(COOKIE_NAME, **cookie_settings(ctx.settings))
        return resp

    @app.get("/admin")
    @app.get("/admin.html")
    def admin_page(ctx: AppContext = Depends(get_context), session=Depends(admin_page_user)):
        page = ctx.settings.public_dir / "admin.html"
        if not page.is_file():
            return PlainTextResponse("Página no encontrada", status_code=404)
        return FileResponse(str(page), media_type="text/html")

    # ------------------ Admin API ------------------

    @app.post("/api/upload-image")
    async def upload_image(
        imagen: Optional[UploadFile] = File(None),
        session=Depends(require_admin),
        ctx: AppContext = Depends(get_context),
    ):
        if imagen is None:
            return PlainTextResponse("No se recibió ninguna imagen", status_code=400)
        try:
            data = await imagen.read()
            url = await run_in_threadpool(ctx.uploader.upload, data, imagen.filename or "imagen")
        except UploadError as e:
            logger.error("Image upload failed: %s", e)
            return PlainTextResponse("Error al subir imagen", status_code=500)
        finally:
            await imagen.close()
        return {"url": url}

    @app.post("/api/update-section")
    async def update_section(request: Request, session=Depends(require_admin), ctx: AppContext = Depends(get_context)):
        payload = await _json_body(request)
        try:
            await run_in_threadpool(ctx.content.update_section, payload)
        except ValidationError as e:
            return PlainTextResponse(str(e), status_code=400)
        except StoreError as e:
            logger.error("Content update failed: %s", e)
            return PlainTextResponse("Error al guardar contenido", status_code=500)
        return PlainTextResponse("Contenido actualizado")

    # ------------------ Public API ------------------

    @app.get("/api/get-content")
    def get_content(ctx: AppContext = Depends(get_context)):
        try:
            return JSONResponse(ctx.content.get_content())
        except StoreError as e:
            logger.error("Content read failed: %s", e)
            return PlainTextResponse("Error al obtener contenido", status_code=500)

    @app.post("/enviarCorreo")
    async def send_contact(request: Request, ctx: AppContext = Depends(get_context)):
        payload = await _json_body(request)
        try:
            await run_in_threadpool(ctx.contact.submit, payload)
        except ValidationError as e:
            return PlainTextResponse(str(e), status_code=400)
        except RelayError as e:
            logger.error("Contact relay failed: %s", e)
            return PlainTextResponse("Error al enviar el correo", status_code=500)
        return PlainTextResponse("Correo enviado exitosamente")

    @app.get("/health", include_in_schema=False)
    def healthcheck():
        return {"status": "ok"}

    # Static site last so the routes above win
    public_dir = settings.public_dir
    if public_dir.is_dir():
        app.mount("/", PublicFiles(directory=str(public_dir), html=True), name="public")
    else:
        logger.warning("Public directory %s not found; static site disabled", public_dir)

    return app
