# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Form, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from rolegate import config
from rolegate.auth.session import SessionData, sign_session_id, verify_session_token
from rolegate.core.errors import Forbidden, InternalError, NotAuthenticated, NotFound
from rolegate.infra.session_repo import get_session_repo
from rolegate.infra.user_repo import ROLE_ADMIN
from rolegate.permissions import CurrentUser, cookie_settings, current_session, require_role, require_user
from rolegate.services import admin_service, auth_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    config.validate_runtime_config()
    await run_in_threadpool(get_session_repo().purge_expired)
    yield


app = FastAPI(lifespan=_lifespan)

BASE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


# ------------------ Session handling ------------------


def _load_session(request: Request) -> SessionData:
    sid = verify_session_token(request.cookies.get(config.COOKIE_NAME, ""))
    sess = get_session_repo().load(sid) if sid else None
    return sess or SessionData()


def _flush_session(sess: SessionData, was_authenticated: bool, before: dict, response) -> None:
    """Write the request's session back to the store and refresh the cookie."""
    repo = get_session_repo()
    if sess.destroyed:
        if sess.session_id:
            repo.destroy(sess.session_id)
        response.delete_cookie(config.COOKIE_NAME)
        return

    changed = {k: v for k, v in sess.to_doc().items() if k != "expires_at"} != before
    if not (sess.authenticated or changed):
        return

    # New id whenever a session becomes authenticated.
    if sess.authenticated and not was_authenticated and sess.session_id:
        repo.destroy(sess.session_id)
        sess.session_id = ""

    sid = sess.session_id or repo.create()
    repo.save(sid, sess)
    response.set_cookie(
        config.COOKIE_NAME,
        sign_session_id(sid),
        max_age=config.SESSION_TTL_SECONDS,
        **cookie_settings(),
    )


@app.middleware("http")
async def _session_middleware(request: Request, call_next):
    sess = await run_in_threadpool(_load_session, request)
    was_authenticated = sess.authenticated
    before = {k: v for k, v in sess.to_doc().items() if k != "expires_at"}
    request.state.session = sess

    response = await call_next(request)
    await run_in_threadpool(_flush_session, sess, was_authenticated, before, response)
    return response


# ------------------ Rendering / errors ------------------


def _render(request: Request, template_name: str, ctx: Optional[dict] = None, status_code: int = 200):
    """TemplateResponse wrapper injecting session-derived identity."""
    sess = current_session(request)
    base_ctx = {
        "authenticated": sess.authenticated,
        "username": sess.username if sess.authenticated else None,
        "role": sess.role if sess.authenticated else None,
    }
    merged = {**base_ctx, **(ctx or {})}
    return templates.TemplateResponse(request, template_name, merged, status_code=status_code)


@app.exception_handler(NotAuthenticated)
async def _not_authenticated(request: Request, exc: NotAuthenticated):
    return RedirectResponse(url="/login", status_code=303)


@app.exception_handler(Forbidden)
async def _forbidden(request: Request, exc: Forbidden):
    return _render(request, "403.html", {"message": exc.message}, status_code=403)


@app.exception_handler(NotFound)
async def _not_found(request: Request, exc: NotFound):
    return _render(request, "404.html", {"message": exc.message}, status_code=404)


@app.exception_handler(StarletteHTTPException)
async def _http_error(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return _render(request, "404.html", {"message": "Page not found"}, status_code=404)
    return await http_exception_handler(request, exc)


@app.exception_handler(InternalError)
async def _internal_error(request: Request, exc: InternalError):
    return _render(request, "500.html", {"message": exc.message}, status_code=500)


@app.exception_handler(Exception)
async def _unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _render(request, "500.html", {"message": InternalError.default_message}, status_code=500)


# ------------------ Routes ------------------


@app.get("/", response_class=HTMLResponse)
def home(request: Request):
    return _render(request, "index.html")


@app.get("/healthz")
def healthz():
    return {"status": "ok"}


@app.get("/signup", response_class=HTMLResponse)
def signup_get(request: Request):
    return _render(request, "signup.html", {"error": None, "form": {}})


@app.post("/signup")
def signup_post(
    request: Request,
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
):
    result = auth_service.signup(
        current_session(request),
        {"name": name, "email": email, "password": password},
    )
    if not result.ok:
        if isinstance(result.error, InternalError):
            raise result.error
        return _render(
            request,
            "signup.html",
            {"error": result.error.message, "form": {"name": name or "", "email": email or ""}},
        )
    return RedirectResponse(url=auth_service.landing_for(result.user.role), status_code=303)


@app.get("/login", response_class=HTMLResponse)
def login_get(request: Request):
    sess = current_session(request)
    if sess.authenticated:
        return RedirectResponse(url=auth_service.landing_for(sess.role), status_code=303)
    return _render(request, "login.html", {"error": None, "form": {}})


@app.post("/login")
def login_post(
    request: Request,
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
):
    result = auth_service.login(current_session(request), {"email": email, "password": password})
    if not result.ok:
        if isinstance(result.error, InternalError):
            raise result.error
        return _render(request, "login.html", {"error": result.error.message, "form": {"email": email or ""}})
    return RedirectResponse(url=auth_service.landing_for(result.user.role), status_code=303)


@app.get("/logout")
def logout(request: Request):
    auth_service.logout(current_session(request))
    return RedirectResponse(url="/", status_code=303)


@app.get("/members", response_class=HTMLResponse)
@app.get("/user", response_class=HTMLResponse)
def members(request: Request, user: CurrentUser = Depends(require_user)):
    return _render(request, "members.html", {"user": user})


@app.get("/admin", response_class=HTMLResponse)
def admin_dashboard(request: Request, user: CurrentUser = Depends(require_role(ROLE_ADMIN))):
    return _render(request, "admin.html", {"user": user, "users": admin_service.list_users()})


@app.get("/promote/{user_id}")
def promote(user_id: str, user: CurrentUser = Depends(require_role(ROLE_ADMIN))):
    admin_service.promote(user, user_id)
    return RedirectResponse(url="/admin", status_code=303)


@app.get("/demote/{user_id}")
def demote(user_id: str, user: CurrentUser = Depends(require_role(ROLE_ADMIN))):
    admin_service.demote(user, user_id)
    return RedirectResponse(url="/admin", status_code=303)
