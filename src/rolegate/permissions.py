# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Request

from rolegate import config
from rolegate.auth.session import SessionData
from rolegate.core.errors import Forbidden, NotAuthenticated
from rolegate.infra.user_repo import get_user_repo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurrentUser:
    user_id: str
    username: str
    email: str
    role: str


def current_session(request: Request) -> SessionData:
    sess = getattr(request.state, "session", None)
    if sess is None:
        sess = SessionData()
        request.state.session = sess
    return sess


def has_role(user: CurrentUser, role: str) -> bool:
    return user.role == role


def require_user(request: Request) -> CurrentUser:
    sess = current_session(request)
    if not sess.authenticated:
        raise NotAuthenticated()
    role = sess.role
    if config.RECHECK_ROLE:
        live = get_user_repo().find_by_id(sess.user_id)
        if live is None:
            raise NotAuthenticated()
        role = live.role
    return CurrentUser(user_id=sess.user_id, username=sess.username, email=sess.email, role=role)


def require_role(role: str):
    def _dep(request: Request) -> CurrentUser:
        u = require_user(request)
        if not has_role(u, role):
            logger.warning("Forbidden: user_id=%s role=%s needs %s on %s", u.user_id, u.role, role, request.url.path)
            raise Forbidden()
        return u

    return _dep


def cookie_settings() -> dict:
    return {"httponly": True, "samesite": "lax", "secure": config.COOKIE_SECURE}
