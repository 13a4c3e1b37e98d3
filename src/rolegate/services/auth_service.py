# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from rolegate.auth.passwords import hash_password, needs_rehash, verify_password
from rolegate.auth.session import SessionData
from rolegate.core.errors import AuthError, DuplicateEmail, IncorrectPassword, InternalError, UserNotFound
from rolegate.core.validation import validate
from rolegate.infra.user_repo import ROLE_ADMIN, ROLE_USER, UserRecord, UserRepo, get_user_repo

logger = logging.getLogger(__name__)

LANDING = {ROLE_ADMIN: "/admin", ROLE_USER: "/members"}


@dataclass(frozen=True)
class AuthResult:
    user: Optional[UserRecord] = None
    error: Optional[AuthError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.user is not None


def landing_for(role: str) -> str:
    return LANDING.get(role, LANDING[ROLE_USER])


def establish_session(session: SessionData, user: UserRecord) -> None:
    session.establish(user_id=user.id, username=user.name, email=user.email, role=user.role)


def signup(session: SessionData, payload: Dict[str, Any], *, repo: Optional[UserRepo] = None) -> AuthResult:
    """Validate, reject duplicates, hash, insert, then authenticate the session.

    The session is only touched once the user record exists.
    """
    repo = repo or get_user_repo()
    try:
        form = validate("signup", payload)
        if repo.find_by_email(form["email"]) is not None:
            logger.info("Signup rejected: email already registered")
            return AuthResult(error=DuplicateEmail())
        password_hash = hash_password(form["password"])
        user = repo.insert(name=form["name"], email=form["email"], password_hash=password_hash)
        establish_session(session, user)
    except AuthError as exc:
        return AuthResult(error=exc)
    except Exception:
        logger.exception("Signup failed")
        return AuthResult(error=InternalError())

    logger.info("Signup ok user_id=%s", user.id)
    return AuthResult(user=user)


def login(session: SessionData, payload: Dict[str, Any], *, repo: Optional[UserRepo] = None) -> AuthResult:
    repo = repo or get_user_repo()
    try:
        form = validate("login", payload)
        user = repo.find_by_email(form["email"])
        if user is None:
            logger.info("Login failed: unknown email")
            return AuthResult(error=UserNotFound())
        if not verify_password(user.password_hash, form["password"]):
            logger.info("Login failed: incorrect password user_id=%s", user.id)
            return AuthResult(error=IncorrectPassword())
        if needs_rehash(user.password_hash):
            repo.update_password_hash(user.id, hash_password(form["password"]))
        establish_session(session, user)
    except AuthError as exc:
        return AuthResult(error=exc)
    except Exception:
        logger.exception("Login failed")
        return AuthResult(error=InternalError())

    logger.info("Login ok user_id=%s role=%s", user.id, user.role)
    return AuthResult(user=user)


def logout(session: SessionData) -> None:
    if session.authenticated:
        logger.info("Logout user_id=%s", session.user_id)
    session.destroy()
