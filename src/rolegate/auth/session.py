# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from itsdangerous import BadSignature, BadTimeSignature, URLSafeTimedSerializer

from rolegate import config


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(secret_key=config.secret_key(), salt=config.SESSION_SALT)


@dataclass
class SessionData:
    """Mutable per-request view of a stored session.

    ``username``, ``email``, ``role`` and ``user_id`` are a snapshot of the
    user taken when the session was authenticated; later role changes in the
    user store do not show up here until the next login.
    """

    session_id: str = ""
    authenticated: bool = False
    username: str = ""
    email: str = ""
    role: str = ""
    user_id: str = ""
    expires_at: Optional[datetime] = None
    destroyed: bool = field(default=False, compare=False)

    def establish(self, *, user_id: str, username: str, email: str, role: str) -> None:
        self.authenticated = True
        self.user_id = user_id
        self.username = username
        self.email = email
        self.role = role
        self.destroyed = False

    def destroy(self) -> None:
        self.authenticated = False
        self.user_id = self.username = self.email = self.role = ""
        self.destroyed = True

    def to_doc(self) -> Dict[str, Any]:
        return {
            "authenticated": self.authenticated,
            "username": self.username,
            "email": self.email,
            "role": self.role,
            "user_id": self.user_id,
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
        }

    @classmethod
    def from_doc(cls, session_id: str, doc: Dict[str, Any]) -> "SessionData":
        exp = doc.get("expires_at")
        return cls(
            session_id=session_id,
            authenticated=bool(doc.get("authenticated", False)),
            username=str(doc.get("username") or ""),
            email=str(doc.get("email") or ""),
            role=str(doc.get("role") or ""),
            user_id=str(doc.get("user_id") or ""),
            expires_at=datetime.fromisoformat(exp) if exp else None,
        )


def sign_session_id(session_id: str) -> str:
    return _serializer().dumps({"sid": session_id})


def verify_session_token(token: str, *, max_age: int = config.SESSION_TTL_SECONDS) -> Optional[str]:
    if not token:
        return None
    s = _serializer()
    try:
        data = s.loads(token, max_age=max_age)
        sid = str((data or {}).get("sid") or "").strip()
        return sid or None
    except (BadSignature, BadTimeSignature):
        return None
