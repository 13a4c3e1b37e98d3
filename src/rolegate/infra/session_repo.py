# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from pathlib import Path
from threading import Lock
from typing import Any, Callable, Dict, Optional

from rolegate import config
from rolegate.auth.session import SessionData
from rolegate.infra.documents import read_collection, write_collection

logger = logging.getLogger(__name__)

_COLLECTION = "sessions"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionRepo:
    """Server-side session records with sliding expiration.

    Every ``save`` pushes ``expires_at`` to ``now + ttl``. A record whose
    ``expires_at`` has passed is treated as absent and removed on sight.
    """

    def __init__(
        self,
        path: Path,
        *,
        ttl_seconds: int = config.SESSION_TTL_SECONDS,
        now: Callable[[], datetime] = _utcnow,
    ):
        self.path = Path(path)
        self.ttl = timedelta(seconds=ttl_seconds)
        self._now = now
        self._lock = Lock()

    def create(self) -> str:
        session_id = secrets.token_urlsafe(32)
        self.save(session_id, SessionData(session_id=session_id))
        return session_id

    def load(self, session_id: str) -> Optional[SessionData]:
        if not session_id:
            return None
        doc = read_collection(self.path, _COLLECTION).get(session_id)
        if doc is None:
            return None
        data = SessionData.from_doc(session_id, doc)
        if data.expires_at is None or data.expires_at <= self._now():
            self.destroy(session_id)
            return None
        return data

    def _alive(self, sessions: Dict[str, Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
        now = self._now()
        alive = {}
        for sid, doc in sessions.items():
            exp = doc.get("expires_at")
            if exp and datetime.fromisoformat(exp) > now:
                alive[sid] = doc
        return alive

    def save(self, session_id: str, data: SessionData) -> None:
        """Persist ``data`` and slide its expiry; expired records are dropped on the same write."""
        data.session_id = session_id
        data.expires_at = self._now() + self.ttl
        with self._lock:
            sessions = self._alive(read_collection(self.path, _COLLECTION))
            sessions[session_id] = data.to_doc()
            write_collection(self.path, _COLLECTION, sessions)

    def destroy(self, session_id: str) -> None:
        with self._lock:
            sessions = read_collection(self.path, _COLLECTION)
            if sessions.pop(session_id, None) is not None:
                write_collection(self.path, _COLLECTION, self._alive(sessions))

    def purge_expired(self) -> int:
        with self._lock:
            sessions = read_collection(self.path, _COLLECTION)
            alive = self._alive(sessions)
            removed = len(sessions) - len(alive)
            if removed:
                write_collection(self.path, _COLLECTION, alive)
        if removed:
            logger.info("Purged %s expired sessions", removed)
        return removed


_REPO: Optional[SessionRepo] = None


def get_session_repo() -> SessionRepo:
    global _REPO
    if _REPO is None:
        _REPO = SessionRepo(config.SESSIONS_PATH)
    return _REPO
