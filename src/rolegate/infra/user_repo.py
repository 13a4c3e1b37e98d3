# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Dict, List, Optional, Tuple

from rolegate import config
from rolegate.core.errors import DuplicateEmail, NotFound
from rolegate.infra.documents import read_collection, write_collection

logger = logging.getLogger(__name__)

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_ADMIN)

_COLLECTION = "users"


@dataclass(frozen=True)
class UserRecord:
    id: str
    name: str
    email: str
    password_hash: str
    role: str = ROLE_USER
    created_at: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def _record(user_id: str, doc: dict) -> Optional[UserRecord]:
    email = str(doc.get("email") or "").strip()
    if not email:
        return None
    role = str(doc.get("role") or ROLE_USER).strip().lower()
    return UserRecord(
        id=user_id,
        name=str(doc.get("name") or ""),
        email=email,
        password_hash=str(doc.get("password_hash") or ""),
        role=role if role in ROLES else ROLE_USER,
        created_at=str(doc.get("created_at") or ""),
    )


def _doc(u: UserRecord) -> dict:
    return {
        "name": u.name,
        "email": u.email,
        "password_hash": u.password_hash,
        "role": u.role,
        "created_at": u.created_at,
    }


class UserRepo:
    """User collection kept in one YAML document, keyed by user id.

    Email uniqueness is enforced here, under the repo lock, so a signup that
    loses a race against another signup with the same email still fails with
    ``DuplicateEmail`` instead of creating a second record.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = Lock()
        self._cache: Tuple[float, Dict[str, UserRecord]] = (0.0, {})

    def _mtime(self) -> float:
        try:
            return self.path.stat().st_mtime if self.path.exists() else 0.0
        except OSError:
            return 0.0

    def _load(self) -> Dict[str, UserRecord]:
        mtime = self._mtime()
        cached_mtime, cached_users = self._cache
        if mtime and mtime == cached_mtime and cached_users:
            return cached_users

        users: Dict[str, UserRecord] = {}
        for uid, doc in read_collection(self.path, _COLLECTION).items():
            rec = _record(uid, doc)
            if rec:
                users[uid] = rec
        self._cache = (mtime, users)
        return users

    def _store(self, users: Dict[str, UserRecord]) -> None:
        write_collection(self.path, _COLLECTION, {uid: _doc(u) for uid, u in users.items()})
        self._cache = (0.0, {})

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        if not email:
            return None
        for u in self._load().values():
            if u.email == email:
                return u
        return None

    def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        if not user_id:
            return None
        return self._load().get(user_id)

    def list_all(self) -> List[UserRecord]:
        return list(self._load().values())

    def insert(self, *, name: str, email: str, password_hash: str, role: str = ROLE_USER) -> UserRecord:
        if role not in ROLES:
            raise ValueError(f"Unknown role: {role}")
        with self._lock:
            users = dict(self._load())
            if any(u.email == email for u in users.values()):
                raise DuplicateEmail()
            user = UserRecord(
                id=uuid.uuid4().hex,
                name=name,
                email=email,
                password_hash=password_hash,
                role=role,
                created_at=datetime.now(timezone.utc).isoformat(timespec="seconds"),
            )
            users[user.id] = user
            self._store(users)
        logger.info("Inserted user id=%s role=%s", user.id, user.role)
        return user

    def _replace(self, user_id: str, **changes) -> UserRecord:
        with self._lock:
            users = dict(self._load())
            current = users.get(user_id)
            if current is None:
                raise NotFound(f"No user with id {user_id}")
            updated = UserRecord(**{**_doc(current), "id": user_id, **changes})
            if updated != current:
                users[user_id] = updated
                self._store(users)
            return updated

    def update_role(self, user_id: str, role: str) -> None:
        if role not in ROLES:
            raise ValueError(f"Unknown role: {role}")
        self._replace(user_id, role=role)

    def update_password_hash(self, user_id: str, password_hash: str) -> None:
        self._replace(user_id, password_hash=password_hash)


_REPO: Optional[UserRepo] = None


def get_user_repo() -> UserRepo:
    global _REPO
    if _REPO is None:
        _REPO = UserRepo(config.USERS_PATH)
    return _REPO
