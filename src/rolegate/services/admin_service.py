# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import List, Optional

from rolegate.infra.user_repo import ROLE_ADMIN, ROLE_USER, UserRecord, UserRepo, get_user_repo
from rolegate.permissions import CurrentUser

logger = logging.getLogger(__name__)


def list_users(*, repo: Optional[UserRepo] = None) -> List[UserRecord]:
    return (repo or get_user_repo()).list_all()


def promote(actor: CurrentUser, target_id: str, *, repo: Optional[UserRepo] = None) -> bool:
    """Give ``target_id`` the admin role. Unknown id raises ``NotFound``."""
    (repo or get_user_repo()).update_role(target_id, ROLE_ADMIN)
    logger.info("Promote target=%s by=%s", target_id, actor.user_id)
    return True


def demote(actor: CurrentUser, target_id: str, *, repo: Optional[UserRepo] = None) -> bool:
    """Drop ``target_id`` back to the user role.

    An admin cannot demote themselves: returns False and changes nothing.
    """
    if target_id == actor.user_id:
        logger.warning("Self-demotion refused for user_id=%s", actor.user_id)
        return False
    (repo or get_user_repo()).update_role(target_id, ROLE_USER)
    logger.info("Demote target=%s by=%s", target_id, actor.user_id)
    return True
