# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging

from argon2 import PasswordHasher
from argon2.exceptions import HashingError, InvalidHashError, VerificationError, VerifyMismatchError

from rolegate.core.errors import InternalError

logger = logging.getLogger(__name__)

# Fixed work factor: one verification takes tens of milliseconds on commodity
# hardware (same ballpark as bcrypt with 12 rounds).
TIME_COST = 3
MEMORY_COST = 65536  # KiB
PARALLELISM = 4

_PH = PasswordHasher(time_cost=TIME_COST, memory_cost=MEMORY_COST, parallelism=PARALLELISM)


def hash_password(plain: str) -> str:
    if not plain:
        raise ValueError("Empty password")
    try:
        return _PH.hash(plain)
    except HashingError as exc:
        logger.exception("Password hashing failed")
        raise InternalError() from exc


def verify_password(hash_value: str, plain: str) -> bool:
    if not hash_value or not plain:
        return False
    try:
        return _PH.verify(hash_value, plain)
    except VerifyMismatchError:
        return False
    except (VerificationError, InvalidHashError, ValueError):
        logger.warning("Stored password hash could not be verified; treating as mismatch")
        return False


def needs_rehash(hash_value: str) -> bool:
    try:
        return _PH.check_needs_rehash(hash_value)
    except (InvalidHashError, ValueError):
        return False
