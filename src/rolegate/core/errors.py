# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy shared by the services, the access gate and the views.

Form-level errors (validation, duplicate email, bad credentials) are shown
inline on the form that produced them. Access errors and internal errors are
turned into redirects or status pages by the exception handlers in
``rolegate.app``.
"""

from __future__ import annotations


class AuthError(Exception):
    default_message = "Error"
    status_code = 400

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AuthError):
    default_message = "Invalid input"
    status_code = 200


class DuplicateEmail(AuthError):
    default_message = "User with that email already exists!"
    status_code = 200


class UserNotFound(AuthError):
    default_message = "User not found"
    status_code = 200


class IncorrectPassword(AuthError):
    default_message = "Incorrect password"
    status_code = 200


class NotAuthenticated(AuthError):
    default_message = "Not authenticated"
    status_code = 303


class Forbidden(AuthError):
    default_message = "Forbidden"
    status_code = 403


class NotFound(AuthError):
    default_message = "Not found"
    status_code = 404


class InternalError(AuthError):
    default_message = "Something went wrong"
    status_code = 500
