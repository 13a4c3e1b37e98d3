# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Named form schemas (``signup``, ``login``) and a first-error validator."""

from __future__ import annotations

from typing import Annotated, Any, Dict, Type

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, StringConstraints
from pydantic import ValidationError as PydanticValidationError

from rolegate.core.errors import ValidationError


def _check_email(value: str) -> str:
    # Email is kept as typed; only its syntax is checked.
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError(str(exc)) from exc
    return value


Email = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1), AfterValidator(_check_email)]


class SignupForm(BaseModel):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
    email: Email
    password: Annotated[str, StringConstraints(min_length=6)]


class LoginForm(BaseModel):
    email: Email
    password: Annotated[str, StringConstraints(min_length=1)]


SCHEMAS: Dict[str, Type[BaseModel]] = {
    "signup": SignupForm,
    "login": LoginForm,
}


def _message(err: Dict[str, Any]) -> str:
    field = str(err["loc"][0]) if err.get("loc") else "value"
    kind = err.get("type", "")
    ctx = err.get("ctx") or {}
    if kind == "missing":
        return f'"{field}" is required'
    if kind == "string_too_short":
        n = ctx.get("min_length", 1)
        if n <= 1:
            return f'"{field}" is not allowed to be empty'
        return f'"{field}" length must be at least {n} characters long'
    if kind == "string_too_long":
        return f'"{field}" length must be less than or equal to {ctx.get("max_length")} characters long'
    if kind == "string_type":
        return f'"{field}" must be a string'
    if kind == "value_error" and field == "email":
        return f'"{field}" must be a valid email'
    return f'"{field}" is invalid'


def validate(schema_name: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Validate ``payload`` against the named schema.

    Returns the normalised payload. On failure raises ``ValidationError`` with
    the message of the first failing field, in the schema's field order.
    ``None`` values count as absent.
    """
    model = SCHEMAS[schema_name]
    data = {k: v for k, v in (payload or {}).items() if v is not None}
    try:
        return model.model_validate(data).model_dump()
    except PydanticValidationError as exc:
        errors = exc.errors()
        order = list(model.model_fields)
        errors.sort(key=lambda e: order.index(e["loc"][0]) if e.get("loc") and e["loc"][0] in order else len(order))
        raise ValidationError(_message(errors[0])) from None
