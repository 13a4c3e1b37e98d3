import pytest

from rolegate.core.errors import ValidationError
from rolegate.core.validation import validate


def _message(schema, payload):
    with pytest.raises(ValidationError) as exc:
        validate(schema, payload)
    return exc.value.message


def test_signup_returns_normalised_payload():
    out = validate("signup", {"name": "  Ann ", "email": "ann@x.com", "password": "secret1"})
    assert out == {"name": "Ann", "email": "ann@x.com", "password": "secret1"}


def test_signup_reports_first_failing_field_in_declaration_order():
    msg = _message("signup", {"name": "", "email": "nope", "password": "1"})
    assert msg == '"name" is not allowed to be empty'

    msg = _message("signup", {"name": "Ann", "email": "nope", "password": "1"})
    assert msg == '"email" must be a valid email'


def test_absent_fields_are_failures():
    assert _message("signup", {"email": "ann@x.com", "password": "secret1"}) == '"name" is required'
    assert _message("signup", {"name": None, "email": "ann@x.com", "password": "secret1"}) == '"name" is required'
    assert _message("login", {"email": "ann@x.com"}) == '"password" is required'


def test_signup_length_limits():
    msg = _message("signup", {"name": "a" * 51, "email": "ann@x.com", "password": "secret1"})
    assert msg == '"name" length must be less than or equal to 50 characters long'

    msg = _message("signup", {"name": "Ann", "email": "ann@x.com", "password": "12345"})
    assert msg == '"password" length must be at least 6 characters long'


def test_login_accepts_any_non_empty_password():
    assert validate("login", {"email": "ann@x.com", "password": "x"})["password"] == "x"
    assert _message("login", {"email": "ann@x.com", "password": ""}) == '"password" is not allowed to be empty'


def test_email_is_kept_as_typed():
    assert validate("login", {"email": "Ann@X.com", "password": "x"})["email"] == "Ann@X.com"


def test_unknown_schema():
    with pytest.raises(KeyError):
        validate("reset", {})
