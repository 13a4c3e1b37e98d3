#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from rolegate.auth.passwords import hash_password
from rolegate.core.errors import AuthError
from rolegate.core.validation import validate
from rolegate.infra.user_repo import ROLES, get_user_repo


def main() -> None:
    repo = get_user_repo()

    name = input("Name: ").strip()
    email = input("Email: ").strip()
    role = (input("Role [user/admin]: ").strip().lower() or "user")
    if role not in ROLES:
        raise SystemExit(f"Unknown role: {role}")

    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")

    try:
        form = validate("signup", {"name": name, "email": email, "password": pw1})
        user = repo.insert(
            name=form["name"],
            email=form["email"],
            password_hash=hash_password(form["password"]),
            role=role,
        )
    except AuthError as exc:
        raise SystemExit(exc.message)
    print(f"OK -> {user.id} ({user.role}) in {repo.path}")


if __name__ == "__main__":
    main()
