#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from authdemo.auth.store import CsvUserStore
from authdemo.auth.users import Role, UserCandidate
from authdemo.config import Settings, configure_logging
from authdemo.errors import DuplicateEmail
from authdemo.schemas import MIN_PASSWORD_LENGTH


def main() -> None:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    store = CsvUserStore(settings.users_path, password_scheme=settings.password_scheme)

    name = input("Name: ").strip()
    email = input("Email: ").strip()
    role_in = input("Role [creator/influencer/sponsor]: ").strip().lower() or "creator"
    try:
        role = Role.parse(role_in)
    except ValueError as e:
        raise SystemExit(str(e))

    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")
    if len(pw1) < MIN_PASSWORD_LENGTH:
        raise SystemExit(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    try:
        user = store.create(UserCandidate(name=name, email=email, raw_password=pw1, role=role))
    except DuplicateEmail as e:
        raise SystemExit(e.message)
    print(f"OK -> id={user.id} {settings.users_path}")


if __name__ == "__main__":
    main()
