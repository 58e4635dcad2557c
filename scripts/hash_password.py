#!/usr/bin/env python3
"""Print an argon2 hash for the admin password.

Put the output in ADMIN_PASSWORD_HASH (e.g. in .env) so the plain password
never has to live in the environment.
"""
from __future__ import annotations

from getpass import getpass

from beebright.auth.passwords import hash_password


def main() -> None:
    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords no coinciden")
    if not pw1:
        raise SystemExit("Password vacío")

    # '$' must be escaped when the value goes through docker-compose or a shell
    print(f"ADMIN_PASSWORD_HASH='{hash_password(pw1)}'")


if __name__ == "__main__":
    main()
