"""
Create an account with a chosen role (e.g. the first admin). Run from project root:
  python -m accessgate.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m accessgate.scripts.create_user alice alice@example.com your-secure-password ADMIN
"""
import argparse
import sys

from accessgate.core.config import get_settings
from accessgate.core.database import SessionLocal
from accessgate.core.exceptions import DuplicateKeyError
from accessgate.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    hash_password,
)
from accessgate.models import RoleName, User
from accessgate.services.roles import find_role_by_name, seed_roles_if_empty
from accessgate.services.store import CredentialStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an accessgate account.")
    parser.add_argument("username", help=f"Username (1-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument(
        "role",
        nargs="?",
        default=RoleName.USER.value,
        choices=[r.value for r in RoleName],
    )
    args = parser.parse_args(argv)

    username = args.username.strip()
    email = args.email.strip()
    if not username or len(username) > USERNAME_MAX_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if "@" not in email:
        print("Invalid email address.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        store = CredentialStore(db)
        seed_roles_if_empty(store)
        role = find_role_by_name(store, args.role)
        if role is None:
            print(f"Role '{args.role}' is not seeded.", file=sys.stderr)
            return 1
        user = User(
            username=username,
            email=email,
            password_hash=hash_password(args.password, rounds=get_settings().BCRYPT_ROUNDS),
            roles=[role],
        )
        try:
            store.insert(user)
        except DuplicateKeyError:
            print(f"User '{username}' or email '{email}' already exists.", file=sys.stderr)
            return 1
        print(f"Created user '{username}' with role '{args.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
