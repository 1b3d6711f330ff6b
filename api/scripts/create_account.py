"""
Create an account with a password credential (no registration endpoint).
Run from `api/`:
  python -m scripts.create_account EMAIL PASSWORD FIRSTNAME [--role Admin]
Example:
  python -m scripts.create_account ada@example.com 'secure-password' Ada --role Admin
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from auth import repository, security
from core import db
from core.config import get_settings


async def _create(args: argparse.Namespace) -> int:
    await db.init_pool(get_settings())
    try:
        existing = await repository.get_credentials_by_email(args.email)
        if existing:
            print(f"Account '{args.email}' already exists.", file=sys.stderr)
            return 1

        salt = security.generate_salt()
        account = await repository.create_account(
            firstname=args.firstname,
            lastname=args.lastname,
            username=args.username or args.email,
            email=args.email,
            phone=args.phone,
            role=args.role,
            salted_hash=security.generate_hash(args.password, salt),
            salt=salt,
        )
        print(f"Created account {account['account_id']} '{account['email']}' with role '{account['account_role']}'.")
        return 0
    except db.StoreError as exc:
        print(f"Database error: {exc}", file=sys.stderr)
        return 1
    finally:
        await db.close_pool()


def main() -> int:
    parser = argparse.ArgumentParser(description="Create an account that can log in.")
    parser.add_argument("email")
    parser.add_argument("password")
    parser.add_argument("firstname")
    parser.add_argument("--lastname", default="")
    parser.add_argument("--username", default="")
    parser.add_argument("--phone", default="")
    parser.add_argument("--role", default="User")
    args = parser.parse_args()

    if not args.email.strip() or not args.password:
        print("Email and password are required.", file=sys.stderr)
        return 1
    return asyncio.run(_create(args))


if __name__ == "__main__":
    sys.exit(main())
