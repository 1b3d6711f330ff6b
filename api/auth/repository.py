"""
Auth persistence helpers.
"""

from __future__ import annotations

from core import db


def normalize_email(email: str) -> str:
    return (email or "").strip()


async def get_credentials_by_email(email: str) -> list[dict]:
    """
    Credential rows joined to their account for `email`.

    Returns every matching row so callers can detect duplicates.
    """
    return await db.fetch_all(
        """
        SELECT c.salted_hash, c.salt, c.account_id,
               a.email, a.firstname, a.lastname, a.phone, a.username, a.account_role
        FROM account_credential c
        INNER JOIN account a ON c.account_id = a.account_id
        WHERE a.email = $1
        """,
        normalize_email(email),
    )


async def create_account(
    *,
    firstname: str,
    lastname: str,
    username: str,
    email: str,
    phone: str,
    role: str,
    salted_hash: str,
    salt: str,
) -> dict:
    async with db.pool().acquire() as conn:
        async with conn.transaction():
            account = await db.fetch_one(
                """
                INSERT INTO account (firstname, lastname, username, email, phone, account_role)
                VALUES ($1, $2, $3, $4, $5, $6)
                RETURNING account_id, email, firstname, account_role
                """,
                firstname,
                lastname,
                username,
                normalize_email(email),
                phone,
                role,
                conn=conn,
            )
            if account is None:
                raise RuntimeError("Failed to create account.")
            await db.execute(
                """
                INSERT INTO account_credential (account_id, salted_hash, salt)
                VALUES ($1, $2, $3)
                """,
                account["account_id"],
                salted_hash,
                salt,
                conn=conn,
            )
    return account
