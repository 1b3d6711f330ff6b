"""
Auth security helpers.

Password hashing:
- every credential row stores its own bcrypt salt next to the salted hash
- `generate_hash(password, salt)` is deterministic for a given salt, so login
  re-derives the hash from the stored salt and compares

Access tokens are HS256 JWTs carrying `name`, `role`, `account_id`,
`iat` and `exp`.
"""

from __future__ import annotations

import hmac
import time
from dataclasses import dataclass
from typing import Any

import bcrypt
import jwt


class AuthSecurityError(RuntimeError):
    pass


@dataclass(frozen=True)
class IssuedToken:
    token: str
    issued_at: int
    expires_at: int


def now_epoch_s() -> int:
    return int(time.time())


def generate_salt() -> str:
    return bcrypt.gensalt().decode("utf-8")


def generate_hash(plain_password: str, salt: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    try:
        return bcrypt.hashpw(password, (salt or "").encode("utf-8")).decode("utf-8")
    except ValueError as exc:
        raise AuthSecurityError("Stored salt is malformed.") from exc


def verify_password(plain_password: str, salt: str, salted_hash: str) -> bool:
    if not plain_password or not salted_hash:
        return False
    try:
        provided = generate_hash(plain_password, salt)
    except AuthSecurityError:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), salted_hash.encode("utf-8"))


def build_access_token(
    *,
    account_id: int,
    name: str,
    role: str,
    secret: str,
    algorithm: str,
    lifetime_s: int,
    issued_at: int | None = None,
) -> IssuedToken:
    issued_at = now_epoch_s() if issued_at is None else issued_at
    expires_at = issued_at + lifetime_s

    payload = {
        "name": name,
        "role": role,
        "account_id": account_id,
        "iat": issued_at,
        "exp": expires_at,
    }
    token = jwt.encode(payload, secret, algorithm=algorithm)
    return IssuedToken(token=token, issued_at=issued_at, expires_at=expires_at)


def decode_access_token(token: str, *, secret: str, algorithm: str) -> dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Access token is empty.")

    try:
        payload = jwt.decode(raw, secret, algorithms=[algorithm])
    except jwt.ExpiredSignatureError as exc:
        raise AuthSecurityError("Access token has expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid access token.") from exc

    if "account_id" not in payload:
        raise AuthSecurityError("Access token has no account id.")

    return payload
