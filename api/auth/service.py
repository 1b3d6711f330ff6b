"""
Auth business logic.

`AuthService.login` turns an email/password pair into a signed access token:
credential lookup -> salted-hash comparison -> token issuance. Unknown emails
and wrong passwords raise the same `InvalidCredentials` error.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from core import db
from core.config import Settings
from core.errors import IntegrityFault, InvalidCredentials, MissingParameters, StoreFault
from core.validation import Rule, enforce, is_string_provided

from . import repository, schemas, security

SECONDS_PER_DAY = 24 * 60 * 60

LOGIN_RULES = (
    Rule(
        lambda body: is_string_provided(body.get("email")) and is_string_provided(body.get("password")),
        MissingParameters,
    ),
)

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, *, secret: str, algorithm: str = "HS256", token_lifetime_days: int = 14, accounts=repository):
        if not secret:
            raise ValueError("Token signing secret is empty.")
        self._secret = secret
        self._algorithm = algorithm
        self._token_lifetime_s = token_lifetime_days * SECONDS_PER_DAY
        self._accounts = accounts

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthService":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            token_lifetime_days=settings.access_token_expire_days,
        )

    async def login(self, email: Any, password: Any) -> schemas.LoginResponse:
        enforce({"email": email, "password": password}, LOGIN_RULES)

        try:
            rows = await self._accounts.get_credentials_by_email(email)
        except db.StoreError as exc:
            logger.exception("login_lookup_failed")
            raise StoreFault() from exc

        if not rows:
            logger.info("login_rejected reason=unknown_email")
            raise InvalidCredentials()
        if len(rows) > 1:
            logger.error("login_integrity_fault rows=%s", len(rows))
            raise IntegrityFault()

        row = rows[0]
        if not security.verify_password(password, str(row.get("salt") or ""), str(row.get("salted_hash") or "")):
            logger.info("login_rejected reason=password_mismatch account_id=%s", row["account_id"])
            raise InvalidCredentials()

        issued = self.issue_token(row)
        logger.info("login_succeeded account_id=%s", row["account_id"])
        return schemas.LoginResponse(
            access_token=issued.token,
            user=schemas.UserResponse(
                id=int(row["account_id"]),
                email=str(row["email"]),
                name=str(row["firstname"]),
                role=str(row["account_role"]),
            ),
        )

    def issue_token(self, row: Mapping[str, Any]) -> security.IssuedToken:
        return security.build_access_token(
            account_id=int(row["account_id"]),
            name=str(row["firstname"]),
            role=str(row["account_role"]),
            secret=self._secret,
            algorithm=self._algorithm,
            lifetime_s=self._token_lifetime_s,
        )

    def verify_token(self, token: str) -> dict[str, Any]:
        return security.decode_access_token(token, secret=self._secret, algorithm=self._algorithm)
