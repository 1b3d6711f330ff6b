"""Unit tests for auth.security: salted hashing and access token issuance."""

import unittest

import jwt

from auth import security
from fakes import make_salt

SECRET = "unit-test-secret"
FOURTEEN_DAYS = 14 * 24 * 60 * 60


class TestGenerateHash(unittest.TestCase):
    """generate_hash is a pure function of (password, salt)."""

    def test_same_inputs_same_hash(self) -> None:
        salt = make_salt()
        self.assertEqual(security.generate_hash("hunter2", salt), security.generate_hash("hunter2", salt))

    def test_different_salt_different_hash(self) -> None:
        self.assertNotEqual(
            security.generate_hash("hunter2", make_salt()),
            security.generate_hash("hunter2", make_salt()),
        )

    def test_hash_does_not_contain_password(self) -> None:
        self.assertNotIn("hunter2", security.generate_hash("hunter2", make_salt()))

    def test_empty_password_rejected(self) -> None:
        with self.assertRaises(security.AuthSecurityError):
            security.generate_hash("", make_salt())

    def test_malformed_salt_rejected(self) -> None:
        with self.assertRaises(security.AuthSecurityError):
            security.generate_hash("hunter2", "not-a-salt")


class TestVerifyPassword(unittest.TestCase):
    def setUp(self) -> None:
        self.salt = make_salt()
        self.stored = security.generate_hash("correct horse", self.salt)

    def test_match(self) -> None:
        self.assertTrue(security.verify_password("correct horse", self.salt, self.stored))

    def test_mismatch(self) -> None:
        self.assertFalse(security.verify_password("wrong horse", self.salt, self.stored))

    def test_empty_inputs(self) -> None:
        self.assertFalse(security.verify_password("", self.salt, self.stored))
        self.assertFalse(security.verify_password("correct horse", self.salt, ""))

    def test_bad_salt_is_mismatch(self) -> None:
        self.assertFalse(security.verify_password("correct horse", "garbage", self.stored))


class TestAccessToken(unittest.TestCase):
    def _issue(self, **kwargs: object) -> security.IssuedToken:
        params = {
            "account_id": 42,
            "name": "Ada",
            "role": "Admin",
            "secret": SECRET,
            "algorithm": "HS256",
            "lifetime_s": FOURTEEN_DAYS,
        }
        params.update(kwargs)
        return security.build_access_token(**params)

    def test_claims_and_expiry(self) -> None:
        issued = self._issue(issued_at=1_700_000_000)
        payload = jwt.decode(
            issued.token,
            SECRET,
            algorithms=["HS256"],
            options={"verify_exp": False},
        )
        self.assertEqual(payload["account_id"], 42)
        self.assertEqual(payload["name"], "Ada")
        self.assertEqual(payload["role"], "Admin")
        self.assertEqual(payload["iat"], 1_700_000_000)
        self.assertEqual(payload["exp"] - payload["iat"], FOURTEEN_DAYS)
        self.assertEqual(issued.expires_at, 1_700_000_000 + FOURTEEN_DAYS)

    def test_decode_round_trip(self) -> None:
        issued = self._issue()
        claims = security.decode_access_token(issued.token, secret=SECRET, algorithm="HS256")
        self.assertEqual(claims["account_id"], 42)

    def test_expired_token_rejected(self) -> None:
        issued = self._issue(issued_at=security.now_epoch_s() - FOURTEEN_DAYS - 60)
        with self.assertRaises(security.AuthSecurityError):
            security.decode_access_token(issued.token, secret=SECRET, algorithm="HS256")

    def test_wrong_secret_rejected(self) -> None:
        issued = self._issue()
        with self.assertRaises(security.AuthSecurityError):
            security.decode_access_token(issued.token, secret="other", algorithm="HS256")

    def test_empty_token_rejected(self) -> None:
        with self.assertRaises(security.AuthSecurityError):
            security.decode_access_token("  ", secret=SECRET, algorithm="HS256")
