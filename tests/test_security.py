import os
import sys
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("DATABASE_PATH", os.path.join(tempfile.gettempdir(), "cvbuilder-tests.db"))
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.setdefault("ADMIN_EMAILS", "admin@example.com")
os.environ.setdefault("PASSWORD_HASH_ITERATIONS", "1000")

from cvbuilder.core.security import (
    InvalidTokenError,
    create_auth_token,
    decode_auth_token,
    extract_bearer_token,
    hash_password,
    new_password_salt,
    verify_password,
)


class PasswordTests(unittest.TestCase):
    def test_hash_and_verify(self):
        salt = new_password_salt()
        digest = hash_password("secret123", salt)
        self.assertTrue(verify_password("secret123", salt, digest))
        self.assertFalse(verify_password("secret124", salt, digest))

    def test_salts_differ(self):
        self.assertNotEqual(new_password_salt(), new_password_salt())
        self.assertNotEqual(hash_password("pw", "a" * 32), hash_password("pw", "b" * 32))


class TokenTests(unittest.TestCase):
    def test_round_trip(self):
        token, expires_at = create_auth_token("user-1")
        claims = decode_auth_token(token)
        self.assertEqual(claims["uid"], "user-1")
        self.assertEqual(claims["exp"], int(expires_at.timestamp()))

    def test_tokens_are_unique(self):
        now = datetime.now(timezone.utc)
        first, _ = create_auth_token("user-1", now=now)
        second, _ = create_auth_token("user-1", now=now)
        self.assertNotEqual(first, second)

    def test_tampered_token_is_rejected(self):
        token, _ = create_auth_token("user-1")
        payload, signature = token.split(".")
        forged, _ = create_auth_token("user-2")
        with self.assertRaises(InvalidTokenError):
            decode_auth_token(f"{forged.split('.')[0]}.{signature}")
        with self.assertRaises(InvalidTokenError):
            decode_auth_token(payload)
        with self.assertRaises(InvalidTokenError):
            decode_auth_token("")

    def test_expired_token_is_rejected(self):
        token, _ = create_auth_token("user-1", now=datetime.now(timezone.utc) - timedelta(days=30))
        with self.assertRaises(InvalidTokenError):
            decode_auth_token(token)

    def test_bearer_extraction(self):
        self.assertEqual(extract_bearer_token("Bearer abc.def"), "abc.def")
        self.assertEqual(extract_bearer_token("bearer   abc"), "abc")
        self.assertIsNone(extract_bearer_token("Basic abc"))
        self.assertIsNone(extract_bearer_token("Bearer "))
        self.assertIsNone(extract_bearer_token(None))


if __name__ == "__main__":
    unittest.main()
