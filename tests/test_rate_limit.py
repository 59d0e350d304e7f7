import dataclasses
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("DATABASE_PATH", os.path.join(tempfile.gettempdir(), "cvbuilder-tests.db"))
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.setdefault("ADMIN_EMAILS", "admin@example.com")
os.environ.setdefault("PASSWORD_HASH_ITERATIONS", "1000")

from starlette.requests import Request

from cvbuilder.core import rate_limit
from cvbuilder.core.config import settings


def _request(forwarded_for=None, client=("5.6.7.8", 1234)):
    headers = []
    if forwarded_for is not None:
        headers.append((b"x-forwarded-for", forwarded_for.encode()))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers, "client": client})


class ClientKeyTests(unittest.TestCase):
    def test_forwarded_header_ignored_by_default(self):
        with patch.object(rate_limit, "settings", dataclasses.replace(settings, trust_x_forwarded_for=False)):
            self.assertEqual(rate_limit.client_key(_request("1.2.3.4")), "5.6.7.8")

    def test_forwarded_header_used_when_trusted(self):
        with patch.object(rate_limit, "settings", dataclasses.replace(settings, trust_x_forwarded_for=True)):
            self.assertEqual(rate_limit.client_key(_request("1.2.3.4, 10.0.0.1")), "1.2.3.4")
            self.assertEqual(rate_limit.client_key(_request("  ")), "5.6.7.8")

    def test_unknown_without_client(self):
        with patch.object(rate_limit, "settings", dataclasses.replace(settings, trust_x_forwarded_for=False)):
            self.assertEqual(rate_limit.client_key(_request(client=None)), "unknown")


if __name__ == "__main__":
    unittest.main()
