import json
import os
import sys
import tempfile
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("DATABASE_PATH", os.path.join(tempfile.gettempdir(), "cvbuilder-tests.db"))
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.setdefault("ADMIN_EMAILS", "admin@example.com")
os.environ.setdefault("PASSWORD_HASH_ITERATIONS", "1000")

import httpx

from cvbuilder.integrations.lenco import InitiatePaymentParams, LencoClient, LencoError


def _params(**overrides):
    values = {
        "amount": 1.0,
        "currency": "USD",
        "payment_method": "mobile_money",
        "customer_email": "payer@example.com",
        "customer_name": "Payer",
        "phone_number": "0971234567",
        "reference": "CV_1_abcdefgh",
        "callback_url": "http://localhost:3000/payment-callback",
    }
    values.update(overrides)
    return InitiatePaymentParams(**values)


class LencoClientTests(unittest.TestCase):
    def setUp(self):
        self.requests = []

    def _client(self, status_code=200, body=None, raise_error=None):
        def handler(request):
            self.requests.append(request)
            if raise_error is not None:
                raise raise_error
            return httpx.Response(status_code, json=body if body is not None else {"status": "success", "data": {}})

        return LencoClient(api_key="sk_test", base_url="https://lenco.test/v2/", transport=httpx.MockTransport(handler))

    def test_mobile_money_request(self):
        body = {"status": "success", "data": {"authorization_url": "https://pay", "access_code": "x"}}
        result = self._client(body=body).initiate_mobile_money_payment(_params())
        self.assertEqual(result, body)

        request = self.requests[0]
        self.assertEqual(request.method, "POST")
        self.assertEqual(str(request.url), "https://lenco.test/v2/payments/mobile-money/initialize")
        self.assertEqual(request.headers["authorization"], "Bearer sk_test")
        sent = json.loads(request.content)
        self.assertEqual(sent["phone_number"], "0971234567")
        self.assertEqual(sent["email"], "payer@example.com")
        self.assertEqual(sent["reference"], "CV_1_abcdefgh")
        self.assertEqual(sent["amount"], 1.0)

    def test_card_request_has_no_phone(self):
        self._client().initiate_card_payment(_params(payment_method="card"))
        request = self.requests[0]
        self.assertEqual(request.url.path, "/v2/payments/card/initialize")
        self.assertNotIn("phone_number", json.loads(request.content))

    def test_verify_request(self):
        self._client().verify_payment("CV_1_abcdefgh")
        request = self.requests[0]
        self.assertEqual(request.method, "GET")
        self.assertEqual(request.url.path, "/v2/payments/verify/CV_1_abcdefgh")

    def test_provider_error_message_is_surfaced(self):
        client = self._client(status_code=400, body={"status": False, "message": "Insufficient funds"})
        with self.assertRaises(LencoError) as ctx:
            client.initiate_mobile_money_payment(_params())
        self.assertEqual(str(ctx.exception), "Insufficient funds")

    def test_provider_error_without_message_uses_fallback(self):
        client = self._client(status_code=500, body={})
        with self.assertRaises(LencoError) as ctx:
            client.verify_payment("CV_1")
        self.assertEqual(str(ctx.exception), "Failed to verify payment")

    def test_transport_error(self):
        client = self._client(raise_error=httpx.ConnectError("boom"))
        with self.assertRaises(LencoError) as ctx:
            client.initiate_card_payment(_params(payment_method="card"))
        self.assertEqual(str(ctx.exception), "Failed to initiate card payment")

    def test_phone_validation_for_payment(self):
        missing = LencoClient.validate_phone_number_for_payment("  ")
        self.assertFalse(missing.is_valid)
        self.assertEqual(missing.error, "Phone number is required")

        unknown = LencoClient.validate_phone_number_for_payment("0991234567")
        self.assertFalse(unknown.is_valid)
        self.assertEqual(unknown.error, "Unsupported or invalid mobile money number")

        valid = LencoClient.validate_phone_number_for_payment("0961234567")
        self.assertTrue(valid.is_valid)
        self.assertEqual(valid.phone_info.operator, "mtn")
        self.assertIsNone(valid.error)

    def test_display_formatting(self):
        self.assertEqual(LencoClient.format_phone_number_for_display("0971234567"), "+260 0971234567")


if __name__ == "__main__":
    unittest.main()
