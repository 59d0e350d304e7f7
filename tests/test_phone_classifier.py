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

from cvbuilder.phone import (
    PHONE_PREFIX_TABLE,
    CountryPrefixes,
    OperatorPrefixes,
    classify_phone_number,
    format_phone_number,
    get_operator_prefixes,
    get_operators_by_country,
    normalize_phone_number,
    validate_phone_number_for_country,
)


class NormalizeTests(unittest.TestCase):
    def test_strips_formatting_characters(self):
        self.assertEqual(normalize_phone_number("+260 (97) 123-4567"), "260971234567")
        self.assertEqual(normalize_phone_number("097 123 4567"), "0971234567")

    def test_keeps_other_characters(self):
        self.assertEqual(normalize_phone_number("097.123"), "097.123")


class ClassifyTests(unittest.TestCase):
    def test_zambia_airtel_old_prefix(self):
        result = classify_phone_number("0971234567")
        self.assertTrue(result.is_valid)
        self.assertEqual(result.iso_code, "ZM")
        self.assertEqual(result.country, "Zambia")
        self.assertEqual(result.country_code, "+260")
        self.assertEqual(result.operator, "airtel")
        self.assertEqual(result.prefix_type, "old")
        self.assertEqual(result.prefix, "097")
        self.assertEqual(result.normalized_number, "0971234567")

    def test_first_operator_wins_for_shared_prefix(self):
        # 095 is listed for both mtn (old) and zamtel (mobile); mtn comes first.
        result = classify_phone_number("0951234567")
        self.assertEqual(result.operator, "mtn")
        self.assertEqual(result.prefix_type, "old")

    def test_first_country_wins_for_shared_prefix(self):
        result = classify_phone_number("0771234567")
        self.assertEqual(result.iso_code, "ZM")
        self.assertEqual(result.operator, "airtel")

    def test_landline_prefix(self):
        result = classify_phone_number("0211 123456")
        self.assertEqual(result.operator, "zamtel")
        self.assertEqual(result.prefix_type, "landline")
        self.assertEqual(result.prefix, "0211")

    def test_other_countries(self):
        cases = {
            "0733123456": ("KE", "airtel", "old"),
            "0101234567": ("KE", "airtel", "new"),
            "0741234567": ("UG", "airtel", "new"),
            "0241234567": ("GH", "mtn", "old"),
        }
        for number, (iso_code, operator, prefix_type) in cases.items():
            with self.subTest(number=number):
                result = classify_phone_number(number)
                self.assertTrue(result.is_valid)
                self.assertEqual(result.iso_code, iso_code)
                self.assertEqual(result.operator, operator)
                self.assertEqual(result.prefix_type, prefix_type)

    def test_dialing_code_is_stripped_before_matching(self):
        result = classify_phone_number("260 0971234567")
        self.assertTrue(result.is_valid)
        self.assertEqual(result.operator, "airtel")
        self.assertEqual(result.normalized_number, "2600971234567")

    def test_international_form_without_trunk_zero_does_not_match(self):
        result = classify_phone_number("+260 97 123 4567")
        self.assertFalse(result.is_valid)
        self.assertEqual(result.normalized_number, "260971234567")

    def test_too_short_input(self):
        for raw in ("", "12", " (9) "):
            with self.subTest(raw=raw):
                result = classify_phone_number(raw)
                self.assertFalse(result.is_valid)
                self.assertEqual(result.to_wire(), {"isValid": False})

    def test_unknown_prefix_keeps_normalized_number(self):
        result = classify_phone_number("099-123-4567")
        self.assertEqual(result.to_wire(), {"isValid": False, "normalizedNumber": "0991234567"})

    def test_classification_ignores_formatting(self):
        for raw in ("097-123-4567", "+260 0971234567", "(0211) 123 456", "0991234567", "12"):
            with self.subTest(raw=raw):
                self.assertEqual(classify_phone_number(normalize_phone_number(raw)), classify_phone_number(raw))

    def test_wire_shape(self):
        body = classify_phone_number("0971234567").to_wire()
        self.assertEqual(
            body,
            {
                "isValid": True,
                "country": "Zambia",
                "countryCode": "+260",
                "isoCode": "ZM",
                "operator": "airtel",
                "prefixType": "old",
                "prefix": "097",
                "normalizedNumber": "0971234567",
            },
        )

    def test_custom_table(self):
        table = (
            CountryPrefixes(
                iso_code="XX",
                country="Testland",
                country_code="+999",
                operators=(OperatorPrefixes(name="acme", mobile=("055",)),),
            ),
        )
        result = classify_phone_number("+999 055 1234", table=table)
        self.assertTrue(result.is_valid)
        self.assertEqual(result.operator, "acme")
        self.assertEqual(result.prefix_type, "mobile")
        self.assertFalse(classify_phone_number("0971234567", table=table).is_valid)

    def test_every_prefix_in_table_classifies(self):
        for country in PHONE_PREFIX_TABLE:
            for operator in country.operators:
                for prefix_type, prefixes in operator.to_dict().items():
                    for prefix in prefixes:
                        with self.subTest(country=country.iso_code, prefix=prefix):
                            result = classify_phone_number(prefix + "123456")
                            self.assertTrue(result.is_valid)
                            self.assertTrue(result.normalized_number.startswith(result.prefix))


class AuxiliaryTests(unittest.TestCase):
    def test_format_with_and_without_country_code(self):
        self.assertEqual(format_phone_number("0971234567"), "+260 0971234567")
        self.assertEqual(format_phone_number("260 0971234567"), "+260 0971234567")
        self.assertEqual(format_phone_number("260 0971234567", include_country_code=False), "0971234567")

    def test_formatted_number_keeps_normalized_digits(self):
        normalized = normalize_phone_number("097-123-4567")
        formatted = format_phone_number(normalized)
        self.assertEqual(formatted, "+260 0971234567")
        self.assertIn(normalized, formatted)

    def test_format_returns_input_when_invalid(self):
        self.assertEqual(format_phone_number("not a number"), "not a number")

    def test_validate_for_country(self):
        self.assertTrue(validate_phone_number_for_country("0971234567", "ZM"))
        self.assertFalse(validate_phone_number_for_country("0971234567", "KE"))
        self.assertFalse(validate_phone_number_for_country("12", "ZM"))

    def test_operator_listing(self):
        self.assertEqual(get_operators_by_country("ZM"), ["airtel", "mtn", "zamtel"])
        self.assertEqual(get_operators_by_country("ug"), ["airtel", "mtn"])
        self.assertEqual(get_operators_by_country("FR"), [])

    def test_operator_prefixes(self):
        prefixes = get_operator_prefixes("UG", "airtel")
        self.assertIsNotNone(prefixes)
        self.assertEqual(prefixes.to_dict(), {"old": [], "new": ["074"], "mobile": [], "landline": []})
        self.assertIsNone(get_operator_prefixes("UG", "zamtel"))
        self.assertIsNone(get_operator_prefixes("FR", "mtn"))


if __name__ == "__main__":
    unittest.main()
