from .classifier import (
    PhoneNumberInfo,
    classify_phone_number,
    format_phone_number,
    get_operator_prefixes,
    get_operators_by_country,
    normalize_phone_number,
    validate_phone_number_for_country,
)
from .prefixes import PHONE_PREFIX_TABLE, CountryPrefixes, OperatorPrefixes

__all__ = [
    "PHONE_PREFIX_TABLE",
    "CountryPrefixes",
    "OperatorPrefixes",
    "PhoneNumberInfo",
    "classify_phone_number",
    "format_phone_number",
    "get_operator_prefixes",
    "get_operators_by_country",
    "normalize_phone_number",
    "validate_phone_number_for_country",
]
