from __future__ import annotations

import re
from typing import Any

from cvbuilder.phone.prefixes import (
    PHONE_PREFIX_TABLE,
    PREFIX_TYPE_ORDER,
    CountryPrefixes,
    OperatorPrefixes,
    PrefixType,
    find_country,
)
from cvbuilder.schemas.cv import CamelModel

MIN_NORMALIZED_LENGTH = 3

_FORMATTING_CHARS_RE = re.compile(r"[\s\-()+]")


class PhoneNumberInfo(CamelModel):
    is_valid: bool
    country: str | None = None
    country_code: str | None = None
    iso_code: str | None = None
    operator: str | None = None
    prefix_type: PrefixType | None = None
    prefix: str | None = None
    normalized_number: str | None = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


def normalize_phone_number(phone_number: str) -> str:
    return _FORMATTING_CHARS_RE.sub("", phone_number or "")


def _local_part(normalized: str, country: CountryPrefixes) -> str:
    digits = country.dialing_digits
    if digits and normalized.startswith(digits):
        return normalized[len(digits):]
    return normalized


def _match_operator(number: str, operator: OperatorPrefixes) -> tuple[PrefixType, str] | None:
    for prefix_type in PREFIX_TYPE_ORDER:
        for prefix in operator.prefixes_for(prefix_type):
            if number.startswith(prefix):
                return prefix_type, prefix
    return None


def classify_phone_number(
    phone_number: str,
    table: tuple[CountryPrefixes, ...] = PHONE_PREFIX_TABLE,
) -> PhoneNumberInfo:
    """Classify a raw phone number by country and operator.

    The table is walked in order and the first prefix the number starts with
    wins. When the number begins with a country's dialing code, that code is
    removed before the prefixes of that country are compared.
    """
    normalized = normalize_phone_number(phone_number)
    if len(normalized) < MIN_NORMALIZED_LENGTH:
        return PhoneNumberInfo(is_valid=False)

    for country in table:
        number_to_check = _local_part(normalized, country)
        for operator in country.operators:
            match = _match_operator(number_to_check, operator)
            if match is None:
                continue
            prefix_type, prefix = match
            return PhoneNumberInfo(
                is_valid=True,
                country=country.country,
                country_code=country.country_code,
                iso_code=country.iso_code,
                operator=operator.name,
                prefix_type=prefix_type,
                prefix=prefix,
                normalized_number=normalized,
            )

    return PhoneNumberInfo(is_valid=False, normalized_number=normalized)


def get_operators_by_country(iso_code: str, table: tuple[CountryPrefixes, ...] = PHONE_PREFIX_TABLE) -> list[str]:
    country = find_country(iso_code, table)
    if country is None:
        return []
    return [operator.name for operator in country.operators]


def get_operator_prefixes(
    iso_code: str,
    operator: str,
    table: tuple[CountryPrefixes, ...] = PHONE_PREFIX_TABLE,
) -> OperatorPrefixes | None:
    country = find_country(iso_code, table)
    if country is None:
        return None
    return country.operator(operator)


def validate_phone_number_for_country(phone_number: str, iso_code: str) -> bool:
    result = classify_phone_number(phone_number)
    return result.is_valid and result.iso_code == iso_code


def format_phone_number(phone_number: str, include_country_code: bool = True) -> str:
    result = classify_phone_number(phone_number)
    if not result.is_valid or not result.country_code or result.normalized_number is None:
        return phone_number

    digits = result.country_code.lstrip("+")
    local_number = result.normalized_number
    if local_number.startswith(digits):
        local_number = local_number[len(digits):]

    if include_country_code:
        return f"{result.country_code} {local_number}"
    return local_number
