from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

PrefixType = Literal["old", "new", "mobile", "landline"]

PREFIX_TYPE_ORDER: tuple[PrefixType, ...] = ("old", "new", "mobile", "landline")


@dataclass(frozen=True)
class OperatorPrefixes:
    name: str
    old: tuple[str, ...] = ()
    new: tuple[str, ...] = ()
    mobile: tuple[str, ...] = ()
    landline: tuple[str, ...] = ()

    def prefixes_for(self, prefix_type: PrefixType) -> tuple[str, ...]:
        return getattr(self, prefix_type)

    def to_dict(self) -> dict[str, list[str]]:
        return {prefix_type: list(self.prefixes_for(prefix_type)) for prefix_type in PREFIX_TYPE_ORDER}


@dataclass(frozen=True)
class CountryPrefixes:
    iso_code: str
    country: str
    country_code: str
    operators: tuple[OperatorPrefixes, ...]

    @property
    def dialing_digits(self) -> str:
        return self.country_code.lstrip("+")

    def operator(self, name: str) -> OperatorPrefixes | None:
        for operator in self.operators:
            if operator.name == name:
                return operator
        return None


# Traversal order matters: the first country/operator/category/prefix hit wins.
PHONE_PREFIX_TABLE: tuple[CountryPrefixes, ...] = (
    CountryPrefixes(
        iso_code="ZM",
        country="Zambia",
        country_code="+260",
        operators=(
            OperatorPrefixes(name="airtel", old=("097", "077"), new=("057",)),
            OperatorPrefixes(name="mtn", old=("095", "096", "078", "079"), new=("076",)),
            OperatorPrefixes(
                name="zamtel",
                mobile=("095",),
                landline=("0211", "0212", "0213", "0214", "0215", "0216", "0217", "0218"),
            ),
        ),
    ),
    CountryPrefixes(
        iso_code="KE",
        country="Kenya",
        country_code="+254",
        operators=(
            OperatorPrefixes(
                name="airtel",
                old=(
                    "0730", "0731", "0732", "0733", "0734", "0735", "0736", "0737", "0738", "0739",
                    "0750", "0751", "0752", "0753", "0754", "0755", "0756",
                ),
                new=("0100", "0101", "0102"),
            ),
        ),
    ),
    CountryPrefixes(
        iso_code="UG",
        country="Uganda",
        country_code="+256",
        operators=(
            OperatorPrefixes(name="airtel", old=(), new=("074",)),
            OperatorPrefixes(name="mtn", old=("077", "078"), new=("076",)),
        ),
    ),
    CountryPrefixes(
        iso_code="GH",
        country="Ghana",
        country_code="+233",
        operators=(
            OperatorPrefixes(name="mtn", old=("024", "025", "053", "054", "055", "059"), new=()),
        ),
    ),
)


def find_country(iso_code: str, table: tuple[CountryPrefixes, ...] = PHONE_PREFIX_TABLE) -> CountryPrefixes | None:
    wanted = (iso_code or "").strip().upper()
    for country in table:
        if country.iso_code == wanted:
            return country
    return None
