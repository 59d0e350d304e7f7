from fastapi import APIRouter, HTTPException, Query, status

from cvbuilder.phone import (
    PHONE_PREFIX_TABLE,
    classify_phone_number,
    format_phone_number,
    get_operator_prefixes,
    get_operators_by_country,
    validate_phone_number_for_country,
)

router = APIRouter()


@router.get("/phone/lookup")
async def phone_lookup(number: str = Query(max_length=64)):
    return classify_phone_number(number).to_wire()


@router.get("/phone/format")
async def phone_format(
    number: str = Query(max_length=64),
    include_country_code: bool = Query(default=True, alias="includeCountryCode"),
):
    return {"formatted": format_phone_number(number, include_country_code=include_country_code)}


@router.get("/phone/validate")
async def phone_validate(
    number: str = Query(max_length=64),
    iso_code: str = Query(alias="isoCode", min_length=2, max_length=2),
):
    return {"valid": validate_phone_number_for_country(number, iso_code)}


@router.get("/phone/countries")
async def phone_countries():
    return [
        {
            "isoCode": country.iso_code,
            "country": country.country,
            "countryCode": country.country_code,
            "operators": [operator.name for operator in country.operators],
        }
        for country in PHONE_PREFIX_TABLE
    ]


@router.get("/phone/countries/{iso_code}/operators")
async def phone_country_operators(iso_code: str):
    return {"operators": get_operators_by_country(iso_code)}


@router.get("/phone/countries/{iso_code}/operators/{operator}")
async def phone_operator_prefixes(iso_code: str, operator: str):
    prefixes = get_operator_prefixes(iso_code, operator)
    if prefixes is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Operator not found")
    return {"isoCode": iso_code.upper(), "operator": prefixes.name, "prefixes": prefixes.to_dict()}
