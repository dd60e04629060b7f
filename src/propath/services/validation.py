# src/propath/services/validation.py

from typing import Any

from pydantic import ValidationError

from propath.adapters.config import AppConfig, config
from propath.domain.errors import InvalidArgumentError
from propath.domain.money import to_decimal
from propath.domain.property import PropertyRecord
from propath.domain.simulation import FinancingAssumptions

# Core fields that are truly required to value a property
REQUIRED_CORE_FIELDS = [
    "current_value",
]

# Wire names used by the web client -> internal names
_PROPERTY_ALIASES = {
    "zipCode": "zipcode",
    "zip_code": "zipcode",
    "purchasePrice": "purchase_price",
    "currentValue": "current_value",
    "mortgageAmount": "mortgage_amount",
    "monthlyRent": "monthly_rent",
    "monthlyExpenses": "monthly_expenses",
    "monthlyDebtService": "monthly_debt_service",
    "monthlyCashFlow": "monthly_cash_flow",
    "annualReturn": "annual_return",
    "yearBuilt": "year_built",
    "squareFootage": "square_footage",
}

_FINANCING_ALIASES = {
    "downPayment": "down_payment",
    "interestRate": "interest_rate",
    "loanTermMonths": "loan_term_months",
    "propertyTaxRate": "property_tax_rate",
    "insuranceRate": "insurance_rate",
    "maintenanceRate": "maintenance_rate",
    "vacancyRate": "vacancy_rate",
    "managementRate": "management_rate",
}

# Terms up to this many are read as years ("loanTerm": 30)
MAX_TERM_YEARS = 50


def _rename(raw: dict[str, Any], aliases: dict[str, str]) -> dict[str, Any]:
    """
    Map camelCase keys onto internal names and drop blanks, so an omitted
    field and an explicit null/"" behave the same.
    """
    out: dict[str, Any] = {}
    for key, val in raw.items():
        if val is None or (isinstance(val, str) and not val.strip()):
            continue
        out[aliases.get(key, key)] = val
    return out


def _to_int_optional(val: Any, field_name: str) -> int | None:
    if val is None:
        return None
    d = to_decimal(val, field_name)
    if d is None:
        return None
    if d != d.to_integral_value():
        raise InvalidArgumentError(f"Invalid integer for {field_name}: {val!r}")
    return int(d)


def _first_error(err: ValidationError) -> str:
    first = err.errors()[0]
    loc = ".".join(str(p) for p in first.get("loc", ()))
    msg = str(first.get("msg", "invalid value"))
    return f"{loc}: {msg}" if loc else msg


def parse_property(raw: dict[str, Any]) -> PropertyRecord:
    """
    Normalize an incoming property payload into a PropertyRecord.

    Accepts both snake_case and the camelCase keys sent by the web client,
    plus numeric strings like "$250,000".
    """
    if not isinstance(raw, dict):
        raise InvalidArgumentError("property payload must be an object")

    cleaned = _rename(raw, _PROPERTY_ALIASES)

    for field in REQUIRED_CORE_FIELDS:
        if field not in cleaned:
            raise InvalidArgumentError(f"Missing required field: {field}")

    try:
        return PropertyRecord.model_validate(cleaned)
    except ValidationError as err:
        raise InvalidArgumentError(f"Invalid property: {_first_error(err)}") from err


def parse_financing(raw: dict[str, Any], settings: AppConfig | None = None) -> FinancingAssumptions:
    """
    Normalize financing assumptions.

    Responsibilities:
      - Map camelCase keys and strip "%" from rates.
      - Read `loanTerm` / `loan_term_years` as years, `loan_term_months` as months.
        A bare `loanTerm` above MAX_TERM_YEARS is taken as months.
      - Fill configured default rates where omitted, when APPLY_DEFAULT_RATES is on.
    """
    settings = settings or config
    cleaned = _rename(raw or {}, _FINANCING_ALIASES)

    term_months = _to_int_optional(cleaned.pop("loan_term_months", None), "loan_term_months")
    term_years = _to_int_optional(cleaned.pop("loan_term_years", None), "loan_term_years")
    loan_term = _to_int_optional(cleaned.pop("loanTerm", None), "loanTerm")

    if term_months is None and term_years is not None:
        term_months = term_years * 12
    if term_months is None and loan_term is not None:
        term_months = loan_term * 12 if loan_term <= MAX_TERM_YEARS else loan_term
    if term_months is not None:
        cleaned["loan_term_months"] = term_months

    if settings.APPLY_DEFAULT_RATES:
        defaults = {
            "interest_rate": settings.DEFAULT_INTEREST_RATE,
            "loan_term_months": settings.DEFAULT_LOAN_TERM_MONTHS,
            "property_tax_rate": settings.DEFAULT_PROPERTY_TAX_RATE,
            "insurance_rate": settings.DEFAULT_INSURANCE_RATE,
            "maintenance_rate": settings.DEFAULT_MAINTENANCE_RATE,
            "vacancy_rate": settings.DEFAULT_VACANCY_RATE,
            "management_rate": settings.DEFAULT_MANAGEMENT_RATE,
        }
        for key, val in defaults.items():
            cleaned.setdefault(key, val)

    try:
        return FinancingAssumptions.model_validate(cleaned)
    except ValidationError as err:
        raise InvalidArgumentError(f"Invalid financing assumptions: {_first_error(err)}") from err
