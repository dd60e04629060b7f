from decimal import Decimal

import pytest

from propath.adapters.config import AppConfig
from propath.domain.errors import InvalidArgumentError
from propath.services.validation import parse_financing, parse_property


def test_camel_case_property_payload():
    rec = parse_property(
        {
            "address": "1 Test St",
            "zipCode": "3000",
            "currentValue": "450000",
            "mortgageAmount": 300000,
            "monthlyRent": "2,100",
            "monthlyExpenses": 350,
            "yearBuilt": 1998,
            "bedrooms": "3",
            "monthlyCashFlow": None,
        }
    )
    assert rec.zipcode == "3000"
    assert rec.current_value == Decimal("450000.00")
    assert rec.monthly_rent == Decimal("2100.00")
    assert rec.monthly_cash_flow == Decimal("1750.00")
    assert rec.year_built == 1998
    assert rec.bedrooms == 3


def test_missing_current_value_is_reported():
    with pytest.raises(InvalidArgumentError) as exc:
        parse_property({"address": "1 Test St", "currentValue": ""})
    assert "Missing required field: current_value" in str(exc.value)


def test_bad_number_is_invalid_argument():
    with pytest.raises(InvalidArgumentError) as exc:
        parse_property({"current_value": "lots"})
    assert "Invalid property" in str(exc.value)


def test_financing_percent_strings_and_loan_term_years():
    fin = parse_financing(
        {
            "downPayment": "50000",
            "interestRate": "6.5%",
            "loanTerm": 30,
            "vacancyRate": "5",
        }
    )
    assert fin.down_payment == Decimal("50000.00")
    assert fin.interest_rate == Decimal("6.5")
    assert fin.loan_term_months == 360
    assert fin.vacancy_rate == Decimal("5")
    assert fin.management_rate is None


@pytest.mark.parametrize(
    "raw, months",
    [
        ({"loan_term_months": 240}, 240),
        ({"loan_term_years": 25}, 300),
        ({"loanTerm": 360}, 360),
        ({"loanTerm": 15}, 180),
        ({"loan_term_months": 120, "loanTerm": 30}, 120),
    ],
)
def test_loan_term_units(raw, months):
    assert parse_financing(raw).loan_term_months == months


def test_missing_down_payment_stays_missing():
    assert parse_financing({"interestRate": 4.5}).down_payment is None


def test_default_rates_applied_when_enabled():
    settings = AppConfig(APPLY_DEFAULT_RATES=True)
    fin = parse_financing({"downPayment": 10000, "vacancyRate": 2}, settings=settings)

    assert fin.vacancy_rate == Decimal("2")
    assert fin.interest_rate == settings.DEFAULT_INTEREST_RATE
    assert fin.loan_term_months == 360
    assert fin.management_rate == Decimal("8.0")


def test_default_rates_not_applied_by_default():
    fin = parse_financing({"downPayment": 10000}, settings=AppConfig(APPLY_DEFAULT_RATES=False))
    assert fin.interest_rate is None
    assert not fin.has_operating_rates()


def test_negative_rate_is_invalid_argument():
    with pytest.raises(InvalidArgumentError):
        parse_financing({"downPayment": 1000, "vacancyRate": -5})


@pytest.mark.parametrize("raw", ["NaN", "Infinity", "1e30"])
def test_non_finite_property_value_is_invalid_argument(raw):
    with pytest.raises(InvalidArgumentError) as exc:
        parse_property({"currentValue": raw})
    assert "current_value" in str(exc.value)


@pytest.mark.parametrize(
    "raw",
    [
        {"downPayment": "NaN"},
        {"downPayment": "Infinity"},
        {"downPayment": 1000, "interestRate": "NaN"},
        {"downPayment": 1000, "loanTerm": "Infinity"},
    ],
)
def test_non_finite_financing_is_invalid_argument(raw):
    with pytest.raises(InvalidArgumentError):
        parse_financing(raw)
