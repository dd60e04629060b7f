# src/propath/domain/formulas.py
from __future__ import annotations

from decimal import Decimal

from propath.domain.money import HUNDRED, TWELVE, ZERO, percent, round_currency, safe_divide


def annual_return(monthly_cash_flow: Decimal, total_value: Decimal) -> Decimal:
    """
    Annual return (%) = monthly cash flow * 12 / value * 100.

    Zero when the value is zero (empty portfolio).
    """
    return percent(monthly_cash_flow * TWELVE, total_value)


def cap_rate(monthly_rent: Decimal, monthly_expenses: Decimal, current_value: Decimal) -> Decimal:
    """
    Cap rate (%) = annual NOI / current value * 100.
    NOI = rent * 12 - operating expenses * 12 (debt service excluded).
    """
    noi = monthly_rent * TWELVE - monthly_expenses * TWELVE
    return percent(noi, current_value)


def cash_on_cash_return(monthly_cash_flow: Decimal, down_payment: Decimal | None) -> Decimal:
    """
    Cash-on-cash return (%) = annual cash flow / cash invested * 100.
    """
    if down_payment is None:
        return ZERO
    return percent(monthly_cash_flow * TWELVE, down_payment)


def debt_to_income_ratio(total_debt: Decimal, monthly_cash_flow: Decimal) -> Decimal:
    """
    Debt-to-income = total debt / annualized cash flow, as a plain ratio.
    """
    return safe_divide(total_debt, monthly_cash_flow * TWELVE)


def monthly_debt_service(principal: Decimal, annual_rate_pct: Decimal, term_months: int) -> Decimal:
    """
    Standard fixed-rate amortization formula:
    M = P * [ r(1+r)^n / ((1+r)^n - 1) ]
    P = loan principal
    r = monthly interest rate (annual % / 100 / 12)
    n = number of payments (months)
    """
    if principal <= ZERO or term_months <= 0:
        return ZERO

    r = annual_rate_pct / HUNDRED / TWELVE
    n = int(term_months)

    if r == ZERO:
        return round_currency(principal / n)

    growth = (1 + r) ** n
    return round_currency(principal * (r * growth) / (growth - 1))


def estimate_monthly_operating_expenses(
    current_value: Decimal,
    monthly_rent: Decimal,
    *,
    property_tax_rate: Decimal | None = None,
    insurance_rate: Decimal | None = None,
    maintenance_rate: Decimal | None = None,
    vacancy_rate: Decimal | None = None,
    management_rate: Decimal | None = None,
) -> Decimal:
    """
    Operating expenses do NOT include mortgage. (Mortgage is financing, not operations.)

    - Taxes, insurance and maintenance are annual % of property value.
    - Vacancy and management are % of monthly rent.
    Missing rates count as zero.
    """
    def _pct(rate: Decimal | None) -> Decimal:
        return (rate or ZERO) / HUNDRED

    value_based = current_value * (
        _pct(property_tax_rate) + _pct(insurance_rate) + _pct(maintenance_rate)
    ) / TWELVE
    rent_based = monthly_rent * (_pct(vacancy_rate) + _pct(management_rate))
    return round_currency(value_based + rent_based)
