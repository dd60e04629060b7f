# src/propath/domain/simulation.py
from __future__ import annotations

from decimal import Decimal
from typing import Any, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from propath.domain import formulas
from propath.domain.errors import InvalidArgumentError
from propath.domain.money import ZERO, round_currency, to_decimal
from propath.domain.portfolio import PortfolioSnapshot, aggregate
from propath.domain.property import PropertyRecord

OPERATING_RATE_FIELDS = (
    "property_tax_rate",
    "insurance_rate",
    "maintenance_rate",
    "vacancy_rate",
    "management_rate",
)


class FinancingAssumptions(BaseModel):
    """
    Financing and operating assumptions for a candidate property.

    Rates are percentages: 4.5 (or "4.5%") means 4.5%.
    """
    model_config = ConfigDict(frozen=True)

    down_payment: Decimal | None = Field(None, description="Cash invested; required to simulate")
    interest_rate: Decimal | None = Field(None, description="Annual % rate, e.g. 4.5")
    loan_term_months: int | None = Field(None, description="Amortization period in months")

    property_tax_rate: Decimal | None = None  # annual % of value
    insurance_rate: Decimal | None = None     # annual % of value
    maintenance_rate: Decimal | None = None   # annual % of value
    vacancy_rate: Decimal | None = None       # % of rent
    management_rate: Decimal | None = None    # % of rent

    @field_validator("down_payment", "interest_rate", *OPERATING_RATE_FIELDS, mode="before")
    @classmethod
    def _non_negative_decimal(cls, v: Any, info: ValidationInfo) -> Any:
        d = to_decimal(v, info.field_name)
        if d is not None and d < ZERO:
            raise ValueError(f"{info.field_name} must be non-negative")
        if d is not None and info.field_name == "down_payment":
            return round_currency(d)
        return d

    @field_validator("loan_term_months")
    @classmethod
    def _term_positive(cls, v: int | None) -> int | None:
        if v is not None and v <= 0:
            raise ValueError("loan_term_months must be > 0")
        return v

    def has_operating_rates(self) -> bool:
        return any(getattr(self, name) is not None for name in OPERATING_RATE_FIELDS)


class SimulationResult(BaseModel):
    """
    Before/after snapshots for a what-if acquisition plus the deltas and
    single-property ratios. Created per request; never persisted.
    """
    model_config = ConfigDict(frozen=True)

    current: PortfolioSnapshot
    projected: PortfolioSnapshot
    candidate: PropertyRecord

    total_value_change: Decimal
    total_debt_change: Decimal
    total_equity_change: Decimal
    monthly_cash_flow_change: Decimal
    annual_return_change: Decimal

    cap_rate: Decimal
    cash_on_cash_return: Decimal
    debt_to_income_ratio: Decimal


def prepare_candidate(candidate: PropertyRecord, financing: FinancingAssumptions) -> PropertyRecord:
    """
    Fill the candidate's operating expenses and debt service from the financing
    assumptions where the caller left them out. Supplied values always win.
    """
    changes: dict[str, Any] = {}
    fields_set = candidate.model_fields_set

    if "monthly_expenses" not in fields_set and financing.has_operating_rates():
        changes["monthly_expenses"] = formulas.estimate_monthly_operating_expenses(
            candidate.current_value,
            candidate.monthly_rent,
            property_tax_rate=financing.property_tax_rate,
            insurance_rate=financing.insurance_rate,
            maintenance_rate=financing.maintenance_rate,
            vacancy_rate=financing.vacancy_rate,
            management_rate=financing.management_rate,
        )

    if (
        "monthly_debt_service" not in fields_set
        and candidate.mortgage_amount > ZERO
        and financing.interest_rate is not None
        and financing.loan_term_months
    ):
        changes["monthly_debt_service"] = formulas.monthly_debt_service(
            candidate.mortgage_amount,
            financing.interest_rate,
            financing.loan_term_months,
        )

    if not changes:
        return candidate
    if "monthly_cash_flow" not in candidate.derived_fields:
        # an explicit cash flow is a stored value and is kept as-is
        changes["monthly_cash_flow"] = candidate.monthly_cash_flow
    return candidate.with_changes(**changes)


def simulate(
    current_properties: Sequence[PropertyRecord],
    candidate: PropertyRecord,
    financing: FinancingAssumptions,
    *,
    owner_id: int | None = None,
    portfolio_id: int | None = None,
) -> SimulationResult:
    """
    Project the portfolio with `candidate` added.

    1. aggregate the current set
    2. copy the set and append the (prepared) candidate
    3. aggregate the projected set
    4. deltas projected - current
    5. cap rate and cash-on-cash on the candidate, debt-to-income on the projection
    """
    if financing.down_payment is None:
        raise InvalidArgumentError(
            "down_payment is required to compute cash-on-cash return",
            details={"field": "down_payment"},
        )

    current = aggregate(current_properties, owner_id=owner_id, portfolio_id=portfolio_id)

    prepared = prepare_candidate(candidate, financing)
    projected_properties = tuple(current.properties) + (prepared,)
    projected = aggregate(projected_properties, owner_id=owner_id, portfolio_id=portfolio_id)

    return SimulationResult(
        current=current,
        projected=projected,
        candidate=prepared,
        total_value_change=projected.total_value - current.total_value,
        total_debt_change=projected.total_debt - current.total_debt,
        total_equity_change=projected.total_equity - current.total_equity,
        monthly_cash_flow_change=projected.monthly_cash_flow - current.monthly_cash_flow,
        annual_return_change=projected.annual_return - current.annual_return,
        cap_rate=prepared.cap_rate(),
        cash_on_cash_return=prepared.cash_on_cash_return(financing.down_payment),
        debt_to_income_ratio=formulas.debt_to_income_ratio(projected.total_debt, projected.monthly_cash_flow),
    )
