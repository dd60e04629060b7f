# src/propath/domain/portfolio.py
from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from pydantic import BaseModel, ConfigDict, model_validator

from propath.domain import formulas
from propath.domain.errors import InvalidArgumentError
from propath.domain.money import ZERO
from propath.domain.property import PropertyRecord


class PortfolioSnapshot(BaseModel):
    """
    Computed, non-persisted aggregate view of one owner's properties.

    Recomputed on demand by `aggregate`; never incrementally maintained.
    """
    model_config = ConfigDict(frozen=True)

    owner_id: int | None = None
    portfolio_id: int | None = None
    properties: tuple[PropertyRecord, ...] = ()

    property_count: int = 0
    total_value: Decimal = ZERO
    total_debt: Decimal = ZERO
    total_equity: Decimal = ZERO
    monthly_cash_flow: Decimal = ZERO
    annual_return: Decimal = ZERO  # percent

    @model_validator(mode="after")
    def _equity_matches(self) -> "PortfolioSnapshot":
        if self.total_equity != self.total_value - self.total_debt:
            raise ValueError("total_equity must equal total_value - total_debt")
        return self


def aggregate(
    properties: Iterable[PropertyRecord],
    *,
    owner_id: int | None = None,
    portfolio_id: int | None = None,
) -> PortfolioSnapshot:
    """
    Reduction step: walk the full property set and collapse it into
    portfolio-level totals and the annual return.

    Pure: the input is only read. An empty set yields an all-zero snapshot.
    """
    records = tuple(properties)

    total_value = ZERO
    total_debt = ZERO
    total_cash_flow = ZERO

    for idx, prop in enumerate(records):
        if prop is None:
            raise InvalidArgumentError(f"property at position {idx} is missing")
        total_value += prop.current_value
        total_debt += prop.mortgage_amount
        total_cash_flow += prop.monthly_cash_flow

    return PortfolioSnapshot(
        owner_id=owner_id,
        portfolio_id=portfolio_id,
        properties=records,
        property_count=len(records),
        total_value=total_value,
        total_debt=total_debt,
        total_equity=total_value - total_debt,
        monthly_cash_flow=total_cash_flow,
        annual_return=formulas.annual_return(total_cash_flow, total_value),
    )
