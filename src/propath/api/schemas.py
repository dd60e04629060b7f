# src/propath/api/schemas.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from propath.domain.portfolio import PortfolioSnapshot
from propath.domain.property import PropertyRecord
from propath.domain.simulation import SimulationResult

# a float keeps the exact decimal text up to 15 significant digits
FLOAT_SAFE_DIGITS = 15


def _json_number(value: Decimal) -> float | str:
    """
    Decimals go over the wire as JSON numbers. Values too long to survive a
    float (large NUMERIC(19, 2) totals) are sent as exact decimal strings.
    """
    if len(value.normalize().as_tuple().digits) <= FLOAT_SAFE_DIGITS:
        return float(value)
    return str(value)


JsonDecimal = Annotated[Decimal, PlainSerializer(_json_number, return_type=float | str, when_used="json")]


# --------------------------------------------
# Requests
# --------------------------------------------

class PropertyPayload(BaseModel):
    """
    Property body for POST /portfolio/{owner_id}/properties.

    Keep this permissive: snake_case or camelCase keys, numbers or numeric
    strings. services.validation does the real normalization.
    """
    model_config = ConfigDict(extra="allow")


class SimulationRequest(BaseModel):
    """
    Body for POST /portfolio/simulate.

    Financing fields (downPayment, interestRate, loanTerm, *Rate) are flat
    on the request, as the web client sends them.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    owner_id: int = Field(..., alias="ownerId")
    new_property: dict[str, Any] = Field(..., alias="newProperty")


# --------------------------------------------
# Responses
# --------------------------------------------

class PropertyOut(BaseModel):
    id: str | None = None
    address: str = ""
    city: str = ""
    state: str = ""
    zipcode: str = ""

    purchase_price: JsonDecimal | None = None
    current_value: JsonDecimal
    mortgage_amount: JsonDecimal
    monthly_rent: JsonDecimal
    monthly_expenses: JsonDecimal
    monthly_debt_service: JsonDecimal
    monthly_cash_flow: JsonDecimal
    annual_return: JsonDecimal

    year_built: int | None = None
    bedrooms: int | None = None
    bathrooms: int | None = None
    square_footage: JsonDecimal | None = None

    @classmethod
    def from_record(cls, record: PropertyRecord) -> "PropertyOut":
        return cls(**record.model_dump())


class PortfolioOut(BaseModel):
    owner_id: int | None = None
    portfolio_id: int | None = None
    properties: list[PropertyOut] = []

    property_count: int = 0
    total_value: JsonDecimal
    total_debt: JsonDecimal
    total_equity: JsonDecimal
    monthly_cash_flow: JsonDecimal
    annual_return: JsonDecimal

    @classmethod
    def from_snapshot(cls, snapshot: PortfolioSnapshot) -> "PortfolioOut":
        data = snapshot.model_dump(exclude={"properties"})
        return cls(properties=[PropertyOut.from_record(p) for p in snapshot.properties], **data)


class SimulationOut(BaseModel):
    current_portfolio: PortfolioOut
    projected_portfolio: PortfolioOut
    candidate: PropertyOut

    total_value_change: JsonDecimal
    total_debt_change: JsonDecimal
    total_equity_change: JsonDecimal
    monthly_cash_flow_change: JsonDecimal
    annual_return_change: JsonDecimal

    cap_rate: JsonDecimal
    cash_on_cash_return: JsonDecimal
    debt_to_income_ratio: JsonDecimal

    @classmethod
    def from_result(cls, result: SimulationResult) -> "SimulationOut":
        data = result.model_dump(exclude={"current", "projected", "candidate"})
        return cls(
            current_portfolio=PortfolioOut.from_snapshot(result.current),
            projected_portfolio=PortfolioOut.from_snapshot(result.projected),
            candidate=PropertyOut.from_record(result.candidate),
            **data,
        )


class SnapshotItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    snapshot_id: int
    ts: datetime
    owner_id: int | None = None
    portfolio_id: int | None = None
    property_count: int = 0

    total_value: JsonDecimal
    total_debt: JsonDecimal
    total_equity: JsonDecimal
    monthly_cash_flow: JsonDecimal
    annual_return: JsonDecimal
