# src/propath/domain/property.py
from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from propath.domain import formulas
from propath.domain.money import ZERO, round_currency, to_decimal

# NUMERIC(19, 2) columns in sql_repo
CURRENCY_FIELDS = (
    "purchase_price",
    "current_value",
    "mortgage_amount",
    "monthly_rent",
    "monthly_expenses",
    "monthly_debt_service",
    "monthly_cash_flow",
)

NON_NEGATIVE_FIELDS = (
    "current_value",
    "mortgage_amount",
    "monthly_rent",
    "monthly_expenses",
    "monthly_debt_service",
)


def _currency_or_zero(data: dict[str, Any], key: str) -> Decimal:
    d = to_decimal(data.get(key), key)
    return round_currency(d) if d is not None else ZERO


class PropertyRecord(BaseModel):
    """
    Valuation-relevant state of one owned or hypothetical property.

    Immutable: use `with_changes` to get an updated copy. If `monthly_cash_flow`
    is omitted it is derived as rent - operating expenses - debt service, and
    `annual_return` as cash flow * 12 / current value (%).
    """
    model_config = ConfigDict(frozen=True)

    id: str | None = None

    address: str = ""
    city: str = ""
    state: str = ""
    zipcode: str = ""

    purchase_price: Decimal | None = None
    current_value: Decimal = Field(..., description="Current market value")
    mortgage_amount: Decimal = Field(ZERO, description="Outstanding mortgage / debt balance")

    monthly_rent: Decimal = ZERO
    monthly_expenses: Decimal = Field(ZERO, description="Operating expenses, excluding debt service")
    monthly_debt_service: Decimal = ZERO
    monthly_cash_flow: Decimal = ZERO
    annual_return: Decimal = ZERO

    year_built: int | None = None
    bedrooms: int | None = None
    bathrooms: int | None = None
    square_footage: Decimal | None = None

    derived_fields: frozenset[str] = Field(default=frozenset(), exclude=True, repr=False)

    @model_validator(mode="before")
    @classmethod
    def _derive_cash_flow(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        data = dict(data)
        derived = set(data.get("derived_fields") or ())

        if data.get("monthly_cash_flow") is None:
            data["monthly_cash_flow"] = (
                _currency_or_zero(data, "monthly_rent")
                - _currency_or_zero(data, "monthly_expenses")
                - _currency_or_zero(data, "monthly_debt_service")
            )
            derived.add("monthly_cash_flow")

        if data.get("annual_return") is None:
            value = to_decimal(data.get("current_value"), "current_value")
            if value is not None:
                cash_flow = to_decimal(data["monthly_cash_flow"], "monthly_cash_flow")
                data["annual_return"] = formulas.annual_return(round_currency(cash_flow), round_currency(value))
                derived.add("annual_return")

        data["derived_fields"] = frozenset(derived)
        return data

    @field_validator(*CURRENCY_FIELDS, mode="before")
    @classmethod
    def _to_currency(cls, v: Any, info: ValidationInfo) -> Any:
        d = to_decimal(v, info.field_name)
        if d is None:
            if info.field_name == "purchase_price":
                return None
            if info.field_name == "current_value":
                raise ValueError("current_value is required")
            return ZERO
        if info.field_name in NON_NEGATIVE_FIELDS and d < ZERO:
            raise ValueError(f"{info.field_name} must be non-negative")
        return round_currency(d)

    @field_validator("annual_return", "square_footage", mode="before")
    @classmethod
    def _to_plain_decimal(cls, v: Any, info: ValidationInfo) -> Any:
        d = to_decimal(v, info.field_name)
        if d is None and info.field_name == "annual_return":
            return ZERO
        return d

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, v: Any) -> Any:
        if v is None:
            return None
        return str(v)

    @property
    def equity(self) -> Decimal:
        return self.current_value - self.mortgage_amount

    def with_changes(self, **changes: Any) -> "PropertyRecord":
        """
        Copy-with-changes. Derived fields are recomputed from the new inputs
        unless they are passed explicitly. Fields left at their defaults stay
        unset on the copy, so `model_fields_set` still tells supplied from omitted.
        """
        data = self.model_dump(include=set(self.model_fields_set) - set(self.derived_fields))
        data.update(changes)
        return PropertyRecord.model_validate(data)

    def cap_rate(self) -> Decimal:
        return formulas.cap_rate(self.monthly_rent, self.monthly_expenses, self.current_value)

    def cash_on_cash_return(self, down_payment: Decimal | None) -> Decimal:
        return formulas.cash_on_cash_return(self.monthly_cash_flow, down_payment)
