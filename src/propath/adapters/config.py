# src/propath/adapters/config.py
from decimal import Decimal
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    # App & logging
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # persistence
    DB_URI: str = Field(default="sqlite:///propath.db")
    SAVE_SNAPSHOTS: bool = Field(default=False)

    # -----------------------------
    # Simulation default assumptions (percent values, 4.5 == 4.5%)
    # -----------------------------
    DEFAULT_INTEREST_RATE: Decimal = Field(default=Decimal("4.5"))
    DEFAULT_LOAN_TERM_MONTHS: int = Field(default=360)
    DEFAULT_PROPERTY_TAX_RATE: Decimal = Field(default=Decimal("1.2"))
    DEFAULT_INSURANCE_RATE: Decimal = Field(default=Decimal("0.5"))
    DEFAULT_MAINTENANCE_RATE: Decimal = Field(default=Decimal("1.0"))
    DEFAULT_VACANCY_RATE: Decimal = Field(default=Decimal("5.0"))
    DEFAULT_MANAGEMENT_RATE: Decimal = Field(default=Decimal("8.0"))

    # If false, simulations only use the rates the caller sends
    APPLY_DEFAULT_RATES: bool = Field(default=False)

    SNAPSHOTS_DEFAULT_LIMIT: int = Field(default=50)

    model_config = SettingsConfigDict(
        env_prefix="PROPATH_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "DEFAULT_INTEREST_RATE",
        "DEFAULT_PROPERTY_TAX_RATE",
        "DEFAULT_INSURANCE_RATE",
        "DEFAULT_MAINTENANCE_RATE",
        "DEFAULT_VACANCY_RATE",
        "DEFAULT_MANAGEMENT_RATE",
        mode="before",
    )
    @classmethod
    def _to_non_negative_percent(cls, v: Any) -> Any:
        if v is None:
            return v
        if isinstance(v, str):
            v = v.strip().replace("%", "")
        try:
            d = Decimal(str(v))
        except Exception as err:
            raise ValueError("rate must be numeric or percent-like") from err
        if d < 0:
            raise ValueError("rate must be non-negative")
        return d

    @field_validator("DEFAULT_LOAN_TERM_MONTHS", mode="before")
    @classmethod
    def _term_positive(cls, v: Any) -> Any:
        n = int(v)
        if n <= 0:
            raise ValueError("DEFAULT_LOAN_TERM_MONTHS must be > 0")
        return n


config = AppConfig()
