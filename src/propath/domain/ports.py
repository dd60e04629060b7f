# src/propath/domain/ports.py
from __future__ import annotations

from typing import Any, Protocol

from propath.domain.portfolio import PortfolioSnapshot
from propath.domain.property import PropertyRecord


# ----------------------------
# Portfolio storage
# ----------------------------

class PortfolioRepository(Protocol):
    """
    Storage collaborator for the valuation core.

    Lookups for an owner without a portfolio raise NotFoundError.
    """

    def create_portfolio(self, owner_id: int) -> int:
        ...

    def get_portfolio_id(self, owner_id: int) -> int:
        ...

    def load_properties_for_owner(self, owner_id: int) -> list[PropertyRecord]:
        ...

    def add_property(self, owner_id: int, record: PropertyRecord) -> PropertyRecord:
        ...

    def remove_property(self, owner_id: int, property_id: str) -> None:
        ...

    # ----------------------------
    # Snapshot persistence
    # ----------------------------

    def save_snapshot(self, snapshot: PortfolioSnapshot) -> int:
        ...

    def list_snapshots(self, owner_id: int, limit: int = 50) -> list[dict[str, Any]]:
        ...
