from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from propath.domain.errors import NotFoundError
from propath.domain.portfolio import PortfolioSnapshot
from propath.domain.ports import PortfolioRepository
from propath.domain.property import PropertyRecord


class InMemoryPortfolioRepository(PortfolioRepository):
    def __init__(self) -> None:
        self._portfolio_ids: dict[int, int] = {}
        self._properties: dict[int, list[PropertyRecord]] = {}
        self._snapshots: list[dict[str, Any]] = []

    def create_portfolio(self, owner_id: int) -> int:
        if owner_id not in self._portfolio_ids:
            self._portfolio_ids[owner_id] = len(self._portfolio_ids) + 1
            self._properties[owner_id] = []
        return self._portfolio_ids[owner_id]

    def get_portfolio_id(self, owner_id: int) -> int:
        try:
            return self._portfolio_ids[owner_id]
        except KeyError:
            raise NotFoundError(f"Portfolio not found for owner: {owner_id}") from None

    def load_properties_for_owner(self, owner_id: int) -> list[PropertyRecord]:
        self.get_portfolio_id(owner_id)
        return list(self._properties[owner_id])

    def add_property(self, owner_id: int, record: PropertyRecord) -> PropertyRecord:
        self.get_portfolio_id(owner_id)
        if record.id is None:
            record = record.with_changes(id=uuid4().hex)
        self._properties[owner_id].append(record)
        return record

    def remove_property(self, owner_id: int, property_id: str) -> None:
        self.get_portfolio_id(owner_id)
        items = self._properties[owner_id]
        kept = [p for p in items if p.id != str(property_id)]
        if len(kept) == len(items):
            raise NotFoundError(f"Property {property_id} not found in portfolio of owner {owner_id}")
        self._properties[owner_id] = kept

    def save_snapshot(self, snapshot: PortfolioSnapshot) -> int:
        rec = snapshot.model_dump(exclude={"properties"})
        rec["snapshot_id"] = len(self._snapshots) + 1
        rec["ts"] = datetime.now(timezone.utc)
        self._snapshots.append(rec)
        return rec["snapshot_id"]

    def list_snapshots(self, owner_id: int, limit: int = 50) -> list[dict[str, Any]]:
        rows = [s for s in self._snapshots if s["owner_id"] == owner_id]
        return list(reversed(rows))[:limit]
