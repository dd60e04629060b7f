# src/propath/adapters/sql_repo.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import uuid4

from sqlmodel import Field, Session, SQLModel, create_engine, select

from propath.domain.errors import NotFoundError
from propath.domain.portfolio import PortfolioSnapshot
from propath.domain.property import PropertyRecord


# ---------- Portfolios ----------

class PortfolioRow(SQLModel, table=True):
    __tablename__ = "portfolios"

    id: int | None = Field(default=None, primary_key=True)
    owner_id: int = Field(index=True, unique=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)


# ---------- Properties held in a portfolio ----------

class PortfolioPropertyRow(SQLModel, table=True):
    __tablename__ = "portfolio_properties"

    id: int | None = Field(default=None, primary_key=True)
    property_id: str = Field(index=True)
    portfolio_id: int = Field(foreign_key="portfolios.id", index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    address: str = ""
    city: str = ""
    state: str = ""
    zipcode: str = ""

    purchase_price: Decimal | None = Field(default=None, max_digits=19, decimal_places=2)
    current_value: Decimal = Field(max_digits=19, decimal_places=2)
    mortgage_amount: Decimal = Field(default=Decimal("0"), max_digits=19, decimal_places=2)
    monthly_rent: Decimal = Field(default=Decimal("0"), max_digits=19, decimal_places=2)
    monthly_expenses: Decimal = Field(default=Decimal("0"), max_digits=19, decimal_places=2)
    monthly_debt_service: Decimal = Field(default=Decimal("0"), max_digits=19, decimal_places=2)
    monthly_cash_flow: Decimal = Field(default=Decimal("0"), max_digits=19, decimal_places=2)
    annual_return: Decimal = Field(default=Decimal("0"), max_digits=19, decimal_places=4)

    year_built: int | None = None
    bedrooms: int | None = None
    bathrooms: int | None = None
    square_footage: Decimal | None = Field(default=None, max_digits=19, decimal_places=2)


# ---------- Snapshot history ----------

class SnapshotRow(SQLModel, table=True):
    __tablename__ = "portfolio_snapshots"

    id: int | None = Field(default=None, primary_key=True)
    ts: datetime = Field(default_factory=datetime.utcnow, index=True)

    owner_id: int | None = Field(default=None, index=True)
    portfolio_id: int | None = None
    property_count: int = 0

    total_value: Decimal = Field(max_digits=19, decimal_places=2)
    total_debt: Decimal = Field(max_digits=19, decimal_places=2)
    total_equity: Decimal = Field(max_digits=19, decimal_places=2)
    monthly_cash_flow: Decimal = Field(max_digits=19, decimal_places=2)
    annual_return: Decimal = Field(max_digits=19, decimal_places=4)


_RECORD_FIELDS = [
    "address", "city", "state", "zipcode",
    "purchase_price", "current_value", "mortgage_amount",
    "monthly_rent", "monthly_expenses", "monthly_debt_service",
    "monthly_cash_flow", "annual_return",
    "year_built", "bedrooms", "bathrooms", "square_footage",
]


def _row_to_record(row: PortfolioPropertyRow) -> PropertyRecord:
    data: dict[str, Any] = {f: getattr(row, f) for f in _RECORD_FIELDS}
    data["id"] = row.property_id
    return PropertyRecord.model_validate(data)


class SqlPortfolioRepository:
    def __init__(self, uri: str = "sqlite:///propath.db"):
        self.engine = create_engine(uri, echo=False)
        SQLModel.metadata.create_all(self.engine)

    def _portfolio_row(self, session: Session, owner_id: int) -> PortfolioRow:
        stmt = select(PortfolioRow).where(PortfolioRow.owner_id == owner_id)
        row = session.exec(stmt).first()
        if row is None:
            raise NotFoundError(f"Portfolio not found for owner: {owner_id}")
        return row

    def create_portfolio(self, owner_id: int) -> int:
        with Session(self.engine) as session:
            stmt = select(PortfolioRow).where(PortfolioRow.owner_id == owner_id)
            row = session.exec(stmt).first()
            if row is None:
                row = PortfolioRow(owner_id=owner_id)
                session.add(row)
                session.commit()
                session.refresh(row)
            return int(row.id)  # type: ignore[arg-type]

    def get_portfolio_id(self, owner_id: int) -> int:
        with Session(self.engine) as session:
            return int(self._portfolio_row(session, owner_id).id)  # type: ignore[arg-type]

    def load_properties_for_owner(self, owner_id: int) -> list[PropertyRecord]:
        with Session(self.engine) as session:
            portfolio = self._portfolio_row(session, owner_id)
            stmt = (
                select(PortfolioPropertyRow)
                .where(PortfolioPropertyRow.portfolio_id == portfolio.id)
                .order_by(PortfolioPropertyRow.id)
            )
            rows = list(session.exec(stmt))
        return [_row_to_record(r) for r in rows]

    def add_property(self, owner_id: int, record: PropertyRecord) -> PropertyRecord:
        if record.id is None:
            record = record.with_changes(id=uuid4().hex)

        with Session(self.engine) as session:
            portfolio = self._portfolio_row(session, owner_id)
            row = PortfolioPropertyRow(
                property_id=str(record.id),
                portfolio_id=int(portfolio.id),  # type: ignore[arg-type]
                **{f: getattr(record, f) for f in _RECORD_FIELDS},
            )
            session.add(row)
            session.commit()
        return record

    def remove_property(self, owner_id: int, property_id: str) -> None:
        with Session(self.engine) as session:
            portfolio = self._portfolio_row(session, owner_id)
            stmt = select(PortfolioPropertyRow).where(
                PortfolioPropertyRow.portfolio_id == portfolio.id,
                PortfolioPropertyRow.property_id == str(property_id),
            )
            row = session.exec(stmt).first()
            if row is None:
                raise NotFoundError(f"Property {property_id} not found in portfolio of owner {owner_id}")
            session.delete(row)
            session.commit()

    def save_snapshot(self, snapshot: PortfolioSnapshot) -> int:
        row = SnapshotRow(
            owner_id=snapshot.owner_id,
            portfolio_id=snapshot.portfolio_id,
            property_count=snapshot.property_count,
            total_value=snapshot.total_value,
            total_debt=snapshot.total_debt,
            total_equity=snapshot.total_equity,
            monthly_cash_flow=snapshot.monthly_cash_flow,
            annual_return=snapshot.annual_return,
        )
        with Session(self.engine) as session:
            session.add(row)
            session.commit()
            session.refresh(row)
            return int(row.id)  # type: ignore[arg-type]

    def list_snapshots(self, owner_id: int, limit: int = 50) -> list[dict[str, Any]]:
        with Session(self.engine) as session:
            stmt = (
                select(SnapshotRow)
                .where(SnapshotRow.owner_id == owner_id)
                .order_by(SnapshotRow.ts.desc(), SnapshotRow.id.desc())
                .limit(limit)
            )
            rows = list(session.exec(stmt))

        return [
            {
                "snapshot_id": r.id,
                "ts": r.ts,
                "owner_id": r.owner_id,
                "portfolio_id": r.portfolio_id,
                "property_count": r.property_count,
                "total_value": r.total_value,
                "total_debt": r.total_debt,
                "total_equity": r.total_equity,
                "monthly_cash_flow": r.monthly_cash_flow,
                "annual_return": r.annual_return,
            }
            for r in rows
        ]
