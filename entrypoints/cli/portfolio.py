from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer

from propath.adapters.config import config
from propath.adapters.sql_repo import SqlPortfolioRepository
from propath.api.schemas import PortfolioOut, SimulationOut
from propath.domain.errors import InvalidArgumentError, NotFoundError
from propath.services import portfolio_service
from propath.services.validation import parse_financing, parse_property

app = typer.Typer(help="Portfolio valuation and what-if simulation.")


def _repo(db_uri: Optional[str]) -> SqlPortfolioRepository:
    return SqlPortfolioRepository(db_uri or config.DB_URI)


def _read_json(path: Path) -> dict[str, Any]:
    try:
        return json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise typer.BadParameter(f"cannot read {path}: {e}") from e


def _fail(err: Exception) -> None:
    typer.echo(f"error: {err}", err=True)
    raise typer.Exit(code=1)


@app.command("create")
def create_cmd(
    owner: int = typer.Option(..., "--owner", help="Owner (profile) id"),
    db_uri: Optional[str] = typer.Option(None, help="Database URI (default: PROPATH_DB_URI)"),
) -> None:
    """
    Create an empty portfolio for an owner (no-op if it already exists).
    """
    snapshot = portfolio_service.create_portfolio(owner, repo=_repo(db_uri))
    typer.echo(PortfolioOut.from_snapshot(snapshot).model_dump_json(indent=2))


@app.command("add-property")
def add_property_cmd(
    owner: int = typer.Option(..., "--owner", help="Owner (profile) id"),
    property_json: Path = typer.Option(..., "--property", help="JSON file with the property fields"),
    db_uri: Optional[str] = typer.Option(None, help="Database URI (default: PROPATH_DB_URI)"),
) -> None:
    """
    Add a property to the owner's portfolio and print the new totals.
    """
    try:
        record = parse_property(_read_json(property_json))
        snapshot = portfolio_service.add_property_to_portfolio(owner, record, repo=_repo(db_uri))
    except (NotFoundError, InvalidArgumentError) as e:
        _fail(e)
    typer.echo(PortfolioOut.from_snapshot(snapshot).model_dump_json(indent=2))


@app.command()
def snapshot(
    owner: int = typer.Option(..., "--owner", help="Owner (profile) id"),
    save: bool = typer.Option(False, "--save", help="Append the totals to the snapshot history"),
    db_uri: Optional[str] = typer.Option(None, help="Database URI (default: PROPATH_DB_URI)"),
) -> None:
    """
    Print the owner's current portfolio totals.
    """
    try:
        snap = portfolio_service.get_portfolio_snapshot(owner, repo=_repo(db_uri), save=save)
    except NotFoundError as e:
        _fail(e)
    typer.echo(PortfolioOut.from_snapshot(snap).model_dump_json(indent=2))


@app.command()
def simulate(
    owner: int = typer.Option(..., "--owner", help="Owner (profile) id"),
    candidate_json: Path = typer.Option(..., "--candidate", help="JSON file with the candidate property"),
    down_payment: Optional[str] = typer.Option(None, help="Cash invested, e.g. 50000"),
    interest_rate: Optional[str] = typer.Option(None, help="Annual rate in %, e.g. 6.5"),
    loan_term_months: Optional[int] = typer.Option(None, help="Amortization period in months"),
    property_tax_rate: Optional[str] = typer.Option(None, help="Annual % of value"),
    insurance_rate: Optional[str] = typer.Option(None, help="Annual % of value"),
    maintenance_rate: Optional[str] = typer.Option(None, help="Annual % of value"),
    vacancy_rate: Optional[str] = typer.Option(None, help="% of rent"),
    management_rate: Optional[str] = typer.Option(None, help="% of rent"),
    db_uri: Optional[str] = typer.Option(None, help="Database URI (default: PROPATH_DB_URI)"),
) -> None:
    """
    What-if: project the portfolio with the candidate added. Nothing is saved.
    """
    raw_financing = {
        "down_payment": down_payment,
        "interest_rate": interest_rate,
        "loan_term_months": loan_term_months,
        "property_tax_rate": property_tax_rate,
        "insurance_rate": insurance_rate,
        "maintenance_rate": maintenance_rate,
        "vacancy_rate": vacancy_rate,
        "management_rate": management_rate,
    }
    try:
        candidate = parse_property(_read_json(candidate_json))
        financing = parse_financing(raw_financing)
        result = portfolio_service.simulate_property_impact(owner, candidate, financing, repo=_repo(db_uri))
    except (NotFoundError, InvalidArgumentError) as e:
        _fail(e)
    typer.echo(SimulationOut.from_result(result).model_dump_json(indent=2))


if __name__ == "__main__":
    app()
