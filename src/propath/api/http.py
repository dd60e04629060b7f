# src/propath/api/http.py
from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException, Query

from propath.adapters.config import config
from propath.adapters.sql_repo import SqlPortfolioRepository
from propath.domain.errors import InvalidArgumentError, NotFoundError
from propath.domain.ports import PortfolioRepository
from propath.services import portfolio_service
from propath.services.validation import parse_financing, parse_property

from .schemas import PortfolioOut, PropertyPayload, SimulationOut, SimulationRequest, SnapshotItem

app = FastAPI(title="propath")


@lru_cache(maxsize=1)
def get_repo() -> PortfolioRepository:
    return SqlPortfolioRepository(config.DB_URI)


def _http_error(err: Exception) -> HTTPException:
    if isinstance(err, NotFoundError):
        return HTTPException(status_code=404, detail=str(err))
    return HTTPException(status_code=400, detail=str(err))


@app.post("/portfolio/simulate", response_model=SimulationOut)
def simulate_property_impact(
    payload: SimulationRequest,
    repo: PortfolioRepository = Depends(get_repo),
) -> SimulationOut:
    """
    What-if: the candidate is evaluated against the stored portfolio but never saved.
    """
    try:
        candidate = parse_property(payload.new_property)
        financing = parse_financing(payload.model_extra or {})
        result = portfolio_service.simulate_property_impact(
            payload.owner_id,
            candidate,
            financing,
            repo=repo,
        )
    except (NotFoundError, InvalidArgumentError) as e:
        raise _http_error(e) from e
    return SimulationOut.from_result(result)


@app.get("/portfolio/{owner_id}", response_model=PortfolioOut)
def get_portfolio(
    owner_id: int,
    save: bool = Query(False, description="Also append the totals to the snapshot history"),
    repo: PortfolioRepository = Depends(get_repo),
) -> PortfolioOut:
    try:
        snapshot = portfolio_service.get_portfolio_snapshot(
            owner_id,
            repo=repo,
            save=save or config.SAVE_SNAPSHOTS,
        )
    except (NotFoundError, InvalidArgumentError) as e:
        raise _http_error(e) from e
    return PortfolioOut.from_snapshot(snapshot)


@app.post("/portfolio/{owner_id}", response_model=PortfolioOut)
def create_portfolio(owner_id: int, repo: PortfolioRepository = Depends(get_repo)) -> PortfolioOut:
    snapshot = portfolio_service.create_portfolio(owner_id, repo=repo)
    return PortfolioOut.from_snapshot(snapshot)


@app.post("/portfolio/{owner_id}/properties", response_model=PortfolioOut)
def add_property(
    owner_id: int,
    payload: PropertyPayload,
    repo: PortfolioRepository = Depends(get_repo),
) -> PortfolioOut:
    try:
        record = parse_property(payload.model_dump())
        snapshot = portfolio_service.add_property_to_portfolio(owner_id, record, repo=repo)
    except (NotFoundError, InvalidArgumentError) as e:
        raise _http_error(e) from e
    return PortfolioOut.from_snapshot(snapshot)


@app.delete("/portfolio/{owner_id}/properties/{property_id}", response_model=PortfolioOut)
def remove_property(
    owner_id: int,
    property_id: str,
    repo: PortfolioRepository = Depends(get_repo),
) -> PortfolioOut:
    try:
        snapshot = portfolio_service.remove_property_from_portfolio(owner_id, property_id, repo=repo)
    except NotFoundError as e:
        raise _http_error(e) from e
    return PortfolioOut.from_snapshot(snapshot)


@app.get("/portfolio/{owner_id}/snapshots", response_model=list[SnapshotItem])
def list_snapshots(
    owner_id: int,
    limit: int = Query(config.SNAPSHOTS_DEFAULT_LIMIT, ge=1, le=1000),
    repo: PortfolioRepository = Depends(get_repo),
) -> list[SnapshotItem]:
    try:
        repo.get_portfolio_id(owner_id)
    except NotFoundError as e:
        raise _http_error(e) from e
    return [SnapshotItem(**row) for row in repo.list_snapshots(owner_id, limit=limit)]
