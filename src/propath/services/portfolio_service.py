# src/propath/services/portfolio_service.py
from __future__ import annotations

from propath.adapters.logging_utils import get_logger
from propath.domain.portfolio import PortfolioSnapshot, aggregate
from propath.domain.ports import PortfolioRepository
from propath.domain.property import PropertyRecord
from propath.domain.simulation import FinancingAssumptions, SimulationResult, simulate

logger = get_logger(__name__)


def _snapshot_for_owner(owner_id: int, repo: PortfolioRepository) -> PortfolioSnapshot:
    portfolio_id = repo.get_portfolio_id(owner_id)
    properties = repo.load_properties_for_owner(owner_id)
    return aggregate(properties, owner_id=owner_id, portfolio_id=portfolio_id)


def get_portfolio_snapshot(
    owner_id: int,
    *,
    repo: PortfolioRepository,
    save: bool = False,
) -> PortfolioSnapshot:
    """
    Aggregate the owner's stored properties into a fresh snapshot.

    Raises NotFoundError when the owner has no portfolio. With save=True the
    totals are also appended to the snapshot history.
    """
    snapshot = _snapshot_for_owner(owner_id, repo)

    if save:
        snapshot_id = repo.save_snapshot(snapshot)
        logger.info("portfolio_snapshot_saved", extra={"context": {"owner_id": owner_id, "snapshot_id": snapshot_id}})

    logger.info(
        "portfolio_snapshot",
        extra={
            "context": {
                "owner_id": owner_id,
                "property_count": snapshot.property_count,
                "total_value": snapshot.total_value,
                "annual_return": snapshot.annual_return,
            }
        },
    )
    return snapshot


def simulate_property_impact(
    owner_id: int,
    candidate: PropertyRecord,
    financing: FinancingAssumptions,
    *,
    repo: PortfolioRepository,
) -> SimulationResult:
    """
    What-if: project the owner's portfolio with `candidate` added.

    The candidate is never written to the repository.
    """
    portfolio_id = repo.get_portfolio_id(owner_id)
    current_properties = repo.load_properties_for_owner(owner_id)

    result = simulate(
        current_properties,
        candidate,
        financing,
        owner_id=owner_id,
        portfolio_id=portfolio_id,
    )

    logger.info(
        "portfolio_simulation",
        extra={
            "context": {
                "owner_id": owner_id,
                "property_count": result.current.property_count,
                "total_value_change": result.total_value_change,
                "monthly_cash_flow_change": result.monthly_cash_flow_change,
                "cap_rate": result.cap_rate,
                "cash_on_cash_return": result.cash_on_cash_return,
            }
        },
    )
    return result


def create_portfolio(owner_id: int, *, repo: PortfolioRepository) -> PortfolioSnapshot:
    portfolio_id = repo.create_portfolio(owner_id)
    logger.info("portfolio_created", extra={"context": {"owner_id": owner_id, "portfolio_id": portfolio_id}})
    return _snapshot_for_owner(owner_id, repo)


def add_property_to_portfolio(
    owner_id: int,
    record: PropertyRecord,
    *,
    repo: PortfolioRepository,
) -> PortfolioSnapshot:
    stored = repo.add_property(owner_id, record)
    logger.info("portfolio_property_added", extra={"context": {"owner_id": owner_id, "property_id": stored.id}})
    return _snapshot_for_owner(owner_id, repo)


def remove_property_from_portfolio(
    owner_id: int,
    property_id: str,
    *,
    repo: PortfolioRepository,
) -> PortfolioSnapshot:
    repo.remove_property(owner_id, property_id)
    logger.info("portfolio_property_removed", extra={"context": {"owner_id": owner_id, "property_id": property_id}})
    return _snapshot_for_owner(owner_id, repo)
