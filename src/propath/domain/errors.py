# src/propath/domain/errors.py
from __future__ import annotations

from typing import Any, Dict, Optional


class PortfolioError(Exception):
    """Base exception for portfolio valuation and simulation."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(PortfolioError, LookupError):
    """Referenced owner, portfolio or property does not exist."""


class InvalidArgumentError(PortfolioError, ValueError):
    """Malformed or missing input (e.g. no down payment for a simulation)."""
