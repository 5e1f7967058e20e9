"""
Portfolio tracking package.
Provides position storage, the entry form and price refresh.
"""

from .models import Position, Quote, PositionQuote
from .calculator import PortfolioCalculator, return_pct
from .form import PositionForm, submit_position
from .portfolio_storage import (
    PortfolioStorage,
    JsonPortfolioStorage,
    InMemoryPortfolioStorage,
    create_storage,
)
from .price_service import PortfolioPriceService

__all__ = [
    "Position",
    "Quote",
    "PositionQuote",
    "PortfolioCalculator",
    "return_pct",
    "PositionForm",
    "submit_position",
    "PortfolioStorage",
    "JsonPortfolioStorage",
    "InMemoryPortfolioStorage",
    "create_storage",
    "PortfolioPriceService",
]
