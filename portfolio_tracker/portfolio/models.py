"""
Data models for portfolio tracking.
Defines tracked positions, quotes and the rows rendered for display.
"""

from dataclasses import dataclass
from typing import Dict, Any, Optional


@dataclass
class Position:
    """Data model for a tracked portfolio position"""
    ticker: str
    average_buy_price: float
    target_entry: float
    target_exit: float
    quantity: float = 0.0

    def __post_init__(self):
        """Normalize the ticker so comparisons are case-insensitive"""
        self.ticker = self.ticker.strip().upper()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a store document"""
        return {
            "ticker": self.ticker,
            "quantity": self.quantity,
            "averageBuyPrice": self.average_buy_price,
            "targetEntry": self.target_entry,
            "targetExit": self.target_exit,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Position":
        """Create from a store document"""
        return cls(
            ticker=str(data["ticker"]),
            average_buy_price=float(data["averageBuyPrice"]),
            target_entry=float(data["targetEntry"]),
            target_exit=float(data["targetExit"]),
            quantity=float(data.get("quantity") or 0.0),
        )


@dataclass
class Quote:
    """Current market price for a ticker; None when unavailable"""
    ticker: str
    current_price: Optional[float] = None

    @property
    def available(self) -> bool:
        return self.current_price is not None


@dataclass
class PositionQuote:
    """A position joined with its latest quote"""
    position: Position
    quote: Quote
    return_pct: float = 0.0

    @property
    def ticker(self) -> str:
        return self.position.ticker

    @property
    def current_price(self) -> Optional[float]:
        return self.quote.current_price
