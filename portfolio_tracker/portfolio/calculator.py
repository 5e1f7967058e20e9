"""
Calculator for position returns.
"""

from typing import List, Optional

from .models import Position, PositionQuote, Quote


def return_pct(current_price: float, average_buy_price: float) -> float:
    """
    Unrealized return relative to the average buy price.

    Args:
        current_price: Latest market price
        average_buy_price: Average price paid

    Returns:
        (current - average) / average * 100
    """
    return (current_price - average_buy_price) / average_buy_price * 100


class PortfolioCalculator:
    """Joins positions with quotes and derives return percentages"""

    def build_row(self, position: Position, quote: Optional[Quote]) -> PositionQuote:
        """
        Build a display row for a position.

        A missing quote or a non-positive average price yields a 0.00% return.
        """
        if quote is None:
            quote = Quote(ticker=position.ticker)

        pct = 0.0
        if quote.current_price and position.average_buy_price:
            pct = return_pct(quote.current_price, position.average_buy_price)

        return PositionQuote(position=position, quote=quote, return_pct=pct)

    def build_rows(self, positions: List[Position], quotes: List[Optional[Quote]]) -> List[PositionQuote]:
        """Build display rows for positions and their quotes, pairwise"""
        return [self.build_row(position, quote) for position, quote in zip(positions, quotes)]
