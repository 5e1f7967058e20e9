"""
Price service for portfolio tracking.
Retrieves current prices for tracked positions.
"""

import asyncio
from typing import List
from loguru import logger

from ..errors import FetchError
from .calculator import PortfolioCalculator
from .models import Position, PositionQuote, Quote


class PortfolioPriceService:
    """Service for retrieving position prices through a quote fetcher"""

    def __init__(self, fetcher):
        """
        Args:
            fetcher: Object with an async ``quote(ticker) -> Quote`` method
        """
        self.fetcher = fetcher
        self.calculator = PortfolioCalculator()

    async def refresh(self, positions: List[Position]) -> List[PositionQuote]:
        """
        Fetch prices for all positions in parallel.

        A failure for one ticker leaves its price unavailable and does not
        affect the others.

        Returns:
            One row per position, in input order
        """
        results = await asyncio.gather(
            *(self.fetcher.quote(position.ticker) for position in positions),
            return_exceptions=True
        )

        quotes = []
        for position, result in zip(positions, results):
            if isinstance(result, Quote):
                quotes.append(result)
                continue

            if isinstance(result, FetchError):
                logger.error(f"Error fetching price for ticker {position.ticker}: {result}")
            elif isinstance(result, BaseException):
                logger.opt(exception=result).error(f"Unexpected error fetching price for {position.ticker}")
            quotes.append(Quote(ticker=position.ticker))

        rows = self.calculator.build_rows(positions, quotes)
        available = sum(1 for row in rows if row.quote.available)
        logger.debug(f"Refreshed prices for {available}/{len(rows)} positions")
        return rows
