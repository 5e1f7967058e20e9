"""
Asynchronous quote client.
Fetches the current market price for a ticker from the price snapshot endpoint.
"""

import os
from typing import Optional
from loguru import logger

from ..config import QUOTE_API_BASE_URL
from ..errors import FetchError, QuoteNotFoundError
from ..portfolio.models import Quote
from .base import AsyncBaseAPI, require_api_key, ApiKeyRequiredError
from .request_utilities import APIError


class AsyncQuoteAPI(AsyncBaseAPI):
    """
    Asynchronous client for live price snapshots.
    One instance serves every ticker in a refresh cycle.
    """

    # Single attempt per quote; a failed ticker waits for the next cycle
    REQUEST_ATTEMPTS = 1
    
    def __init__(self, api_key: Optional[str] = None, base_url: str = QUOTE_API_BASE_URL):
        """
        Initialize the quote client.
        
        Args:
            api_key: API key (falls back to env var if not provided)
            base_url: Base URL of the price API
        """
        if not api_key:
            api_key = os.getenv("FINANCIAL_DATASETS_API_KEY")
        
        super().__init__(base_url=base_url, api_key=api_key)
        logger.debug("Initialized AsyncQuoteAPI")
    
    @require_api_key
    async def get_live_price(self, ticker: str) -> dict:
        """
        Get the raw price snapshot for a ticker.
        
        Raises:
            APIError: On transport failure
        """
        response = await self.get(
            "prices/snapshot", params={"ticker": ticker}, retries=self.REQUEST_ATTEMPTS
        )
        success, data, error = await self.process_response(
            response,
            success_path="snapshot",
            default_value={}
        )
        
        if not success:
            logger.warning(f"Failed to get live price for {ticker}: {error}")
            return {}
            
        return data
    
    async def quote(self, ticker: str) -> Quote:
        """
        Get the current market price for a ticker.
        
        Args:
            ticker: Stock ticker symbol (case-insensitive)
            
        Returns:
            Quote with the current price
            
        Raises:
            QuoteNotFoundError: If the API has no price for the ticker
            FetchError: If the API cannot be reached or is not configured
        """
        symbol = ticker.strip().upper()
        
        try:
            snapshot = await self.get_live_price(symbol)
        except APIError as e:
            if e.status_code == 404:
                raise QuoteNotFoundError(f"Unknown ticker {symbol}", ticker=symbol) from e
            raise FetchError(f"Could not fetch quote for {symbol}: {e}", ticker=symbol) from e
        except ApiKeyRequiredError as e:
            raise FetchError(f"Could not fetch quote for {symbol}: {e}", ticker=symbol) from e
        
        if not snapshot or snapshot.get("price") is None:
            raise QuoteNotFoundError(f"No price available for {symbol}", ticker=symbol)
        
        try:
            price = float(snapshot["price"])
        except (TypeError, ValueError) as e:
            raise QuoteNotFoundError(f"Invalid price for {symbol}: {snapshot['price']!r}", ticker=symbol) from e
        
        logger.debug(f"Quote for {symbol}: ${price}")
        return Quote(ticker=symbol, current_price=price)
