"""
Clients for external market data APIs.
"""

from .quotes import AsyncQuoteAPI

__all__ = ["AsyncQuoteAPI"]
