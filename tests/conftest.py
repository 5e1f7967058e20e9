import os
from typing import Dict, Iterable, List, Optional
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest
from loguru import logger

from portfolio_tracker.errors import FetchError, QuoteNotFoundError
from portfolio_tracker.portfolio.models import Position, Quote
from portfolio_tracker.portfolio.portfolio_storage import InMemoryPortfolioStorage

# Configure logging for tests
logger.remove()
logger.add(lambda msg: print(msg, end=""), level="INFO", colorize=False)


class FakeQuoteFetcher:
    """Quote fetcher returning configured prices"""

    def __init__(self, prices: Optional[Dict[str, float]] = None, failing: Iterable[str] = ()):
        self.prices = {k.upper(): v for k, v in (prices or {}).items()}
        self.failing = {t.upper() for t in failing}
        self.calls: List[str] = []

    def set_price(self, ticker: str, price: float) -> None:
        self.prices[ticker.upper()] = price

    async def quote(self, ticker: str) -> Quote:
        symbol = ticker.upper()
        self.calls.append(symbol)
        if symbol in self.failing:
            raise FetchError(f"Network error for {symbol}", ticker=symbol)
        if symbol not in self.prices:
            raise QuoteNotFoundError(f"No price available for {symbol}", ticker=symbol)
        return Quote(ticker=symbol, current_price=self.prices[symbol])


class RecordingNotifier:
    """Notifier that records messages instead of sending them"""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.messages: List[str] = []

    async def send(self, message: str) -> bool:
        self.messages.append(message)
        return self.succeed


class MockDiscordClient:
    """Mock Discord client for testing"""

    def __init__(self):
        self.user = MagicMock()
        self.user.name = "TestBot"
        self.channels = {}
        self.fetch_channel = AsyncMock(side_effect=self._fetch_channel)

    def add_channel(self, channel_id):
        channel = MagicMock()
        channel.id = channel_id
        channel.name = f"test-channel-{channel_id}"
        channel.send = AsyncMock(return_value=MagicMock())
        self.channels[channel_id] = channel
        return channel

    def get_channel(self, channel_id):
        return self.channels.get(channel_id)

    async def _fetch_channel(self, channel_id):
        raise discord.DiscordException(f"Unknown channel {channel_id}")

    async def wait_until_ready(self):
        return True


@pytest.fixture
def fetcher():
    return FakeQuoteFetcher()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def storage():
    return InMemoryPortfolioStorage()


@pytest.fixture
def mock_client():
    return MockDiscordClient()


@pytest.fixture
def make_position():
    def _make(ticker="AAPL", average=100.0, entry=90.0, exit=120.0, quantity=0.0):
        return Position(
            ticker=ticker,
            average_buy_price=average,
            target_entry=entry,
            target_exit=exit,
            quantity=quantity,
        )
    return _make


@pytest.fixture(scope="session", autouse=True)
def setup_environment():
    """Set up environment variables for testing"""
    os.environ.setdefault("FINANCIAL_DATASETS_API_KEY", "test_api_key")
    yield
