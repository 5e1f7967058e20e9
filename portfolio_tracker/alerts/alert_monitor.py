"""
Price monitoring for threshold alerts.
Runs one refresh cycle: load positions, fetch quotes, compute returns and
notify the first time each target entry/exit price is crossed.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional
from loguru import logger

from ..errors import FetchError
from ..portfolio.calculator import PortfolioCalculator
from ..portfolio.models import Position, PositionQuote
from ..portfolio.portfolio_storage import PortfolioStorage
from .alert_model import AlertedSet, AlertKind, TriggeredAlert, check_triggered


class MonitorState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    EVALUATING = "evaluating"


@dataclass
class CycleReport:
    """Outcome of one refresh cycle"""
    started_at: datetime
    finished_at: Optional[datetime] = None
    rows: List[PositionQuote] = field(default_factory=list)
    failed_tickers: List[str] = field(default_factory=list)
    alerts: List[TriggeredAlert] = field(default_factory=list)
    store_error: Optional[str] = None


class AlertMonitor:
    """Check tracked positions against their target prices"""

    def __init__(
        self,
        storage: PortfolioStorage,
        fetcher,
        notifier=None,
        alerted: Optional[AlertedSet] = None,
        alerts_enabled: bool = True,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize the alert monitor.

        Args:
            storage: Portfolio store read at the start of each cycle
            fetcher: Object with an async ``quote(ticker) -> Quote`` method
            notifier: Object with an async ``send(message) -> bool`` method
            alerted: Alerts already sent; a fresh set when omitted
            alerts_enabled: Whether thresholds are evaluated at all
            clock: Source of cycle timestamps
        """
        self.storage = storage
        self.fetcher = fetcher
        self.notifier = notifier
        self.alerted = alerted if alerted is not None else AlertedSet()
        self.alerts_enabled = alerts_enabled and notifier is not None
        self.clock = clock
        self.calculator = PortfolioCalculator()
        self.state = MonitorState.IDLE
        self.last_report: Optional[CycleReport] = None
        logger.info(f"Initialized AlertMonitor (alerts {'enabled' if self.alerts_enabled else 'disabled'})")

    async def run_cycle(self) -> CycleReport:
        """
        Run one refresh cycle over every stored position.

        Store and quote failures are logged; a failing ticker is skipped
        and the remaining tickers are still evaluated.
        """
        report = CycleReport(started_at=self.clock())
        logger.info("Checking stock alerts...")

        try:
            self.state = MonitorState.FETCHING
            try:
                positions = await self.storage.list_entries()
            except FetchError as e:
                logger.error(f"Error checking stock alerts: {e}")
                report.store_error = str(e)
                return report

            for position in positions:
                await self._process_position(position, report)
        finally:
            self.state = MonitorState.IDLE
            report.finished_at = self.clock()
            self.last_report = report

        logger.info(
            f"Alert check complete: {len(report.rows)} evaluated, "
            f"{len(report.failed_tickers)} failed, {len(report.alerts)} alerts"
        )
        return report

    async def _process_position(self, position: Position, report: CycleReport) -> None:
        self.state = MonitorState.FETCHING
        try:
            quote = await self.fetcher.quote(position.ticker)
        except FetchError as e:
            logger.error(f"Error fetching price for {position.ticker}: {e}")
            report.failed_tickers.append(position.ticker)
            return
        except Exception:
            logger.exception(f"Unexpected error fetching price for {position.ticker}")
            report.failed_tickers.append(position.ticker)
            return

        if quote.current_price is None:
            logger.warning(f"No current price for {position.ticker}")
            report.failed_tickers.append(position.ticker)
            return

        self.state = MonitorState.EVALUATING
        row = self.calculator.build_row(position, quote)
        report.rows.append(row)
        logger.info(f"Ticker: {position.ticker}, Current Price: ${quote.current_price}")

        if self.alerts_enabled:
            await self._evaluate_thresholds(row, report)

    async def _evaluate_thresholds(self, row: PositionQuote, report: CycleReport) -> None:
        position = row.position
        price = row.current_price
        entry_crossed, exit_crossed = check_triggered(position, price)

        for kind, crossed in ((AlertKind.ENTRY, entry_crossed), (AlertKind.EXIT, exit_crossed)):
            if not crossed or self.alerted.has(position.ticker, kind):
                continue

            alert = TriggeredAlert(
                ticker=position.ticker,
                kind=kind,
                current_price=price,
                average_buy_price=position.average_buy_price,
                return_pct=row.return_pct,
            )
            alert.delivered = await self.notifier.send(alert.to_message())
            # Marked even when delivery failed; the alert is not retried
            self.alerted.mark(position.ticker, kind, self.clock())
            report.alerts.append(alert)
