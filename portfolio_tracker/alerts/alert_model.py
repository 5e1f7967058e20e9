"""
Data models for threshold alerts.
Defines alert kinds, the record of alerts already sent and message text.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Iterator, Optional, Tuple

from ..portfolio.models import Position


class AlertKind(str, Enum):
    """Which threshold was crossed"""
    ENTRY = "entry"
    EXIT = "exit"


def check_triggered(position: Position, current_price: float) -> Tuple[bool, bool]:
    """
    Check the position thresholds against a price.

    Returns:
        (entry_crossed, exit_crossed): price at/below target entry,
        price at/above target exit
    """
    return current_price <= position.target_entry, current_price >= position.target_exit


class AlertedSet:
    """
    (ticker, kind) pairs already notified during this process lifetime.

    Held in memory only. A new instance (process restart) starts empty, so a
    position whose threshold is still crossed alerts again.
    """

    def __init__(self):
        self._sent: Dict[Tuple[str, AlertKind], datetime] = {}

    @staticmethod
    def _key(ticker: str, kind: AlertKind) -> Tuple[str, AlertKind]:
        return ticker.strip().upper(), AlertKind(kind)

    def has(self, ticker: str, kind: AlertKind) -> bool:
        return self._key(ticker, kind) in self._sent

    def mark(self, ticker: str, kind: AlertKind, when: Optional[datetime] = None) -> None:
        self._sent[self._key(ticker, kind)] = when or datetime.now()

    def sent_at(self, ticker: str, kind: AlertKind) -> Optional[datetime]:
        return self._sent.get(self._key(ticker, kind))

    def clear(self) -> None:
        self._sent.clear()

    def __contains__(self, item) -> bool:
        ticker, kind = item
        return self.has(ticker, kind)

    def __iter__(self) -> Iterator[Tuple[str, AlertKind]]:
        return iter(sorted(self._sent, key=lambda pair: (pair[0], pair[1].value)))

    def __len__(self) -> int:
        return len(self._sent)


@dataclass
class TriggeredAlert:
    """An alert raised during a refresh cycle"""
    ticker: str
    kind: AlertKind
    current_price: float
    average_buy_price: float
    return_pct: float
    delivered: bool = False

    def to_message(self) -> str:
        """Text sent to the notification channel"""
        if self.kind == AlertKind.ENTRY:
            headline = f"🟢 Buy opportunity for {self.ticker} at ${self.current_price}"
        else:
            headline = f"🔴 Sell alert for {self.ticker} at ${self.current_price}"
        return (
            f"{headline}\n"
            f"Average Buy Price: ${self.average_buy_price}\n"
            f"Return: {self.return_pct:.2f}%"
        )
