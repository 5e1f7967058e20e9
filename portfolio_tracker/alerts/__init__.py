"""
Threshold alerts package.
Provides the refresh/alert loop and Discord notification delivery.
"""

from .alert_model import AlertedSet, AlertKind, TriggeredAlert
from .alert_monitor import AlertMonitor, CycleReport, MonitorState
from .notifier import DiscordNotifier
from .cog import PortfolioAlerts, setup

__all__ = [
    "AlertedSet",
    "AlertKind",
    "TriggeredAlert",
    "AlertMonitor",
    "CycleReport",
    "MonitorState",
    "DiscordNotifier",
    "PortfolioAlerts",
    "setup",
]
