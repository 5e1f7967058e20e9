"""
Configuration for the portfolio tracker.
Defaults live here as constants; secrets and overrides come from the environment.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

from .errors import ConfigError

# Price refresh / alert check interval in seconds
REFRESH_INTERVAL = 60

# JSON document collection holding one record per tracked position
PORTFOLIO_FILE = "portfolio.json"

# "json" for the durable file store, "memory" for page-local state
PORTFOLIO_STORE = "json"

# Quote API
QUOTE_API_BASE_URL = "https://api.financialdatasets.ai"


@dataclass
class Settings:
    """Runtime settings resolved from the environment"""
    discord_token: Optional[str]
    alert_channel_id: Optional[int]
    quote_api_key: Optional[str]
    portfolio_file: str = PORTFOLIO_FILE
    portfolio_store: str = PORTFOLIO_STORE
    refresh_interval: float = REFRESH_INTERVAL
    alerts_enabled: bool = True


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_interval(value: str) -> float:
    try:
        interval = float(value)
    except ValueError:
        raise ConfigError(f"REFRESH_INTERVAL must be a number, got {value!r}")
    if interval <= 0:
        raise ConfigError("REFRESH_INTERVAL must be greater than 0")
    return interval


def load_settings(require_notifier: bool = True) -> Settings:
    """
    Load settings from the process environment (and a .env file if present).

    Args:
        require_notifier: Whether the bot token and alert channel are mandatory

    Returns:
        Resolved settings

    Raises:
        ConfigError: If a required setting is missing or malformed
    """
    # Load variables from .env file into environment variables
    load_dotenv()

    token = os.getenv("DISCORD_TOKEN")
    channel_raw = os.getenv("ALERT_CHANNEL_ID")

    if require_notifier:
        missing = [
            name for name, value in (("DISCORD_TOKEN", token), ("ALERT_CHANNEL_ID", channel_raw))
            if not value
        ]
        if missing:
            logger.critical(f"Missing required environment variables: {', '.join(missing)}")
            raise ConfigError(f"Please provide {' and '.join(missing)} in the environment or .env")

    channel_id = None
    if channel_raw:
        try:
            channel_id = int(channel_raw)
        except ValueError:
            raise ConfigError(f"ALERT_CHANNEL_ID must be an integer, got {channel_raw!r}")

    store = os.getenv("PORTFOLIO_STORE", PORTFOLIO_STORE).strip().lower()
    if store not in ("json", "memory"):
        raise ConfigError(f"PORTFOLIO_STORE must be 'json' or 'memory', got {store!r}")

    interval_raw = os.getenv("REFRESH_INTERVAL")
    interval = _parse_interval(interval_raw) if interval_raw else REFRESH_INTERVAL

    alerts_raw = os.getenv("ALERTS_ENABLED")
    alerts_enabled = _parse_bool(alerts_raw) if alerts_raw else True

    settings = Settings(
        discord_token=token,
        alert_channel_id=channel_id,
        quote_api_key=os.getenv("FINANCIAL_DATASETS_API_KEY"),
        portfolio_file=os.getenv("PORTFOLIO_FILE", PORTFOLIO_FILE),
        portfolio_store=store,
        refresh_interval=interval,
        alerts_enabled=alerts_enabled,
    )
    logger.debug(
        f"Loaded settings: store={settings.portfolio_store}, file={settings.portfolio_file}, "
        f"interval={settings.refresh_interval}s, alerts_enabled={settings.alerts_enabled}"
    )
    return settings
