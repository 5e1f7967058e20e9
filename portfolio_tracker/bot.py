"""
Main Discord bot application.
Initializes the bot, loads the portfolio alerts cog and runs it.
"""

import sys

import discord
from discord.ext import commands

from .logging_setup import setup_logging, get_logger
from .alerts import setup as setup_portfolio_alerts
from .api import AsyncQuoteAPI
from .config import Settings, load_settings
from .errors import ConfigError
from .portfolio.portfolio_storage import create_storage

# Create module logger
logger = get_logger("bot")


def create_bot(settings: Settings, storage=None, fetcher=None) -> commands.Bot:
    """
    Build the bot and register its startup hook.

    Args:
        settings: Resolved runtime settings
        storage: Portfolio store (built from settings when omitted)
        fetcher: Quote fetcher (built from settings when omitted)
    """
    intents = discord.Intents.default()
    intents.message_content = True
    bot = commands.Bot(command_prefix="!", intents=intents)

    storage = storage or create_storage(settings.portfolio_store, settings.portfolio_file)
    fetcher = fetcher or AsyncQuoteAPI(api_key=settings.quote_api_key)

    @bot.event
    async def on_ready():
        """Called when bot is ready and connected to Discord"""
        logger.info(f"Bot is connected! Logged in as {bot.user}")
        logger.info(f"Bot is in {len(bot.guilds)} servers")

        # on_ready fires again after reconnects
        if bot.get_cog("PortfolioAlerts") is not None:
            return

        try:
            await setup_portfolio_alerts(bot, settings, storage, fetcher)
            logger.info("Portfolio alerts loaded!")
        except Exception as e:
            logger.error(f"Error loading portfolio alerts: {e}")

    @bot.command(name="ping")
    async def ping_command(ctx):
        """Simple ping command to test if bot is responsive"""
        logger.debug(f"Ping command received from {ctx.author}")
        await ctx.send("Pong! Bot is working!")

    return bot


def main():
    setup_logging()

    try:
        settings = load_settings(require_notifier=True)
    except ConfigError as e:
        logger.critical(f"ERROR: {e}")
        sys.exit(1)

    if not settings.quote_api_key:
        logger.warning("FINANCIAL_DATASETS_API_KEY is not set; every quote fetch will fail")

    bot = create_bot(settings)

    logger.info("Starting bot...")
    try:
        bot.run(settings.discord_token, log_handler=None)
    except discord.LoginFailure as e:
        logger.critical(f"Failed to start bot: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
