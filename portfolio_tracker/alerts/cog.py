"""
Discord cog for portfolio alerts.
Runs the refresh/alert loop in the background and exposes portfolio commands.
"""

import asyncio
from typing import Optional

import discord
from discord.ext import commands
from loguru import logger

from ..config import Settings
from ..errors import FetchError, ValidationError
from ..portfolio.embed_builder import PortfolioEmbedBuilder
from ..portfolio.form import submit_position
from ..portfolio.portfolio_storage import PortfolioStorage
from ..portfolio.price_service import PortfolioPriceService
from ..scheduler import RefreshScheduler
from .alert_model import AlertedSet
from .alert_monitor import AlertMonitor
from .notifier import DiscordNotifier


class PortfolioAlerts(commands.Cog):
    """Discord cog for refreshing prices and sending threshold alerts"""

    def __init__(self, bot: commands.Bot, settings: Settings, storage: PortfolioStorage, fetcher):
        """
        Initialize the portfolio alerts cog.

        Args:
            bot: Discord bot instance
            settings: Resolved runtime settings
            storage: Portfolio store
            fetcher: Quote fetcher
        """
        self.bot = bot
        self.settings = settings
        self.storage = storage
        logger.info("Initializing PortfolioAlerts cog")

        # Alert state lives as long as this cog, i.e. the process
        self.alerted = AlertedSet()
        self.notifier = DiscordNotifier(bot, settings.alert_channel_id)
        self.monitor = AlertMonitor(
            storage,
            fetcher,
            notifier=self.notifier,
            alerted=self.alerted,
            alerts_enabled=settings.alerts_enabled,
        )
        self.price_service = PortfolioPriceService(fetcher)
        self.embed_builder = PortfolioEmbedBuilder()
        self.scheduler = RefreshScheduler(
            settings.refresh_interval, self.monitor.run_cycle, name="alert check"
        )
        self._startup: Optional[asyncio.Task] = None

    async def cog_load(self):
        """Start the alert loop once the bot is ready"""
        self._startup = asyncio.create_task(self._start_when_ready())

    async def _start_when_ready(self):
        logger.debug("Waiting for bot to be ready before starting alert loop")
        await self.bot.wait_until_ready()
        self.scheduler.start()
        logger.info("Started price alert checker")

    async def cog_unload(self):
        """Stop the alert loop when the cog is unloaded"""
        logger.info("Unloading PortfolioAlerts cog")
        if self._startup is not None and not self._startup.done():
            self._startup.cancel()
        self.scheduler.stop()

    @commands.command(name="portfolio")
    async def show_portfolio(self, ctx):
        """Show tracked positions with current price and return"""
        logger.debug(f"Portfolio command invoked by {ctx.author}")
        try:
            positions = await self.storage.list_entries()
        except FetchError as e:
            logger.error(f"Error loading portfolio: {e}")
            await ctx.send(f"❌ Could not load portfolio: {e.message}")
            return

        rows = await self.price_service.refresh(positions)
        await ctx.send(embed=self.embed_builder.build_portfolio_embed(rows))

    @commands.command(name="track")
    async def track_position(
        self,
        ctx,
        ticker: str,
        average_buy_price: str,
        target_entry: str,
        target_exit: str,
        quantity: str = "",
    ):
        """Add a position to the portfolio

        Example:
        !track AAPL 180 170 220 10   - Avg $180, alert at <= $170 and >= $220, 10 shares
        """
        logger.info(f"{ctx.author} adding {ticker} to portfolio")
        try:
            position = await submit_position(
                self.storage,
                ticker=ticker,
                averageBuyPrice=average_buy_price,
                targetEntry=target_entry,
                targetExit=target_exit,
                quantity=quantity,
            )
        except ValidationError as e:
            await ctx.send(f"❌ {e.message}")
            return
        except FetchError as e:
            logger.error(f"Error adding stock: {e}")
            await ctx.send(f"❌ Could not save position: {e.message}")
            return

        await ctx.send(
            f"✅ Tracking {position.ticker}: average ${position.average_buy_price:.2f}, "
            f"entry <= ${position.target_entry:.2f}, exit >= ${position.target_exit:.2f}"
        )

    @commands.command(name="alerts")
    async def show_alerts(self, ctx):
        """List alerts already sent since the bot started"""
        if not self.alerted:
            await ctx.send("No alerts sent since the bot started")
            return

        embed = discord.Embed(
            title="Alerts Sent",
            description="Each ticker alerts once per threshold until the bot restarts",
            color=discord.Color.gold(),
        )
        for ticker, kind in self.alerted:
            sent_at = self.alerted.sent_at(ticker, kind)
            embed.add_field(
                name=f"{ticker} {kind.value}",
                value=sent_at.strftime("%Y-%m-%d %H:%M:%S"),
                inline=True,
            )
        await ctx.send(embed=embed)


async def setup(bot, settings: Settings, storage: PortfolioStorage, fetcher):
    """Add the PortfolioAlerts cog to the bot"""
    logger.info("Setting up PortfolioAlerts cog")
    cog = PortfolioAlerts(bot, settings, storage, fetcher)
    await bot.add_cog(cog)
    logger.info("PortfolioAlerts cog setup complete")
    return cog
