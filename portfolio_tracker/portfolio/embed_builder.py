"""
Embed builder for portfolio data.
Creates formatted Discord embeds for portfolio displays.
"""

import discord
from datetime import datetime
from typing import List, Optional

from .models import PositionQuote


class PortfolioEmbedBuilder:
    """Builder for portfolio embeds"""

    def build_portfolio_embed(
        self,
        rows: List[PositionQuote],
        title: str = "Saved Portfolio",
        timestamp: Optional[datetime] = None,
        max_positions: int = 25
    ) -> discord.Embed:
        """
        Build an embed listing positions with their current price and return.

        Args:
            rows: Positions joined with their quotes
            title: Embed title
            timestamp: Time of the price refresh
            max_positions: Maximum positions to display (Discord allows 25 fields)

        Returns:
            Formatted Discord embed
        """
        timestamp = timestamp or datetime.now()
        embed = discord.Embed(
            title=title,
            description=f"Prices as of {timestamp.strftime('%Y-%m-%d %H:%M:%S')}",
            color=discord.Color.blue(),
        )

        if not rows:
            embed.description = "No positions tracked yet. Use `!track` to add one."
            return embed

        for row in rows[:max_positions]:
            position = row.position
            if row.current_price is not None:
                price_text = f"${row.current_price:.2f}"
                emoji = "🟢" if row.return_pct > 0 else "🔴" if row.return_pct < 0 else "⚪"
            else:
                price_text = "N/A"
                emoji = "⚪"

            value = (
                f"Quantity: {position.quantity:g}\n"
                f"Average Buy Price: ${position.average_buy_price:.2f}\n"
                f"Target Entry: ${position.target_entry:.2f}\n"
                f"Target Exit: ${position.target_exit:.2f}\n"
                f"Current Price: {price_text}\n"
                f"Return: {row.return_pct:.2f}%"
            )
            embed.add_field(name=f"{emoji} {position.ticker}", value=value, inline=True)

        if len(rows) > max_positions:
            embed.set_footer(text=f"Showing {max_positions} of {len(rows)} positions")

        return embed
