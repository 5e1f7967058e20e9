"""
Notification delivery for threshold alerts.
Sends plain text messages to a configured Discord channel.
"""

import discord
from loguru import logger

from ..errors import DeliveryError


class DiscordNotifier:
    """Send alert messages to one Discord channel"""

    def __init__(self, bot: discord.Client, channel_id: int):
        """
        Args:
            bot: Connected Discord client
            channel_id: Destination channel ID
        """
        self.bot = bot
        self.channel_id = channel_id
        logger.debug(f"Initialized DiscordNotifier for channel {channel_id}")

    async def _resolve_channel(self):
        channel = self.bot.get_channel(self.channel_id)
        if channel is not None:
            return channel

        try:
            return await self.bot.fetch_channel(self.channel_id)
        except discord.DiscordException as e:
            raise DeliveryError(f"Channel {self.channel_id} not found: {e}") from e

    async def deliver(self, message: str) -> None:
        """
        Send a message.

        Raises:
            DeliveryError: If the channel is unknown or Discord rejects the message
        """
        channel = await self._resolve_channel()
        try:
            await channel.send(message)
        except discord.DiscordException as e:
            raise DeliveryError(f"Discord rejected message for channel {self.channel_id}: {e}") from e

    async def send(self, message: str) -> bool:
        """
        Send a message; failures are logged and never propagated.

        Returns:
            Whether the message was delivered
        """
        try:
            await self.deliver(message)
        except DeliveryError as e:
            logger.error(f"Error sending alert message: {e}")
            return False

        logger.info(f"Alert sent: {message}")
        return True
