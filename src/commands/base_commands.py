import logging
from typing import Optional

import discord
from discord.ext import commands

from src.utils.constants import INFO_COLOR
from src.utils.formatting import truncate_message

logger = logging.getLogger(__name__)

"""Base command class providing common functionality for all command types."""

class BaseCommands(commands.Cog):
    """Base class for all command categories providing common functionality."""

    async def send_response(
        self,
        ctx: commands.Context,
        message: Optional[str] = None,
        *,
        embed: Optional[discord.Embed] = None
    ) -> Optional[discord.Message]:
        """Send a message to the command's channel

        Args:
            ctx: Command context
            message: Optional text message
            embed: Optional embed message

        Returns:
            Optional[discord.Message]: The sent message, None if Discord refused it
        """
        try:
            content = truncate_message(message) if message else None
            return await ctx.send(content=content, embed=embed)
        except discord.HTTPException as e:
            logger.error(f"Error sending response: {e}")
            return None

    async def send_info(self, ctx: commands.Context, title: str, message: str) -> None:
        """Send an informational embed"""
        embed = discord.Embed(
            title=title,
            description=message,
            color=INFO_COLOR
        )
        await self.send_response(ctx, embed=embed)

    async def delete_message(self, message: discord.abc.Snowflake) -> None:
        """Delete a message, ignoring ones that are already gone

        Args:
            message: Message or partial message to delete
        """
        try:
            await message.delete()
        except discord.HTTPException as e:
            logger.debug(f"Could not delete message {message.id}: {e}")

    def get_user_name(self, ctx: commands.Context) -> str:
        """Server display name if in a guild, otherwise Discord username"""
        return ctx.author.display_name

    def get_user_id(self, ctx: commands.Context) -> str:
        return str(ctx.author.id)

    def get_channel_id(self, ctx: commands.Context) -> str:
        return str(ctx.channel.id)

    def get_guild_id(self, ctx: commands.Context) -> str:
        """Guild ID, empty outside of guilds"""
        return str(ctx.guild.id) if ctx.guild else ""
