import logging
from typing import Dict, List, Optional, cast

import discord
from discord.ext import commands

from src.commands.cup_draft import CupDraftCommands
from src.cup_draft.infrastructure.container import CupContainer
from src.cup_draft.infrastructure.cup_config_adapter import CupConfigurationAdapter
from src.cup_draft.presentation.cup_presenter import CupPresenter
from src.utils.constants import ERROR_COLOR, GENERIC_ERROR_MESSAGE, PRESENCE_PREFIX

logger = logging.getLogger(__name__)


class DraftBot(commands.Bot):
    """Draft cup bot handling commands and events"""

    def __init__(self, config: Dict[str, str], container: Optional[CupContainer] = None) -> None:
        """Initialize bot

        Args:
            config: Configuration dictionary from the environment
            container: Optional dependency container. If not provided, one will be created.
        """
        # Set up intents
        intents = discord.Intents.default()
        intents.message_content = True  # Required for prefix commands and moderation
        intents.members = True  # Required for admin role lookups
        intents.guilds = True
        intents.messages = True
        logger.info("Initialized bot intents: %s", intents.value)

        super().__init__(
            command_prefix=self._get_prefix,
            intents=intents,
            help_command=None,  # Replaced by the draft help command
            case_insensitive=True,
            strip_after_prefix=True
        )

        self._config = config
        self.container = container or CupContainer(self, CupConfigurationAdapter(config))
        self.command_prefix_text = self.container.get_configuration().get_command_prefix()
        logger.info("Bot initialization completed")

    async def setup_hook(self) -> None:
        """Restore saved cups and register commands"""
        try:
            logger.info("Starting setup_hook...")
            logger.info(f"Draft settings: {self.container.get_configuration().as_dict()}")

            restored = self.container.restore()
            logger.info(f"Restored {restored} cups from disk")

            service = self.container.get_cup_service()
            presenter = CupPresenter(self.command_prefix_text, service.engine)
            await self.add_cog(CupDraftCommands(self, service, presenter))
            if not self.get_cog(CupDraftCommands.__name__):
                raise ValueError(f"Failed to add cog: {CupDraftCommands.__name__}")

            logger.info("Bot setup completed successfully")
        except Exception as e:
            logger.error(f"Error in setup_hook: {str(e)}", exc_info=True)
            raise

    async def on_ready(self) -> None:
        """Handle bot ready event"""
        user = cast(discord.ClientUser, self.user)
        logger.info(f"Logged in as {user.name} (ID: {user.id})")
        await self._update_presence()

    async def on_resumed(self) -> None:
        await self._update_presence()

    async def _update_presence(self) -> None:
        """Give users a starting point"""
        try:
            await self.change_presence(
                activity=discord.Game(name=f"{PRESENCE_PREFIX}{self.command_prefix_text}")
            )
        except Exception as e:
            logger.error(f"Error updating bot presence: {e}")

    async def on_command_error(
        self,
        ctx: commands.Context,
        error: commands.CommandError
    ) -> None:
        """Handle command errors

        Args:
            ctx: Command context
            error: Error that occurred
        """
        if isinstance(error, commands.CommandNotFound):
            # answered by the draft cog
            return

        if isinstance(error, commands.CommandInvokeError):
            # already reported to the channel by the command handler
            logger.error(f"Command error: {error}", exc_info=error)
            return

        error_message = self._get_error_message(error)
        await self._send_error_message(ctx, error_message)
        logger.error(f"Command error: {error}", exc_info=error)

    def _get_error_message(self, error: Exception) -> str:
        """Get user-friendly error message

        Args:
            error: Error to process

        Returns:
            str: Error message to display
        """
        if isinstance(error, commands.BotMissingPermissions):
            return "The bot is missing permissions for this command"
        if isinstance(error, commands.MissingRequiredArgument):
            return f"Missing argument: {error.param.name}"
        if isinstance(error, commands.BadArgument):
            return "Invalid argument"
        return GENERIC_ERROR_MESSAGE

    async def _send_error_message(self, ctx: commands.Context, error_message: str) -> None:
        """Send error message to user"""
        embed = discord.Embed(
            title="Error",
            description=error_message,
            color=ERROR_COLOR
        )
        try:
            await ctx.send(embed=embed)
        except Exception as e:
            logger.error(f"Failed to send error message: {e}")

    async def close(self) -> None:
        """Save every cup to disk, then close the connection"""
        try:
            logger.info("Bot shutting down, saving cups...")
            saved = self.container.shutdown()
            logger.info(f"Saved {saved} cups")
        except Exception as e:
            logger.error(f"Error during cleanup: {str(e)}", exc_info=True)
        finally:
            await super().close()
            logger.info("Bot shutdown complete")

    async def _get_prefix(self, bot: commands.Bot, message: discord.Message) -> List[str]:
        """Get command prefixes for the bot

        The prefix matches case-insensitively, so the prefix as typed is
        returned when it matches.

        Args:
            bot: Bot instance
            message: Message to check

        Returns:
            List[str]: List of valid prefixes
        """
        prefix = self.command_prefix_text
        typed = message.content[:len(prefix)]
        if typed.lower() == prefix:
            return [typed]
        return [prefix]
