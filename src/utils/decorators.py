"""Utility decorators for command handling"""

import functools
import logging
from typing import Any, Callable, TypeVar, cast

from discord.ext import commands

from src.utils.constants import GENERIC_ERROR_MESSAGE

logger = logging.getLogger(__name__)

T = TypeVar('T')
CommandFunc = Callable[..., Any]

def command_handler() -> Callable[[CommandFunc], CommandFunc]:
    """Decorator for prefix command callbacks

    Logs unexpected errors, tells the channel something went wrong and
    re-raises so the bot's error handler sees the failure too.

    Returns:
        Callable: Decorated command handler
    """
    def decorator(func: CommandFunc) -> CommandFunc:
        @functools.wraps(func)
        async def wrapper(
            self,
            ctx: commands.Context,
            *args: Any,
            **kwargs: Any
        ) -> Any:
            try:
                return await func(self, ctx, *args, **kwargs)
            except Exception as e:
                logger.error(f"Error in {func.__name__}: {e}", exc_info=True)
                await ctx.send(GENERIC_ERROR_MESSAGE)
                raise
        return cast(CommandFunc, wrapper)
    return decorator
