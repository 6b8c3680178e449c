"""
Discord Integration Adapters

Adapters for Discord-specific functionality.
"""

import logging
from typing import Iterable, Optional

import discord
from discord.ext import commands

from ..application.interfaces import IPermissionChecker
from ..domain.entities.cup import Cup
from .cup_config_adapter import ADMIN_ROLE_NAMES

logger = logging.getLogger(__name__)


class DiscordPermissionChecker(IPermissionChecker):
    """
    Discord implementation of permission checker.

    Besides the cup manager, members holding one of the admin roles of the
    cup's guild are super users. Role names compare case-insensitively.
    """

    def __init__(self, bot: commands.Bot, admin_role_names: Iterable[str] = ADMIN_ROLE_NAMES):
        self.bot = bot
        self._admin_roles = {name.lower() for name in admin_role_names}

    def is_super_user(self, cup: Cup, user_id: str) -> bool:
        """Check manager first, then the member's roles"""
        if self.is_manager(cup, user_id):
            return True

        member = self._get_member(cup.guild_id, user_id)
        if member is None:
            return False
        return any(role.name.lower() in self._admin_roles for role in member.roles)

    def _get_member(self, guild_id: str, user_id: str) -> Optional[discord.Member]:
        try:
            guild = self.bot.get_guild(int(guild_id))
            if guild is None:
                return None
            return guild.get_member(int(user_id))
        except (TypeError, ValueError) as e:
            logger.error(f"Error retrieving guild member {user_id}: {e}")
            return None
