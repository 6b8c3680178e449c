import random
from itertools import count
from typing import Callable, List
from unittest.mock import AsyncMock, MagicMock

import pytest
import discord
from discord.ext import commands

from src.commands.cup_draft import CupDraftCommands
from src.cup_draft.application.cup_service import CupApplicationService
from src.cup_draft.domain.entities.cup import Cup
from src.cup_draft.domain.entities.player import Player
from src.cup_draft.domain.services.draft_engine import DraftEngine
from src.cup_draft.domain.services.team_names import TeamNameService
from src.cup_draft.infrastructure.cup_registry import CupRegistry
from src.cup_draft.infrastructure.mock_adapters import MockCupConfiguration, MockPermissionChecker
from src.cup_draft.presentation.cup_presenter import CupPresenter

CHANNEL_ID = "123"
GUILD_ID = "789"
MANAGER_ID = "100"


def make_players(total: int, first_id: int = 1) -> List[Player]:
    """Players with ids "1", "2", ... and names "Player1", "Player2", ..."""
    return [Player(str(i), f"Player{i}") for i in range(first_id, first_id + total)]


@pytest.fixture
def manager() -> Player:
    return Player(MANAGER_ID, "Manager")


@pytest.fixture
def engine() -> DraftEngine:
    """Engine with seeded team names"""
    return DraftEngine(TeamNameService(random.Random(42)))


@pytest.fixture
def cup_factory(manager) -> Callable[..., Cup]:
    """Create a cup in signup with the given number of players"""
    def _make(players: int = 0, team_size: int = 4, channel_id: str = CHANNEL_ID) -> Cup:
        return Cup(
            channel_id=channel_id,
            manager=manager.copy(),
            guild_id=GUILD_ID,
            team_size=team_size,
            players=make_players(players),
        )
    return _make


@pytest.fixture
def pickup_factory(cup_factory, engine) -> Callable[..., Cup]:
    """Create a cup that has been closed and is ready for picking"""
    def _make(players: int = 8, team_size: int = 4, keep_count=None) -> Cup:
        cup = cup_factory(players, team_size)
        engine.close(cup, keep_count)
        return cup
    return _make


@pytest.fixture
def registry(tmp_path) -> CupRegistry:
    return CupRegistry(str(tmp_path / "channels"))


@pytest.fixture
def permissions() -> MockPermissionChecker:
    return MockPermissionChecker()


@pytest.fixture
def configuration() -> MockCupConfiguration:
    return MockCupConfiguration()


@pytest.fixture
def service(registry, permissions, configuration, engine) -> CupApplicationService:
    return CupApplicationService(registry, permissions, configuration, engine)


@pytest.fixture
def bot() -> MagicMock:
    bot = MagicMock(spec=commands.Bot)
    bot.user = MagicMock(spec=discord.ClientUser)
    bot.user.id = 999
    return bot


@pytest.fixture
def cog(bot, service) -> CupDraftCommands:
    return CupDraftCommands(bot, service, CupPresenter("?draft", service.engine))


@pytest.fixture
def channel() -> MagicMock:
    """Text channel shared by every context of a test"""
    channel = MagicMock(spec=discord.TextChannel)
    channel.id = int(CHANNEL_ID)
    channel.pins = AsyncMock(return_value=[])
    partial = MagicMock()
    partial.delete = AsyncMock()
    channel.get_partial_message = MagicMock(return_value=partial)
    return channel


@pytest.fixture
def make_context(channel) -> Callable[..., MagicMock]:
    """Create mock contexts for different authors in the same channel"""
    message_ids = count(1000)

    def _send(*args, **kwargs):
        sent = MagicMock(spec=discord.Message)
        sent.id = next(message_ids)
        sent.content = kwargs.get("content")
        sent.pin = AsyncMock()
        return sent

    def _make(user_id: str = MANAGER_ID, name: str = "Manager") -> MagicMock:
        ctx = MagicMock(spec=commands.Context)
        ctx.send = AsyncMock(side_effect=_send)
        ctx.message = MagicMock(spec=discord.Message)
        ctx.message.delete = AsyncMock()
        ctx.channel = channel
        ctx.author = MagicMock(spec=discord.Member)
        ctx.author.id = int(user_id)
        ctx.author.display_name = name
        ctx.guild = MagicMock(spec=discord.Guild)
        ctx.guild.id = int(GUILD_ID)
        ctx.invoked_with = None
        return ctx

    return _make


def sent_texts(ctx: MagicMock) -> List[str]:
    """Contents of every message sent through a mock context"""
    return [c.kwargs.get("content") or "" for c in ctx.send.call_args_list]
