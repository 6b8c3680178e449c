import pytest
from unittest.mock import MagicMock

from discord.ext import commands

from src.bot import DraftBot
from src.main import MAX_RETRY_DELAY, get_config, retry_delay, validate_config


@pytest.fixture
def draft_bot(tmp_path):
    return DraftBot({"DISCORD_TOKEN": "token", "DRAFT_DATA_DIR": str(tmp_path)})


def message_with(content):
    message = MagicMock()
    message.content = content
    return message


def test_bot_uses_configured_prefix(tmp_path):
    bot = DraftBot({"DRAFT_COMMAND_PREFIX": "!Cup", "DRAFT_DATA_DIR": str(tmp_path)})
    assert bot.command_prefix_text == "!cup"


@pytest.mark.asyncio
async def test_prefix_matches_case_insensitively(draft_bot):
    assert await draft_bot._get_prefix(draft_bot, message_with("?DRAFT add")) == ["?DRAFT"]
    assert await draft_bot._get_prefix(draft_bot, message_with("?draft who")) == ["?draft"]
    assert await draft_bot._get_prefix(draft_bot, message_with("hello")) == ["?draft"]


def test_error_messages(draft_bot):
    assert draft_bot._get_error_message(commands.BadArgument()) == "Invalid argument"
    assert draft_bot._get_error_message(RuntimeError()) == "Something went wrong while processing that command"


def test_retry_delay():
    assert retry_delay(1) == 5
    assert retry_delay(2) == 10
    assert retry_delay(20) == MAX_RETRY_DELAY


def test_validate_config():
    validate_config({"DISCORD_TOKEN": "token"})
    with pytest.raises(ValueError, match="DISCORD_TOKEN"):
        validate_config({"DISCORD_TOKEN": ""})


def test_get_config_reads_environment(monkeypatch):
    monkeypatch.setenv("DISCORD_TOKEN", "abc")
    monkeypatch.setenv("DRAFT_TEAM_SIZE", "3")
    config = get_config()
    assert config["DISCORD_TOKEN"] == "abc"
    assert config["DRAFT_TEAM_SIZE"] == "3"
