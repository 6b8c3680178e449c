import asyncio
import logging
import sys
import os
from typing import NoReturn, Dict

import discord

from src.bot import DraftBot

logger = logging.getLogger(__name__)

# Add constants for retry logic
MAX_RETRY_ATTEMPTS = 3  # Maximum number of restart attempts
BASE_RETRY_DELAY = 5  # Base delay in seconds
MAX_RETRY_DELAY = 300  # Maximum delay (5 minutes)

# Only these must be set, everything else has a default
REQUIRED_VARIABLES = ("DISCORD_TOKEN",)

def setup_logging() -> None:
    """Configure logging settings"""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler("bot.log", encoding="utf-8")
        ]
    )

def get_config() -> Dict[str, str]:
    """Get configuration from environment variables"""
    return {
        "DISCORD_TOKEN": os.getenv("DISCORD_TOKEN", ""),
        "DRAFT_DATA_DIR": os.getenv("DRAFT_DATA_DIR", ""),
        "DRAFT_COMMAND_PREFIX": os.getenv("DRAFT_COMMAND_PREFIX", ""),
        "DRAFT_TEAM_SIZE": os.getenv("DRAFT_TEAM_SIZE", ""),
        "DRAFT_ALLOW_DUPLICATES": os.getenv("DRAFT_ALLOW_DUPLICATES", ""),
        "DRAFT_AUTOFILL": os.getenv("DRAFT_AUTOFILL", ""),
        "DRAFT_SAVE_ON_WHO": os.getenv("DRAFT_SAVE_ON_WHO", ""),
    }

def validate_config(config: Dict[str, str]) -> None:
    """Raise ValueError naming every missing required variable"""
    missing_vars = [k for k in REQUIRED_VARIABLES if not config.get(k)]
    if missing_vars:
        error_msg = (
            f"Missing required environment variables: {', '.join(missing_vars)}\n"
            "Please ensure all required environment variables are set."
        )
        logger.error(error_msg)
        raise ValueError(error_msg)

async def start_bot(config: Dict[str, str], attempt: int = 1) -> NoReturn:
    """Start the Discord bot with retry logic

    Args:
        config: Application configuration
        attempt: Current attempt number

    Raises:
        SystemExit: If bot fails to start after maximum retries
    """
    try:
        logger.info("Creating bot instance...")
        bot = DraftBot(config)
        logger.info("Bot instance created successfully")

        logger.info("Starting bot with token...")
        async with bot:
            try:
                await bot.start(config["DISCORD_TOKEN"])
            except Exception as e:
                logger.error(f"Error during bot.start(): {e}", exc_info=True)
                raise
    except discord.LoginFailure as e:
        logger.error(f"Failed to login: {e}", exc_info=True)
        raise SystemExit("Discord login failed") from e
    except Exception as e:
        if attempt >= MAX_RETRY_ATTEMPTS:
            logger.error(
                f"Bot failed to start after {MAX_RETRY_ATTEMPTS} attempts. "
                f"Last error: {e}",
                exc_info=True
            )
            raise SystemExit(
                f"Bot failed to start after {MAX_RETRY_ATTEMPTS} attempts.\n"
                f"Last error: {str(e)}"
            ) from e

        # Calculate delay with exponential backoff
        delay = retry_delay(attempt)
        logger.warning(
            f"Bot crashed (attempt {attempt}/{MAX_RETRY_ATTEMPTS}). "
            f"Retrying in {delay} seconds..."
        )

        await asyncio.sleep(delay)
        await start_bot(config, attempt + 1)

def retry_delay(attempt: int) -> int:
    return min(BASE_RETRY_DELAY * (2 ** (attempt - 1)), MAX_RETRY_DELAY)

async def main() -> NoReturn:
    """Main entry point

    Raises:
        SystemExit: If initialization fails or bot crashes
    """
    try:
        logger.info("Loading configuration from environment...")
        config = get_config()
        validate_config(config)

        logger.info("Starting bot with retry logic...")
        await start_bot(config)

    except SystemExit as e:
        logger.error(f"Bot terminated: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        sys.exit(1)
