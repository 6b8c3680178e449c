"""Constants used throughout the application"""

import discord

# Colors for embeds
ERROR_COLOR = discord.Color.red()
INFO_COLOR = discord.Color.blue()

# Generic reply when a command fails unexpectedly
GENERIC_ERROR_MESSAGE = "Something went wrong while processing that command"

# Bot presence, followed by the command prefix
PRESENCE_PREFIX = "type "
