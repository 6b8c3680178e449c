"""Discord markdown and text helpers"""

from typing import Iterable

# Discord rejects messages longer than this
MAX_MESSAGE_LENGTH = 2000

_DURATION_UNITS = (
    (1, "second"),
    (60, "minute"),
    (60 * 60, "hour"),
    (24 * 60 * 60, "day"),
    (7 * 24 * 60 * 60, "week"),
    (30 * 24 * 60 * 60, "month"),
    (12 * 30 * 24 * 60 * 60, "year"),  # 12 months reads better than 365 days
)


def escape(text: str) -> str:
    """Escape markdown characters that usernames commonly contain"""
    return text.replace("_", "\\_").replace("*", "\\*").replace("`", "\\`")


def bold(text: str) -> str:
    return f"**{text}**"


def italic(text: str) -> str:
    return f"*{text}*"


def mention_user(user_id: str) -> str:
    return f"<@{user_id}>"


def mention_channel(channel_id: str) -> str:
    return f"<#{channel_id}>"


def numbered(count: int, singular: str) -> str:
    """'1 player', '3 players'"""
    suffix = "" if count == 1 else "s"
    return f"{count} {singular}{suffix}"


def nth(position: int) -> str:
    """Ordinal for a 1-based position"""
    if position == 1:
        return "1st"
    if position == 2:
        return "2nd"
    if position == 3:
        return "3rd"
    return f"{position}th"


def rightpad(text: str, total: int) -> str:
    return text.ljust(total)


def join_alternatives(items: Iterable[str]) -> str:
    """'a', 'a or b', 'a, b or c'"""
    items = list(items)
    if len(items) <= 1:
        return "".join(items)
    return ", ".join(items[:-1]) + " or " + items[-1]


def humanize(seconds: float) -> str:
    """Round a duration to its most significant unit

    Each unit is considered after rounding to half of the unit below it, so
    59 minutes and 33 seconds reads as "1 hour".
    """
    seconds = abs(seconds)

    index = len(_DURATION_UNITS)
    for i, (unit, _) in enumerate(_DURATION_UNITS):
        rounded = seconds
        if i > 0:
            rounded += _DURATION_UNITS[i - 1][0] / 2
        if unit > rounded:
            index = i
            break
    index = max(index - 1, 0)

    unit, name = _DURATION_UNITS[index]
    major = int((seconds + unit / 2) // unit)
    return numbered(major, name)


def truncate_message(text: str, limit: int = MAX_MESSAGE_LENGTH) -> str:
    """Ensure text fits in a single Discord message"""
    if len(text) <= limit:
        return text
    return text[:limit - 3] + "..."
