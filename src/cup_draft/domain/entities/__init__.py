"""
Domain Entities

Core business objects representing the cup's main concepts.
"""

from .cup import Cup, DEFAULT_TEAM_SIZE, MINIMUM_TEAMS
from .cup_status import CupStatus
from .outcomes import Assignment, PickOutcome, PickTurn, WithdrawOutcome
from .player import NO_INDEX, Player
from .team import Team

__all__ = [
    "Cup",
    "CupStatus",
    "Player",
    "Team",
    "PickTurn",
    "Assignment",
    "PickOutcome",
    "WithdrawOutcome",
    "NO_INDEX",
    "DEFAULT_TEAM_SIZE",
    "MINIMUM_TEAMS",
]
