"""
Engine Outcomes

Value objects returned by draft engine operations.
"""

from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional

from .player import Player


class PickTurn(NamedTuple):
    """Whose slot is being filled: team index and seat within that team"""
    team: int
    seat: int

    @property
    def is_captain_pick(self) -> bool:
        return self.seat == 0


@dataclass
class Assignment:
    """One player joining one team"""
    player_index: int
    team_index: int
    player: Player
    team_name: str
    is_captain: bool = False


@dataclass
class PickOutcome:
    """Result of a pick, including the automatic assignment of the last player"""
    assignments: List[Assignment] = field(default_factory=list)
    completed: bool = False


@dataclass
class WithdrawOutcome:
    """Result of a withdrawal"""
    removed: Player
    index: int
    replacement: Optional[Player] = None  # substitute who took the slot

    @property
    def was_substituted(self) -> bool:
        return self.replacement is not None
