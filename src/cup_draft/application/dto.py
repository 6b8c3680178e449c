"""
Data Transfer Objects

Results handed from the application service to the command layer.
"""

from dataclasses import dataclass
from typing import Optional

from ..domain.entities.cup import Cup
from ..domain.entities.outcomes import PickOutcome, WithdrawOutcome
from ..domain.entities.player import Player


@dataclass
class SignupResult:
    """Result of a signup"""
    cup: Cup
    index: int
    player: Player

    @property
    def substitute_number(self) -> Optional[int]:
        """1-based substitute position, None during signup"""
        active = self.cup.active_player_count
        if active == 0 or self.index < active:
            return None
        return self.index - active + 1


@dataclass
class WithdrawResult:
    """Result of a withdrawal"""
    cup: Cup
    outcome: WithdrawOutcome


@dataclass
class PickResult:
    """Result of a pick"""
    cup: Cup
    outcome: PickOutcome
    previous_reply_id: str = ""  # status reply left over from a completed cup

    @property
    def completed(self) -> bool:
        return self.outcome.completed

