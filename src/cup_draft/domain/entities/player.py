"""
Player Entity

Represents a user signed up for a cup, or the cup's manager.
"""

from dataclasses import dataclass
from typing import Any, Dict

# Marks an unassigned team or the end of a team's player list
NO_INDEX = -1


@dataclass
class Player:
    """Represents a player in the cup"""
    user_id: str
    display_name: str
    team_index: int = NO_INDEX
    next_index: int = NO_INDEX  # next player on the same team

    @property
    def is_assigned_to_team(self) -> bool:
        """Check if player is assigned to a team"""
        return self.team_index != NO_INDEX

    def reset_team(self) -> None:
        """Remove team assignment"""
        self.team_index = NO_INDEX
        self.next_index = NO_INDEX

    def swap_identity(self, other: "Player") -> None:
        """Exchange who this slot belongs to, keeping team bookkeeping in place"""
        self.user_id, other.user_id = other.user_id, self.user_id
        self.display_name, other.display_name = other.display_name, self.display_name

    def copy(self) -> "Player":
        return Player(self.user_id, self.display_name, self.team_index, self.next_index)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "display_name": self.display_name,
            "user_id": self.user_id,
            "team_index": self.team_index,
            "next_index": self.next_index,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        return cls(
            user_id=str(data["user_id"]),
            display_name=data.get("display_name", str(data["user_id"])),
            team_index=int(data.get("team_index", NO_INDEX)),
            next_index=int(data.get("next_index", NO_INDEX)),
        )
