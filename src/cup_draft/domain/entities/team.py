"""
Team Entity

A team is the head and tail of a list of players threaded through
Player.next_index in the cup's player sequence.
"""

from dataclasses import dataclass
from typing import Any, Dict

from .player import NO_INDEX


@dataclass
class Team:
    """Represents a team assembled during pickup"""
    first_index: int = NO_INDEX  # captain
    last_index: int = NO_INDEX
    name: str = ""

    @property
    def is_empty(self) -> bool:
        """Check if no player has been assigned yet"""
        return self.first_index == NO_INDEX

    def reset(self) -> None:
        """Clear players and name"""
        self.first_index = NO_INDEX
        self.last_index = NO_INDEX
        self.name = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "first_index": self.first_index,
            "last_index": self.last_index,
            "name": self.name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Team":
        return cls(
            first_index=int(data.get("first_index", NO_INDEX)),
            last_index=int(data.get("last_index", NO_INDEX)),
            name=data.get("name", ""),
        )
