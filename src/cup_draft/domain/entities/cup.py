"""
Cup Entity - Aggregate Root

A cup is one drafting event scoped to a single chat channel. Players are kept
in signup order; the first len(teams) * team_size of them are active slots,
the rest are substitutes. Team rosters are linked lists through the player
sequence, so a player's index never changes once picking has begun.
"""

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .cup_status import CupStatus
from .player import NO_INDEX, Player
from .team import Team

DEFAULT_TEAM_SIZE = 4
MINIMUM_TEAMS = 2

# Minimum time between promotions, in seconds
MINIMUM_PROMOTION_INTERVAL = 2 * 60 * 60
MINIMUM_PROMOTION_INTERVAL_MANAGER = 15 * 60

# Snapshots written before statuses were named used their ordinal
_LEGACY_STATUS = {0: CupStatus.INACTIVE, 1: CupStatus.SIGNUP, 2: CupStatus.PICKUP}


@dataclass
class Cup:
    """Draft cup aggregate root"""

    # Core identification
    channel_id: str
    manager: Player
    guild_id: str = ""

    # State
    status: CupStatus = CupStatus.SIGNUP
    moderated: bool = False
    picked_count: int = 0
    team_size: int = DEFAULT_TEAM_SIZE

    # Players and teams
    players: List[Player] = field(default_factory=list)
    teams: List[Team] = field(default_factory=list)

    # Chat bookkeeping
    description: str = ""
    start_message_id: str = ""
    last_reply_id: str = ""

    # Epoch seconds
    start_time: float = 0.0
    next_promote_time: float = 0.0
    next_promote_time_manager: float = 0.0

    # Held by the application service around every mutation
    lock: Any = field(default_factory=threading.RLock, compare=False, repr=False)

    # ===================
    # Derived values
    # ===================

    @property
    def active_player_count(self) -> int:
        """Number of roster slots eligible for team assignment"""
        return len(self.teams) * self.team_size

    @property
    def min_player_count(self) -> int:
        return self.team_size * MINIMUM_TEAMS

    @property
    def substitute_count(self) -> int:
        return max(0, len(self.players) - self.active_player_count)

    @property
    def is_complete(self) -> bool:
        """Check if every active slot has been assigned"""
        active = self.active_player_count
        return self.status == CupStatus.PICKUP and active > 0 and self.picked_count >= active

    def is_manager(self, user_id: str) -> bool:
        return self.status != CupStatus.INACTIVE and self.manager.user_id == user_id

    # ===================
    # Roster queries
    # ===================

    def find_player(self, user_id: str) -> Optional[int]:
        """Index of the first player with the given user id"""
        for i, player in enumerate(self.players):
            if player.user_id == user_id:
                return i
        return None

    def find_available_player(self, nth: int = 0) -> Optional[int]:
        """
        Index of the nth active player not yet on a team.

        Substitutes are never returned.
        """
        active = min(self.active_player_count, len(self.players))
        if nth < 0 or nth > active:
            return None
        for i in range(active):
            if self.players[i].team_index == NO_INDEX:
                if nth == 0:
                    return i
                nth -= 1
        return None

    def next_available_player(self) -> Optional[int]:
        return self.find_available_player(0)

    def unassigned_active_indices(self) -> List[int]:
        active = min(self.active_player_count, len(self.players))
        return [i for i in range(active) if not self.players[i].is_assigned_to_team]

    def substitute_indices(self) -> List[int]:
        return list(range(self.active_player_count, len(self.players)))

    def lineup(self, team_index: int) -> List[Player]:
        """Players of a team in the order they were picked"""
        if team_index < 0 or team_index >= len(self.teams):
            raise ValueError(f"team index out of range: {team_index}")
        members = []
        player_index = self.teams[team_index].first_index
        while player_index != NO_INDEX:
            player = self.players[player_index]
            members.append(player)
            player_index = player.next_index
        return members

    # ===================
    # Mutation
    # ===================

    def assign_player_to_team(self, player_index: int, team_index: int) -> bool:
        """
        Append a player to a team's list.

        Returns True when the player became the team's captain.
        """
        if player_index < 0 or player_index >= len(self.players):
            raise ValueError(f"player index out of range: {player_index}")
        if team_index < 0 or team_index >= len(self.teams):
            raise ValueError(f"team index out of range: {team_index}")

        player = self.players[player_index]
        if player.team_index != NO_INDEX:
            raise ValueError(f"player {player_index} already assigned to {player.team_index}")

        player.team_index = team_index
        team = self.teams[team_index]
        if team.first_index == NO_INDEX:
            team.first_index = player_index
        else:
            self.players[team.last_index].next_index = player_index
        team.last_index = player_index

        self.picked_count += 1
        return team.first_index == player_index

    def reset_teams(self) -> None:
        """Drop every team and every assignment"""
        self.teams = []
        for player in self.players:
            player.reset_team()
        self.picked_count = 0

    # ===================
    # Serialization
    # ===================

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "moderated": self.moderated,
            "picked_count": self.picked_count,
            "manager": self.manager.to_dict(),
            "players": [p.to_dict() for p in self.players],
            "teams": [t.to_dict() for t in self.teams],
            "channel_id": self.channel_id,
            "guild_id": self.guild_id,
            "description": self.description,
            "start_message_id": self.start_message_id,
            "last_reply_id": self.last_reply_id,
            "start_time": self.start_time,
            "next_promote_time": self.next_promote_time,
            "next_promote_time_manager": self.next_promote_time_manager,
            "team_size": self.team_size,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Cup":
        status = data.get("status", CupStatus.SIGNUP.value)
        if isinstance(status, int):
            status = _LEGACY_STATUS[status]
        else:
            status = CupStatus(status)

        return cls(
            channel_id=str(data["channel_id"]),
            manager=Player.from_dict(data["manager"]),
            guild_id=str(data.get("guild_id", "")),
            status=status,
            moderated=bool(data.get("moderated", False)),
            picked_count=int(data.get("picked_count", 0)),
            team_size=int(data.get("team_size") or DEFAULT_TEAM_SIZE),
            players=[Player.from_dict(p) for p in data.get("players") or []],
            teams=[Team.from_dict(t) for t in data.get("teams") or []],
            description=data.get("description", ""),
            start_message_id=data.get("start_message_id", ""),
            last_reply_id=data.get("last_reply_id", ""),
            start_time=float(data.get("start_time", 0.0)),
            next_promote_time=float(data.get("next_promote_time", 0.0)),
            next_promote_time_manager=float(data.get("next_promote_time_manager", 0.0)),
        )
