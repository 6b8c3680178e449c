"""
Application Layer Interfaces (Ports)

Defines contracts between application layer and infrastructure adapters.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from ..domain.entities.cup import Cup
from ..domain.entities.player import Player


# Repository Interfaces
class ICupRepository(ABC):
    """Channel -> active cup mapping"""

    @abstractmethod
    def create(self, channel_id: str, manager: Player, guild_id: str = "", team_size: Optional[int] = None) -> Cup:
        """Register a new cup, failing if the channel already has one"""
        pass

    @abstractmethod
    def get(self, channel_id: str) -> Optional[Cup]:
        """Get cup by channel ID"""
        pass

    @abstractmethod
    def delete(self, channel_id: str) -> Optional[Cup]:
        """Remove a cup, returning it if it existed"""
        pass

    @abstractmethod
    def active_cups(self) -> List[Cup]:
        """Get all registered cups"""
        pass

    @abstractmethod
    def guild_channels(self, guild_id: str) -> List[str]:
        """Channels of a guild with an active cup"""
        pass

    @abstractmethod
    def save(self, cup: Cup) -> None:
        """Write a snapshot of one cup"""
        pass


# Authorization
class IPermissionChecker(ABC):
    """
    Capability check injected into the application service.

    Lookups that fail must answer False rather than raise.
    """

    def is_manager(self, cup: Cup, user_id: str) -> bool:
        """Check if user manages this cup"""
        return cup.is_manager(user_id)

    @abstractmethod
    def is_super_user(self, cup: Cup, user_id: str) -> bool:
        """Check if user is the manager or holds an admin role"""
        pass


# Configuration Interfaces
class ICupConfiguration(ABC):
    """Interface for cup configuration"""

    @abstractmethod
    def get_default_team_size(self) -> int:
        pass

    @abstractmethod
    def get_command_prefix(self) -> str:
        pass

    @abstractmethod
    def get_data_dir(self) -> str:
        """Folder for cup snapshots"""
        pass

    @abstractmethod
    def get_admin_role_names(self) -> Tuple[str, ...]:
        pass

    @abstractmethod
    def allow_duplicate_signups(self) -> bool:
        pass

    @abstractmethod
    def get_autofill_count(self) -> int:
        """Fill the roster up to this many slots on close (0 disables)"""
        pass

    @abstractmethod
    def save_on_who(self) -> bool:
        pass

    def as_dict(self) -> Dict[str, object]:
        """Effective settings, for the startup log"""
        return {
            "command_prefix": self.get_command_prefix(),
            "data_dir": self.get_data_dir(),
            "team_size": self.get_default_team_size(),
            "allow_duplicates": self.allow_duplicate_signups(),
            "autofill": self.get_autofill_count(),
            "save_on_who": self.save_on_who(),
        }
