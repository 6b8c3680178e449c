"""
Cup Status Value Object

Represents the lifecycle states of a cup with transition logic.
"""

from enum import Enum
from typing import List


class CupStatus(Enum):
    """Statuses of a cup"""
    INACTIVE = "inactive"
    SIGNUP = "signup"
    PICKUP = "pickup"

    @property
    def next_statuses(self) -> List["CupStatus"]:
        """Get valid next statuses from current status"""
        transitions = {
            CupStatus.INACTIVE: [CupStatus.SIGNUP],
            CupStatus.SIGNUP: [CupStatus.PICKUP],
            CupStatus.PICKUP: [CupStatus.SIGNUP],  # reopen
        }
        return transitions.get(self, [])

    def can_transition_to(self, target: "CupStatus") -> bool:
        """Check if can transition to target status"""
        return target in self.next_statuses

    @property
    def is_active(self) -> bool:
        """Check if this status represents a running cup"""
        return self is not CupStatus.INACTIVE

    @property
    def accepts_signups(self) -> bool:
        """Signups after close are appended as substitutes"""
        return self in (CupStatus.SIGNUP, CupStatus.PICKUP)
