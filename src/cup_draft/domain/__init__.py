"""
Domain Layer - Pure Business Logic

Contains entities, value objects, domain services, and business rules.
No chat or storage dependencies allowed in this layer.
"""

from .entities.cup import Cup
from .entities.cup_status import CupStatus
from .entities.player import Player
from .entities.team import Team
from .exceptions import CupError, CupNotFoundError, InvalidPhaseError

__all__ = [
    "Cup",
    "CupStatus",
    "Player",
    "Team",
    "CupError",
    "CupNotFoundError",
    "InvalidPhaseError",
]
