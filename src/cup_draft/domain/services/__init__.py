"""
Domain Services

Business logic services that operate on domain entities.
"""

from .draft_engine import DraftEngine
from .team_names import TeamNameService

__all__ = ["DraftEngine", "TeamNameService"]
