"""
Draft Cup System

Channel-scoped draft cups: players sign up, the manager picks captains and
captains pick their teammates in snake order. Layered as domain,
application, infrastructure and presentation packages.
"""

from .application.cup_service import CupApplicationService
from .infrastructure.container import CupContainer
from .presentation.cup_presenter import CupPresenter

__all__ = [
    "CupApplicationService",
    "CupContainer",
    "CupPresenter",
]
