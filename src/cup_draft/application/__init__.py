"""
Application Layer

Use cases, ports and result objects between the domain and the adapters.
"""

from .cup_service import CupApplicationService
from .dto import PickResult, SignupResult, WithdrawResult

__all__ = [
    "CupApplicationService",
    "SignupResult",
    "WithdrawResult",
    "PickResult",
]
