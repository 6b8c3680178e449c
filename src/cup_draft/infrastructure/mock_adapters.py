"""
Mock Adapters for Testing

Mock implementations of interfaces for testing without Discord dependencies.
"""

from typing import Dict, Optional

from ..application.interfaces import IPermissionChecker
from ..domain.entities.cup import Cup
from .cup_config_adapter import CupConfigurationAdapter


class MockPermissionChecker(IPermissionChecker):
    """Mock permission checker for testing"""

    def __init__(self):
        self.super_users = set()
        self.fail_lookups = False

    def is_super_user(self, cup: Cup, user_id: str) -> bool:
        if self.is_manager(cup, user_id):
            return True
        if self.fail_lookups:
            raise RuntimeError("directory unavailable")
        return user_id in self.super_users

    def set_super_user(self, user_id: str):
        """Helper for testing"""
        self.super_users.add(user_id)


class MockCupConfiguration(CupConfigurationAdapter):
    """Configuration with explicit values instead of the environment"""

    def __init__(self, values: Optional[Dict[str, str]] = None, **overrides: str):
        merged = dict(values or {})
        merged.update(overrides)
        super().__init__(merged)
