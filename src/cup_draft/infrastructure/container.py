"""
Dependency Injection Configuration

Central container that wires up all dependencies for the draft cup system.
"""

from typing import Any, Dict, Optional

from ..application.cup_service import CupApplicationService
from ..application.interfaces import ICupConfiguration, ICupRepository, IPermissionChecker
from ..domain.services.draft_engine import DraftEngine
from .cup_config_adapter import CupConfigurationAdapter
from .cup_registry import CupRegistry


class CupContainer:
    """
    Dependency injection container for the draft cup system.

    Centralizes all dependency wiring and provides factory methods
    for creating properly configured services.
    """

    def __init__(self, bot=None, configuration: Optional[ICupConfiguration] = None):
        """
        Initialize container with Discord bot instance.

        Args:
            bot: Discord bot instance (optional for testing)
            configuration: settings source, the environment by default
        """
        self.bot = bot
        self._services: Dict[str, Any] = {}
        self._setup_dependencies(configuration or CupConfigurationAdapter())

    def _setup_dependencies(self, configuration: ICupConfiguration):
        """Setup all service dependencies"""
        self._services['configuration'] = configuration
        self._services['cup_repository'] = CupRegistry(configuration.get_data_dir())
        self._services['draft_engine'] = DraftEngine()

        # Discord-specific services (require bot instance)
        if self.bot:
            from .discord_adapter import DiscordPermissionChecker
            self._services['permission_checker'] = DiscordPermissionChecker(
                self.bot, configuration.get_admin_role_names()
            )
        else:
            from .mock_adapters import MockPermissionChecker
            self._services['permission_checker'] = MockPermissionChecker()

    def get_cup_service(self) -> CupApplicationService:
        """Get configured cup application service"""
        if 'cup_service' not in self._services:
            self._services['cup_service'] = CupApplicationService(
                cup_repository=self.get_cup_repository(),
                permission_checker=self.get_permission_checker(),
                configuration=self.get_configuration(),
                engine=self._services['draft_engine']
            )
        return self._services['cup_service']

    def get_cup_repository(self) -> ICupRepository:
        return self._services['cup_repository']

    def get_permission_checker(self) -> IPermissionChecker:
        return self._services['permission_checker']

    def get_configuration(self) -> ICupConfiguration:
        return self._services['configuration']

    def get_bot(self):
        """Get Discord bot instance"""
        return self.bot

    def restore(self) -> int:
        """Load cups saved by a previous run"""
        repository = self.get_cup_repository()
        return len(repository.restore_all())

    def shutdown(self) -> int:
        """Save all cups to disk and release them"""
        repository = self.get_cup_repository()
        saved = repository.suspend()
        self._services.pop('cup_service', None)
        return len(saved)
