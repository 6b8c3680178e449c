"""
Infrastructure Layer

Adapters for external systems and services.
"""

from .container import CupContainer
from .cup_config_adapter import CupConfigurationAdapter
from .cup_registry import CupRegistry

__all__ = ["CupRegistry", "CupContainer", "CupConfigurationAdapter"]
