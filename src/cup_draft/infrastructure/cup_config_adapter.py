"""
Cup Configuration Adapter

Configuration values for the draft cup, overridable through environment
variables.
"""

import os
from typing import Mapping, Optional, Tuple

from ..application.interfaces import ICupConfiguration
from ..domain.entities.cup import DEFAULT_TEAM_SIZE

DEFAULT_COMMAND_PREFIX = "?draft"
DEFAULT_DATA_DIR = "channels"

# Guild roles whose members count as super users for any cup
ADMIN_ROLE_NAMES = (
    "DraftusAdmin",
    "Admins",
    "Admin",
    "Supervisors",
    "Supervisor",
    "DraftCupOrganizer",
)

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _as_bool(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in _TRUE_VALUES


def _as_int(value: Optional[str], default: int) -> int:
    try:
        return int(value) if value not in (None, "") else default
    except ValueError:
        return default


class CupConfigurationAdapter(ICupConfiguration):
    """
    Configuration adapter backed by a mapping (the environment by default).

    Recognized keys: DRAFT_COMMAND_PREFIX, DRAFT_DATA_DIR, DRAFT_TEAM_SIZE,
    DRAFT_ALLOW_DUPLICATES, DRAFT_AUTOFILL, DRAFT_SAVE_ON_WHO.
    """

    def __init__(self, values: Optional[Mapping[str, str]] = None):
        self._values: Mapping[str, str] = os.environ if values is None else values

    def get_default_team_size(self) -> int:
        size = _as_int(self._values.get("DRAFT_TEAM_SIZE"), DEFAULT_TEAM_SIZE)
        return size if size > 0 else DEFAULT_TEAM_SIZE

    def get_command_prefix(self) -> str:
        return (self._values.get("DRAFT_COMMAND_PREFIX") or DEFAULT_COMMAND_PREFIX).lower()

    def get_data_dir(self) -> str:
        return self._values.get("DRAFT_DATA_DIR") or DEFAULT_DATA_DIR

    def get_admin_role_names(self) -> Tuple[str, ...]:
        return ADMIN_ROLE_NAMES

    # Developer settings, for easier testing

    def allow_duplicate_signups(self) -> bool:
        return _as_bool(self._values.get("DRAFT_ALLOW_DUPLICATES"))

    def get_autofill_count(self) -> int:
        return max(0, _as_int(self._values.get("DRAFT_AUTOFILL"), 0))

    def save_on_who(self) -> bool:
        return _as_bool(self._values.get("DRAFT_SAVE_ON_WHO"))
