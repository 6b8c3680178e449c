"""
Cup Registry

In-memory channel -> cup repository with JSON snapshots for restarts.
One lock guards the map itself and is never held across a whole command.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Dict, List, Optional

from ..application.interfaces import ICupRepository
from ..domain.entities.cup import Cup, DEFAULT_TEAM_SIZE
from ..domain.entities.cup_status import CupStatus
from ..domain.entities.player import Player
from ..domain.exceptions import CupAlreadyExistsError, PersistenceError

logger = logging.getLogger(__name__)


class CupRegistry(ICupRepository):
    """
    Thread-safe registry of active cups.

    Snapshots are one file per channel, named <channel_id>.json.
    """

    def __init__(self, data_dir: Optional[str] = None):
        self._cups: Dict[str, Cup] = {}  # channel_id -> Cup
        self._lock = threading.Lock()
        self.dir = Path(data_dir) if data_dir else None

    # ====================
    # Map operations
    # ====================

    def create(self, channel_id: str, manager: Player, guild_id: str = "", team_size: Optional[int] = None) -> Cup:
        """Register a new cup in signup"""
        cup = Cup(
            channel_id=channel_id,
            manager=manager,
            guild_id=guild_id,
            status=CupStatus.SIGNUP,
            team_size=team_size or DEFAULT_TEAM_SIZE,
        )
        with self._lock:
            if channel_id in self._cups:
                raise CupAlreadyExistsError(channel_id)
            self._cups[channel_id] = cup
        return cup

    def get(self, channel_id: str) -> Optional[Cup]:
        with self._lock:
            return self._cups.get(channel_id)

    def delete(self, channel_id: str) -> Optional[Cup]:
        with self._lock:
            return self._cups.pop(channel_id, None)

    def active_cups(self) -> List[Cup]:
        with self._lock:
            return list(self._cups.values())

    def guild_channels(self, guild_id: str) -> List[str]:
        with self._lock:
            return [
                cup.channel_id for cup in self._cups.values()
                if cup.guild_id == guild_id and cup.status.is_active
            ]

    def has_cup(self, channel_id: str) -> bool:
        with self._lock:
            return channel_id in self._cups

    def get_cup_count(self) -> int:
        with self._lock:
            return len(self._cups)

    # ====================
    # Persistence
    # ====================

    def _path(self, channel_id: str) -> Path:
        if self.dir is None:
            raise PersistenceError("No data folder configured")
        return self.dir / f"{channel_id}.json"

    def save(self, cup: Cup) -> None:
        """Write one cup snapshot"""
        path = self._path(cup.channel_id)
        try:
            self.dir.mkdir(parents=True, exist_ok=True)
            with cup.lock:
                payload = cup.to_dict()
            with path.open("w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"Could not save cup {cup.channel_id}: {e}") from e

    def snapshot_all(self) -> List[str]:
        """Save every cup; failures are logged and skipped"""
        saved = []
        for cup in self.active_cups():
            try:
                self.save(cup)
            except PersistenceError as e:
                logger.error(f"Error serializing cup {cup.channel_id}: {e}")
                continue
            saved.append(cup.channel_id)
            logger.info(f"Saved cup {cup.channel_id}")
        return saved

    def suspend(self) -> List[str]:
        """Save every cup and drop the saved ones from memory"""
        saved = self.snapshot_all()
        with self._lock:
            for channel_id in saved:
                self._cups.pop(channel_id, None)
        return saved

    def restore_all(self) -> List[str]:
        """
        Load every snapshot in the data folder.

        A file is deleted only after its cup has been registered, so a
        snapshot that fails to load stays on disk for inspection.
        """
        if self.dir is None or not self.dir.is_dir():
            logger.info("No cup snapshots to restore")
            return []

        loaded = []
        for path in sorted(self.dir.glob("*.json")):
            if not path.is_file():
                continue
            name = path.stem
            try:
                with path.open("r", encoding="utf-8") as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise ValueError(f"expected an object, got {type(data).__name__}")
                cup = Cup.from_dict(data)
            except (OSError, ValueError, KeyError, TypeError) as e:
                logger.error(f"Error parsing cup {name}: {e}")
                continue

            if cup.channel_id != name:
                logger.warning(f"File name/channel ID mismatch: '{name}' vs '{cup.channel_id}', ignoring...")
                continue

            if not cup.team_size:
                cup.team_size = DEFAULT_TEAM_SIZE

            with self._lock:
                if cup.channel_id in self._cups:
                    logger.warning(f"Cup {name} is already active, keeping snapshot on disk")
                    continue
                self._cups[cup.channel_id] = cup

            try:
                path.unlink()
            except OSError as e:
                logger.warning(f"Could not remove snapshot {path}: {e}")
            loaded.append(cup.channel_id)
            logger.info(f"Loaded cup {name}")

        return loaded
