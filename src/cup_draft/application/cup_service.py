"""
Cup Application Service

Facade for every cup use case. Fetches the cup from the repository, checks
authorization through the injected permission checker and runs the draft
engine while holding the cup's lock.
"""

import logging
import time
from typing import List, Optional

from ..domain.entities.cup import Cup, MINIMUM_PROMOTION_INTERVAL, MINIMUM_PROMOTION_INTERVAL_MANAGER
from ..domain.entities.cup_status import CupStatus
from ..domain.entities.player import Player
from ..domain.exceptions import (
    AlreadyStartedError,
    CupAlreadyExistsError,
    CupNotFoundError,
    InvalidPhaseError,
    NotRegisteredError,
    NothingToRemoveError,
    UnauthorizedError,
)
from ..domain.services.draft_engine import DraftEngine
from .dto import PickResult, SignupResult, WithdrawResult
from .interfaces import ICupConfiguration, ICupRepository, IPermissionChecker

logger = logging.getLogger(__name__)


class CupApplicationService:
    """
    Main application service for cup operations.

    Indices taken and returned here are 0-based; the command layer converts
    from the 1-based numbers players type.
    """

    def __init__(
        self,
        cup_repository: ICupRepository,
        permission_checker: IPermissionChecker,
        configuration: ICupConfiguration,
        engine: Optional[DraftEngine] = None
    ):
        self._cup_repository = cup_repository
        self._permission_checker = permission_checker
        self._configuration = configuration
        self._engine = engine or DraftEngine()

    @property
    def engine(self) -> DraftEngine:
        return self._engine

    # ====================
    # Queries
    # ====================

    def get_cup(self, channel_id: str) -> Optional[Cup]:
        """Active cup of a channel, or None"""
        cup = self._cup_repository.get(channel_id)
        if cup is None or cup.status == CupStatus.INACTIVE:
            return None
        return cup

    def require_cup(self, channel_id: str) -> Cup:
        cup = self.get_cup(channel_id)
        if cup is None:
            raise CupNotFoundError(channel_id)
        return cup

    def other_active_channels(self, guild_id: str, channel_id: str) -> List[str]:
        """Channels of the same guild running a cup, excluding this one"""
        if not guild_id:
            return []
        return [c for c in self._cup_repository.guild_channels(guild_id) if c != channel_id]

    def is_moderated(self, channel_id: str) -> bool:
        cup = self.get_cup(channel_id)
        return cup is not None and cup.moderated

    def who(self, channel_id: str) -> Cup:
        cup = self.require_cup(channel_id)
        if self._configuration.save_on_who():
            self._cup_repository.save(cup)
        return cup

    # ====================
    # Cup Lifecycle
    # ====================

    def start_cup(
        self,
        channel_id: str,
        manager: Player,
        guild_id: str = "",
        description: str = "",
        now: Optional[float] = None
    ) -> Cup:
        """Open signup in a channel"""
        try:
            cup = self._cup_repository.create(
                channel_id,
                manager,
                guild_id=guild_id,
                team_size=self._configuration.get_default_team_size()
            )
        except CupAlreadyExistsError as e:
            raise AlreadyStartedError(channel_id, self._cup_repository.get(channel_id)) from e

        now = time.time() if now is None else now
        with cup.lock:
            cup.description = description
            cup.start_time = now
            cup.next_promote_time = now + MINIMUM_PROMOTION_INTERVAL
            cup.next_promote_time_manager = now + MINIMUM_PROMOTION_INTERVAL_MANAGER

        logger.info(f"Cup started in channel {channel_id} by {manager.display_name}")
        return cup

    def abort_cup(self, channel_id: str, requester_id: str) -> Cup:
        cup = self.require_cup(channel_id)
        if not self._is_super_user(cup, requester_id):
            raise UnauthorizedError("abort this cup", cup.manager)

        self._cup_repository.delete(channel_id)
        logger.info(f"Cup in channel {channel_id} aborted by {requester_id}")
        return cup

    def discard_cup(self, channel_id: str) -> None:
        """Drop a cup whose announcement could not be delivered"""
        self._cup_repository.delete(channel_id)

    def set_start_message(self, channel_id: str, message_id: str) -> None:
        cup = self.get_cup(channel_id)
        if cup is not None:
            cup.start_message_id = message_id

    def set_last_reply(self, channel_id: str, message_id: str) -> Optional[str]:
        """Record the newest status reply; returns the one it replaces"""
        cup = self.get_cup(channel_id)
        if cup is None:
            return None
        previous = cup.last_reply_id
        cup.last_reply_id = message_id
        return previous or None

    # ====================
    # Signup
    # ====================

    def sign_up(self, channel_id: str, player: Player) -> SignupResult:
        cup = self.require_cup(channel_id)
        with cup.lock:
            index = self._engine.register(
                cup, player, allow_duplicates=self._configuration.allow_duplicate_signups()
            )
        return SignupResult(cup=cup, index=index, player=cup.players[index])

    def withdraw(self, channel_id: str, requester_id: str, index: Optional[int] = None) -> WithdrawResult:
        """
        Remove the requester, or the player at index.

        Removing by number is reserved to the manager, even for oneself.
        """
        cup = self.require_cup(channel_id)
        with cup.lock:
            if not cup.status.accepts_signups:
                raise InvalidPhaseError("withdraw", cup.status)
            if not cup.players:
                raise NothingToRemoveError("Nobody has signed up for the cup yet")

            if index is not None:
                if not self._permission_checker.is_manager(cup, requester_id):
                    raise UnauthorizedError("remove other players", cup.manager)
            else:
                index = cup.find_player(requester_id)
                if index is None:
                    raise NotRegisteredError(f"{requester_id} is not registered for this cup")

            outcome = self._engine.withdraw(cup, index, requester_id)
        return WithdrawResult(cup=cup, outcome=outcome)

    def set_team_size(self, channel_id: str, requester_id: str, size: int) -> bool:
        cup = self.require_cup(channel_id)
        if not self._permission_checker.is_manager(cup, requester_id):
            raise UnauthorizedError("change team size", cup.manager)
        with cup.lock:
            return self._engine.set_team_size(cup, size)

    def set_moderation(self, channel_id: str, requester_id: str, enabled: Optional[bool] = None) -> bool:
        cup = self.require_cup(channel_id)
        if not self._is_super_user(cup, requester_id):
            raise UnauthorizedError("enable or disable moderation", cup.manager)
        with cup.lock:
            return self._engine.set_moderation(cup, enabled)

    def promote(self, channel_id: str, requester_id: str, now: Optional[float] = None) -> Cup:
        cup = self.require_cup(channel_id)
        with cup.lock:
            if cup.status != CupStatus.SIGNUP:
                raise InvalidPhaseError("promote", cup.status)
            privileged = self._is_super_user(cup, requester_id)
            self._engine.promote(cup, privileged, now)
        return cup

    # ====================
    # Drafting
    # ====================

    def close_signup(self, channel_id: str, requester_id: str, keep_count: Optional[int] = None) -> Cup:
        cup = self.require_cup(channel_id)
        if not self._permission_checker.is_manager(cup, requester_id):
            raise UnauthorizedError("close sign-up", cup.manager)

        with cup.lock:
            autofill = self._configuration.get_autofill_count()
            if autofill > 0 and cup.status == CupStatus.SIGNUP:
                self._fill_up(cup, autofill)
            self._engine.close(cup, keep_count)
        return cup

    def reopen(self, channel_id: str, requester_id: str) -> Cup:
        cup = self.require_cup(channel_id)
        with cup.lock:
            if cup.status != CupStatus.PICKUP:
                raise InvalidPhaseError("reopen", cup.status)
            if not self._permission_checker.is_manager(cup, requester_id):
                raise UnauthorizedError("discard current teams and reopen the cup", cup.manager)
            self._engine.reopen(cup)

        logger.info(f"Cup in channel {channel_id} reopened for signup")
        return cup

    def pick(self, channel_id: str, picker_id: str, index: int) -> PickResult:
        """Pick a player; a completed cup is removed from the repository"""
        cup = self.require_cup(channel_id)
        with cup.lock:
            outcome = self._engine.pick(cup, picker_id, index)
            previous_reply = ""
            if outcome.completed:
                previous_reply, cup.last_reply_id = cup.last_reply_id, ""

        if outcome.completed:
            self._cup_repository.delete(channel_id)
        return PickResult(cup=cup, outcome=outcome, previous_reply_id=previous_reply)

    # ====================
    # Helpers
    # ====================

    def _is_super_user(self, cup: Cup, user_id: str) -> bool:
        try:
            return self._permission_checker.is_super_user(cup, user_id)
        except Exception as e:
            logger.warning(f"Permission lookup failed for {user_id}: {e}")
            return False

    def _fill_up(self, cup: Cup, count: int) -> None:
        """Pad the roster with copies of the first player, for testing"""
        if not cup.players:
            cup.players.append(cup.manager.copy())
        while len(cup.players) < count:
            cup.players.append(cup.players[0].copy())
        logger.debug(f"Filled cup {cup.channel_id} up to {len(cup.players)} players")
