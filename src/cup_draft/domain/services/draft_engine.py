"""
Draft Engine Domain Service

State transitions of a cup (signup, close, pickup, reopen), the snake turn
order and the substitution rules. Every operation is synchronous and works on
the in-memory Cup only; failures are raised as CupError subclasses.
"""

import logging
import time
from typing import List, Optional

from ..entities.cup import (
    Cup,
    MINIMUM_PROMOTION_INTERVAL,
    MINIMUM_PROMOTION_INTERVAL_MANAGER,
)
from ..entities.cup_status import CupStatus
from ..entities.outcomes import Assignment, PickOutcome, PickTurn, WithdrawOutcome
from ..entities.player import Player
from ..entities.team import Team
from ..exceptions import (
    AlreadyAssignedError,
    DuplicateSignupError,
    InvalidIndexError,
    InvalidPhaseError,
    InvalidTargetError,
    InvalidTeamSizeError,
    NoSubstituteAvailableError,
    NotEnoughPlayersError,
    NotYourTurnError,
    NothingToRemoveError,
    PromotionThrottledError,
    SubstitutePickError,
    TooFewPlayersError,
    TooManyPlayersError,
    UnauthorizedError,
)
from .team_names import TeamNameService

logger = logging.getLogger(__name__)


class DraftEngine:
    """
    Core domain service that drives a cup from signup to complete teams.

    Authorization beyond "self or manager" is the caller's job.
    """

    def __init__(self, name_service: Optional[TeamNameService] = None):
        self._name_service = name_service or TeamNameService()

    # =====================
    # Signup
    # =====================

    def register(self, cup: Cup, player: Player, allow_duplicates: bool = False) -> int:
        """
        Append a player to the roster and return their index.

        Once pickup has begun the duplicate check is skipped, since every
        late signup becomes a substitute.
        """
        if not cup.status.accepts_signups:
            raise InvalidPhaseError("sign up", cup.status)

        if cup.status == CupStatus.SIGNUP and not allow_duplicates:
            existing = cup.find_player(player.user_id)
            if existing is not None:
                raise DuplicateSignupError(existing, len(cup.players))

        player.reset_team()
        cup.players.append(player)
        return len(cup.players) - 1

    def withdraw(self, cup: Cup, target_index: int, requester_id: str) -> WithdrawOutcome:
        """
        Remove a player from the roster.

        An active player leaving during pickup hands their slot to the first
        substitute, so team lists and indices stay valid.
        """
        if not cup.status.accepts_signups:
            raise InvalidPhaseError("withdraw", cup.status)
        if not cup.players:
            raise NothingToRemoveError("Nobody has signed up for the cup yet")
        if target_index < 0 or target_index >= len(cup.players):
            raise InvalidIndexError(target_index)

        target = cup.players[target_index]
        if target.user_id != requester_id and not cup.is_manager(requester_id):
            raise UnauthorizedError("remove other players", cup.manager)

        if cup.status == CupStatus.PICKUP:
            active = cup.active_player_count
            if target_index < active:
                if active >= len(cup.players):
                    raise NoSubstituteAvailableError(target)

                substitute = cup.players[active]
                target.swap_identity(substitute)
                # substitute now carries the leaving player's identity
                del cup.players[active]
                logger.info(
                    f"{substitute.display_name} left cup {cup.channel_id}, "
                    f"replaced by {target.display_name} at slot {target_index + 1}"
                )
                return WithdrawOutcome(removed=substitute, index=target_index, replacement=target)

        del cup.players[target_index]
        return WithdrawOutcome(removed=target, index=target_index)

    def set_team_size(self, cup: Cup, size: int) -> bool:
        """Change team size during signup; returns False if unchanged"""
        if cup.status != CupStatus.SIGNUP:
            raise InvalidPhaseError("change team size", cup.status)
        if size <= 0:
            raise InvalidTeamSizeError(size)
        if size == cup.team_size:
            return False
        cup.team_size = size
        return True

    def set_moderation(self, cup: Cup, enabled: Optional[bool] = None) -> bool:
        """Enable, disable or (with None) toggle moderation; returns whether it changed"""
        if not cup.status.is_active:
            raise InvalidPhaseError("moderate", cup.status)
        target = (not cup.moderated) if enabled is None else enabled
        if target == cup.moderated:
            return False
        cup.moderated = target
        return True

    def promote(self, cup: Cup, privileged: bool, now: Optional[float] = None) -> None:
        """Check the promotion throttle and move both deadlines forward"""
        if cup.status != CupStatus.SIGNUP:
            raise InvalidPhaseError("promote", cup.status)

        now = time.time() if now is None else now
        deadline = cup.next_promote_time_manager if privileged else cup.next_promote_time
        remaining = deadline - now
        if remaining > 0:
            raise PromotionThrottledError(remaining)

        cup.next_promote_time = now + MINIMUM_PROMOTION_INTERVAL
        cup.next_promote_time_manager = now + MINIMUM_PROMOTION_INTERVAL_MANAGER

    # =====================
    # Phase Transitions
    # =====================

    def close(self, cup: Cup, keep_count: Optional[int] = None) -> List[Team]:
        """
        Close signup and start pickup.

        Only num_teams * team_size players are active; any remainder and
        everyone past keep_count become substitutes.
        """
        if not cup.status.can_transition_to(CupStatus.PICKUP):
            raise InvalidPhaseError("close signup", cup.status)

        signed_up = len(cup.players)
        minimum = cup.min_player_count
        if signed_up < minimum:
            raise NotEnoughPlayersError(signed_up, minimum)

        if keep_count is not None:
            if keep_count > signed_up:
                raise TooManyPlayersError(keep_count, signed_up)
            if keep_count < minimum:
                raise TooFewPlayersError(keep_count, minimum)
            signed_up = keep_count

        num_teams = signed_up // cup.team_size

        cup.status = CupStatus.PICKUP
        cup.picked_count = 0
        cup.teams = [Team() for _ in range(num_teams)]
        for team in cup.teams:
            team.reset()
        self._name_service.choose_team_names(cup.teams)

        logger.info(
            f"Closed signup for cup {cup.channel_id}: {num_teams} teams of {cup.team_size}, "
            f"{cup.substitute_count} substitutes"
        )
        return cup.teams

    def reopen(self, cup: Cup) -> None:
        """Discard teams and go back to signup"""
        if cup.status != CupStatus.PICKUP:
            raise InvalidPhaseError("reopen", cup.status)
        cup.reset_teams()
        cup.status = CupStatus.SIGNUP

    # =====================
    # Picking
    # =====================

    def current_turn(self, cup: Cup) -> PickTurn:
        """
        Team and seat for the next pick.

        Seat 0 (captains) and seat 1 go in team order; seats 2 and 3 go in
        reverse order so the team that picked last picks first next.
        """
        num_teams = len(cup.teams)
        if num_teams == 0:
            raise InvalidPhaseError("pick", cup.status)

        seat = cup.picked_count // num_teams
        team = cup.picked_count % num_teams
        if 2 <= seat <= 3:
            team = num_teams - 1 - team
        return PickTurn(team=team, seat=seat)

    def who_may_pick(self, cup: Cup, turn: PickTurn) -> Optional[Player]:
        """The manager picks captains; each captain picks for their team afterwards"""
        if cup.status != CupStatus.PICKUP:
            return None
        if turn.seat < 0 or turn.seat >= cup.team_size:
            return None
        if turn.team < 0 or turn.team >= len(cup.teams):
            return None
        if turn.seat == 0:
            return cup.manager
        index = cup.teams[turn.team].first_index
        if index < 0 or index >= len(cup.players):
            return None
        return cup.players[index]

    def next_picker(self, cup: Cup) -> Optional[Player]:
        if cup.status != CupStatus.PICKUP or not cup.teams:
            return None
        return self.who_may_pick(cup, self.current_turn(cup))

    def pick(self, cup: Cup, picker_id: str, target_index: int) -> PickOutcome:
        """
        Assign a player to the team whose turn it is.

        When only one active slot remains afterwards, the last unassigned
        active player fills it without a separate pick.
        """
        if cup.status != CupStatus.PICKUP:
            raise InvalidPhaseError("pick players", cup.status)

        turn = self.current_turn(cup)
        picker = self.who_may_pick(cup, turn)
        if picker is None or picker.user_id != picker_id:
            raise NotYourTurnError(picker)

        active = cup.active_player_count
        if target_index < 0 or target_index >= len(cup.players):
            raise InvalidTargetError(target_index)
        selected = cup.players[target_index]
        if target_index >= active:
            raise SubstitutePickError(target_index, selected)
        if selected.is_assigned_to_team:
            raise AlreadyAssignedError(target_index, selected, cup.teams[selected.team_index])

        outcome = PickOutcome()
        outcome.assignments.append(self._assign(cup, target_index, turn.team))

        if cup.picked_count == active - 1:
            last_player = cup.next_available_player()
            last_slot = self.current_turn(cup)
            outcome.assignments.append(self._assign(cup, last_player, last_slot.team))
            outcome.completed = True
            logger.info(f"Teams complete for cup {cup.channel_id}")

        return outcome

    def _assign(self, cup: Cup, player_index: int, team_index: int) -> Assignment:
        is_captain = cup.assign_player_to_team(player_index, team_index)
        return Assignment(
            player_index=player_index,
            team_index=team_index,
            player=cup.players[player_index],
            team_name=cup.teams[team_index].name,
            is_captain=is_captain,
        )
