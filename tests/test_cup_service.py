import pytest

from src.cup_draft.application.cup_service import CupApplicationService
from src.cup_draft.domain.entities.cup import (
    MINIMUM_PROMOTION_INTERVAL,
    MINIMUM_PROMOTION_INTERVAL_MANAGER,
)
from src.cup_draft.domain.entities.cup_status import CupStatus
from src.cup_draft.domain.entities.player import Player
from src.cup_draft.domain.exceptions import (
    AlreadyStartedError,
    CupNotFoundError,
    InvalidPhaseError,
    NotRegisteredError,
    NothingToRemoveError,
    PromotionThrottledError,
    UnauthorizedError,
)
from src.cup_draft.infrastructure.mock_adapters import MockCupConfiguration
from conftest import CHANNEL_ID, GUILD_ID, MANAGER_ID, make_players


@pytest.fixture
def started(service, manager):
    """Service with a cup in signup and eight players"""
    service.start_cup(CHANNEL_ID, manager, guild_id=GUILD_ID, description="Friday", now=1000.0)
    for player in make_players(8):
        service.sign_up(CHANNEL_ID, player)
    return service


def test_start_cup(service, manager):
    cup = service.start_cup(CHANNEL_ID, manager, guild_id=GUILD_ID, description="Friday", now=1000.0)
    assert cup.status == CupStatus.SIGNUP
    assert cup.description == "Friday"
    assert cup.start_time == 1000.0
    assert cup.next_promote_time == 1000.0 + MINIMUM_PROMOTION_INTERVAL
    assert service.get_cup(CHANNEL_ID) is cup


def test_start_twice(started, manager):
    with pytest.raises(AlreadyStartedError) as exc_info:
        started.start_cup(CHANNEL_ID, Player("5", "Eve"))
    assert exc_info.value.cup.manager.user_id == MANAGER_ID


def test_start_uses_configured_team_size(registry, permissions, engine, manager):
    service = CupApplicationService(registry, permissions, MockCupConfiguration(DRAFT_TEAM_SIZE="2"), engine)
    assert service.start_cup(CHANNEL_ID, manager).team_size == 2


def test_require_cup(service):
    assert service.get_cup(CHANNEL_ID) is None
    with pytest.raises(CupNotFoundError):
        service.require_cup(CHANNEL_ID)


def test_other_active_channels(started, manager):
    started.start_cup("456", manager, guild_id=GUILD_ID)
    started.start_cup("654", manager, guild_id="other")
    assert started.other_active_channels(GUILD_ID, CHANNEL_ID) == ["456"]
    assert started.other_active_channels("", CHANNEL_ID) == []


def test_abort_requires_super_user(started, permissions):
    with pytest.raises(UnauthorizedError):
        started.abort_cup(CHANNEL_ID, "1")

    permissions.set_super_user("1")
    started.abort_cup(CHANNEL_ID, "1")
    assert started.get_cup(CHANNEL_ID) is None


def test_failed_permission_lookup_is_unauthorized(started, permissions):
    permissions.fail_lookups = True
    permissions.set_super_user("1")
    with pytest.raises(UnauthorizedError):
        started.abort_cup(CHANNEL_ID, "1")
    started.abort_cup(CHANNEL_ID, MANAGER_ID)


def test_withdraw_self(started):
    result = started.withdraw(CHANNEL_ID, "3")
    assert result.outcome.removed.user_id == "3"
    assert len(result.cup.players) == 7


def test_withdraw_unregistered(started):
    with pytest.raises(NotRegisteredError):
        started.withdraw(CHANNEL_ID, "42")


def test_withdraw_by_number_needs_manager(started):
    # even for one's own number
    with pytest.raises(UnauthorizedError):
        started.withdraw(CHANNEL_ID, "1", index=0)

    result = started.withdraw(CHANNEL_ID, MANAGER_ID, index=0)
    assert result.outcome.removed.user_id == "1"


def test_withdraw_from_empty_cup(service, manager):
    service.start_cup(CHANNEL_ID, manager)
    with pytest.raises(NothingToRemoveError):
        service.withdraw(CHANNEL_ID, MANAGER_ID)


def test_signup_substitute_number(started):
    started.close_signup(CHANNEL_ID, MANAGER_ID)
    result = started.sign_up(CHANNEL_ID, Player("9", "Player9"))
    assert result.index == 8
    assert result.substitute_number == 1

    result = started.sign_up(CHANNEL_ID, Player("10", "Player10"))
    assert result.substitute_number == 2


def test_signup_during_signup_has_no_substitute_number(service, manager):
    service.start_cup(CHANNEL_ID, manager)
    assert service.sign_up(CHANNEL_ID, Player("1", "Alice")).substitute_number is None


def test_close_requires_manager(started):
    with pytest.raises(UnauthorizedError):
        started.close_signup(CHANNEL_ID, "1")
    cup = started.close_signup(CHANNEL_ID, MANAGER_ID)
    assert cup.status == CupStatus.PICKUP


def test_close_with_autofill(registry, permissions, engine, manager):
    configuration = MockCupConfiguration(DRAFT_AUTOFILL="8")
    service = CupApplicationService(registry, permissions, configuration, engine)
    service.start_cup(CHANNEL_ID, manager)

    cup = service.close_signup(CHANNEL_ID, MANAGER_ID)
    assert len(cup.players) == 8
    assert all(p.user_id == MANAGER_ID for p in cup.players)
    assert len(cup.teams) == 2


def test_duplicates_allowed_by_configuration(registry, permissions, engine, manager):
    configuration = MockCupConfiguration(DRAFT_ALLOW_DUPLICATES="true")
    service = CupApplicationService(registry, permissions, configuration, engine)
    service.start_cup(CHANNEL_ID, manager)
    service.sign_up(CHANNEL_ID, Player("1", "Alice"))
    assert service.sign_up(CHANNEL_ID, Player("1", "Alice")).index == 1


def test_reopen(started):
    started.close_signup(CHANNEL_ID, MANAGER_ID)
    with pytest.raises(UnauthorizedError):
        started.reopen(CHANNEL_ID, "1")
    cup = started.reopen(CHANNEL_ID, MANAGER_ID)
    assert cup.status == CupStatus.SIGNUP
    with pytest.raises(InvalidPhaseError):
        started.reopen(CHANNEL_ID, MANAGER_ID)


def test_set_team_size_requires_manager(started):
    with pytest.raises(UnauthorizedError):
        started.set_team_size(CHANNEL_ID, "1", 2)
    assert started.set_team_size(CHANNEL_ID, MANAGER_ID, 2) is True
    assert started.get_cup(CHANNEL_ID).team_size == 2


def test_set_moderation_allows_admins(started, permissions):
    with pytest.raises(UnauthorizedError):
        started.set_moderation(CHANNEL_ID, "1", True)
    permissions.set_super_user("1")
    assert started.set_moderation(CHANNEL_ID, "1", True) is True
    assert started.is_moderated(CHANNEL_ID)


def test_promote_privileged_deadline(started, permissions):
    just_after_manager_interval = 1000.0 + MINIMUM_PROMOTION_INTERVAL_MANAGER + 1
    with pytest.raises(PromotionThrottledError):
        started.promote(CHANNEL_ID, "1", now=just_after_manager_interval)
    started.promote(CHANNEL_ID, MANAGER_ID, now=just_after_manager_interval)


def test_full_draft_removes_cup(started):
    started.close_signup(CHANNEL_ID, MANAGER_ID)
    result = None
    for index in range(7):
        cup = started.get_cup(CHANNEL_ID)
        picker = started.engine.next_picker(cup)
        result = started.pick(CHANNEL_ID, picker.user_id, index)

    assert result.completed
    assert started.get_cup(CHANNEL_ID) is None
    assert result.cup.picked_count == 8


def test_who_saves_when_configured(registry, permissions, engine, manager):
    service = CupApplicationService(registry, permissions, MockCupConfiguration(DRAFT_SAVE_ON_WHO="1"), engine)
    service.start_cup(CHANNEL_ID, manager)
    service.who(CHANNEL_ID)
    assert (registry.dir / f"{CHANNEL_ID}.json").exists()


def test_who_does_not_save_by_default(started, registry):
    started.who(CHANNEL_ID)
    assert not (registry.dir / f"{CHANNEL_ID}.json").exists()


def test_last_reply_bookkeeping(started):
    assert started.set_last_reply(CHANNEL_ID, "1") is None
    assert started.set_last_reply(CHANNEL_ID, "2") == "1"
    assert started.set_last_reply("nowhere", "3") is None


def test_final_pick_hands_back_last_reply(started):
    started.close_signup(CHANNEL_ID, MANAGER_ID)
    cup = started.get_cup(CHANNEL_ID)
    result = None
    for index in range(7):
        started.set_last_reply(CHANNEL_ID, str(500 + index))
        result = started.pick(CHANNEL_ID, started.engine.next_picker(cup).user_id, index)
        if not result.completed:
            assert result.previous_reply_id == ""

    assert result.completed
    assert result.previous_reply_id == "506"
    assert cup.last_reply_id == ""
