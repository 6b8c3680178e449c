from src.cup_draft.domain.entities.cup_status import CupStatus
from src.cup_draft.domain.exceptions import (
    DuplicateSignupError,
    InvalidPhaseError,
    NotEnoughPlayersError,
    NotYourTurnError,
    PromotionThrottledError,
    UnauthorizedError,
)
from src.cup_draft.presentation.cup_presenter import CupPresenter
from src.cup_draft.presentation.report import ReportSection, render, render_text
from conftest import MANAGER_ID


def test_empty_signup_report(cup_factory):
    text = render_text(cup_factory())
    assert text.startswith("No players signed up for the cup so far.\n")
    assert "Sign up now by typing **?draft add**" in text


def test_signup_report_lists_players(cup_factory):
    blocks = render(cup_factory(10), ReportSection.PLAYERS)
    assert len(blocks) == 1
    assert blocks[0].title == "10 players signed up so far:"
    assert blocks[0].lines[0] == "1.  Player1"
    assert blocks[0].lines[9] == "10. Player10"
    assert "```" in blocks[0].to_text()


def test_single_player_title(cup_factory):
    block = render(cup_factory(1), ReportSection.PLAYERS)[0]
    assert block.title == "1 player signed up so far:"


def test_pickup_report_before_picking(pickup_factory, engine):
    cup = pickup_factory(9)
    blocks = {b.section: b for b in render(cup, engine=engine)}

    teams = blocks[ReportSection.TEAMS]
    assert teams.title == "2 competing teams:"
    assert teams.lines == [f"1. {cup.teams[0].name}", f"2. {cup.teams[1].name}"]

    assert blocks[ReportSection.PLAYERS].title == "8 available players:"
    assert blocks[ReportSection.SUBSTITUTES].title == "1 substitute player:"
    assert blocks[ReportSection.SUBSTITUTES].lines == ["9. Player9"]

    assert blocks[ReportSection.NEXT_ACTION].title == (
        f"<@{MANAGER_ID}>, pick a captain for team 1, **{cup.teams[0].name}**, "
        "by typing **?draft pick <number>**"
    )


def test_pickup_report_during_picking(pickup_factory, engine):
    cup = pickup_factory(8)
    engine.pick(cup, MANAGER_ID, 2)
    engine.pick(cup, MANAGER_ID, 5)
    blocks = {b.section: b for b in render(cup, engine=engine)}

    teams = blocks[ReportSection.TEAMS]
    assert teams.title == "2 teams, with 2 players picked out of 8:"
    assert teams.lines[0].endswith(" : Player3")
    assert teams.lines[1].endswith(" : Player6")

    available = blocks[ReportSection.PLAYERS]
    assert available.title == "6 available players:"
    assert not any("Player3" in line for line in available.lines)

    assert blocks[ReportSection.NEXT_ACTION].title.startswith(
        "<@3>, pick the 2nd player for team 1"
    )


def test_report_of_complete_cup(pickup_factory, engine):
    cup = pickup_factory(8)
    for index in range(7):
        engine.pick(cup, engine.next_picker(cup).user_id, index)

    text = render_text(cup, engine=engine)
    assert "2 competing teams:" in text
    assert "available players" not in text
    assert text.endswith("Good luck and have fun!\n")


def test_inactive_cup_renders_nothing(cup_factory):
    cup = cup_factory(3)
    cup.status = CupStatus.INACTIVE
    assert render(cup) == []


def test_status_sections_hide_substitutes_while_picking(pickup_factory, cup_factory):
    presenter = CupPresenter()
    assert presenter.status_sections(cup_factory()) == ReportSection.ALL
    sections = presenter.status_sections(pickup_factory(9))
    assert not sections & ReportSection.SUBSTITUTES
    assert sections & ReportSection.TEAMS


def test_help_lists_every_command():
    text = CupPresenter("!cup").help_text()
    assert text.startswith("Supported commands:")
    assert "!cup pick <number>" in text
    assert "!cup close [number]" in text


def test_start_announcement():
    text = CupPresenter().start_announcement("Some_One", "Friday night")
    assert "managed by **Some\\_One**" in text
    assert "Friday night" in text
    assert text.endswith("You can sign up now by typing **?draft add**")


def test_error_messages():
    presenter = CupPresenter()
    assert presenter.error(DuplicateSignupError(1, 5), "Bob") == (
        "**Bob**, you're already registered for this cup (2nd of 5)."
    )
    assert presenter.error(NotEnoughPlayersError(0, 8), "Bob") == (
        "Nobody signed up, at least 8 are needed to close sign-up."
    )
    assert presenter.error(NotEnoughPlayersError(3, 8), "Bob").startswith("Only 3 players signed up")
    assert presenter.error(PromotionThrottledError(7200), "Bob") == (
        "Too soon to promote, **Bob**. You can try again in 2 hours."
    )
    assert presenter.error(NotYourTurnError(), "Bob") == "**Bob**, it's not your turn to pick.\n"
    assert presenter.error(
        InvalidPhaseError("sign up", CupStatus.INACTIVE), "Bob", command="add"
    ) == "Sorry, **Bob**, cup is no longer open for signup."


def test_unauthorized_messages(manager):
    presenter = CupPresenter()
    assert presenter.error(UnauthorizedError("remove other players", manager), "Bob") == (
        "Only the cup manager, **Manager**, can remove other players.\n"
    )
    assert presenter.error(UnauthorizedError("abort this cup", manager), "Bob") == (
        "Only **Manager**, the cup manager, or an admin can abort this cup."
    )
    assert presenter.error(UnauthorizedError("close sign-up", manager), "Bob") == (
        "Only **Manager**, the cup manager, can close sign-up."
    )


def test_no_cup_here_points_to_other_channels():
    presenter = CupPresenter()
    assert presenter.no_cup_here("Bob").startswith("No cup in progress in this channel.")
    text = presenter.no_cup_here("Bob", ["1", "2"])
    assert "Try again in <#1> or <#2>" in text


def test_last_pinned_quote():
    presenter = CupPresenter()
    assert presenter.last_pinned("Hey, @everyone!", 0) == (
        "\n\n__***Last pinned cup message:***__\n\nHey, everyone!"
    )
    assert "(from 3 days ago)" in presenter.last_pinned("x", 3 * 24 * 60 * 60)
