"""
Cup Presenter

Turns cups, engine outcomes and domain errors into the chat messages the
bot posts. Pure string building; sending is left to the command cog.
"""

from typing import NamedTuple, Optional, Sequence

from ..domain.entities.cup import Cup
from ..domain.entities.cup_status import CupStatus
from ..domain.entities.outcomes import Assignment, PickOutcome, WithdrawOutcome
from ..domain.entities.player import Player
from ..domain.exceptions import (
    AlreadyAssignedError,
    AlreadyStartedError,
    CupError,
    CupNotFoundError,
    DuplicateSignupError,
    InvalidIndexError,
    InvalidPhaseError,
    InvalidTargetError,
    InvalidTeamSizeError,
    NoSubstituteAvailableError,
    NotEnoughPlayersError,
    NotRegisteredError,
    NotYourTurnError,
    NothingToRemoveError,
    PromotionThrottledError,
    SubstitutePickError,
    TooFewPlayersError,
    TooManyPlayersError,
    UnauthorizedError,
)
from ..domain.services.draft_engine import DraftEngine
from .report import ReportSection, render_text
from src.utils.formatting import (
    bold,
    escape,
    humanize,
    join_alternatives,
    mention_channel,
    mention_user,
    nth,
    numbered,
)


class CommandInfo(NamedTuple):
    name: str
    args: str
    help: str


COMMANDS = (
    CommandInfo("help", "", "Show this list"),
    CommandInfo("start", " [message]", "Start a new cup, with an optional description"),
    CommandInfo("abort", "", "Abort current cup"),
    CommandInfo("add", "", "Sign up to play in the cup"),
    CommandInfo("remove", " [number]", "Remove yourself from the cup (or another player, if manager)"),
    CommandInfo("who", "", "Show list of players in cup"),
    CommandInfo("moderate", " [on|off]", "Enable/disable or toggle channel moderation when a cup is active"),
    CommandInfo("teamsize", " [number]", "Show or change current team size"),
    CommandInfo("close", " [number]", "Close cup for sign-ups, optionally keeping only [number] players"),
    CommandInfo("pick", " <number>", "Pick the player with the given number"),
    CommandInfo("promote", "", "Promote the cup"),
    CommandInfo("reopen", "", "Discard current teams and reopen cup for sign-up"),
)


def display(player: Player) -> str:
    return bold(escape(player.display_name))


class CupPresenter:
    """Message builder for one command prefix"""

    def __init__(self, prefix: str = "?draft", engine: Optional[DraftEngine] = None):
        self.prefix = prefix
        self.engine = engine or DraftEngine()

    # ===================
    # Commands
    # ===================

    def syntax(self, name: str) -> str:
        for command in COMMANDS:
            if command.name == name:
                return f"{self.prefix} {command.name}{command.args}"
        return f"{self.prefix} {name}"

    def syntax_no_args(self, name: str) -> str:
        return f"{self.prefix} {name}"

    def help_text(self) -> str:
        """Aligned command list in a code block"""
        lines = ["Supported commands:", "```Note: arguments marked [] are optional, <> are mandatory.", ""]
        syntaxes = [self.syntax(c.name) for c in COMMANDS]
        width = max(len(s) for s in syntaxes)
        for syntax, command in zip(syntaxes, COMMANDS):
            lines.append(f"{syntax.ljust(width)} : {command.help}")
        return "\n".join(lines) + "\n```\n"

    def unknown_command(self, token: str) -> str:
        return f"Unknown command, '{token}'.\n"

    # ===================
    # Reports
    # ===================

    def report(self, cup: Cup, sections: ReportSection = ReportSection.ALL) -> str:
        return render_text(cup, sections, self.engine, self.prefix)

    def status_sections(self, cup: Cup) -> ReportSection:
        """Substitutes are left out of the status reply while picking"""
        if cup.status == CupStatus.PICKUP:
            return ReportSection.ALL & ~ReportSection.SUBSTITUTES
        return ReportSection.ALL

    # ===================
    # Lifecycle Messages
    # ===================

    def start_announcement(self, author_name: str, description: str = "") -> str:
        text = (
            "Hey, @everyone!\n\nRegistration is now open for a new draft cup, "
            f"managed by {bold(escape(author_name))}.\n\n"
        )
        if description:
            text += description + "\n\n"
        return text + f"You can sign up now by typing {bold(self.syntax('add'))}"

    def promotion(self, cup: Cup) -> str:
        text = (
            "Hey, @everyone!\n\nDon't forget that registration is now open for a new draft cup, "
            f"managed by {display(cup.manager)}.\n"
        )
        if cup.description:
            text += "\n" + cup.description
        return text

    def aborted(self, author_name: str) -> str:
        return (
            f"Cup aborted by {bold(escape(author_name))}. "
            f"You can start a new one with {bold(self.syntax('start'))}"
        )

    def no_cup_here(self, author_name: str, other_channel_ids: Sequence[str] = ()) -> str:
        if not other_channel_ids:
            return f"No cup in progress in this channel. You can start one with {bold(self.syntax('start'))}"
        alternatives = join_alternatives(mention_channel(c) for c in other_channel_ids)
        return (
            f"{bold(escape(author_name))}, there's no cup in progress in this channel.\n"
            f"Try again in {alternatives}, or start a new cup here with {bold(self.syntax('start'))}"
        )

    def last_pinned(self, content: str, age_seconds: float) -> str:
        """Previous cup announcement, quoted without pinging anyone"""
        text = "\n\n__***Last pinned cup message"
        if age_seconds > 0:
            text += f" (from {humanize(age_seconds)} ago)"
        return text + ":***__\n\n" + content.replace("@everyone", "everyone")

    def signup_closed(self) -> str:
        return "Cup registration is now closed.\n\n"

    def reopened(self, author_name: str) -> str:
        return f"{bold(escape(author_name))} discarded the teams and reopened the cup.\n\n"

    def substitute_joined(self, player: Player, substitute_number: int) -> str:
        return f"{mention_user(player.user_id)} joined the cup as {nth(substitute_number)} substitute."

    def withdrawn(self, outcome: WithdrawOutcome, status: CupStatus) -> str:
        """Announcement for a withdrawal; signup withdrawals need none"""
        if outcome.was_substituted:
            return (
                f"{mention_user(outcome.removed.user_id)} has left the cup and "
                f"{mention_user(outcome.replacement.user_id)} will take their place."
            )
        if status == CupStatus.PICKUP:
            return f"{mention_user(outcome.removed.user_id)} has left the cup."
        return ""

    def team_size(self, author_name: str, size: int, changed: Optional[bool] = None) -> str:
        name = bold(escape(author_name))
        if changed is None:
            return f"{name}, team size is {bold(str(size))}.\n"
        if not changed:
            return f"{name}, team size is already {size}."
        return f"{name} has changed team size to {bold(str(size))}."

    def moderation(self, author_name: str, moderated: bool, changed: bool) -> str:
        if not changed:
            state = "moderated" if moderated else "unmoderated"
            return f"{bold(escape(author_name))}, this channel is already {state}."
        if moderated:
            return (
                "This channel is now moderated while the cup is active.\n"
                "Any message that is not a bot command will be removed."
            )
        return "This channel is no longer moderated."

    def assignment(self, assignment: Assignment) -> str:
        text = (
            f"{mention_user(assignment.player.user_id)} joined team "
            f"{assignment.team_index + 1}, {bold(assignment.team_name)}"
        )
        if assignment.is_captain:
            text += " (as captain)"
        return text + ".\n"

    def picked(self, outcome: PickOutcome) -> str:
        return "".join(self.assignment(a) for a in outcome.assignments)

    def completed(self, cup: Cup) -> str:
        return (
            "Teams are now complete and the games can begin!\n"
            f"{display(cup.manager)} will take things from here, setting up matches and tracking scores.\n\n"
            + self.report(cup, ReportSection.TEAMS | ReportSection.SUBSTITUTES)
            + "Good luck and have fun, @everyone!"
        )

    # ===================
    # Input Errors
    # ===================

    def not_a_number(self, author_name: str, token: str, command: str) -> str:
        name = bold(escape(author_name))
        if command == "remove":
            return (
                f"{name}, '{token}' doesn't look like a number, either leave it out (to remove yourself "
                "from the list of players) or specify an actual player number.\n\n"
            )
        if command == "close":
            return (
                f"{name}, '{token}' doesn't look like a number, either leave it out or specify "
                "an actual number of players to keep.\n"
            )
        if command == "pick":
            return f"{name}, '{token}' doesn't look like a number. You need to specify a player number."
        return f"{name}, '{token}' doesn't look like a number.\n\n"

    def missing_pick_number(self, author_name: str) -> str:
        return f"{bold(escape(author_name))}, you need to specify a player number."

    def invalid_moderation_option(self, author_name: str, token: str) -> str:
        return (
            f"{bold(escape(author_name))}, '{token}' is not a valid option. You need to specify either "
            f"**on** or **off** after {bold(self.syntax_no_args('moderate'))}"
        )

    # ===================
    # Domain Errors
    # ===================

    def error(self, error: CupError, author_name: str, author_id: str = "", command: str = "") -> str:
        """User-facing text for a domain error raised by a command"""
        name = bold(escape(author_name))

        if isinstance(error, AlreadyStartedError):
            cup = error.cup
            if cup is None:
                return f"{name}, a cup has already been started in this channel."
            who = "you" if cup.manager.user_id == author_id else display(cup.manager)
            return f"{name}, {who} already started the cup."
        if isinstance(error, CupNotFoundError):
            return self.no_cup_here(author_name)
        if isinstance(error, DuplicateSignupError):
            return (
                f"{name}, you're already registered for this cup "
                f"({nth(error.index + 1)} of {error.total})."
            )
        if isinstance(error, NotRegisteredError):
            return f"{name}, you're not registered for this cup anyway."
        if isinstance(error, NothingToRemoveError):
            return "No players to remove, nobody has signed up for the cup yet."
        if isinstance(error, InvalidIndexError):
            return f"{name}, {error.index + 1} is not a valid player number."
        if isinstance(error, NoSubstituteAvailableError):
            target = "you" if error.player.user_id == author_id else mention_user(error.player.user_id)
            return (
                f"{name}, there's no substitute available to replace {target}.\n"
                f"You need to find a substitute first and have them sign up by typing {bold(self.syntax('add'))}"
            )
        if isinstance(error, NotEnoughPlayersError):
            who = "Nobody" if error.signed_up == 0 else "Only " + numbered(error.signed_up, "player")
            return f"{who} signed up, at least {error.minimum} are needed to close sign-up."
        if isinstance(error, TooManyPlayersError):
            return f"{name}, {error.requested} players haven't signed up yet.\n"
        if isinstance(error, TooFewPlayersError):
            return f"{name}, you need to keep at least {error.minimum} players.\n"
        if isinstance(error, NotYourTurnError):
            if error.expected is None:
                return f"{name}, it's not your turn to pick.\n"
            return f"{name}, it's not your turn to pick, but {display(error.expected)}'s.\n"
        if isinstance(error, SubstitutePickError):
            return f"{name}, you can't pick {display(error.player)}, they're only registered as a substitute."
        if isinstance(error, AlreadyAssignedError):
            return f"{display(error.player)} already on team {error.player.team_index + 1}, {bold(error.team.name)}"
        if isinstance(error, InvalidTargetError):
            return f"{name}, '{error.index + 1}' is not a valid player number."
        if isinstance(error, InvalidTeamSizeError):
            return f"{name}, {error.size} is not a valid team size."
        if isinstance(error, PromotionThrottledError):
            return f"Too soon to promote, {name}. You can try again in {humanize(error.remaining)}."
        if isinstance(error, UnauthorizedError):
            return self._unauthorized(error, author_id)
        if isinstance(error, InvalidPhaseError):
            return self._invalid_phase(error, name, command)
        return f"{name}, {error}"

    def _unauthorized(self, error: UnauthorizedError, author_id: str) -> str:
        manager = display(error.manager) if error.manager is not None else "the manager"
        if error.operation == "remove other players":
            return f"Only the cup manager, {manager}, can remove other players.\n"
        if error.operation in ("abort this cup", "enable or disable moderation"):
            return f"Only {manager}, the cup manager, or an admin can {error.operation}."
        return f"Only {manager}, the cup manager, can {error.operation}."

    def _invalid_phase(self, error: InvalidPhaseError, name: str, command: str) -> str:
        status = error.status
        if command == "add":
            return f"Sorry, {name}, cup is no longer open for signup."
        if command == "remove":
            return "Cup is not currently open for signup, anyway."
        if command == "close":
            return f"Too late, {name}, registration for this cup is already closed."
        if command == "pick":
            if status == CupStatus.SIGNUP:
                return f"{name}, we're not picking players yet.\n"
            return f"Sorry, {name}, we're not picking players at this point."
        if command == "promote":
            return "Cup can only be promoted when registration is open."
        if command == "reopen":
            return f"{name}, the cup can only be reopened for sign-up after picking has begun."
        if command == "teamsize":
            return f"{name}, you can only change team size during sign-up."
        return f"{name}, that's not possible while the cup is in {status.value}."

    def remove_hint(self, is_registered: bool) -> str:
        """Appended to the unauthorized remove message for signed-up players"""
        if not is_registered:
            return ""
        return f"You can remove yourself by typing {bold(self.syntax_no_args('remove'))}"
