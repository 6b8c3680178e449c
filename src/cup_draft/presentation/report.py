"""
Cup Report Projection

Read-only rendering of a cup into report blocks. Nothing here mutates the
cup or talks to Discord; the command layer decides where the text goes.
"""

import enum
from dataclasses import dataclass, field
from typing import List, Optional

from ..domain.entities.cup import Cup
from ..domain.entities.cup_status import CupStatus
from ..domain.services.draft_engine import DraftEngine
from src.utils.formatting import bold, mention_user, nth, numbered, rightpad

DEFAULT_PREFIX = "?draft"


class ReportSection(enum.Flag):
    """Parts of a report that can be requested"""
    NONE = 0
    PLAYERS = 1
    TEAMS = 2
    SUBSTITUTES = 4
    NEXT_ACTION = 8
    ALL = 15


@dataclass
class ReportBlock:
    """
    One section of a report.

    Lines are shown as a preformatted list under the title; a block without
    lines is a single sentence.
    """
    section: ReportSection
    title: str
    lines: List[str] = field(default_factory=list)

    def to_text(self) -> str:
        if not self.lines:
            return self.title + "\n"
        body = "\n".join(self.lines)
        return f"{self.title}\n```\n{body}\n```\n"


def _numbered_line(index: int, name: str, width: int) -> str:
    return rightpad(f"{index + 1}. ", width + 2) + name


def _lineup_text(cup: Cup, team_index: int) -> str:
    return ", ".join(player.display_name for player in cup.lineup(team_index))


def _signup_blocks(cup: Cup, sections: ReportSection, prefix: str) -> List[ReportBlock]:
    blocks = []
    width = len(str(len(cup.players)))

    if sections & ReportSection.PLAYERS:
        if not cup.players:
            blocks.append(ReportBlock(ReportSection.PLAYERS, "No players signed up for the cup so far."))
        else:
            lines = [_numbered_line(i, p.display_name, width) for i, p in enumerate(cup.players)]
            title = f"{numbered(len(cup.players), 'player')} signed up so far:"
            blocks.append(ReportBlock(ReportSection.PLAYERS, title, lines))

    if sections & ReportSection.NEXT_ACTION:
        title = f"Sign up now by typing {bold(prefix + ' add')}"
        blocks.append(ReportBlock(ReportSection.NEXT_ACTION, title))

    return blocks


def _pickup_blocks(cup: Cup, sections: ReportSection, engine: DraftEngine, prefix: str) -> List[ReportBlock]:
    blocks = []
    active = cup.active_player_count
    width = len(str(len(cup.players)))

    if sections & ReportSection.TEAMS:
        if cup.picked_count not in (0, active):
            title = (
                f"{len(cup.teams)} teams, with {numbered(cup.picked_count, 'player')} "
                f"picked out of {active}:"
            )
        else:
            title = f"{len(cup.teams)} competing teams:"

        descriptions = [f"{i + 1}. {team.name}" for i, team in enumerate(cup.teams)]
        if cup.picked_count > 0:
            longest = max(len(d) for d in descriptions)
            lines = [
                f"{d.ljust(longest)} : {_lineup_text(cup, i)}"
                for i, d in enumerate(descriptions)
            ]
        else:
            # no colons while every team is empty
            lines = descriptions
        blocks.append(ReportBlock(ReportSection.TEAMS, title, lines))

    if sections & ReportSection.PLAYERS:
        available = cup.unassigned_active_indices()
        if available:
            lines = [_numbered_line(i, cup.players[i].display_name, width) for i in available]
            blocks.append(ReportBlock(ReportSection.PLAYERS, f"{len(available)} available players:", lines))

    if sections & ReportSection.SUBSTITUTES:
        substitutes = cup.substitute_indices()
        if substitutes:
            lines = [f"{i + 1}. {cup.players[i].display_name}" for i in substitutes]
            title = f"{numbered(len(substitutes), 'substitute player')}:"
            blocks.append(ReportBlock(ReportSection.SUBSTITUTES, title, lines))

    if sections & ReportSection.NEXT_ACTION:
        picker = engine.next_picker(cup)
        if picker is None:
            blocks.append(ReportBlock(ReportSection.NEXT_ACTION, "Good luck and have fun!"))
        else:
            turn = engine.current_turn(cup)
            team = f"team {turn.team + 1}, {bold(cup.teams[turn.team].name)}"
            what = "a captain" if turn.is_captain_pick else f"the {nth(turn.seat + 1)} player"
            title = (
                f"{mention_user(picker.user_id)}, pick {what} for {team}, "
                f"by typing {bold(prefix + ' pick <number>')}"
            )
            blocks.append(ReportBlock(ReportSection.NEXT_ACTION, title))

    return blocks


def render(
    cup: Cup,
    sections: ReportSection = ReportSection.ALL,
    engine: Optional[DraftEngine] = None,
    prefix: str = DEFAULT_PREFIX
) -> List[ReportBlock]:
    """Build the requested report sections for a cup's current status"""
    if cup.status == CupStatus.SIGNUP:
        return _signup_blocks(cup, sections, prefix)
    if cup.status == CupStatus.PICKUP:
        return _pickup_blocks(cup, sections, engine or DraftEngine(), prefix)
    return []


def render_text(
    cup: Cup,
    sections: ReportSection = ReportSection.ALL,
    engine: Optional[DraftEngine] = None,
    prefix: str = DEFAULT_PREFIX
) -> str:
    return "".join(block.to_text() for block in render(cup, sections, engine, prefix))
