import random

from src.cup_draft.domain.entities.team import Team
from src.cup_draft.domain.services.team_names import (
    ATTRIBUTES,
    MAX_NAME_RETRIES,
    NOUNS,
    TEAM_NAME_COMBOS,
    TeamNameService,
    compose_name,
    decompose_name,
)


class FixedRandom(random.Random):
    """Always draws the same combination and counts the draws"""

    def __init__(self, value: int):
        super().__init__()
        self.value = value
        self.draws = 0

    def randrange(self, *args, **kwargs):
        self.draws += 1
        return self.value


def test_compose_name():
    assert compose_name(0) == f"{ATTRIBUTES[0]} {NOUNS[0]}"
    index = 3 + 2 * len(ATTRIBUTES)
    assert decompose_name(index) == (3, 2)
    assert compose_name(index) == f"{ATTRIBUTES[3]} {NOUNS[2]}"
    assert compose_name(TEAM_NAME_COMBOS - 1) == f"{ATTRIBUTES[-1]} {NOUNS[-1]}"


def test_every_team_gets_a_name():
    teams = [Team() for _ in range(6)]
    chosen = TeamNameService(random.Random(1)).choose_team_names(teams)
    assert len(chosen) == 6
    assert all(team.name for team in teams)
    assert [compose_name(i) for i in chosen] == [team.name for team in teams]


def test_names_avoid_shared_words_when_possible():
    teams = [Team() for _ in range(8)]
    chosen = TeamNameService(random.Random(7)).choose_team_names(teams)
    attributes = {decompose_name(i)[0] for i in chosen}
    nouns = {decompose_name(i)[1] for i in chosen}
    assert len(attributes) == 8
    assert len(nouns) == 8


def test_collisions_give_up_after_retries():
    rng = FixedRandom(42)
    teams = [Team(), Team()]
    TeamNameService(rng).choose_team_names(teams)

    assert teams[0].name == teams[1].name == compose_name(42)
    assert rng.draws == 1 + MAX_NAME_RETRIES
