"""
Team Name Service - Domain Service

Random team names are an attribute followed by a noun. Every combination is
addressed by a single integer, index = attribute + noun * len(ATTRIBUTES).
"""

import random
from typing import List, Optional, Sequence, Tuple

from ..entities.team import Team

ATTRIBUTES = (
    "Black", "Grey", "Purple", "Brown", "Blue", "Red", "Green", "Magenta",
    "Silent", "Quiet", "Loud", "Thundering", "Screaming", "Flaming", "Furious", "Zen", "Chill",
    "Jolly", "Giggly", "Unimpressed", "Serious",
    "Inappropriate", "Indecent", "Sexy", "Hot", "Flirty", "Cheeky", "Cheesy", "Shameless", "Provocative", "Offensive", "Defensive",
    "Gangster", "Fugitive", "Outlaw", "Pirate", "Thug", "Kleptomaniac", "Killer", "Lethal", "Gunslinging",
    "Fresh", "Rookie", "Trained", "Major", "Grandmaster", "Retired", "Potent", "Mighty", "Convincing", "Commanding", "Punchy",
    "Lucky", "Tryhard", "Stronk",
    "Expendable",
    "Millenial", "Centennial",
    "Lunar", "Solar", "Martian",
    "Aerodynamic",
    "Sprinting", "Strafing", "Strafejumping", "Circlejumping", "Bunnyhopping", "Crouching", "Rising", "Standing", "Camping", "Twitchy", "Sniping", "Telefragging",
    "Rolling", "Dancing", "Breakdancing", "Tapdancing", "Clubbing",
    "Snorkeling", "Snowbording", "Cycling", "Rollerblading", "Paragliding", "Skydiving",
    "Drifting", "Warping", "Laggy", "Smooth", "Stiff",
    "Cryogenic", "Mutating", "Undead", "Ghostly", "Possessed", "Supernatural",
    "Juggling", "Ambidextrous", "Left-handed",
    "Snoring", "Sleepy", "Energetic", "Hyperactive", "Dynamic",
    "Tilted", "Excentric", "Irrational", "Claustrophobic",
    "Undercover", "Stealthy", "Hidden", "Obvious", "Deceptive",
    "Total", "Definitive",
    "Chocolate", "Vanilla",
    "Plastic", "Metal", "Rubber", "Golden", "Silver", "Paper",
    "Random", "Synchronized", "Synergetic", "Coordinated",
    "Radical", "Unconventional", "Standard", "Original", "Mutated", "Creative", "Articulate", "Elegant", "Gentle", "Polite", "Classy",
    "Retro", "Old-school", "Next-gen", "Revolutionary",
    "Punk", "Disco", "Electronic", "Analog", "Mechanical",
    "Wireless", "Aircooled", "Watercooled", "Overvolted", "Overclocked", "Idle", "Hyperthreaded", "Freesync", "G-Sync", "Crossfire", "SLI", "Quad-channel",
    "Optimized", "Registered", "Licensed",
    "Nerdy", "Hipster", "Trendy", "Sporty", "Chic", "Photogenic",
    "Mythical", "Famous", "Incognito",
    "Slim", "Toned", "Muscular", "Round", "Heavy", "Well-fed", "Hungry", "Vegan",
    "Bearded", "Hairy", "Furry", "Fuzzy",
    "Beastly", "Barbarian", "Vicious", "Fierce", "Devastating", "Dominating", "Conquering", "Controlling", "Agressive", "Retaliating",
    "Fearless", "Heroic", "Glorious", "Victorious", "Triumphant", "Relentless", "Unstoppable", "Spectacular", "Impressive", "Rampage",
    "Arctic", "Polar", "Siberian", "Tropical", "Brazilian",
)

NOUNS = (
    "Alligators", "Crocs",
    "Armadillos", "Beavers", "Squirrels", "Raccoons",
    "Bears", "Pandas",
    "Hamsters", "Kittens", "Bunnies", "Puppies", "Pitbulls", "Bulldogs", "Dalmatians", "Greyhounds", "Huskies",
    "Turtles",
    "Giraffes", "Gazelles",
    "Sharks", "Piranhas", "Tuna", "Salmons", "Trouts", "Barracudas", "Stingrays",
    "Dolphins", "Sealions",
    "Hornets",
    "Pythons", "Vipers", "Cobras", "Anacondas",
    "Hippos", "Rhinos",
    "Tigers", "Cheetas", "Hyenas", "Dingos",
    "Baboons", "Bonobos",
    "Dragons", "Pterodactyls", "Eagles", "Hawks", "Ravens", "Seagulls", "Flamingos", "Pigeons", "Roosters", "Duckies",
    "Ponies", "Zebras", "Stallions",
    "Zombies", "Unicorns", "Mermaids", "Trolls",
)

TEAM_NAME_COMBOS = len(ATTRIBUTES) * len(NOUNS)

# Attempts at avoiding a shared attribute or noun before settling for a repeat
MAX_NAME_RETRIES = 100


def decompose_name(index: int) -> Tuple[int, int]:
    """Split a combination index into (attribute, noun) indices"""
    return index % len(ATTRIBUTES), index // len(ATTRIBUTES)


def compose_name(index: int) -> str:
    attribute, noun = decompose_name(index)
    return f"{ATTRIBUTES[attribute]} {NOUNS[noun]}"


def _collides(candidate: int, chosen: Sequence[int]) -> bool:
    attribute, noun = decompose_name(candidate)
    for other in chosen:
        other_attribute, other_noun = decompose_name(other)
        if attribute == other_attribute or noun == other_noun:
            return True
    return False


class TeamNameService:
    """
    Assigns random names to the teams of a cup.

    Uniqueness is best effort: a candidate sharing its attribute or its noun
    with an earlier team is redrawn, and after MAX_NAME_RETRIES the last
    candidate is kept anyway.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def choose_team_names(self, teams: List[Team]) -> List[int]:
        """Name every team in order; returns the chosen combination indices"""
        chosen: List[int] = []
        for team in teams:
            candidate = self._rng.randrange(TEAM_NAME_COMBOS)
            for _ in range(MAX_NAME_RETRIES - 1):
                if not _collides(candidate, chosen):
                    break
                candidate = self._rng.randrange(TEAM_NAME_COMBOS)
            chosen.append(candidate)
            team.name = compose_name(candidate)
        return chosen
