"""
Personality reference data.

Each personality shifts generated skills, scales salary and productivity,
and weights the culture axes differently when judging culture fit.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from models import Culture, Personality


@dataclass(frozen=True)
class PersonalityProfile:
    name: str
    description: str
    skill_modifiers: Dict[str, float]
    salary_multiplier: float = 1.0
    productivity_multiplier: float = 1.0
    quit_multiplier: float = 1.0
    traits: List[str] = field(default_factory=list)


PERSONALITIES: Dict[Personality, PersonalityProfile] = {
    Personality.ROCKSTAR: PersonalityProfile(
        name="Rockstar",
        description="Exceptionally skilled but difficult to manage. High output but low collaboration.",
        skill_modifiers={"technical": 15, "sales": 5, "design": 10, "management": -10},
        salary_multiplier=1.5,
        productivity_multiplier=1.3,
        quit_multiplier=1.3,
        traits=["High skill ceiling", "Expensive", "Prone to leaving"],
    ),
    Personality.TEAM_PLAYER: PersonalityProfile(
        name="Team Player",
        description="Boosts team morale and collaborates well. Reliable and steady performer.",
        skill_modifiers={"technical": 0, "sales": 5, "design": 5, "management": 10},
        traits=["Reliable", "Good culture fit", "Stable"],
    ),
    Personality.WILDCARD: PersonalityProfile(
        name="Wildcard",
        description="Unpredictable creative genius. Can produce breakthroughs or disasters.",
        skill_modifiers={"technical": 5, "sales": 0, "design": 15, "management": -5},
        traits=["Variable productivity (0.5-1.5x)", "Creative breakthroughs", "Unpredictable"],
    ),
    Personality.WORKHORSE: PersonalityProfile(
        name="Workhorse",
        description="Steady, reliable, rarely quits. Consistent output day after day.",
        skill_modifiers={"technical": 5, "sales": 0, "design": 0, "management": 0},
        salary_multiplier=1.1,
        productivity_multiplier=1.1,
        quit_multiplier=0.5,
        traits=["Rarely quits", "Consistent output", "Low maintenance"],
    ),
    Personality.LEADER: PersonalityProfile(
        name="Leader",
        description="Natural manager who unlocks team bonuses and improves overall performance.",
        skill_modifiers={"technical": 0, "sales": 10, "design": 0, "management": 20},
        salary_multiplier=1.3,
        traits=["Natural manager", "Strategic thinker"],
    ),
}


def culture_fit(personality: Personality, culture: Culture) -> float:
    """Weighted 0-1 fit between a personality and the company culture."""
    if personality == Personality.ROCKSTAR:
        return culture.quality * 0.6 + (1 - culture.hierarchy) * 0.4
    if personality == Personality.TEAM_PLAYER:
        return (1 - culture.hierarchy) * 0.7 + culture.work_life * 0.3
    if personality == Personality.WILDCARD:
        return (1 - culture.speed) * 0.5 + (1 - culture.hierarchy) * 0.5
    if personality == Personality.WORKHORSE:
        return culture.speed * 0.6 + culture.work_life * 0.4
    if personality == Personality.LEADER:
        return culture.hierarchy * 0.6 + culture.quality * 0.4
    return 0.5
