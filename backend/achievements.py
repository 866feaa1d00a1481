"""
Achievement catalog and evaluator.

Each achievement is a data rule: a `kind` naming the check and a
`threshold` parameterizing it. The evaluator dispatches on kind through one
table, so adding an achievement never means adding code unless it needs a
new kind of check.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional

from models import Company, FinancialSnapshot, ProjectStatus

logger = logging.getLogger(__name__)


class Rarity(str, Enum):
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


@dataclass(frozen=True)
class Achievement:
    id: str
    name: str
    description: str
    rarity: Rarity
    kind: str
    threshold: object = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "rarity": self.rarity.value,
        }


ACHIEVEMENTS: List[Achievement] = [
    # Survival
    Achievement("survive_6_months", "First Steps", "Survive 6 months in business",
                Rarity.COMMON, "min_month", 6),
    Achievement("survive_12_months", "One Year Anniversary", "Survive one full year",
                Rarity.COMMON, "min_month", 12),
    Achievement("survive_24_months", "Established", "Survive two years",
                Rarity.RARE, "min_month", 24),
    Achievement("survive_60_months", "Legacy", "Survive five years",
                Rarity.EPIC, "min_month", 60),

    # Financial
    Achievement("first_profit", "In the Black", "Achieve positive cash flow",
                Rarity.COMMON, "positive_cashflow"),
    Achievement("reach_100k", "Six Figures", "Reach $100,000 in cash",
                Rarity.COMMON, "min_cash", 100000),
    Achievement("reach_500k", "Half Million", "Reach $500,000 in cash",
                Rarity.RARE, "min_cash", 500000),
    Achievement("reach_1m", "Millionaire", "Reach $1,000,000 in cash",
                Rarity.EPIC, "min_cash", 1000000),

    # Team
    Achievement("hire_first_employee", "Growing Team", "Hire your first employee",
                Rarity.COMMON, "min_hired", 2),
    Achievement("team_of_5", "Small but Mighty", "Build a team of 5 employees",
                Rarity.COMMON, "min_active_team", 5),
    Achievement("team_of_10", "Double Digits", "Build a team of 10 employees",
                Rarity.RARE, "min_active_team", 10),
    Achievement("team_of_25", "Unicorn Team", "Build a team of 25 employees",
                Rarity.EPIC, "min_active_team", 25),

    # Projects
    Achievement("first_project", "First Delivery", "Complete your first project",
                Rarity.COMMON, "min_completed", 1),
    Achievement("complete_5_projects", "Getting Things Done", "Complete 5 projects",
                Rarity.COMMON, "min_completed", 5),
    Achievement("complete_20_projects", "Project Machine", "Complete 20 projects",
                Rarity.RARE, "min_completed", 20),
    Achievement("perfect_project", "Perfect Execution", "Complete a project with 90%+ quality",
                Rarity.RARE, "min_completed_quality", 90),

    # Reputation
    Achievement("reputation_75", "Well Known", "Reach 75 reputation",
                Rarity.RARE, "min_reputation", 75),
    Achievement("reputation_95", "Industry Leader", "Reach 95 reputation",
                Rarity.EPIC, "min_reputation", 95),

    # Culture
    Achievement("balanced_culture", "Goldilocks Zone",
                "Maintain balanced culture across all dimensions (0.4-0.6)",
                Rarity.RARE, "culture_balanced", (0.4, 0.6)),
    Achievement("speed_demon", "Speed Demon", "Achieve speed culture above 0.8",
                Rarity.RARE, "min_culture_speed", 0.8),
    Achievement("quality_focused", "Quality Obsessed", "Achieve quality culture above 0.8",
                Rarity.RARE, "min_culture_quality", 0.8),

    # Special
    Achievement("no_quitters", "Retention Master", "Reach month 12 without any employees quitting",
                Rarity.EPIC, "no_quitters", 12),
    Achievement("jack_of_all_trades", "Jack of All Trades", "Have employees with all 5 personality types",
                Rarity.EPIC, "personality_diversity", 5),
    Achievement("legendary_survivor", "Legendary Survivor", "Reach month 100 with positive cash flow",
                Rarity.LEGENDARY, "legendary_survivor", 100),
]

ACHIEVEMENTS_BY_ID: Dict[str, Achievement] = {a.id: a for a in ACHIEVEMENTS}


def _completed(company: Company):
    return company.projects_with_status(ProjectStatus.COMPLETED)


def _latest_financials(company: Company, financials: Optional[FinancialSnapshot]):
    if financials is not None:
        return financials
    if company.history:
        return company.history[-1].financials
    return None


def _positive_cashflow(company, threshold, financials):
    latest = _latest_financials(company, financials)
    return latest is not None and latest.net_cashflow > 0


def _culture_balanced(company, threshold, financials):
    low, high = threshold
    culture = company.culture
    return all(
        low <= value <= high
        for value in (culture.speed, culture.quality, culture.work_life, culture.hierarchy)
    )


def _no_quitters(company, threshold, financials):
    if company.current_month < threshold:
        return False
    return all(
        e.quit_month is None or e.quit_month == company.current_month
        for e in company.employees
    )


# kind -> predicate(company, threshold, financials)
RULE_CHECKS: Dict[str, Callable[[Company, object, Optional[FinancialSnapshot]], bool]] = {
    "min_month": lambda c, t, f: c.current_month >= t,
    "min_cash": lambda c, t, f: c.cash >= t,
    "min_hired": lambda c, t, f: len(c.employees) >= t,
    "min_active_team": lambda c, t, f: len(c.active_employees()) >= t,
    "min_completed": lambda c, t, f: len(_completed(c)) >= t,
    "min_completed_quality": lambda c, t, f: any(p.quality >= t for p in _completed(c)),
    "min_reputation": lambda c, t, f: c.reputation >= t,
    "culture_balanced": _culture_balanced,
    "min_culture_speed": lambda c, t, f: c.culture.speed >= t,
    "min_culture_quality": lambda c, t, f: c.culture.quality >= t,
    "no_quitters": _no_quitters,
    "personality_diversity": lambda c, t, f: len({e.personality for e in c.employees}) >= t,
    "positive_cashflow": _positive_cashflow,
    "legendary_survivor": lambda c, t, f: c.current_month >= t and c.cash > 0,
}


class AchievementEvaluator:
    """Sweeps the catalog once per month."""

    def __init__(self, catalog: Optional[Iterable[Achievement]] = None):
        self.catalog = list(catalog) if catalog is not None else list(ACHIEVEMENTS)
        for achievement in self.catalog:
            if achievement.kind not in RULE_CHECKS:
                raise ValueError(f"Unknown achievement kind: {achievement.kind}")

    def evaluate(
        self,
        company: Company,
        financials: Optional[FinancialSnapshot] = None
    ) -> List[Achievement]:
        """
        Return achievements newly satisfied this month, in catalog order.

        Args:
            company: Company to check
            financials: This month's snapshot; falls back to the last history
                entry when omitted

        Returns:
            Achievements not yet in company.unlocked_achievements
        """
        unlocked = set(company.unlocked_achievements)
        newly_unlocked = []
        for achievement in self.catalog:
            if achievement.id in unlocked:
                continue
            check = RULE_CHECKS[achievement.kind]
            if check(company, achievement.threshold, financials):
                newly_unlocked.append(achievement)
                logger.info("Achievement unlocked: %s", achievement.name)
        return newly_unlocked
