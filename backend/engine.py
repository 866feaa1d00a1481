"""
Monthly tick orchestration and end-of-game scoring.

process_month runs the subsystems in a fixed order against one Company:

    1. morale & productivity      7. event generation
    2. project progress           8. culture drift
    3. completion outcomes        9. achievements
    4. financial snapshot        10. month snapshot
    5. cash update               11. month advance
    6. turnover                  12. solvency check
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from achievements import AchievementEvaluator
from config import CONFIG, SimulationConfig
from culture import CultureSystem
from employees import EmployeeSystem
from events import EventSystem
from finances import FinancialSystem
from models import Company, GameEvent, MonthSnapshot, ProjectStatus, clamp
from projects import ProjectSystem

logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    success: bool
    events: List[GameEvent]
    snapshot: MonthSnapshot
    messages: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "success": self.success,
            "events": [e.to_dict() for e in self.events],
            "snapshot": self.snapshot.to_dict(),
            "messages": list(self.messages),
        }


@dataclass
class LeaderboardEntry:
    id: str
    company_name: str
    score: int
    months_survived: int
    final_cash: float
    final_reputation: float
    employees_hired: int
    projects_completed: int
    achievements_unlocked: int
    date: str

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "company_name": self.company_name,
            "score": self.score,
            "months_survived": self.months_survived,
            "final_cash": self.final_cash,
            "final_reputation": self.final_reputation,
            "employees_hired": self.employees_hired,
            "projects_completed": self.projects_completed,
            "achievements_unlocked": self.achievements_unlocked,
            "date": self.date,
        }


class ScoreCalculator:
    """End-of-game score from survival, cash, reputation, hiring and delivery."""

    def __init__(self, config: SimulationConfig = CONFIG):
        self.config = config

    def calculate_score(self, company: Company) -> int:
        cfg = self.config.score
        completed = len(company.projects_with_status(ProjectStatus.COMPLETED))
        score = (
            company.current_month * cfg.per_month
            + company.cash * cfg.per_cash
            + company.reputation * cfg.per_reputation
            + len(company.employees) * cfg.per_hire  # includes the founder and leavers
            + completed * cfg.per_completed_project
        )
        return int(score // 1)

    def build_leaderboard_entry(self, company: Company, date: Optional[str] = None) -> LeaderboardEntry:
        if date is None:
            date = datetime.now(timezone.utc).isoformat()
        return LeaderboardEntry(
            id=company.id,
            company_name=company.name,
            score=self.calculate_score(company),
            months_survived=company.current_month,
            final_cash=company.cash,
            final_reputation=company.reputation,
            employees_hired=len(company.employees),
            projects_completed=len(company.projects_with_status(ProjectStatus.COMPLETED)),
            achievements_unlocked=len(company.unlocked_achievements),
            date=date,
        )


class SimulationEngine:
    """
    Runs one month of the simulation.

    All randomness comes from the injected rng; the systems are built here
    unless explicitly passed in (tests swap in deterministic event catalogs).
    """

    def __init__(
        self,
        rng: random.Random,
        config: SimulationConfig = CONFIG,
        event_system: Optional[EventSystem] = None
    ):
        self.rng = rng
        self.config = config
        self.employee_system = EmployeeSystem(rng, config)
        self.project_system = ProjectSystem(config)
        self.financial_system = FinancialSystem(config)
        self.event_system = event_system or EventSystem(rng, config)
        self.culture_system = CultureSystem(config)
        self.achievement_evaluator = AchievementEvaluator()
        self.score_calculator = ScoreCalculator(config)

    def process_month(self, company: Company) -> SimulationResult:
        messages: List[str] = []
        current_month = company.current_month

        # 1. Morale and productivity
        self.employee_system.update_morale(company)

        # 2. Project progress
        project_update = self.project_system.process_projects(company)
        messages.extend(project_update.messages)

        # 3. Outcomes for projects completed this month
        revenue = 0.0
        for project in project_update.completed:
            outcome = self.project_system.calculate_project_outcome(project)
            revenue += outcome.payment
            company.reputation = clamp(
                company.reputation + outcome.reputation_change, 0.0, 100.0
            )
            if outcome.quality > 70:
                verdict = "Success"
            elif outcome.quality > 50:
                verdict = "Mediocre"
            else:
                verdict = "Failure"
            messages.append(f'Project "{project.name}" completed: {verdict}')

        # 4. Finances
        financials = self.financial_system.calculate_monthly_finances(company, revenue)

        # 5. Cash
        company.cash += financials.net_cashflow

        # 6. Turnover
        turnover = self.employee_system.process_turnover(company)
        messages.extend(turnover.messages)

        # 7. Events
        events = self.event_system.generate_events(company)

        # 8. Culture
        self.culture_system.update_culture(company)

        # 9. Achievements
        for achievement in self.achievement_evaluator.evaluate(company, financials):
            company.unlocked_achievements.append(achievement.id)
            messages.append(f"Achievement unlocked: {achievement.name}!")

        # 10. Snapshot
        snapshot = MonthSnapshot(
            month=current_month,
            cash=company.cash,
            reputation=company.reputation,
            employee_count=len(company.active_employees()),
            active_projects=len(company.projects_with_status(ProjectStatus.IN_PROGRESS)),
            completed_projects=len(company.projects_with_status(ProjectStatus.COMPLETED)),
            financials=financials,
            culture=company.culture.copy(),
        )
        company.history.append(snapshot)

        # 11. Advance
        company.current_month += 1

        # 12. Solvency
        success = company.cash >= 0
        if not success:
            messages.append("Company has gone bankrupt!")
            logger.info("%s went bankrupt in month %d", company.name, current_month)

        logger.info(
            "Month %d processed: cash=$%.0f net=$%.0f employees=%d events=%d",
            current_month, company.cash, financials.net_cashflow,
            snapshot.employee_count, len(events)
        )

        return SimulationResult(
            success=success,
            events=events,
            snapshot=snapshot,
            messages=messages,
        )

    def calculate_score(self, company: Company) -> int:
        return self.score_calculator.calculate_score(company)
