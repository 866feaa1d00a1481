"""
Game Session

Owns everything belonging to one game: the RNG, the generators, the engine,
the Company aggregate, the pending hire candidate and the events waiting for
a player decision. Player actions live here and validate before mutating;
rule violations return False/None and leave a short reason in last_error.
"""

import logging
import random
from typing import Dict, List, Optional

from config import CONFIG, SimulationConfig
from engine import LeaderboardEntry, SimulationEngine, SimulationResult
from generators import EmployeeGenerator, ProjectGenerator
from models import (
    Company,
    Culture,
    Employee,
    GameEvent,
    Project,
    ProjectStatus,
    ProjectType,
    new_id,
)
import projects

logger = logging.getLogger(__name__)


class NoActiveCompanyError(RuntimeError):
    """Raised when a player action is attempted before new_game/load."""


class GameSession:
    """One game, from founding to bankruptcy."""

    def __init__(self, config: SimulationConfig = CONFIG, seed: Optional[int] = None):
        self.config = config
        self.seed = seed
        self.rng = random.Random(seed)
        self.employee_generator = EmployeeGenerator(self.rng, config)
        self.project_generator = ProjectGenerator(self.rng, config)
        self.engine = SimulationEngine(self.rng, config)

        self.company: Optional[Company] = None
        self.pending_hire: Optional[Employee] = None
        self.pending_events: List[GameEvent] = []
        self.last_error: Optional[str] = None
        self.game_over = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def new_game(self, name: str) -> Company:
        cfg = self.config.game
        self.employee_generator.reset()

        starting = cfg.starting_culture
        company = Company(
            id=new_id(self.rng),
            name=name,
            current_month=1,
            cash=cfg.starting_cash,
            reputation=cfg.starting_reputation,
            culture=Culture(starting, starting, starting, starting),
        )
        company.employees.append(
            self.employee_generator.generate_employee(company.current_month, is_founder=True)
        )

        self.company = company
        self.pending_hire = None
        self.pending_events = []
        self.last_error = None
        self.game_over = False
        logger.info("New game started: %s (seed=%s)", name, self.seed)
        return company

    def load(self, data: Dict[str, object]) -> Company:
        """Restore a company from Company.to_dict() output."""
        company = Company.from_dict(data)
        self.employee_generator.reset()
        self.employee_generator.used_names.update(e.name for e in company.employees)

        self.company = company
        self.pending_hire = None
        self.pending_events = []
        self.last_error = None
        self.game_over = company.cash < 0
        logger.info("Loaded game %s at month %d", company.name, company.current_month)
        return company

    def to_dict(self) -> Dict[str, object]:
        return self._require_company().to_dict()

    # ------------------------------------------------------------------
    # Hiring and firing
    # ------------------------------------------------------------------

    def generate_candidate(self) -> Optional[Employee]:
        company = self._require_company()
        if company.cash < self.engine.financial_system.hiring_cost():
            return self._reject("Not enough cash to hire", None)

        self.pending_hire = self.employee_generator.generate_employee(company.current_month)
        self.last_error = None
        return self.pending_hire

    def confirm_hire(self) -> Optional[Employee]:
        company = self._require_company()
        candidate = self.pending_hire
        if candidate is None:
            return self._reject("No candidate to hire", None)

        hiring_cost = self.engine.financial_system.hiring_cost()
        if not self.engine.financial_system.can_afford(company, hiring_cost):
            return self._reject("Not enough cash to hire", None)

        candidate.hired_month = company.current_month
        company.cash -= hiring_cost
        company.employees.append(candidate)
        self.pending_hire = None
        self.last_error = None
        logger.info("Hired %s as %s for $%.0f/month", candidate.name, candidate.role, candidate.salary)
        return candidate

    def reject_hire(self) -> None:
        self.pending_hire = None

    def fire_employee(self, employee_id: str) -> bool:
        company = self._require_company()
        employee = company.find_employee(employee_id)
        if employee is None:
            return self._reject("Employee not found", False)
        if not employee.is_active:
            return self._reject(f"{employee.name} has already left", False)
        if employee.role == self.config.game.founder_role:
            return self._reject("You cannot fire the founder", False)

        severance = self.engine.financial_system.severance_for(employee)
        if not self.engine.financial_system.can_afford(company, severance):
            return self._reject("Not enough cash for severance", False)

        company.cash -= severance
        employee.quit_month = company.current_month
        projects.clear_employee_assignments(company, employee)
        self.last_error = None
        logger.info("Fired %s, severance $%.0f", employee.name, severance)
        return True

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def create_project(self, project_type) -> Project:
        company = self._require_company()
        project = self.project_generator.generate_project(
            ProjectType(project_type), company.current_month
        )
        company.projects.append(project)
        self.last_error = None
        logger.info("Created %s project %s (value $%.0f)", project.type.value, project.name, project.value)
        return project

    def cancel_project(self, project_id: str) -> bool:
        company = self._require_company()
        project = company.find_project(project_id)
        if project is None:
            return self._reject("Project not found", False)
        if project.is_terminal:
            return self._reject(f"Project {project.name} is already {project.status.value}", False)

        project.status = ProjectStatus.FAILED
        projects.clear_project_assignments(company, project)
        self.last_error = None
        logger.info("Cancelled project %s", project.name)
        return True

    def assign_employee_to_project(self, employee_id: str, project_id: str, allocation: float) -> bool:
        company = self._require_company()
        employee = company.find_employee(employee_id)
        project = company.find_project(project_id)
        if employee is None:
            return self._reject("Employee not found", False)
        if project is None:
            return self._reject("Project not found", False)
        if not employee.is_active:
            return self._reject(f"{employee.name} has already left", False)
        if project.is_terminal:
            return self._reject(f"Project {project.name} is already {project.status.value}", False)
        if not (1 <= allocation <= 100):
            return self._reject("Allocation must be between 1 and 100", False)

        other_allocation = employee.workload - employee.allocation_for(project.id)
        if other_allocation + allocation > 100:
            return self._reject(
                f"{employee.name} only has {100 - other_allocation:.0f}% capacity left", False
            )

        projects.assign_employee_to_project(company, employee, project, allocation)
        self.last_error = None
        logger.info("Assigned %s to %s at %.0f%%", employee.name, project.name, allocation)
        return True

    def unassign_employee_from_project(self, employee_id: str, project_id: str) -> bool:
        company = self._require_company()
        employee = company.find_employee(employee_id)
        project = company.find_project(project_id)
        if employee is None or project is None:
            return self._reject("Employee or project not found", False)

        if not projects.unassign_employee_from_project(employee, project):
            return self._reject(f"{employee.name} is not assigned to {project.name}", False)
        self.last_error = None
        return True

    # ------------------------------------------------------------------
    # Turn flow
    # ------------------------------------------------------------------

    def advance_month(self) -> SimulationResult:
        company = self._require_company()
        result = self.engine.process_month(company)
        # Unanswered events expire when the next month is processed
        self.pending_events = list(result.events)
        if not result.success:
            self.game_over = True
        return result

    def resolve_event(self, event_id: str, choice_id: str) -> bool:
        company = self._require_company()
        event = next((e for e in self.pending_events if e.id == event_id), None)
        if event is None:
            if any(e.id == event_id for e in company.events):
                return self._reject("Event already resolved", False)
            return self._reject("Event not found", False)

        choice = event.find_choice(choice_id)
        if choice is None:
            return self._reject(f"Unknown choice {choice_id}", False)

        self.engine.event_system.resolve_event(company, event, choice)
        self.pending_events = [e for e in self.pending_events if e.id != event_id]
        self.last_error = None
        return True

    # ------------------------------------------------------------------
    # Derived metrics
    # ------------------------------------------------------------------

    def score(self) -> int:
        return self.engine.calculate_score(self._require_company())

    def leaderboard_entry(self) -> LeaderboardEntry:
        return self.engine.score_calculator.build_leaderboard_entry(self._require_company())

    def runway(self) -> float:
        return self.engine.financial_system.calculate_runway(self._require_company())

    def burn_rate(self) -> float:
        return self.engine.financial_system.calculate_burn_rate(self._require_company())

    def culture_description(self) -> str:
        return self.engine.culture_system.describe(self._require_company().culture)

    def _require_company(self) -> Company:
        if self.company is None:
            raise NoActiveCompanyError("No active company; start a new game first")
        return self.company

    def _reject(self, message: str, result):
        self.last_error = message
        logger.debug("Action rejected: %s", message)
        return result
