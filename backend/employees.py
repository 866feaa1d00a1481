"""
Employee morale, productivity and voluntary turnover.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import List

from config import CONFIG, SimulationConfig
from models import Company, Employee, Personality, ProjectStatus, clamp
from personalities import PERSONALITIES, culture_fit
from projects import clear_employee_assignments

logger = logging.getLogger(__name__)


@dataclass
class TurnoverResult:
    quit_employees: List[Employee] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)
    severance_paid: float = 0.0


class EmployeeSystem:
    """
    Per-month morale recompute and quit resolution.

    Only active employees (no quit_month) are ever touched.
    """

    def __init__(self, rng: random.Random, config: SimulationConfig = CONFIG):
        self.rng = rng
        self.config = config

    def update_morale(self, company: Company) -> None:
        """Apply this month's morale delta, then recompute productivity."""
        cfg = self.config.employees
        active = company.active_employees()
        avg_salary = sum(e.salary for e in active) / len(active) if active else 0.0

        for employee in active:
            morale_change = 0.0

            # Salary fairness
            if employee.salary < avg_salary * cfg.underpaid_ratio:
                morale_change -= cfg.underpaid_penalty
            elif employee.salary > avg_salary * cfg.overpaid_ratio:
                morale_change += cfg.overpaid_bonus

            # Workload balance
            workload = employee.workload
            if workload > cfg.overload_threshold:
                morale_change -= cfg.overload_penalty
            elif workload < cfg.underload_threshold:
                morale_change -= cfg.underload_penalty
            else:
                morale_change += cfg.balanced_load_bonus

            # Culture fit, mapped into [-10, +10]
            fit = culture_fit(employee.personality, company.culture)
            morale_change += (fit - 0.5) * cfg.culture_fit_scale

            # Recent project success
            morale_change += self.recent_success(company, employee) * cfg.recent_success_bonus

            employee.morale = clamp(employee.morale + morale_change, 0.0, 100.0)
            employee.productivity = self.calculate_productivity(employee)

    def recent_success(self, company: Company, employee: Employee) -> float:
        """0-1 bonus weight for recent high-quality completions the employee worked on."""
        cfg = self.config.employees
        successes = 0
        for project in company.projects:
            if project.status != ProjectStatus.COMPLETED or project.completed_month is None:
                continue
            if company.current_month - project.completed_month > cfg.recent_success_window:
                continue
            if employee.id in project.contributors and project.quality > cfg.recent_success_quality:
                successes += 1
        return min(1.0, successes * cfg.recent_success_step)

    def calculate_productivity(self, employee: Employee) -> float:
        cfg = self.config.employees
        productivity = 1.0 + (employee.morale - 50) / 100

        if employee.personality == Personality.WILDCARD:
            # Fresh draw every month: 0.5x - 1.5x
            productivity *= cfg.wildcard_min_factor + self.rng.random()
        else:
            productivity *= PERSONALITIES[employee.personality].productivity_multiplier

        return clamp(productivity, cfg.min_productivity, cfg.max_productivity)

    def calculate_quit_probability(self, employee: Employee, current_month: int) -> float:
        cfg = self.config.employees
        probability = cfg.base_quit_rate

        if employee.morale < cfg.critical_morale:
            probability *= cfg.critical_morale_multiplier
        elif employee.morale < cfg.low_morale:
            probability *= cfg.low_morale_multiplier
        elif employee.morale > cfg.high_morale:
            probability *= cfg.high_morale_multiplier

        probability *= (100 - employee.loyalty) / cfg.loyalty_reference

        tenure = current_month - employee.hired_month
        if tenure < cfg.new_hire_tenure:
            probability *= cfg.new_hire_multiplier
        elif tenure > cfg.veteran_tenure:
            probability *= cfg.veteran_multiplier

        probability *= PERSONALITIES[employee.personality].quit_multiplier

        return clamp(probability, 0.0, cfg.max_quit_probability)

    def process_turnover(self, company: Company) -> TurnoverResult:
        """
        Roll once per active employee.

        Severance (2x salary) is deducted unconditionally; cash may go negative.
        """
        result = TurnoverResult()

        for employee in company.active_employees():
            probability = self.calculate_quit_probability(employee, company.current_month)
            logger.debug("Quit probability for %s: %.3f", employee.name, probability)
            if self.rng.random() >= probability:
                continue

            employee.quit_month = company.current_month
            clear_employee_assignments(company, employee)

            severance = employee.salary * self.config.game.severance_multiplier
            company.cash -= severance
            result.severance_paid += severance
            result.quit_employees.append(employee)
            result.messages.append(f"{employee.name} ({employee.role}) has quit.")
            logger.info(
                "%s quit in month %d, severance $%.0f",
                employee.name, company.current_month, severance
            )

        return result
