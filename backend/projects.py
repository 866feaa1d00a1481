"""
Project progress, payment and the employee <-> project assignment relation.

The assignment relation is stored twice (Employee.project_assignments and
Project.assignments). The functions in this module are the only writers of
either index and always change both sides together.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List

import numpy as np

from config import CONFIG, SimulationConfig
from models import (
    SKILL_NAMES,
    Company,
    Employee,
    EmployeeAssignment,
    Project,
    ProjectAssignment,
    ProjectStatus,
    ProjectType,
    SkillSet,
)

logger = logging.getLogger(__name__)


@dataclass
class ProjectOutcome:
    payment: float
    quality: float
    reputation_change: float


@dataclass
class ProjectUpdate:
    messages: List[str] = field(default_factory=list)
    completed: List[Project] = field(default_factory=list)
    failed: List[Project] = field(default_factory=list)
    milestone_payments: float = 0.0


# ---------------------------------------------------------------------------
# Assignment relation
# ---------------------------------------------------------------------------

def assign_employee_to_project(
    company: Company,
    employee: Employee,
    project: Project,
    allocation: float
) -> None:
    """
    Create or update one assignment on both indexes.

    Callers validate allocation caps and entity state beforehand. The first
    assignment to a notStarted project starts it.
    """
    existing = next((a for a in employee.project_assignments if a.project_id == project.id), None)
    if existing:
        existing.allocation = allocation
    else:
        employee.project_assignments.append(ProjectAssignment(project.id, allocation))

    mirrored = next((a for a in project.assignments if a.employee_id == employee.id), None)
    if mirrored:
        mirrored.allocation = allocation
    else:
        project.assignments.append(EmployeeAssignment(employee.id, allocation))

    if employee.id not in project.contributors:
        project.contributors.append(employee.id)

    if project.status == ProjectStatus.NOT_STARTED:
        project.status = ProjectStatus.IN_PROGRESS
        project.start_month = company.current_month
        logger.info("Project %s started in month %d", project.name, company.current_month)


def unassign_employee_from_project(employee: Employee, project: Project) -> bool:
    """Remove one assignment from both indexes. False if it did not exist."""
    had_employee_side = any(a.project_id == project.id for a in employee.project_assignments)
    had_project_side = any(a.employee_id == employee.id for a in project.assignments)

    employee.project_assignments = [
        a for a in employee.project_assignments if a.project_id != project.id
    ]
    project.assignments = [a for a in project.assignments if a.employee_id != employee.id]
    return had_employee_side or had_project_side


def clear_project_assignments(company: Company, project: Project) -> None:
    """Drop every assignment of a project, on both indexes."""
    for assignment in project.assignments:
        employee = company.find_employee(assignment.employee_id)
        if employee:
            employee.project_assignments = [
                a for a in employee.project_assignments if a.project_id != project.id
            ]
    project.assignments = []


def clear_employee_assignments(company: Company, employee: Employee) -> None:
    """Drop every assignment of an employee, on both indexes."""
    for assignment in employee.project_assignments:
        project = company.find_project(assignment.project_id)
        if project:
            project.assignments = [
                a for a in project.assignments if a.employee_id != employee.id
            ]
    employee.project_assignments = []


# ---------------------------------------------------------------------------
# Monthly processing
# ---------------------------------------------------------------------------

class ProjectSystem:
    """Advances in-progress projects and prices finished ones."""

    def __init__(self, config: SimulationConfig = CONFIG):
        self.config = config

    def process_projects(self, company: Company) -> ProjectUpdate:
        """
        Advance every in-progress project by one month.

        Order per project: progress/quality/tech debt, client milestones,
        completion, then deadline failure (only if not just completed).
        """
        cfg = self.config.projects
        update = ProjectUpdate()

        for project in company.projects:
            if project.status != ProjectStatus.IN_PROGRESS:
                continue

            team = self._active_team(company, project)
            if team:
                skill_match = self.calculate_skill_match(team, project.required_skills)
                avg_productivity = float(np.mean([e.productivity for e in team]))

                monthly_progress = (
                    cfg.base_monthly_progress * skill_match * avg_productivity
                    / math.sqrt(project.complexity)
                )
                old_progress = project.progress
                project.progress = min(100.0, project.progress + monthly_progress)

                quality_gain = skill_match * (avg_productivity / 2) * cfg.quality_scale
                project.quality = min(100.0, project.quality + quality_gain)

                if skill_match < cfg.tech_debt_match_threshold:
                    project.tech_debt += cfg.tech_debt_increment

                logger.debug(
                    "Project %s: match=%.2f productivity=%.2f progress %.1f -> %.1f",
                    project.name, skill_match, avg_productivity, old_progress, project.progress
                )

                if project.type == ProjectType.CLIENT_WORK:
                    update.milestone_payments += self._pay_milestones(
                        company, project, old_progress, update.messages
                    )

                if project.progress >= 100.0:
                    self._complete(company, project)
                    update.completed.append(project)
                    update.messages.append(f'Project "{project.name}" completed!')
                    continue

            if project.deadline is not None and company.current_month > project.deadline:
                project.status = ProjectStatus.FAILED
                clear_project_assignments(company, project)
                update.failed.append(project)
                update.messages.append(f'Project "{project.name}" failed to meet deadline!')
                logger.info("Project %s failed its deadline (month %d)", project.name, project.deadline)

        return update

    def calculate_project_outcome(self, project: Project) -> ProjectOutcome:
        """Payment and reputation for a finished project, tiered by final quality."""
        for min_quality, payment_multiplier, reputation_change in self.config.projects.outcome_tiers:
            if project.quality >= min_quality:
                return ProjectOutcome(
                    payment=project.value * payment_multiplier,
                    quality=project.quality,
                    reputation_change=reputation_change,
                )
        return ProjectOutcome(
            payment=0.0,
            quality=project.quality,
            reputation_change=self.config.projects.failed_outcome_reputation,
        )

    def calculate_skill_match(self, team: List[Employee], required: SkillSet) -> float:
        """
        Unweighted mean of min(1, team average / required) over every
        dimension with a nonzero requirement.
        """
        if not team:
            return 0.0
        team_skills = np.array([e.skills.values() for e in team], dtype=np.float64)
        averages = team_skills.mean(axis=0)
        requirements = np.array(required.values(), dtype=np.float64)

        needed = requirements > 0
        if not needed.any():
            return self.config.projects.default_skill_match
        ratios = np.minimum(1.0, averages[needed] / requirements[needed])
        return float(ratios.mean())

    def _active_team(self, company: Company, project: Project) -> List[Employee]:
        team = []
        for assignment in project.assignments:
            employee = company.find_employee(assignment.employee_id)
            if employee and employee.is_active:
                team.append(employee)
        return team

    def _pay_milestones(
        self,
        company: Company,
        project: Project,
        old_progress: float,
        messages: List[str]
    ) -> float:
        cfg = self.config.projects
        paid = 0.0
        for threshold in cfg.milestone_thresholds:
            crossed = old_progress < threshold <= project.progress
            if crossed and threshold not in project.paid_milestones:
                payment = project.value * cfg.milestone_payment_share
                company.cash += payment
                project.paid_milestones.append(threshold)
                paid += payment
                messages.append(
                    f'Project "{project.name}" milestone reached ({threshold}%) '
                    f"- received ${math.floor(payment):,}"
                )
        return paid

    def _complete(self, company: Company, project: Project) -> None:
        cfg = self.config.projects
        project.status = ProjectStatus.COMPLETED
        project.completed_month = company.current_month
        project.progress = 100.0
        project.quality = max(0.0, project.quality - project.tech_debt * cfg.tech_debt_quality_penalty)
        clear_project_assignments(company, project)
        logger.info(
            "Project %s completed in month %d (quality %.1f, tech debt %.1f)",
            project.name, company.current_month, project.quality, project.tech_debt
        )
