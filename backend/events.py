"""
Narrative events: catalog-driven triggering and consequence application.

Catalog templates are never handed out directly; every trigger produces a
fresh copy with its own id and month. Templates may name a target kind, in
which case effects written against TARGET_PLACEHOLDER are bound to a
concrete employee or project at trigger time.
"""

import copy
import logging
import random
from typing import List, Optional

from config import CONFIG, SimulationConfig
from models import (
    Company,
    EmployeeEffect,
    EventChoice,
    EventConsequences,
    EventTarget,
    EventType,
    GameEvent,
    ProjectEffect,
    ProjectStatus,
    TriggerConditions,
    clamp,
)

logger = logging.getLogger(__name__)

TARGET_PLACEHOLDER = "@target"


def default_event_catalog() -> List[GameEvent]:
    """Triggered events checked every month."""
    return [
        GameEvent(
            id="competing_offer",
            title="Key Employee Recruited",
            description="One of your top employees has received a competing offer from a larger company.",
            type=EventType.TRIGGERED,
            target=EventTarget.EMPLOYEE,
            choices=[
                EventChoice(
                    id="match_offer",
                    label="Match the offer",
                    description="Increase their salary by 20% to keep them",
                    consequences=EventConsequences(
                        cash=-2500,
                        morale_change=10,
                        employee_effects=[EmployeeEffect(TARGET_PLACEHOLDER, 10, 20)],
                    ),
                ),
                EventChoice(
                    id="let_go",
                    label="Let them go",
                    description="Wish them well and focus on the team",
                    consequences=EventConsequences(
                        morale_change=-5,
                        employee_effects=[EmployeeEffect(TARGET_PLACEHOLDER, -10, -30)],
                    ),
                ),
                EventChoice(
                    id="counter_offer",
                    label="Counter with equity",
                    description="Offer profit sharing instead of higher salary",
                    consequences=EventConsequences(
                        morale_change=5,
                        employee_effects=[EmployeeEffect(TARGET_PLACEHOLDER, 5, 10)],
                    ),
                ),
            ],
            trigger_conditions=TriggerConditions(probability=0.06, min_month=8, min_employees=4),
        ),
        GameEvent(
            id="client_threatens",
            title="Major Client Unhappy",
            description="Your largest client is threatening to leave due to missed deadlines.",
            type=EventType.TRIGGERED,
            target=EventTarget.PROJECT,
            choices=[
                EventChoice(
                    id="rush_project",
                    label="Rush the project",
                    description="Assign more resources to finish quickly",
                    consequences=EventConsequences(
                        cash=-1000,
                        morale_change=-10,
                        project_effects=[ProjectEffect(TARGET_PLACEHOLDER, 10, -5)],
                    ),
                ),
                EventChoice(
                    id="negotiate",
                    label="Negotiate extension",
                    description="Ask for more time with a discount",
                    consequences=EventConsequences(reputation=-5, cash=-1500),
                ),
                EventChoice(
                    id="accept_loss",
                    label="Accept the loss",
                    description="Let them go and focus on other clients",
                    consequences=EventConsequences(reputation=-10, cash=-2500),
                ),
            ],
            trigger_conditions=TriggerConditions(probability=0.08, min_month=6, min_employees=2),
        ),
        GameEvent(
            id="viral_success",
            title="Viral Success!",
            description="One of your projects went viral on social media!",
            type=EventType.RANDOM,
            choices=[
                EventChoice(
                    id="capitalize",
                    label="Capitalize on it",
                    description="Invest in marketing to ride the wave",
                    consequences=EventConsequences(cash=-1500, reputation=15),
                ),
                EventChoice(
                    id="stay_focused",
                    label="Stay focused",
                    description="Keep working without distraction",
                    consequences=EventConsequences(reputation=5, morale_change=5),
                ),
            ],
            trigger_conditions=TriggerConditions(probability=0.05),
        ),
        GameEvent(
            id="tech_debt_crisis",
            title="Technical Debt Crisis",
            description="Your codebase has accumulated too much technical debt.",
            type=EventType.TRIGGERED,
            choices=[
                EventChoice(
                    id="refactor",
                    label="Refactor everything",
                    description="Spend a month fixing technical debt",
                    consequences=EventConsequences(cash=-2000, morale_change=10),
                ),
                EventChoice(
                    id="ignore",
                    label="Ignore it",
                    description="Continue shipping features",
                    consequences=EventConsequences(morale_change=-15, reputation=-5),
                ),
            ],
            trigger_conditions=TriggerConditions(probability=0.06, min_month=15),
        ),
        GameEvent(
            id="cofounder_conflict",
            title="Cofounder Conflict",
            description="Tension is rising between cofounders about company direction.",
            type=EventType.TRIGGERED,
            choices=[
                EventChoice(
                    id="mediate",
                    label="Team building retreat",
                    description="Invest in team bonding",
                    consequences=EventConsequences(cash=-2500, morale_change=15),
                ),
                EventChoice(
                    id="pick_side",
                    label="Pick a side",
                    description="Make a decision and move forward",
                    consequences=EventConsequences(morale_change=-10, reputation=5),
                ),
            ],
            trigger_conditions=TriggerConditions(probability=0.05, min_month=10, min_employees=6),
        ),
    ]


def default_random_pool() -> List[GameEvent]:
    """Ungated events, one of which may be drawn on any month."""
    return [
        GameEvent(
            id="equipment_failure",
            title="Equipment Failure",
            description="Several workstations need replacement.",
            type=EventType.RANDOM,
            choices=[
                EventChoice(
                    id="replace_now",
                    label="Replace immediately",
                    description="Buy new equipment",
                    consequences=EventConsequences(cash=-1500),
                ),
                EventChoice(
                    id="wait",
                    label="Wait and repair",
                    description="Try to fix what you have",
                    consequences=EventConsequences(morale_change=-5),
                ),
            ],
        ),
        GameEvent(
            id="networking_opportunity",
            title="Networking Opportunity",
            description="A major industry conference is happening this month.",
            type=EventType.RANDOM,
            choices=[
                EventChoice(
                    id="attend",
                    label="Send the team",
                    description="Invest in networking",
                    consequences=EventConsequences(cash=-1000, reputation=5),
                ),
                EventChoice(
                    id="skip",
                    label="Skip it",
                    description="Focus on work",
                ),
            ],
        ),
    ]


class EventSystem:
    """Samples events each month and applies the consequences of choices."""

    def __init__(
        self,
        rng: random.Random,
        config: SimulationConfig = CONFIG,
        catalog: Optional[List[GameEvent]] = None,
        random_pool: Optional[List[GameEvent]] = None
    ):
        self.rng = rng
        self.config = config
        self.catalog = catalog if catalog is not None else default_event_catalog()
        self.random_pool = random_pool if random_pool is not None else default_random_pool()

    def generate_events(self, company: Company) -> List[GameEvent]:
        triggered = []
        for template in self.catalog:
            if self.should_trigger(template, company):
                triggered.append(self._instantiate(template, company, template.id))

        if self.random_pool and self.rng.random() < self.config.events.random_event_probability:
            template = self.rng.choice(self.random_pool)
            triggered.append(self._instantiate(template, company, "random"))

        for event in triggered:
            logger.info("Event triggered in month %d: %s", company.current_month, event.title)
        return triggered

    def should_trigger(self, template: GameEvent, company: Company) -> bool:
        """Check gates, then roll the template's probability."""
        conditions = template.trigger_conditions
        if conditions is None:
            return False

        headcount = len(company.active_employees())
        if conditions.min_month is not None and company.current_month < conditions.min_month:
            return False
        if conditions.max_month is not None and company.current_month > conditions.max_month:
            return False
        if conditions.min_employees is not None and headcount < conditions.min_employees:
            return False
        if conditions.min_cash is not None and company.cash < conditions.min_cash:
            return False
        if conditions.min_reputation is not None and company.reputation < conditions.min_reputation:
            return False

        return self.rng.random() < conditions.probability

    def resolve_event(self, company: Company, event: GameEvent, choice: EventChoice) -> None:
        """Apply a choice's consequences and move the event into history."""
        consequences = choice.consequences

        if consequences.cash:
            company.cash += consequences.cash

        if consequences.reputation:
            company.reputation = clamp(company.reputation + consequences.reputation, 0.0, 100.0)

        if consequences.morale_change:
            for employee in company.active_employees():
                employee.morale = clamp(employee.morale + consequences.morale_change, 0.0, 100.0)

        for effect in consequences.employee_effects:
            employee = company.find_employee(effect.employee_id)
            if employee and employee.is_active:
                employee.morale = clamp(employee.morale + effect.morale_change, 0.0, 100.0)
                employee.loyalty = clamp(employee.loyalty + effect.loyalty_change, 0.0, 100.0)

        for effect in consequences.project_effects:
            project = company.find_project(effect.project_id)
            if project and project.status == ProjectStatus.IN_PROGRESS:
                project.progress = clamp(project.progress + effect.progress_change, 0.0, 100.0)
                project.quality = clamp(project.quality + effect.quality_change, 0.0, 100.0)

        event.resolved = True
        company.record_event(event, self.config.game.event_history_limit)
        logger.info("Event %s resolved with choice %s", event.title, choice.label)

    def _instantiate(self, template: GameEvent, company: Company, prefix: str) -> GameEvent:
        event = copy.deepcopy(template)
        event.id = f"{prefix}_{company.current_month}_{self.rng.getrandbits(32):08x}"
        event.month_occurred = company.current_month
        event.resolved = False
        self._bind_target(event, company)
        return event

    def _bind_target(self, event: GameEvent, company: Company) -> None:
        """Point placeholder effects at a concrete entity, or drop them."""
        target_id = None
        if event.target == EventTarget.EMPLOYEE:
            target_id = self._pick_employee_target(company)
        elif event.target == EventTarget.PROJECT:
            target_id = self._pick_project_target(company)

        for choice in event.choices:
            effects = choice.consequences
            effects.employee_effects = [
                EmployeeEffect(target_id, e.morale_change, e.loyalty_change)
                if e.employee_id == TARGET_PLACEHOLDER else e
                for e in effects.employee_effects
                if e.employee_id != TARGET_PLACEHOLDER or target_id is not None
            ]
            effects.project_effects = [
                ProjectEffect(target_id, p.progress_change, p.quality_change)
                if p.project_id == TARGET_PLACEHOLDER else p
                for p in effects.project_effects
                if p.project_id != TARGET_PLACEHOLDER or target_id is not None
            ]

    def _pick_employee_target(self, company: Company) -> Optional[str]:
        candidates = [
            e for e in company.active_employees()
            if e.role != self.config.game.founder_role
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda e: e.skills.average()).id

    def _pick_project_target(self, company: Company) -> Optional[str]:
        in_progress = company.projects_with_status(ProjectStatus.IN_PROGRESS)
        if not in_progress:
            return None
        with_deadline = [p for p in in_progress if p.deadline is not None]
        if with_deadline:
            return min(with_deadline, key=lambda p: p.deadline).id
        return in_progress[0].id
