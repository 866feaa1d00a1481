"""
Company Simulator Data Model

This module defines the entities the simulation operates on: the Company
aggregate, its employees and projects, culture, narrative events and the
per-month snapshots. Entities are plain dataclasses; the systems in
employees.py, projects.py, finances.py, events.py and culture.py hold all
behavior that changes them.
"""

import random
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


SKILL_NAMES = ("technical", "sales", "design", "management")


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def new_id(rng: random.Random) -> str:
    """UUID4 string drawn from the given RNG so seeded games replay exactly."""
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))


class Personality(str, Enum):
    ROCKSTAR = "rockstar"
    TEAM_PLAYER = "teamPlayer"
    WILDCARD = "wildcard"
    WORKHORSE = "workhorse"
    LEADER = "leader"


class ProjectType(str, Enum):
    CLIENT_WORK = "clientWork"
    PRODUCT_FEATURE = "productFeature"
    MAINTENANCE = "maintenance"
    RND = "rnd"


class ProjectStatus(str, Enum):
    NOT_STARTED = "notStarted"
    IN_PROGRESS = "inProgress"
    COMPLETED = "completed"
    FAILED = "failed"


class EventType(str, Enum):
    RANDOM = "random"
    TRIGGERED = "triggered"
    MILESTONE = "milestone"


class EventTarget(str, Enum):
    """Kind of entity a catalog event binds its targeted effects to."""
    EMPLOYEE = "employee"
    PROJECT = "project"


@dataclass
class SkillSet:
    """Four skill dimensions, each on a 0-100 scale."""
    technical: float = 0.0
    sales: float = 0.0
    design: float = 0.0
    management: float = 0.0

    def __post_init__(self):
        for name in SKILL_NAMES:
            value = getattr(self, name)
            if not (0.0 <= value <= 100.0):
                raise ValueError(f"{name} skill must be in [0,100], got {value}")

    def get(self, name: str) -> float:
        return getattr(self, name)

    def values(self) -> List[float]:
        return [getattr(self, name) for name in SKILL_NAMES]

    def average(self) -> float:
        return sum(self.values()) / len(SKILL_NAMES)

    def to_dict(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in SKILL_NAMES}

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> "SkillSet":
        return cls(**{name: data.get(name, 0.0) for name in SKILL_NAMES})


@dataclass
class ProjectAssignment:
    """Employee-side index entry of the assignment relation."""
    project_id: str
    allocation: float


@dataclass
class EmployeeAssignment:
    """Project-side index entry of the assignment relation."""
    employee_id: str
    allocation: float


@dataclass
class Employee:
    """
    A member of staff.

    Employees move forward only: once quit_month is set they are out of the
    company for good and every system skips them.
    """

    id: str
    name: str
    role: str
    personality: Personality
    skills: SkillSet
    morale: float = 50.0  # 0-100
    productivity: float = 1.0  # 0.5-2.0 multiplier
    loyalty: float = 50.0  # 0-100
    salary: float = 0.0  # monthly
    hired_month: int = 1
    quit_month: Optional[int] = None
    project_assignments: List[ProjectAssignment] = field(default_factory=list)

    def __post_init__(self):
        """Validate invariants after initialization."""
        self.personality = Personality(self.personality)
        if not (0.0 <= self.morale <= 100.0):
            raise ValueError(f"morale must be in [0,100], got {self.morale}")
        if not (0.0 <= self.loyalty <= 100.0):
            raise ValueError(f"loyalty must be in [0,100], got {self.loyalty}")
        if self.salary < 0:
            raise ValueError(f"salary cannot be negative, got {self.salary}")

    @property
    def is_active(self) -> bool:
        return self.quit_month is None

    @property
    def workload(self) -> float:
        """Summed allocation across all current assignments."""
        return sum(a.allocation for a in self.project_assignments)

    def allocation_for(self, project_id: str) -> float:
        for assignment in self.project_assignments:
            if assignment.project_id == project_id:
                return assignment.allocation
        return 0.0

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "personality": self.personality.value,
            "skills": self.skills.to_dict(),
            "morale": self.morale,
            "productivity": self.productivity,
            "loyalty": self.loyalty,
            "salary": self.salary,
            "hired_month": self.hired_month,
            "quit_month": self.quit_month,
            "project_assignments": [
                {"project_id": a.project_id, "allocation": a.allocation}
                for a in self.project_assignments
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "Employee":
        return cls(
            id=data["id"],
            name=data["name"],
            role=data["role"],
            personality=Personality(data["personality"]),
            skills=SkillSet.from_dict(data["skills"]),
            morale=data["morale"],
            productivity=data["productivity"],
            loyalty=data["loyalty"],
            salary=data["salary"],
            hired_month=data["hired_month"],
            quit_month=data.get("quit_month"),
            project_assignments=[
                ProjectAssignment(a["project_id"], a["allocation"])
                for a in data.get("project_assignments", [])
            ],
        )


@dataclass
class Project:
    """
    A unit of work the company takes on.

    Status only moves forward: notStarted -> inProgress -> completed | failed.
    """

    id: str
    name: str
    type: ProjectType
    complexity: int  # 1-10
    required_skills: SkillSet
    estimated_months: int
    value: float
    deadline: Optional[int] = None  # month number
    progress: float = 0.0  # 0-100
    quality: float = 0.0  # 0-100
    tech_debt: float = 0.0  # unbounded, >= 0
    status: ProjectStatus = ProjectStatus.NOT_STARTED
    assignments: List[EmployeeAssignment] = field(default_factory=list)
    start_month: Optional[int] = None
    completed_month: Optional[int] = None
    paid_milestones: List[int] = field(default_factory=list)
    contributors: List[str] = field(default_factory=list)  # everyone ever assigned

    def __post_init__(self):
        """Validate invariants after initialization."""
        self.type = ProjectType(self.type)
        self.status = ProjectStatus(self.status)
        if not (1 <= self.complexity <= 10):
            raise ValueError(f"complexity must be in [1,10], got {self.complexity}")
        if not (0.0 <= self.progress <= 100.0):
            raise ValueError(f"progress must be in [0,100], got {self.progress}")
        if not (0.0 <= self.quality <= 100.0):
            raise ValueError(f"quality must be in [0,100], got {self.quality}")
        if self.tech_debt < 0:
            raise ValueError(f"tech_debt cannot be negative, got {self.tech_debt}")
        if self.value < 0:
            raise ValueError(f"value cannot be negative, got {self.value}")

    @property
    def is_terminal(self) -> bool:
        return self.status in (ProjectStatus.COMPLETED, ProjectStatus.FAILED)

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "complexity": self.complexity,
            "required_skills": self.required_skills.to_dict(),
            "estimated_months": self.estimated_months,
            "value": self.value,
            "deadline": self.deadline,
            "progress": self.progress,
            "quality": self.quality,
            "tech_debt": self.tech_debt,
            "status": self.status.value,
            "assignments": [
                {"employee_id": a.employee_id, "allocation": a.allocation}
                for a in self.assignments
            ],
            "start_month": self.start_month,
            "completed_month": self.completed_month,
            "paid_milestones": list(self.paid_milestones),
            "contributors": list(self.contributors),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "Project":
        return cls(
            id=data["id"],
            name=data["name"],
            type=ProjectType(data["type"]),
            complexity=data["complexity"],
            required_skills=SkillSet.from_dict(data["required_skills"]),
            estimated_months=data["estimated_months"],
            value=data["value"],
            deadline=data.get("deadline"),
            progress=data.get("progress", 0.0),
            quality=data.get("quality", 0.0),
            tech_debt=data.get("tech_debt", 0.0),
            status=ProjectStatus(data.get("status", ProjectStatus.NOT_STARTED.value)),
            assignments=[
                EmployeeAssignment(a["employee_id"], a["allocation"])
                for a in data.get("assignments", [])
            ],
            start_month=data.get("start_month"),
            completed_month=data.get("completed_month"),
            paid_milestones=list(data.get("paid_milestones", [])),
            contributors=list(data.get("contributors", [])),
        )


@dataclass
class Culture:
    """Four company-wide dials, each 0-1."""
    speed: float = 0.5  # move carefully -> move fast
    quality: float = 0.5  # ship it -> perfect it
    work_life: float = 0.5  # grind -> balance
    hierarchy: float = 0.5  # flat -> structured

    def __post_init__(self):
        for name, value in self.to_dict().items():
            if not (0.0 <= value <= 1.0):
                raise ValueError(f"culture {name} must be in [0,1], got {value}")

    def copy(self) -> "Culture":
        return Culture(self.speed, self.quality, self.work_life, self.hierarchy)

    def to_dict(self) -> Dict[str, float]:
        return {
            "speed": self.speed,
            "quality": self.quality,
            "work_life": self.work_life,
            "hierarchy": self.hierarchy,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> "Culture":
        return cls(
            speed=data["speed"],
            quality=data["quality"],
            work_life=data["work_life"],
            hierarchy=data["hierarchy"],
        )


@dataclass
class EmployeeEffect:
    employee_id: str
    morale_change: float = 0.0
    loyalty_change: float = 0.0


@dataclass
class ProjectEffect:
    project_id: str
    progress_change: float = 0.0
    quality_change: float = 0.0


@dataclass
class EventConsequences:
    """Deltas applied when an event choice is taken."""
    cash: float = 0.0
    reputation: float = 0.0
    morale_change: float = 0.0  # applied to every active employee
    employee_effects: List[EmployeeEffect] = field(default_factory=list)
    project_effects: List[ProjectEffect] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "cash": self.cash,
            "reputation": self.reputation,
            "morale_change": self.morale_change,
            "employee_effects": [
                {
                    "employee_id": e.employee_id,
                    "morale_change": e.morale_change,
                    "loyalty_change": e.loyalty_change,
                }
                for e in self.employee_effects
            ],
            "project_effects": [
                {
                    "project_id": p.project_id,
                    "progress_change": p.progress_change,
                    "quality_change": p.quality_change,
                }
                for p in self.project_effects
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "EventConsequences":
        return cls(
            cash=data.get("cash", 0.0),
            reputation=data.get("reputation", 0.0),
            morale_change=data.get("morale_change", 0.0),
            employee_effects=[EmployeeEffect(**e) for e in data.get("employee_effects", [])],
            project_effects=[ProjectEffect(**p) for p in data.get("project_effects", [])],
        )


@dataclass
class EventChoice:
    id: str
    label: str
    description: str = ""
    consequences: EventConsequences = field(default_factory=EventConsequences)

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "label": self.label,
            "description": self.description,
            "consequences": self.consequences.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "EventChoice":
        return cls(
            id=data["id"],
            label=data["label"],
            description=data.get("description", ""),
            consequences=EventConsequences.from_dict(data.get("consequences", {})),
        )


@dataclass
class TriggerConditions:
    """Gates checked before the per-tick probability roll."""
    probability: float
    min_month: Optional[int] = None
    max_month: Optional[int] = None
    min_employees: Optional[int] = None
    min_cash: Optional[float] = None
    min_reputation: Optional[float] = None

    def __post_init__(self):
        if not (0.0 <= self.probability <= 1.0):
            raise ValueError(f"probability must be in [0,1], got {self.probability}")

    def to_dict(self) -> Dict[str, object]:
        return {
            "probability": self.probability,
            "min_month": self.min_month,
            "max_month": self.max_month,
            "min_employees": self.min_employees,
            "min_cash": self.min_cash,
            "min_reputation": self.min_reputation,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "TriggerConditions":
        return cls(**data)


@dataclass
class GameEvent:
    """A narrative event offering the player a set of choices."""
    id: str
    title: str
    description: str
    type: EventType
    choices: List[EventChoice] = field(default_factory=list)
    trigger_conditions: Optional[TriggerConditions] = None
    resolved: bool = False
    month_occurred: Optional[int] = None
    target: Optional[EventTarget] = None

    def __post_init__(self):
        self.type = EventType(self.type)
        if self.target is not None:
            self.target = EventTarget(self.target)

    def find_choice(self, choice_id: str) -> Optional[EventChoice]:
        for choice in self.choices:
            if choice.id == choice_id:
                return choice
        return None

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "type": self.type.value,
            "choices": [c.to_dict() for c in self.choices],
            "trigger_conditions": (
                self.trigger_conditions.to_dict() if self.trigger_conditions else None
            ),
            "resolved": self.resolved,
            "month_occurred": self.month_occurred,
            "target": self.target.value if self.target else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "GameEvent":
        conditions = data.get("trigger_conditions")
        return cls(
            id=data["id"],
            title=data["title"],
            description=data["description"],
            type=EventType(data["type"]),
            choices=[EventChoice.from_dict(c) for c in data.get("choices", [])],
            trigger_conditions=TriggerConditions.from_dict(conditions) if conditions else None,
            resolved=data.get("resolved", False),
            month_occurred=data.get("month_occurred"),
            target=data.get("target"),
        )


@dataclass(frozen=True)
class FinancialSnapshot:
    month: int
    starting_cash: float
    revenue: float
    payroll: float
    tools: float
    rent: float
    other_expenses: float
    net_cashflow: float
    ending_cash: float

    @property
    def total_expenses(self) -> float:
        return self.payroll + self.tools + self.rent + self.other_expenses

    def to_dict(self) -> Dict[str, float]:
        return {
            "month": self.month,
            "starting_cash": self.starting_cash,
            "revenue": self.revenue,
            "payroll": self.payroll,
            "tools": self.tools,
            "rent": self.rent,
            "other_expenses": self.other_expenses,
            "net_cashflow": self.net_cashflow,
            "ending_cash": self.ending_cash,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> "FinancialSnapshot":
        return cls(**data)


@dataclass(frozen=True)
class MonthSnapshot:
    """Record of one processed month. Written once, never mutated."""
    month: int
    cash: float
    reputation: float
    employee_count: int
    active_projects: int
    completed_projects: int
    financials: FinancialSnapshot
    culture: Culture

    def to_dict(self) -> Dict[str, object]:
        return {
            "month": self.month,
            "cash": self.cash,
            "reputation": self.reputation,
            "employee_count": self.employee_count,
            "active_projects": self.active_projects,
            "completed_projects": self.completed_projects,
            "financials": self.financials.to_dict(),
            "culture": self.culture.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "MonthSnapshot":
        return cls(
            month=data["month"],
            cash=data["cash"],
            reputation=data["reputation"],
            employee_count=data["employee_count"],
            active_projects=data["active_projects"],
            completed_projects=data["completed_projects"],
            financials=FinancialSnapshot.from_dict(data["financials"]),
            culture=Culture.from_dict(data["culture"]),
        )


@dataclass
class Company:
    """
    Root aggregate of one game.

    A single mutable instance per game; the engine and the session's player
    actions are the only writers.
    """

    id: str
    name: str
    current_month: int = 1
    cash: float = 0.0
    reputation: float = 50.0  # 0-100
    culture: Culture = field(default_factory=Culture)
    employees: List[Employee] = field(default_factory=list)
    projects: List[Project] = field(default_factory=list)
    events: List[GameEvent] = field(default_factory=list)  # resolved history
    history: List[MonthSnapshot] = field(default_factory=list)
    unlocked_achievements: List[str] = field(default_factory=list)

    def __post_init__(self):
        """Validate invariants after initialization."""
        if self.current_month < 1:
            raise ValueError(f"current_month must be >= 1, got {self.current_month}")
        if not (0.0 <= self.reputation <= 100.0):
            raise ValueError(f"reputation must be in [0,100], got {self.reputation}")

    def active_employees(self) -> List[Employee]:
        return [e for e in self.employees if e.is_active]

    def find_employee(self, employee_id: str) -> Optional[Employee]:
        for employee in self.employees:
            if employee.id == employee_id:
                return employee
        return None

    def find_project(self, project_id: str) -> Optional[Project]:
        for project in self.projects:
            if project.id == project_id:
                return project
        return None

    def projects_with_status(self, status: ProjectStatus) -> List[Project]:
        return [p for p in self.projects if p.status == status]

    def record_event(self, event: GameEvent, limit: int) -> None:
        """Append a resolved event, keeping only the newest `limit` entries."""
        self.events.append(event)
        if len(self.events) > limit:
            self.events = self.events[-limit:]

    def to_dict(self) -> Dict[str, object]:
        """
        Serialize the whole aggregate to basic Python types.

        Returns:
            Nested dictionary suitable for json.dumps
        """
        return {
            "id": self.id,
            "name": self.name,
            "current_month": self.current_month,
            "cash": self.cash,
            "reputation": self.reputation,
            "culture": self.culture.to_dict(),
            "employees": [e.to_dict() for e in self.employees],
            "projects": [p.to_dict() for p in self.projects],
            "events": [e.to_dict() for e in self.events],
            "history": [s.to_dict() for s in self.history],
            "unlocked_achievements": list(self.unlocked_achievements),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "Company":
        return cls(
            id=data["id"],
            name=data["name"],
            current_month=data["current_month"],
            cash=data["cash"],
            reputation=data["reputation"],
            culture=Culture.from_dict(data["culture"]),
            employees=[Employee.from_dict(e) for e in data.get("employees", [])],
            projects=[Project.from_dict(p) for p in data.get("projects", [])],
            events=[GameEvent.from_dict(e) for e in data.get("events", [])],
            history=[MonthSnapshot.from_dict(s) for s in data.get("history", [])],
            unlocked_achievements=list(data.get("unlocked_achievements", [])),
        )
