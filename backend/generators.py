"""
Entity generators for employees and projects.

Both generators draw every random value from an injected random.Random so a
seeded game produces the same candidates and projects on every replay.
"""

import logging
import math
import random
from typing import Dict, Optional, Set

from config import CONFIG, SimulationConfig
from models import (
    SKILL_NAMES,
    Employee,
    Personality,
    Project,
    ProjectType,
    SkillSet,
    new_id,
)
from personalities import PERSONALITIES

logger = logging.getLogger(__name__)


FIRST_NAMES = [
    "James", "Mary", "John", "Patricia", "Robert", "Jennifer", "Michael", "Linda",
    "William", "Elizabeth", "David", "Barbara", "Richard", "Susan", "Joseph", "Jessica",
    "Thomas", "Sarah", "Charles", "Karen", "Daniel", "Nancy", "Matthew", "Lisa",
    "Anthony", "Betty", "Mark", "Margaret", "Donald", "Sandra", "Steven", "Ashley",
    "Paul", "Kimberly", "Andrew", "Emily", "Joshua", "Donna", "Kenneth", "Michelle",
    "Kevin", "Dorothy", "Brian", "Carol", "George", "Amanda", "Edward", "Melissa",
    "Ronald", "Deborah", "Timothy", "Stephanie", "Jason", "Rebecca", "Jeffrey", "Sharon",
    "Ryan", "Laura", "Jacob", "Cynthia", "Gary", "Kathleen", "Nicholas", "Amy",
    "Eric", "Angela", "Jonathan", "Shirley", "Stephen", "Anna", "Larry", "Brenda",
    "Justin", "Pamela", "Scott", "Emma", "Brandon", "Nicole", "Benjamin", "Helen",
    "Samuel", "Samantha", "Gregory", "Katherine", "Frank", "Christine", "Alexander", "Debra",
    "Raymond", "Rachel", "Patrick", "Catherine", "Jack", "Carolyn", "Dennis", "Janet",
    "Jerry", "Ruth", "Tyler", "Maria", "Aaron", "Heather", "Jose", "Diane",
    "Adam", "Virginia", "Henry", "Julie", "Nathan", "Joyce", "Douglas", "Victoria",
    "Zachary", "Olivia", "Peter", "Kelly", "Kyle", "Christina", "Walter", "Lauren",
    "Ethan", "Joan", "Jeremy", "Evelyn", "Harold", "Keith", "Judith", "Megan",
]

LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis",
    "Rodriguez", "Martinez", "Hernandez", "Lopez", "Gonzalez", "Wilson", "Anderson", "Thomas",
    "Taylor", "Moore", "Jackson", "Martin", "Lee", "Perez", "Thompson", "White",
    "Harris", "Sanchez", "Clark", "Ramirez", "Lewis", "Robinson", "Walker", "Young",
    "Allen", "King", "Wright", "Scott", "Torres", "Nguyen", "Hill", "Flores",
    "Green", "Adams", "Nelson", "Baker", "Hall", "Rivera", "Campbell", "Mitchell",
    "Carter", "Roberts", "Gomez", "Phillips", "Evans", "Turner", "Diaz", "Parker",
    "Cruz", "Edwards", "Collins", "Reyes", "Stewart", "Morris", "Morales", "Murphy",
    "Cook", "Rogers", "Gutierrez", "Ortiz", "Morgan", "Cooper", "Peterson", "Bailey",
    "Reed", "Kelly", "Howard", "Ramos", "Kim", "Cox", "Ward", "Richardson",
    "Watson", "Brooks", "Chavez", "Wood", "James", "Bennett", "Gray", "Mendoza",
    "Ruiz", "Hughes", "Price", "Alvarez", "Castillo", "Sanders", "Patel", "Myers",
    "Long", "Ross", "Foster", "Jimenez", "Powell", "Jenkins", "Perry", "Russell",
    "Sullivan", "Bell", "Coleman", "Butler", "Henderson", "Barnes", "Fisher", "Chen",
]

ROLE_TITLES: Dict[str, list] = {
    "technical": [
        "Frontend Developer",
        "Backend Developer",
        "Full Stack Developer",
        "DevOps Engineer",
        "QA Engineer",
    ],
    "sales": [
        "Sales Representative",
        "Business Development",
        "Account Manager",
        "Sales Engineer",
    ],
    "design": ["UI Designer", "UX Designer", "Product Designer", "Visual Designer"],
    "management": ["Project Manager", "Product Manager", "Team Lead", "Operations Manager"],
}

# Five equally sized buckets
PERSONALITY_ORDER = [
    Personality.ROCKSTAR,
    Personality.TEAM_PLAYER,
    Personality.WILDCARD,
    Personality.WORKHORSE,
    Personality.LEADER,
]

PROJECT_NAMES: Dict[ProjectType, list] = {
    ProjectType.CLIENT_WORK: [
        "E-commerce Platform",
        "Mobile Banking App",
        "Healthcare Portal",
        "Real Estate Website",
        "Inventory Management System",
        "Customer Dashboard",
        "Analytics Platform",
        "Social Media Integration",
        "Payment Gateway",
        "CRM System",
    ],
    ProjectType.PRODUCT_FEATURE: [
        "User Authentication System",
        "Notification Service",
        "Search Functionality",
        "Reporting Module",
        "API Integration",
        "Data Migration Tool",
        "Performance Optimization",
        "Security Audit",
        "Mobile Responsiveness",
        "Third-party Integration",
    ],
    ProjectType.MAINTENANCE: [
        "Code Refactoring",
        "Dependency Updates",
        "Bug Fixing Sprint",
        "Documentation Update",
        "Database Optimization",
        "Server Migration",
        "Security Patches",
        "Performance Tuning",
        "Technical Debt Reduction",
        "Legacy System Cleanup",
    ],
    ProjectType.RND: [
        "AI/ML Research",
        "Blockchain Exploration",
        "New Framework Evaluation",
        "Prototyping Lab",
        "Innovation Workshop",
        "Technology Spike",
        "Proof of Concept",
        "Architecture Redesign",
        "Platform Migration Study",
        "Emerging Tech Analysis",
    ],
}

# (base, per-intensity) required skill per dimension; intensity = complexity / 10
REQUIRED_SKILL_PROFILES: Dict[ProjectType, Dict[str, tuple]] = {
    ProjectType.CLIENT_WORK: {
        "technical": (40, 40), "sales": (20, 20), "design": (30, 30), "management": (30, 30),
    },
    ProjectType.PRODUCT_FEATURE: {
        "technical": (50, 40), "sales": (10, 10), "design": (40, 30), "management": (20, 20),
    },
    ProjectType.MAINTENANCE: {
        "technical": (60, 30), "sales": (0, 0), "design": (10, 10), "management": (10, 10),
    },
    ProjectType.RND: {
        "technical": (70, 25), "sales": (0, 0), "design": (20, 20), "management": (30, 30),
    },
}


def _clamp_skill(value: float) -> int:
    return int(max(0, min(100, math.floor(value))))


class EmployeeGenerator:
    """
    Produces hire candidates and the founder.

    Keeps the set of names already handed out in this game so candidates
    are (almost always) uniquely named.
    """

    def __init__(self, rng: random.Random, config: SimulationConfig = CONFIG):
        self.rng = rng
        self.config = config
        self.used_names: Set[str] = set()

    def reset(self) -> None:
        """Forget used names (new game)."""
        self.used_names.clear()

    def generate_employee(self, current_month: int, is_founder: bool = False) -> Employee:
        cfg = self.config.employees
        personality = self.select_personality()
        skills = self.generate_skills(personality, is_founder)

        if is_founder:
            return Employee(
                id=new_id(self.rng),
                name=self.config.game.founder_name,
                role=self.config.game.founder_role,
                personality=personality,
                skills=skills,
                morale=100.0,
                productivity=1.0,
                loyalty=100.0,
                salary=0.0,
                hired_month=current_month,
            )

        return Employee(
            id=new_id(self.rng),
            name=self.generate_unique_name(),
            role=self.select_role(skills),
            personality=personality,
            skills=skills,
            morale=cfg.hire_morale_min + self.rng.random() * cfg.hire_morale_range,
            productivity=1.0,
            loyalty=cfg.hire_loyalty_min + self.rng.random() * cfg.hire_loyalty_range,
            salary=self.calculate_salary(skills, personality),
            hired_month=current_month,
        )

    def select_personality(self) -> Personality:
        bucket = int(self.rng.random() * len(PERSONALITY_ORDER))
        return PERSONALITY_ORDER[min(bucket, len(PERSONALITY_ORDER) - 1)]

    def generate_skills(self, personality: Personality, is_founder: bool) -> SkillSet:
        cfg = self.config.employees
        if is_founder:
            base_level = cfg.founder_skill_base
        else:
            base_level = cfg.hire_skill_base_min + self.rng.random() * cfg.hire_skill_base_range

        raw = {
            name: _clamp_skill(base_level + (self.rng.random() - 0.5) * cfg.skill_variance * 2)
            for name in SKILL_NAMES
        }
        modifiers = PERSONALITIES[personality].skill_modifiers
        return SkillSet(**{
            name: _clamp_skill(value + modifiers.get(name, 0)) for name, value in raw.items()
        })

    def select_role(self, skills: SkillSet) -> str:
        """Title from the discipline of the strongest skill."""
        best = max(skills.values())
        # SKILL_NAMES order breaks ties: technical > sales > design > management
        discipline = next(name for name in SKILL_NAMES if skills.get(name) == best)
        return self.rng.choice(ROLE_TITLES[discipline])

    def calculate_salary(self, skills: SkillSet, personality: Personality) -> float:
        cfg = self.config.employees
        salary = cfg.salary_base + (skills.average() / 100) * cfg.salary_skill_span
        salary *= PERSONALITIES[personality].salary_multiplier
        salary = min(salary, cfg.salary_cap)
        step = cfg.salary_rounding
        return float(int(salary / step + 0.5) * step)

    def generate_unique_name(self) -> str:
        name = self._random_name()
        attempts = 0
        while name in self.used_names and attempts < self.config.employees.name_retry_limit:
            name = self._random_name()
            attempts += 1
        if name in self.used_names:
            logger.debug("Name pool exhausted after %d attempts, reusing %s", attempts, name)
        self.used_names.add(name)
        return name

    def _random_name(self) -> str:
        return f"{self.rng.choice(FIRST_NAMES)} {self.rng.choice(LAST_NAMES)}"


class ProjectGenerator:
    """Produces new projects of a requested type."""

    def __init__(self, rng: random.Random, config: SimulationConfig = CONFIG):
        self.rng = rng
        self.config = config

    def generate_project(self, project_type: ProjectType, current_month: int) -> Project:
        project_type = ProjectType(project_type)
        cfg = self.config.projects

        complexity = self.generate_complexity(project_type)
        estimated_months = int(
            1 + complexity * cfg.months_per_complexity + self.rng.random() * cfg.months_jitter
        )

        return Project(
            id=new_id(self.rng),
            name=self.rng.choice(PROJECT_NAMES[project_type]),
            type=project_type,
            complexity=complexity,
            required_skills=self.generate_required_skills(project_type, complexity),
            estimated_months=estimated_months,
            value=self.calculate_value(project_type, complexity, estimated_months),
            deadline=self.calculate_deadline(project_type, complexity, current_month),
        )

    def generate_complexity(self, project_type: ProjectType) -> int:
        low, span = self.config.projects.complexity_ranges[project_type.value]
        return int(low + self.rng.random() * span)

    def generate_required_skills(self, project_type: ProjectType, complexity: int) -> SkillSet:
        intensity = complexity / 10
        profile = REQUIRED_SKILL_PROFILES[project_type]
        return SkillSet(**{
            name: float(math.floor(base + intensity * scale))
            for name, (base, scale) in profile.items()
        })

    def calculate_value(
        self,
        project_type: ProjectType,
        complexity: int,
        estimated_months: int
    ) -> float:
        cfg = self.config.projects
        base_value = complexity * estimated_months * cfg.value_per_complexity_month
        if project_type == ProjectType.CLIENT_WORK:
            multiplier = cfg.client_value_min + self.rng.random() * cfg.client_value_range
        else:
            multiplier = cfg.value_multipliers.get(project_type.value, 1.0)
        return float(math.floor(base_value * multiplier))

    def calculate_deadline(
        self,
        project_type: ProjectType,
        complexity: int,
        current_month: int
    ) -> Optional[int]:
        """
        Client work gets a deadline derived from the progress model itself.

        Expected monthly progress for a typical team is
        base * skill_match * productivity / sqrt(complexity); the deadline is
        the months needed to reach 100 plus a fixed buffer.
        """
        if project_type != ProjectType.CLIENT_WORK:
            return None
        cfg = self.config.projects
        expected_progress = (
            cfg.base_monthly_progress * cfg.expected_skill_match * cfg.expected_productivity
        ) / math.sqrt(complexity)
        completion_months = math.ceil(100 / expected_progress)
        return current_month + completion_months + cfg.deadline_buffer
