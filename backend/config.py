"""
Simulation Configuration

Centralizes all tunable parameters for the company simulation.
Every system takes a config argument that defaults to CONFIG, so tests and
alternate game modes can pass their own instance.
"""

from dataclasses import dataclass, field
from typing import Dict


@dataclass
class GameConfig:
    """New-game defaults and player action costs."""
    starting_cash: float = 150000.0
    starting_reputation: float = 50.0
    starting_culture: float = 0.5  # All four axes start balanced
    hiring_cost: float = 5000.0  # Checked and deducted on confirm
    severance_multiplier: float = 2.0  # Months of salary
    founder_role: str = "Founder & CEO"
    founder_name: str = "You"
    event_history_limit: int = 50


@dataclass
class EmployeeConfig:
    """Employee generation, morale and turnover parameters."""

    # Generation
    founder_skill_base: float = 80.0
    hire_skill_base_min: float = 30.0
    hire_skill_base_range: float = 40.0
    skill_variance: float = 15.0
    hire_morale_min: float = 50.0
    hire_morale_range: float = 30.0
    hire_loyalty_min: float = 30.0
    hire_loyalty_range: float = 40.0
    name_retry_limit: int = 100

    # Salary
    salary_base: float = 3000.0
    salary_skill_span: float = 7000.0
    salary_cap: float = 7000.0
    salary_rounding: int = 100

    # Morale
    underpaid_ratio: float = 0.8
    overpaid_ratio: float = 1.2
    underpaid_penalty: float = 10.0
    overpaid_bonus: float = 5.0
    overload_threshold: float = 100.0
    underload_threshold: float = 50.0
    overload_penalty: float = 15.0
    underload_penalty: float = 5.0
    balanced_load_bonus: float = 2.0
    culture_fit_scale: float = 20.0  # (fit - 0.5) * 20 -> [-10, +10]
    recent_success_window: int = 3  # Months
    recent_success_quality: float = 70.0
    recent_success_step: float = 0.3
    recent_success_bonus: float = 10.0

    # Productivity
    min_productivity: float = 0.5
    max_productivity: float = 2.0
    wildcard_min_factor: float = 0.5

    # Turnover
    base_quit_rate: float = 0.02  # 2% monthly
    max_quit_probability: float = 0.5
    critical_morale: float = 30.0
    low_morale: float = 50.0
    high_morale: float = 80.0
    critical_morale_multiplier: float = 3.0
    low_morale_multiplier: float = 1.5
    high_morale_multiplier: float = 0.5
    loyalty_reference: float = 50.0
    new_hire_tenure: int = 3
    veteran_tenure: int = 24
    new_hire_multiplier: float = 1.5
    veteran_multiplier: float = 0.7


@dataclass
class ProjectConfig:
    """Project generation and progress parameters."""

    # Progress model
    base_monthly_progress: float = 25.0
    quality_scale: float = 10.0
    default_skill_match: float = 0.5  # When no skill is required
    tech_debt_match_threshold: float = 0.6
    tech_debt_increment: float = 5.0
    tech_debt_quality_penalty: float = 0.5

    # Client milestones
    milestone_thresholds: tuple = (25, 50, 75)
    milestone_payment_share: float = 0.15

    # Outcome tiers: (min quality, payment multiplier, reputation change)
    outcome_tiers: tuple = (
        (90.0, 1.2, 5.0),
        (70.0, 1.0, 2.0),
        (50.0, 0.8, 0.0),
    )
    failed_outcome_reputation: float = -5.0

    # Generation
    complexity_ranges: Dict[str, tuple] = field(default_factory=lambda: {
        "clientWork": (3, 6),  # (min, span) -> 3-8
        "productFeature": (2, 5),  # 2-6
        "maintenance": (1, 4),  # 1-4
        "rnd": (4, 5),  # 4-8
    })
    value_per_complexity_month: float = 2500.0
    value_multipliers: Dict[str, float] = field(default_factory=lambda: {
        "productFeature": 0.5,  # Indirect value
        "maintenance": 0.3,  # Cost savings
        "rnd": 0.4,  # Future value
    })
    client_value_min: float = 0.8
    client_value_range: float = 0.4
    months_per_complexity: float = 0.8
    months_jitter: float = 2.0

    # Deadline: inverse of the progress model at a typical team
    expected_skill_match: float = 0.7
    expected_productivity: float = 1.0
    deadline_buffer: int = 2


@dataclass
class FinanceConfig:
    """Monthly cost structure."""
    tool_cost_per_employee: float = 500.0
    base_rent: float = 2000.0
    max_rent: float = 20000.0
    max_rent_headcount: int = 50


@dataclass
class EventConfig:
    """Event sampling parameters."""
    random_event_probability: float = 0.03


@dataclass
class CultureConfig:
    """Culture drift parameters."""
    drift_factor: float = 0.1
    manager_skill_threshold: float = 60.0
    manager_reference_share: float = 0.2
    high_axis: float = 0.7
    low_axis: float = 0.3


@dataclass
class ScoreConfig:
    """End-of-game score weights."""
    per_month: float = 100.0
    per_cash: float = 0.1
    per_reputation: float = 50.0
    per_hire: float = 200.0
    per_completed_project: float = 500.0


@dataclass
class SimulationConfig:
    """Master configuration for the entire simulation."""

    game: GameConfig = field(default_factory=GameConfig)
    employees: EmployeeConfig = field(default_factory=EmployeeConfig)
    projects: ProjectConfig = field(default_factory=ProjectConfig)
    finances: FinanceConfig = field(default_factory=FinanceConfig)
    events: EventConfig = field(default_factory=EventConfig)
    culture: CultureConfig = field(default_factory=CultureConfig)
    score: ScoreConfig = field(default_factory=ScoreConfig)

    def __post_init__(self):
        """Validation of cross-field invariants."""
        if self.game.hiring_cost < 0:
            raise ValueError("hiring_cost cannot be negative")
        if not (0.0 <= self.game.starting_culture <= 1.0):
            raise ValueError("starting_culture must be in [0, 1]")
        if not (0.0 <= self.game.starting_reputation <= 100.0):
            raise ValueError("starting_reputation must be in [0, 100]")
        if self.game.event_history_limit <= 0:
            raise ValueError("event_history_limit must be positive")

        if not (0.0 <= self.employees.base_quit_rate <= 1.0):
            raise ValueError("base_quit_rate must be in [0, 1]")
        if self.employees.min_productivity > self.employees.max_productivity:
            raise ValueError("min_productivity cannot exceed max_productivity")

        if self.finances.base_rent > self.finances.max_rent:
            raise ValueError("base_rent cannot exceed max_rent")
        if self.finances.max_rent_headcount <= 1:
            raise ValueError("max_rent_headcount must be greater than 1")

        if not (0.0 < self.culture.drift_factor <= 1.0):
            raise ValueError("drift_factor must be in (0, 1]")
        if not (0.0 <= self.events.random_event_probability <= 1.0):
            raise ValueError("random_event_probability must be in [0, 1]")

        thresholds = list(self.projects.milestone_thresholds)
        if thresholds != sorted(thresholds):
            raise ValueError("milestone_thresholds must be ascending")


# Default configuration instance
CONFIG = SimulationConfig()
