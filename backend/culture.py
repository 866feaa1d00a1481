"""
Company culture drift.

Culture is never set directly by the player. Each month every axis moves a
fixed fraction of the way toward a target derived from what the company has
actually been doing.
"""

import logging

from config import CONFIG, SimulationConfig
from models import Company, Culture, ProjectStatus, clamp

logger = logging.getLogger(__name__)


def _lerp(current: float, target: float, factor: float) -> float:
    return current + (target - current) * factor


class CultureSystem:
    """Exponential smoothing of the four culture axes."""

    def __init__(self, config: SimulationConfig = CONFIG):
        self.config = config

    def update_culture(self, company: Company) -> None:
        """
        Nudge each axis toward its target. Axes without data keep their value.

        speed      completed complexity per month of duration
        quality    average completed quality
        work_life  average active morale
        hierarchy  share of strong managers against a 20% reference
        """
        cfg = self.config.culture
        culture = company.culture
        completed = company.projects_with_status(ProjectStatus.COMPLETED)
        active = company.active_employees()

        if completed:
            avg_complexity = sum(p.complexity for p in completed) / len(completed)
            avg_duration = sum(
                p.completed_month - p.start_month
                for p in completed
                if p.start_month is not None and p.completed_month is not None
            ) / len(completed)

            if avg_duration > 0:
                speed_target = min(1.0, avg_complexity / avg_duration)
                culture.speed = _lerp(culture.speed, speed_target, cfg.drift_factor)

            avg_quality = sum(p.quality for p in completed) / len(completed)
            culture.quality = _lerp(culture.quality, avg_quality / 100, cfg.drift_factor)

        if active:
            avg_morale = sum(e.morale for e in active) / len(active)
            culture.work_life = _lerp(culture.work_life, avg_morale / 100, cfg.drift_factor)

            managers = sum(
                1 for e in active if e.skills.management > cfg.manager_skill_threshold
            )
            hierarchy_target = min(
                1.0, managers / max(1.0, len(active) * cfg.manager_reference_share)
            )
            culture.hierarchy = _lerp(culture.hierarchy, hierarchy_target, cfg.drift_factor)

        # Float drift must never leave the unit interval
        culture.speed = clamp(culture.speed, 0.0, 1.0)
        culture.quality = clamp(culture.quality, 0.0, 1.0)
        culture.work_life = clamp(culture.work_life, 0.0, 1.0)
        culture.hierarchy = clamp(culture.hierarchy, 0.0, 1.0)

        logger.debug(
            "Culture after month %d: speed=%.2f quality=%.2f work_life=%.2f hierarchy=%.2f",
            company.current_month, culture.speed, culture.quality,
            culture.work_life, culture.hierarchy
        )

    def describe(self, culture: Culture) -> str:
        """Short human-readable label, e.g. "Fast-paced, Hustle culture"."""
        cfg = self.config.culture
        labels = [
            (culture.speed, "Fast-paced", "Methodical"),
            (culture.quality, "Quality-focused", "Ship-it mentality"),
            (culture.work_life, "Work-life balance", "Hustle culture"),
            (culture.hierarchy, "Structured", "Flat organization"),
        ]

        descriptions = []
        for value, high_label, low_label in labels:
            if value > cfg.high_axis:
                descriptions.append(high_label)
            elif value < cfg.low_axis:
                descriptions.append(low_label)

        return ", ".join(descriptions) or "Balanced culture"
