"""
Shared pytest fixtures: entity factories and deterministic RNGs.
"""

import random

import pytest

from models import (
    Company,
    Culture,
    Employee,
    Personality,
    Project,
    ProjectStatus,
    ProjectType,
    SkillSet,
)


class FixedRandom(random.Random):
    """random() always returns the same value; getrandbits (ids) stays seeded."""

    value = 0.5

    def random(self):
        return self.value


@pytest.fixture
def fixed_rng():
    def _make(value: float) -> FixedRandom:
        rng = FixedRandom(0)
        rng.value = value
        return rng

    return _make


@pytest.fixture
def make_employee():
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = dict(
            id=f"e{counter['n']}",
            name=f"Employee {counter['n']}",
            role="Software Engineer",
            personality=Personality.TEAM_PLAYER,
            skills=SkillSet(technical=50, sales=50, design=50, management=50),
            morale=50.0,
            productivity=1.0,
            loyalty=50.0,
            salary=4000.0,
            hired_month=1,
        )
        data.update(overrides)
        return Employee(**data)

    return _make


@pytest.fixture
def make_founder(make_employee):
    def _make(**overrides):
        data = dict(
            id="founder",
            name="You",
            role="Founder & CEO",
            skills=SkillSet(technical=80, sales=80, design=80, management=80),
            morale=100.0,
            loyalty=100.0,
            salary=0.0,
        )
        data.update(overrides)
        return make_employee(**data)

    return _make


@pytest.fixture
def make_project():
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = dict(
            id=f"p{counter['n']}",
            name=f"Project {counter['n']}",
            type=ProjectType.PRODUCT_FEATURE,
            complexity=4,
            required_skills=SkillSet(technical=40, sales=20, design=0, management=0),
            estimated_months=4,
            value=10000.0,
            status=ProjectStatus.IN_PROGRESS,
            start_month=1,
        )
        data.update(overrides)
        return Project(**data)

    return _make


@pytest.fixture
def make_company(make_founder):
    def _make(with_founder=True, **overrides):
        data = dict(
            id="c1",
            name="Test Co",
            current_month=1,
            cash=150000.0,
            reputation=50.0,
            culture=Culture(),
        )
        data.update(overrides)
        company = Company(**data)
        if with_founder:
            company.employees.append(make_founder())
        return company

    return _make
