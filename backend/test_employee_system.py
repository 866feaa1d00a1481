"""
Unit tests for EmployeeSystem

Tests cover:
- Morale deltas (pay fairness, workload, culture fit, recent success)
- Productivity from morale and personality
- Quit probability tiers and clamping
- Turnover resolution and severance
"""

import random

import pytest

from config import EmployeeConfig, SimulationConfig
from employees import EmployeeSystem
from models import Personality, ProjectAssignment, ProjectStatus
from projects import assign_employee_to_project


class TestMorale:

    def test_pay_fairness(self, make_company, make_employee):
        company = make_company(with_founder=False)
        underpaid = make_employee(salary=1000)
        overpaid = make_employee(salary=9000)
        company.employees.extend([underpaid, overpaid])

        EmployeeSystem(random.Random(1)).update_morale(company)

        # Average 5000; both idle (-5), neutral culture fit
        assert underpaid.morale == pytest.approx(35)
        assert overpaid.morale == pytest.approx(50)

    def test_workload_bands(self, make_company, make_employee):
        company = make_company(with_founder=False)
        balanced = make_employee(project_assignments=[ProjectAssignment("p1", 80)])
        overloaded = make_employee(project_assignments=[
            ProjectAssignment("p1", 80), ProjectAssignment("p2", 40),
        ])
        company.employees.extend([balanced, overloaded])

        EmployeeSystem(random.Random(1)).update_morale(company)

        assert balanced.morale == pytest.approx(52)
        assert overloaded.morale == pytest.approx(35)

    def test_culture_fit_shifts_morale(self, make_company, make_employee):
        company = make_company(with_founder=False)
        company.culture.hierarchy = 1.0
        company.culture.work_life = 1.0
        team_player = make_employee(personality=Personality.TEAM_PLAYER)
        company.employees.append(team_player)

        EmployeeSystem(random.Random(1)).update_morale(company)

        # fit = 0 * 0.7 + 1.0 * 0.3 = 0.3 -> (0.3 - 0.5) * 20 = -4; idle -5
        assert team_player.morale == pytest.approx(41)

    def test_recent_success_bonus(self, make_company, make_employee, make_project):
        company = make_company(with_founder=False, current_month=6)
        employee = make_employee()
        company.employees.append(employee)
        company.projects.append(make_project(
            status=ProjectStatus.COMPLETED, completed_month=5, quality=80,
            progress=100, contributors=[employee.id],
        ))
        company.projects.append(make_project(
            status=ProjectStatus.COMPLETED, completed_month=1, quality=95,
            progress=100, contributors=[employee.id],
        ))

        EmployeeSystem(random.Random(1)).update_morale(company)

        # Only the recent project counts: 0.3 * 10 = +3; idle -5
        assert employee.morale == pytest.approx(48)

    def test_morale_clamped(self, make_company, make_employee):
        company = make_company(with_founder=False)
        employee = make_employee(morale=2, salary=1000)
        company.employees.extend([employee, make_employee(salary=9000)])

        EmployeeSystem(random.Random(1)).update_morale(company)

        assert employee.morale == 0

    def test_quit_employees_are_not_touched(self, make_company, make_employee):
        company = make_company(with_founder=False)
        leaver = make_employee(morale=50, quit_month=1)
        company.employees.extend([leaver, make_employee()])

        EmployeeSystem(random.Random(1)).update_morale(company)

        assert leaver.morale == 50


class TestProductivity:

    @pytest.mark.parametrize("personality,morale,expected", [
        (Personality.TEAM_PLAYER, 70, 1.2),
        (Personality.ROCKSTAR, 50, 1.3),
        (Personality.ROCKSTAR, 100, 1.95),
        (Personality.WORKHORSE, 100, 1.65),
        (Personality.LEADER, 0, 0.5),
    ])
    def test_productivity_formula(self, make_employee, personality, morale, expected):
        system = EmployeeSystem(random.Random(1))
        employee = make_employee(personality=personality, morale=morale)
        assert system.calculate_productivity(employee) == pytest.approx(expected)

    def test_wildcard_draws_each_month(self, make_employee, fixed_rng):
        employee = make_employee(personality=Personality.WILDCARD, morale=50)

        assert EmployeeSystem(fixed_rng(0.0)).calculate_productivity(employee) == pytest.approx(0.5)
        assert EmployeeSystem(fixed_rng(0.9)).calculate_productivity(employee) == pytest.approx(1.4)

    def test_productivity_bounds(self, make_employee):
        system = EmployeeSystem(random.Random(1))
        for personality in Personality:
            for morale in (0, 25, 50, 75, 100):
                employee = make_employee(personality=personality, morale=morale)
                assert 0.5 <= system.calculate_productivity(employee) <= 2.0


class TestQuitProbability:

    def test_tiers_multiply(self, make_employee):
        system = EmployeeSystem(random.Random(1))
        employee = make_employee(morale=20, loyalty=50, hired_month=1)
        # 0.02 * 3 (critical morale) * 1 (loyalty 50) * 1 (tenure 9)
        assert system.calculate_quit_probability(employee, current_month=10) == pytest.approx(0.06)

    def test_new_hire_and_veteran(self, make_employee):
        system = EmployeeSystem(random.Random(1))
        employee = make_employee(morale=60, loyalty=50, hired_month=10)

        assert system.calculate_quit_probability(employee, 11) == pytest.approx(0.03)
        assert system.calculate_quit_probability(employee, 40) == pytest.approx(0.014)

    def test_personality_multiplier(self, make_employee):
        system = EmployeeSystem(random.Random(1))
        workhorse = make_employee(personality=Personality.WORKHORSE, morale=60, loyalty=50)
        rockstar = make_employee(personality=Personality.ROCKSTAR, morale=60, loyalty=50)

        assert system.calculate_quit_probability(workhorse, 10) == pytest.approx(0.01)
        assert system.calculate_quit_probability(rockstar, 10) == pytest.approx(0.026)

    def test_full_loyalty_never_quits(self, make_employee):
        system = EmployeeSystem(random.Random(1))
        employee = make_employee(morale=0, loyalty=100)
        assert system.calculate_quit_probability(employee, 2) == 0

    def test_probability_clamped(self, make_employee):
        config = SimulationConfig(employees=EmployeeConfig(base_quit_rate=0.5))
        system = EmployeeSystem(random.Random(1), config)
        employee = make_employee(personality=Personality.ROCKSTAR, morale=0, loyalty=0)
        assert system.calculate_quit_probability(employee, 1) == 0.5


class TestTurnover:

    def test_everyone_at_risk_quits_on_zero_draw(self, make_company, make_employee, make_project, fixed_rng):
        company = make_company(current_month=7, cash=10000)
        founder = company.employees[0]
        employee = make_employee(salary=3000)
        project = make_project()
        company.employees.append(employee)
        company.projects.append(project)
        assign_employee_to_project(company, employee, project, 100)

        result = EmployeeSystem(fixed_rng(0.0)).process_turnover(company)

        assert result.quit_employees == [employee]
        assert employee.quit_month == 7
        assert employee.project_assignments == []
        assert project.assignments == []
        assert company.cash == 4000
        assert result.severance_paid == 6000
        assert founder.is_active  # loyalty 100 means probability 0

    def test_severance_can_overdraw(self, make_company, make_employee, fixed_rng):
        company = make_company(cash=100)
        company.employees.append(make_employee(salary=5000))

        EmployeeSystem(fixed_rng(0.0)).process_turnover(company)

        assert company.cash == -9900

    def test_high_draw_keeps_everyone(self, make_company, make_employee, fixed_rng):
        company = make_company()
        company.employees.append(make_employee(morale=0, loyalty=0))

        result = EmployeeSystem(fixed_rng(0.99)).process_turnover(company)

        assert result.quit_employees == []
        assert company.cash == 150000

    def test_quit_month_never_changes(self, make_company, make_employee, fixed_rng):
        company = make_company(current_month=9)
        leaver = make_employee(quit_month=4)
        company.employees.append(leaver)

        EmployeeSystem(fixed_rng(0.0)).process_turnover(company)

        assert leaver.quit_month == 4
