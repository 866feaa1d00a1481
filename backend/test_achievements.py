"""
Unit tests for the achievement catalog and evaluator
"""

import pytest

from achievements import ACHIEVEMENTS, RULE_CHECKS, Achievement, AchievementEvaluator, Rarity
from models import Culture, FinancialSnapshot, Personality, ProjectStatus


def financials(net):
    return FinancialSnapshot(
        month=1, starting_cash=0, revenue=0, payroll=0, tools=0, rent=0,
        other_expenses=0, net_cashflow=net, ending_cash=net,
    )


def unlocked_ids(company, snapshot=None):
    return [a.id for a in AchievementEvaluator().evaluate(company, snapshot)]


class TestCatalog:

    def test_catalog_is_complete(self):
        assert len(ACHIEVEMENTS) == 24
        assert len({a.id for a in ACHIEVEMENTS}) == 24
        assert ACHIEVEMENTS[0].id == "survive_6_months"
        assert ACHIEVEMENTS[-1].rarity == Rarity.LEGENDARY

    def test_every_kind_has_a_check(self):
        assert {a.kind for a in ACHIEVEMENTS} <= set(RULE_CHECKS)

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValueError):
            AchievementEvaluator([Achievement("x", "X", "x", Rarity.COMMON, "telepathy")])


class TestEvaluate:

    def test_new_company(self, make_company):
        """Starting cash and the balanced starting culture qualify immediately"""
        assert unlocked_ids(make_company()) == ["reach_100k", "balanced_culture"]

    def test_already_unlocked_not_repeated(self, make_company):
        company = make_company()
        company.unlocked_achievements.append("reach_100k")
        assert unlocked_ids(company) == ["balanced_culture"]

    def test_positive_cashflow_uses_given_snapshot(self, make_company):
        company = make_company(cash=0)
        assert "first_profit" not in unlocked_ids(company)
        assert "first_profit" not in unlocked_ids(company, financials(-10))
        assert "first_profit" in unlocked_ids(company, financials(10))

    def test_survival_and_retention(self, make_company, make_employee):
        company = make_company(current_month=12)
        company.employees.append(make_employee(quit_month=12))

        ids = unlocked_ids(company)

        assert "survive_6_months" in ids
        assert "survive_12_months" in ids
        assert "no_quitters" in ids
        assert "hire_first_employee" in ids

    def test_earlier_quit_breaks_retention(self, make_company, make_employee):
        company = make_company(current_month=12)
        company.employees.append(make_employee(quit_month=5))
        assert "no_quitters" not in unlocked_ids(company)

    def test_team_size_counts_active(self, make_company, make_employee):
        company = make_company()
        for _ in range(3):
            company.employees.append(make_employee())
        company.employees.append(make_employee(quit_month=1))
        assert "team_of_5" not in unlocked_ids(company)

        company.employees.append(make_employee())
        assert "team_of_5" in unlocked_ids(company)

    def test_projects(self, make_company, make_project):
        company = make_company()
        company.projects.append(make_project(status=ProjectStatus.COMPLETED, progress=100, quality=92))
        company.projects.append(make_project(status=ProjectStatus.FAILED))

        ids = unlocked_ids(company)

        assert "first_project" in ids
        assert "perfect_project" in ids
        assert "complete_5_projects" not in ids

    def test_culture_extremes(self, make_company):
        company = make_company(culture=Culture(speed=0.85, quality=0.8, work_life=0.5, hierarchy=0.5))
        ids = unlocked_ids(company)

        assert "speed_demon" in ids
        assert "quality_focused" in ids
        assert "balanced_culture" not in ids

    def test_personality_diversity(self, make_company, make_employee):
        company = make_company(with_founder=False)
        for personality in Personality:
            company.employees.append(make_employee(personality=personality))
        assert "jack_of_all_trades" in unlocked_ids(company)

    def test_legendary_survivor(self, make_company):
        assert "legendary_survivor" in unlocked_ids(make_company(current_month=100, cash=1))
        assert "legendary_survivor" not in unlocked_ids(make_company(current_month=100, cash=0))

    def test_reputation(self, make_company):
        ids = unlocked_ids(make_company(reputation=96))
        assert "reputation_75" in ids
        assert "reputation_95" in ids
