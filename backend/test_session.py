"""
Tests for GameSession player actions

Tests cover:
- New game defaults
- Hiring flow and its cash checks
- Firing and severance
- Assignment validation
- Project creation and cancellation
- Event resolution
- Determinism and save/load
"""

import pytest

from events import EventSystem
from models import (
    EventChoice,
    EventConsequences,
    EventType,
    GameEvent,
    ProjectStatus,
    ProjectType,
    TriggerConditions,
)
from session import GameSession, NoActiveCompanyError


@pytest.fixture
def session():
    game = GameSession(seed=7)
    game.new_game("Acme")
    return game


def hire(session, salary=None):
    candidate = session.generate_candidate()
    employee = session.confirm_hire()
    assert employee is candidate
    if salary is not None:
        employee.salary = salary
    return employee


class TestNewGame:

    def test_defaults(self, session):
        company = session.company
        assert company.name == "Acme"
        assert company.cash == 150000
        assert company.reputation == 50
        assert company.current_month == 1
        assert company.culture.to_dict() == {
            "speed": 0.5, "quality": 0.5, "work_life": 0.5, "hierarchy": 0.5,
        }
        assert len(company.employees) == 1
        founder = company.employees[0]
        assert founder.role == "Founder & CEO"
        assert founder.salary == 0

    def test_actions_need_a_company(self):
        game = GameSession(seed=1)
        with pytest.raises(NoActiveCompanyError):
            game.advance_month()
        with pytest.raises(NoActiveCompanyError):
            game.generate_candidate()
        with pytest.raises(RuntimeError):
            game.score()

    def test_new_game_resets_state(self, session):
        session.generate_candidate()
        session.new_game("Second")
        assert session.pending_hire is None
        assert session.company.name == "Second"
        assert len(session.company.employees) == 1


class TestHiring:

    def test_hire_costs_hiring_fee(self, session):
        employee = hire(session)

        assert session.company.cash == 145000
        assert employee in session.company.employees
        assert employee.hired_month == 1
        assert session.pending_hire is None

    def test_candidate_refused_when_broke(self, session):
        session.company.cash = 4999
        assert session.generate_candidate() is None
        assert session.last_error == "Not enough cash to hire"

    def test_confirm_rechecks_cash(self, session):
        session.generate_candidate()
        session.company.cash = 1000

        assert session.confirm_hire() is None
        assert session.company.cash == 1000
        assert len(session.company.employees) == 1

    def test_hired_month_is_confirmation_month(self, session):
        candidate = session.generate_candidate()
        session.advance_month()
        session.advance_month()

        employee = session.confirm_hire()

        assert employee is candidate
        assert employee.hired_month == 3

    def test_confirm_without_candidate(self, session):
        assert session.confirm_hire() is None
        assert session.last_error == "No candidate to hire"

    def test_reject(self, session):
        session.generate_candidate()
        session.reject_hire()
        assert session.pending_hire is None
        assert session.confirm_hire() is None


class TestFiring:

    def test_fire_pays_severance(self, session):
        employee = hire(session, salary=4000)
        cash_before = session.company.cash

        assert session.fire_employee(employee.id)

        assert session.company.cash == cash_before - 8000
        assert employee.quit_month == session.company.current_month
        assert not employee.is_active

    def test_fire_twice(self, session):
        employee = hire(session)
        assert session.fire_employee(employee.id)
        assert not session.fire_employee(employee.id)

    def test_founder_cannot_be_fired(self, session):
        founder = session.company.employees[0]
        assert not session.fire_employee(founder.id)
        assert founder.is_active
        assert session.last_error == "You cannot fire the founder"

    def test_unknown_employee(self, session):
        assert not session.fire_employee("nobody")

    def test_insufficient_severance(self, session):
        employee = hire(session, salary=6000)
        session.company.cash = 11999

        assert not session.fire_employee(employee.id)
        assert employee.is_active
        assert session.company.cash == 11999

    def test_fire_releases_assignments(self, session):
        employee = hire(session)
        project = session.create_project(ProjectType.MAINTENANCE)
        session.assign_employee_to_project(employee.id, project.id, 50)

        session.fire_employee(employee.id)

        assert project.assignments == []
        assert employee.project_assignments == []


class TestAssignment:

    def test_assign_starts_project(self, session):
        founder = session.company.employees[0]
        project = session.create_project(ProjectType.CLIENT_WORK)

        assert session.assign_employee_to_project(founder.id, project.id, 60)

        assert project.status == ProjectStatus.IN_PROGRESS
        assert project.start_month == 1
        assert founder.workload == 60

    def test_total_allocation_capped(self, session):
        founder = session.company.employees[0]
        first = session.create_project(ProjectType.CLIENT_WORK)
        second = session.create_project(ProjectType.RND)

        assert session.assign_employee_to_project(founder.id, first.id, 60)
        assert not session.assign_employee_to_project(founder.id, second.id, 50)
        assert session.assign_employee_to_project(founder.id, second.id, 40)
        assert founder.workload == 100
        # Re-assigning replaces the existing allocation
        assert session.assign_employee_to_project(founder.id, first.id, 30)
        assert founder.workload == 70

    @pytest.mark.parametrize("allocation", [0, -10, 101])
    def test_allocation_bounds(self, session, allocation):
        founder = session.company.employees[0]
        project = session.create_project(ProjectType.RND)
        assert not session.assign_employee_to_project(founder.id, project.id, allocation)
        assert project.status == ProjectStatus.NOT_STARTED

    def test_rejects_terminal_project_and_leavers(self, session):
        employee = hire(session)
        project = session.create_project(ProjectType.RND)
        other = session.create_project(ProjectType.RND)
        session.cancel_project(project.id)

        assert not session.assign_employee_to_project(employee.id, project.id, 50)

        session.fire_employee(employee.id)
        assert not session.assign_employee_to_project(employee.id, other.id, 50)

    def test_unknown_ids(self, session):
        founder = session.company.employees[0]
        assert not session.assign_employee_to_project(founder.id, "missing", 50)
        assert not session.assign_employee_to_project("missing", "missing", 50)

    def test_unassign(self, session):
        founder = session.company.employees[0]
        project = session.create_project(ProjectType.RND)
        session.assign_employee_to_project(founder.id, project.id, 50)

        assert session.unassign_employee_from_project(founder.id, project.id)
        assert not session.unassign_employee_from_project(founder.id, project.id)
        assert founder.workload == 0


class TestProjects:

    def test_create_project(self, session):
        project = session.create_project("clientWork")
        assert project in session.company.projects
        assert project.type == ProjectType.CLIENT_WORK
        assert project.deadline is not None

    def test_create_unknown_type(self, session):
        with pytest.raises(ValueError):
            session.create_project("consulting")

    def test_cancel_project(self, session):
        founder = session.company.employees[0]
        project = session.create_project(ProjectType.PRODUCT_FEATURE)
        session.assign_employee_to_project(founder.id, project.id, 100)

        assert session.cancel_project(project.id)
        assert project.status == ProjectStatus.FAILED
        assert founder.workload == 0
        assert not session.cancel_project(project.id)


class TestEvents:

    def pending(self, session):
        event = GameEvent(
            id="ev-1",
            title="Offer",
            description="Choose",
            type=EventType.RANDOM,
            choices=[
                EventChoice("pay", "Pay", consequences=EventConsequences(cash=-1000)),
                EventChoice("skip", "Skip"),
            ],
        )
        session.pending_events.append(event)
        return event

    def test_resolve(self, session):
        event = self.pending(session)

        assert session.resolve_event(event.id, "pay")

        assert session.company.cash == 149000
        assert event.resolved
        assert session.pending_events == []
        assert session.company.events == [event]

    def test_resolve_twice(self, session):
        event = self.pending(session)
        session.resolve_event(event.id, "skip")
        cash = session.company.cash

        assert not session.resolve_event(event.id, "pay")
        assert session.last_error == "Event already resolved"
        assert session.company.cash == cash

    def test_unknown_choice_keeps_event_pending(self, session):
        event = self.pending(session)
        assert not session.resolve_event(event.id, "panic")
        assert session.pending_events == [event]

    def test_advance_collects_events(self, session):
        always = GameEvent(
            id="always",
            title="Always",
            description="Every month",
            type=EventType.TRIGGERED,
            choices=[EventChoice("ok", "OK")],
            trigger_conditions=TriggerConditions(probability=1.0),
        )
        session.engine.event_system = EventSystem(
            session.rng, session.config, catalog=[always], random_pool=[]
        )

        session.advance_month()
        first = session.pending_events[0]
        for _ in range(23):
            session.advance_month()

        assert len(session.pending_events) == 1
        assert session.pending_events[0].month_occurred == 24
        assert not session.pending_events[0].resolved

        # Unanswered events expire with the month they occurred in
        assert not session.resolve_event(first.id, "ok")
        assert session.last_error == "Event not found"
        assert session.resolve_event(session.pending_events[0].id, "ok")
        assert session.pending_events == []


class TestTurnFlow:

    def test_advance_month(self, session):
        result = session.advance_month()
        assert result.success
        assert session.company.current_month == 2
        assert session.runway() == session.company.cash // session.burn_rate()
        assert session.score() > 0

    def test_game_over_flag(self, session):
        session.company.cash = 100
        result = session.advance_month()
        assert not result.success
        assert session.game_over

    def test_culture_description(self, session):
        assert session.culture_description() == "Balanced culture"


class TestDeterminism:

    def play(self, seed):
        game = GameSession(seed=seed)
        game.new_game("Replay")
        for month in range(24):
            if month % 3 == 0 and game.generate_candidate():
                game.confirm_hire()
            if month % 4 == 0:
                project = game.create_project(ProjectType.CLIENT_WORK)
                for employee in game.company.active_employees():
                    if employee.workload == 0:
                        game.assign_employee_to_project(employee.id, project.id, 100)
            for event in list(game.pending_events):
                game.resolve_event(event.id, event.choices[0].id)
            game.advance_month()
        return game.to_dict()

    def test_same_seed_same_game(self):
        assert self.play(2024) == self.play(2024)

    def test_different_seed_different_game(self):
        assert self.play(1) != self.play(2)

    def test_save_and_load(self, session):
        hire(session)
        session.create_project(ProjectType.RND)
        session.advance_month()
        saved = session.to_dict()

        restored = GameSession(seed=99)
        restored.load(saved)

        assert restored.to_dict() == saved
        assert restored.score() == session.score()
        assert session.company.employees[1].name in restored.employee_generator.used_names
