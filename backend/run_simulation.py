"""
Run a headless company simulation with an automated player.

The autopilot hires while the runway allows it, keeps every active employee
staffed on a project, and answers events with the cheapest choice. Progress
is printed every 10 months; monthly snapshots can be exported to SQLite and a
JSON summary written at the end.
"""

import argparse
import json
import logging
import sqlite3
import time
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np

from config import CONFIG
from models import MonthSnapshot, ProjectStatus, ProjectType
from session import GameSession

PROJECT_ROTATION = [
    ProjectType.CLIENT_WORK,
    ProjectType.PRODUCT_FEATURE,
    ProjectType.CLIENT_WORK,
    ProjectType.MAINTENANCE,
    ProjectType.RND,
]


class AutopilotPolicy:
    """Simple deterministic strategy used to exercise the engine end to end."""

    def __init__(self, min_hire_runway: float = 12.0, max_team: int = 15, team_per_project: int = 3):
        self.min_hire_runway = min_hire_runway
        self.max_team = max_team
        self.team_per_project = team_per_project
        self.projects_created = 0

    def play_turn(self, session: GameSession):
        """Take this month's player actions before the tick is processed."""
        self.resolve_events(session)
        self.maybe_hire(session)
        self.staff_projects(session)

    def resolve_events(self, session: GameSession):
        for event in list(session.pending_events):
            cheapest = max(event.choices, key=lambda c: c.consequences.cash)
            session.resolve_event(event.id, cheapest.id)

    def maybe_hire(self, session: GameSession):
        company = session.company
        if len(company.active_employees()) >= self.max_team:
            return
        if session.runway() < self.min_hire_runway:
            return
        if session.generate_candidate() is not None:
            session.confirm_hire()

    def staff_projects(self, session: GameSession):
        company = session.company
        idle = [e for e in company.active_employees() if e.workload == 0]
        for employee in idle:
            project = self._open_project(session)
            session.assign_employee_to_project(employee.id, project.id, 100)

    def _open_project(self, session: GameSession):
        company = session.company
        for project in company.projects:
            if project.is_terminal:
                continue
            if len(project.assignments) < self.team_per_project:
                return project

        project_type = PROJECT_ROTATION[self.projects_created % len(PROJECT_ROTATION)]
        self.projects_created += 1
        return session.create_project(project_type)


def init_database(db_path: str):
    """Initialize SQLite database with schema."""
    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS months (
            month INTEGER PRIMARY KEY,
            cash REAL,
            reputation REAL,
            employee_count INTEGER,
            active_projects INTEGER,
            completed_projects INTEGER,
            revenue REAL,
            payroll REAL,
            tools REAL,
            rent REAL,
            net_cashflow REAL,
            culture_speed REAL,
            culture_quality REAL,
            culture_work_life REAL,
            culture_hierarchy REAL
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS employees (
            month INTEGER,
            employee_id TEXT,
            name TEXT,
            personality TEXT,
            morale REAL,
            productivity REAL,
            loyalty REAL,
            salary REAL,
            workload REAL,
            PRIMARY KEY (month, employee_id)
        )
    """)

    conn.commit()
    conn.close()


def export_month(session: GameSession, snapshot: MonthSnapshot, conn: sqlite3.Connection):
    """Export one processed month using an open database connection."""
    financials = snapshot.financials
    culture = snapshot.culture
    conn.execute(
        "INSERT OR REPLACE INTO months VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
        (
            snapshot.month,
            snapshot.cash,
            snapshot.reputation,
            snapshot.employee_count,
            snapshot.active_projects,
            snapshot.completed_projects,
            financials.revenue,
            financials.payroll,
            financials.tools,
            financials.rent,
            financials.net_cashflow,
            culture.speed,
            culture.quality,
            culture.work_life,
            culture.hierarchy,
        )
    )

    employee_rows = [
        (
            snapshot.month,
            e.id,
            e.name,
            e.personality.value,
            e.morale,
            e.productivity,
            e.loyalty,
            e.salary,
            e.workload,
        )
        for e in session.company.active_employees()
    ]
    conn.executemany(
        "INSERT OR REPLACE INTO employees VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
        employee_rows
    )
    conn.commit()


def compute_run_stats(history: List[MonthSnapshot]) -> Dict[str, float]:
    """Aggregate statistics over the monthly snapshots."""
    if not history:
        return {}

    cash = np.array([s.cash for s in history], dtype=np.float64)
    net = np.array([s.financials.net_cashflow for s in history], dtype=np.float64)
    revenue = np.array([s.financials.revenue for s in history], dtype=np.float64)
    headcount = np.array([s.employee_count for s in history], dtype=np.float64)

    return {
        "months": len(history),
        "min_cash": float(cash.min()),
        "max_cash": float(cash.max()),
        "final_cash": float(cash[-1]),
        "mean_net_cashflow": float(net.mean()),
        "median_net_cashflow": float(np.median(net)),
        "profitable_months": int((net > 0).sum()),
        "total_revenue": float(revenue.sum()),
        "mean_headcount": float(headcount.mean()),
        "peak_headcount": int(headcount.max()),
    }


def main(
    num_months: int = 120,
    seed: Optional[int] = 42,
    company_name: str = "Autopilot Inc",
    db_path: Optional[str] = None,
    summary_path: Optional[str] = None
):
    """Play an automated game for up to num_months months."""
    print("=" * 80)
    print(f"COMPANY SIMULATION ({num_months} months, seed {seed})")
    print("=" * 80)
    print()

    session = GameSession(CONFIG, seed=seed)
    session.new_game(company_name)
    policy = AutopilotPolicy()

    db_conn = None
    if db_path:
        path = Path(db_path)
        if path.exists():
            path.unlink()
            print(f"Removed existing database: {path}")
        print(f"Initializing database: {path}")
        init_database(str(path))
        db_conn = sqlite3.connect(str(path))
        print()

    print("Month |      Cash | Rep | Team | Active | Done | Net Cashflow")
    print("-" * 80)

    start_time = time.time()
    for _ in range(num_months):
        policy.play_turn(session)
        result = session.advance_month()
        snapshot = result.snapshot

        if db_conn is not None:
            export_month(session, snapshot, db_conn)

        if snapshot.month % 10 == 0 or not result.success:
            print(f"{snapshot.month:5d} | {snapshot.cash:9,.0f} | {snapshot.reputation:3.0f} | "
                  f"{snapshot.employee_count:4d} | {snapshot.active_projects:6d} | "
                  f"{snapshot.completed_projects:4d} | {snapshot.financials.net_cashflow:12,.0f}")

        if not result.success:
            print()
            print(f"Bankrupt in month {snapshot.month}.")
            break

    total_time = time.time() - start_time
    if db_conn is not None:
        db_conn.close()

    company = session.company
    entry = session.leaderboard_entry()
    stats = compute_run_stats(company.history)

    print()
    print("=" * 80)
    print("FINAL STATE")
    print("=" * 80)
    print(f"  Months survived:     {entry.months_survived:>12,}")
    print(f"  Final cash:          ${entry.final_cash:>11,.0f}")
    print(f"  Reputation:          {entry.final_reputation:>12.1f}")
    print(f"  Employees hired:     {entry.employees_hired:>12,}")
    print(f"  Projects completed:  {entry.projects_completed:>12,}")
    print(f"  Projects failed:     {len(company.projects_with_status(ProjectStatus.FAILED)):>12,}")
    print(f"  Achievements:        {entry.achievements_unlocked:>12,}")
    print(f"  Culture:             {session.culture_description()}")
    print(f"  Score:               {entry.score:>12,}")
    print(f"  Simulation time:     {total_time:>11.2f}s")
    print()

    if summary_path:
        summary = {
            "leaderboard_entry": entry.to_dict(),
            "stats": stats,
            "achievements": list(company.unlocked_achievements),
            "history": [s.to_dict() for s in company.history],
        }
        path = Path(summary_path)
        with open(path, 'w') as f:
            json.dump(summary, f, indent=2)
        print(f"Summary saved to: {path}")

    return session


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    parser = argparse.ArgumentParser(description="Run a headless company simulation.")
    parser.add_argument("--months", type=int, default=120, help="Number of months to run")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--name", type=str, default="Autopilot Inc", help="Company name")
    parser.add_argument("--db", type=str, default=None, help="SQLite path for monthly snapshots")
    parser.add_argument("--summary", type=str, default=None, help="JSON summary output path")
    args = parser.parse_args()

    main(
        num_months=args.months,
        seed=args.seed,
        company_name=args.name,
        db_path=args.db,
        summary_path=args.summary
    )
