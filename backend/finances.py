"""
Monthly cost model: payroll, tools and headcount-scaled rent.

Pure functions of the company state; the engine applies the resulting
cashflow.
"""

import math

from config import CONFIG, SimulationConfig
from models import Company, Employee, FinancialSnapshot


class FinancialSystem:
    """Aggregates monthly costs and derived cash metrics."""

    def __init__(self, config: SimulationConfig = CONFIG):
        self.config = config

    def calculate_monthly_finances(self, company: Company, revenue: float) -> FinancialSnapshot:
        active = company.active_employees()
        payroll = sum(e.salary for e in active)
        tools = len(active) * self.config.finances.tool_cost_per_employee
        rent = self.calculate_rent(len(active))
        net_cashflow = revenue - (payroll + tools + rent)

        return FinancialSnapshot(
            month=company.current_month,
            starting_cash=company.cash,
            revenue=revenue,
            payroll=payroll,
            tools=tools,
            rent=rent,
            other_expenses=0.0,
            net_cashflow=net_cashflow,
            ending_cash=company.cash + net_cashflow,
        )

    def calculate_rent(self, headcount: int) -> float:
        """
        Linear from base rent at one person to max rent at the cap headcount.

        Flat below one and at or above the cap.
        """
        cfg = self.config.finances
        if headcount <= 1:
            return cfg.base_rent
        if headcount >= cfg.max_rent_headcount:
            return cfg.max_rent

        progress = (headcount - 1) / (cfg.max_rent_headcount - 1)
        return float(math.floor(cfg.base_rent + (cfg.max_rent - cfg.base_rent) * progress))

    def calculate_burn_rate(self, company: Company) -> float:
        """Monthly expenses at current headcount, before any revenue."""
        active = company.active_employees()
        payroll = sum(e.salary for e in active)
        tools = len(active) * self.config.finances.tool_cost_per_employee
        return payroll + tools + self.calculate_rent(len(active))

    def calculate_runway(self, company: Company) -> float:
        """Whole months of cash left at the current burn; inf if nothing burns."""
        burn_rate = self.calculate_burn_rate(company)
        if burn_rate <= 0:
            return math.inf
        return float(math.floor(company.cash / burn_rate))

    def can_afford(self, company: Company, amount: float) -> bool:
        return company.cash >= amount

    def hiring_cost(self) -> float:
        return self.config.game.hiring_cost

    def severance_for(self, employee: Employee) -> float:
        return employee.salary * self.config.game.severance_multiplier
