"""Short-term financing over six months.

A company faces monthly net cash flows and can cover shortfalls with three
instruments:

- a credit line, drawn monthly up to a limit and repaid with interest the
  next month,
- 90-day bonds (commercial paper), issued in the first three months and
  repaid with interest three months later,
- surplus cash, invested for one month.

The plan maximizes the company's wealth at the end of the sixth month.
Amounts are in thousands of dollars.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel

from lpkit.core.errors import DomainError
from lpkit.domain.builder import ProblemBuilder
from lpkit.domain.schema import Problem, Relation, Solution
from lpkit.presentation.tables import format_table

MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun"]
DEFAULT_CASH_FLOWS = [-150.0, -120.0, 200.0, -200.0, 50.0, 520.0]
BOND_TERM = 3


class MonthPlan(BaseModel):
    month: str
    cash_flow: float
    credit: float
    bond: float
    surplus: float
    repayment: float


def build_financing_problem(
    cash_flows: Sequence[float] = DEFAULT_CASH_FLOWS,
    credit_rate: float = 0.005,
    bond_rate: float = 0.015,
    cash_rate: float = 0.002,
    credit_limit: Optional[float] = 100.0,
) -> Problem:
    """Cash balance per month: inflows - outflows == net cash flow requirement.

    For month m (0-based) with n months in total:
      credit[m] + bond[m] - cash[m]
        - (1 + credit_rate) * credit[m-1]
        - (1 + bond_rate) * bond[m-3]
        + (1 + cash_rate) * cash[m-1]
      == -cash_flows[m]
    The last month collects everything into ``wealth`` instead of new
    borrowing or investment.
    """
    n = len(cash_flows)
    if n == 0:
        raise DomainError("Financing model needs at least one month of cash flows.")
    b = ProblemBuilder(name="short-term-financing")

    credit = b.add_variables(
        [f"credit[{m}]" for m in _labels(n - 1)], upper=credit_limit
    )
    # bonds must mature inside the horizon
    bond = b.add_variables(
        [f"bond[{m}]" for m in _labels(max(0, min(BOND_TERM, n - BOND_TERM)))]
    )
    cash = b.add_variables([f"cash[{m}]" for m in _labels(n - 1)])
    wealth = b.add_variable("wealth")

    for m in range(n):
        terms: List[tuple] = []
        if m < n - 1:
            terms += [(credit[m], 1.0), (cash[m], -1.0)]
            if m < len(bond):
                terms.append((bond[m], 1.0))
        else:
            terms.append((wealth, -1.0))
        if m >= 1:
            terms += [(credit[m - 1], -(1 + credit_rate)), (cash[m - 1], 1 + cash_rate)]
        if 0 <= m - BOND_TERM < len(bond):
            terms.append((bond[m - BOND_TERM], -(1 + bond_rate)))

        b.add_constraint(
            terms, Relation.EQ, -float(cash_flows[m]), name=f"balance[{_label(m)}]"
        )

    b.maximize({wealth: 1.0})
    return b.build()


def financing_plan(
    solution: Solution,
    cash_flows: Sequence[float] = DEFAULT_CASH_FLOWS,
    credit_rate: float = 0.005,
    bond_rate: float = 0.015,
) -> List[MonthPlan]:
    """Month-by-month view of an optimal financing solution."""
    v: Dict[str, float] = solution.values
    plan: List[MonthPlan] = []
    for m, flow in enumerate(cash_flows):
        label = _label(m)
        repayment = (1 + credit_rate) * v.get(f"credit[{_label(m - 1)}]", 0.0) if m else 0.0
        if m >= BOND_TERM:
            repayment += (1 + bond_rate) * v.get(f"bond[{_label(m - BOND_TERM)}]", 0.0)
        plan.append(
            MonthPlan(
                month=label,
                cash_flow=float(flow),
                credit=v.get(f"credit[{label}]", 0.0),
                bond=v.get(f"bond[{label}]", 0.0),
                surplus=v.get(f"cash[{label}]", 0.0),
                repayment=repayment,
            )
        )
    return plan


def format_financing_plan(plan: Sequence[MonthPlan]) -> str:
    rows = [
        [p.month, p.cash_flow, p.credit, p.bond, p.surplus, p.repayment] for p in plan
    ]
    return format_table(
        ["month", "cash flow", "credit", "bond", "surplus", "repaid"], rows
    )


def _label(m: int) -> str:
    return MONTHS[m] if m < len(MONTHS) else f"M{m + 1}"


def _labels(count: int) -> List[str]:
    return [_label(m) for m in range(count)]
