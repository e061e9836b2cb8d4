from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ortools.linear_solver import pywraplp

from lpkit.domain.schema import Relation, SolveStatus, Solution, TightConstraint
from lpkit.solvers.lp.build import LPBuild

logger = logging.getLogger(__name__)

# OR-Tools returns an int status code; this alias makes typing intent explicit.
_LpStatus = int


def extract_solution(built: LPBuild, eps: float = 1e-7) -> Solution:
    s = built.solver
    status_code = s.Solve(built.params)

    # Status mapping (treat FEASIBLE as "optimal" for now, but add a message)
    status_map: Dict[_LpStatus, SolveStatus] = {
        pywraplp.Solver.OPTIMAL: SolveStatus.OPTIMAL,
        pywraplp.Solver.FEASIBLE: SolveStatus.OPTIMAL,
        pywraplp.Solver.INFEASIBLE: SolveStatus.INFEASIBLE,
        pywraplp.Solver.UNBOUNDED: SolveStatus.UNBOUNDED,
    }
    result_status = status_map.get(status_code, SolveStatus.ERROR)
    logger.info("Solver returned status %s (%s)", status_code, result_status.value)

    if result_status == SolveStatus.INFEASIBLE:
        return _disambiguate_infeasible(built)
    if result_status == SolveStatus.UNBOUNDED:
        return _empty_result(SolveStatus.UNBOUNDED, "Model is unbounded.")
    if result_status == SolveStatus.ERROR:
        return _empty_result(SolveStatus.ERROR, _status_message(status_code))

    message: Optional[str] = None
    if status_code == pywraplp.Solver.FEASIBLE:
        message = "Solver returned FEASIBLE (treated as optimal)."

    # Solution values
    values: Dict[str, float] = {
        name: var.solution_value() for name, var in built.variables.items()
    }
    duals: Dict[str, float] = {
        name: row.dual_value() for name, row in built.rows.items()
    }

    tight = _compute_tight_constraints(built, values, eps=eps)

    return Solution(
        status=result_status,
        message=message,
        objective_value=s.Objective().Value(),
        values=values,
        duals=duals,
        tight_constraints=tight,
    )


def _disambiguate_infeasible(built: LPBuild) -> Solution:
    # GLOP reports "infeasible or unbounded" as INFEASIBLE; a zero objective
    # tells the two apart. The built model is single-use, so clearing is fine.
    built.solver.Objective().Clear()
    status_code = built.solver.Solve(built.params)
    logger.info("Feasibility re-solve returned status %s", status_code)

    if status_code in (pywraplp.Solver.OPTIMAL, pywraplp.Solver.FEASIBLE):
        return _empty_result(SolveStatus.UNBOUNDED, "Model is unbounded.")
    if status_code == pywraplp.Solver.INFEASIBLE:
        return _empty_result(SolveStatus.INFEASIBLE, "Model is infeasible.")
    return _empty_result(SolveStatus.ERROR, _status_message(status_code))


def _status_message(status_code: int) -> str:
    if status_code == pywraplp.Solver.MODEL_INVALID:
        return "Model is invalid (NaN/Inf coefficients or malformed constraints)."
    if status_code == pywraplp.Solver.NOT_SOLVED:
        return "Model not solved (solver did not run or stopped early)."
    if status_code == pywraplp.Solver.ABNORMAL:
        return "Solver ended abnormally."
    return f"Unknown solver status: {status_code}"


def _empty_result(status: SolveStatus, message: Optional[str] = None) -> Solution:
    return Solution(
        status=status,
        message=message,
        objective_value=None,
        values={},
        duals={},
        tight_constraints=[],
    )


def _compute_tight_constraints(
    built: LPBuild,
    values: Dict[str, float],
    eps: float = 1e-7,
) -> List[TightConstraint]:
    tight: List[TightConstraint] = []

    # Inequality rows: distance from the right-hand side
    for name, spec in built.row_specs.items():
        if spec.relation == Relation.EQ:
            continue
        activity = spec.activity(values)
        if spec.relation == Relation.LE:
            slack = spec.rhs - activity
        else:
            slack = activity - spec.rhs
        if slack <= eps:
            tight.append(TightConstraint(name=name, slack=slack))

    # Upper bounds: ub - value
    for name, (_, ub) in built.bounds.items():
        if ub is None:
            continue
        slack = ub - values.get(name, 0.0)
        if slack <= eps:
            tight.append(TightConstraint(name=f"upper_bound:{name}", slack=slack))

    # Lower bounds: value - lb (the default lb == 0 is left out)
    for name, (lb, _) in built.bounds.items():
        if lb is None or lb == 0.0:
            continue
        slack = values.get(name, 0.0) - lb
        if slack <= eps:
            tight.append(TightConstraint(name=f"lower_bound:{name}", slack=slack))

    tight.sort(key=lambda x: x.slack)
    return tight
