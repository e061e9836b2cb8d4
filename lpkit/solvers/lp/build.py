from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ortools.linear_solver import pywraplp

from lpkit.core.config import Settings
from lpkit.core.errors import SolverFailureError
from lpkit.domain.schema import Constraint, Problem, Relation, Sense

logger = logging.getLogger(__name__)


@dataclass
class LPBuild:
    solver: pywraplp.Solver
    params: pywraplp.MPSolverParameters
    variables: Dict[str, pywraplp.Variable]  # name -> var
    rows: Dict[str, pywraplp.Constraint]  # constraint name -> row

    # Helpers for extraction / slacks
    bounds: Dict[str, Tuple[Optional[float], Optional[float]]]  # name -> (lb, ub)
    row_specs: Dict[str, Constraint]  # constraint name -> declared row


def build_lp(problem: Problem, settings: Optional[Settings] = None) -> LPBuild:
    """Translate a normalized, validated problem into an OR-Tools model."""
    settings = settings or Settings()

    s = pywraplp.Solver.CreateSolver(settings.backend)
    if s is None:
        raise SolverFailureError(
            f"Failed to create OR-Tools solver for backend '{settings.backend}'."
        )
    inf = s.infinity()

    # Variables
    variables: Dict[str, pywraplp.Variable] = {}
    bounds: Dict[str, Tuple[Optional[float], Optional[float]]] = {}
    for v in problem.variables:
        lb = -inf if v.lower is None else float(v.lower)
        ub = inf if v.upper is None else float(v.upper)
        variables[v.name] = s.NumVar(lb, ub, v.name)
        bounds[v.name] = (v.lower, v.upper)

    # Rows: lb <= sum(coef * var) <= ub
    rows: Dict[str, pywraplp.Constraint] = {}
    row_specs: Dict[str, Constraint] = {}
    for c in problem.constraints:
        assert c.name is not None
        rhs = float(c.rhs)
        if c.relation == Relation.EQ:
            lb, ub = rhs, rhs
        elif c.relation == Relation.LE:
            lb, ub = -inf, rhs
        else:
            lb, ub = rhs, inf

        row = s.Constraint(lb, ub, c.name)
        for t in c.terms:
            row.SetCoefficient(variables[t.var], float(t.coef))
        rows[c.name] = row
        row_specs[c.name] = c

    # Objective
    obj = s.Objective()
    for t in problem.objective.terms:
        obj.SetCoefficient(variables[t.var], float(t.coef))
    obj.SetOffset(float(problem.objective.constant))
    if problem.objective.sense == Sense.MAXIMIZE:
        obj.SetMaximization()
    else:
        obj.SetMinimization()

    params = pywraplp.MPSolverParameters()
    params.SetDoubleParam(pywraplp.MPSolverParameters.PRIMAL_TOLERANCE, settings.tolerance)
    params.SetDoubleParam(pywraplp.MPSolverParameters.DUAL_TOLERANCE, settings.tolerance)
    params.SetIntegerParam(
        pywraplp.MPSolverParameters.PRESOLVE,
        pywraplp.MPSolverParameters.PRESOLVE_ON
        if settings.presolve
        else pywraplp.MPSolverParameters.PRESOLVE_OFF,
    )

    logger.debug(
        "Built %s model '%s': %d variables, %d constraints",
        settings.backend,
        problem.name or "<unnamed>",
        s.NumVariables(),
        s.NumConstraints(),
    )

    return LPBuild(
        solver=s,
        params=params,
        variables=variables,
        rows=rows,
        bounds=bounds,
        row_specs=row_specs,
    )
