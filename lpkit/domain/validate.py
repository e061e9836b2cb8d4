from __future__ import annotations

import math
from collections import defaultdict
from typing import Dict, List, Optional, Set

from lpkit.core.errors import MalformedProblemError
from lpkit.domain.schema import Constraint, Problem, Term, Variable

# Largest magnitude accepted for coefficients, bounds and right-hand sides.
# GLOP loses precision or stops abnormally well before float overflow.
MAX_ABS_VALUE = 1e15


def validate_problem(problem: Problem) -> None:
    if not problem.variables:
        raise MalformedProblemError("Problem must declare at least one variable.")
    if not problem.constraints:
        raise MalformedProblemError("Problem must have at least one constraint.")

    # Unique name validation
    _validate_unique("variable", [v.name for v in problem.variables])
    _validate_unique(
        "constraint", [c.name for c in problem.constraints if c.name is not None]
    )

    # Variable level validation
    for v in problem.variables:
        _validate_bounds(v)

    declared: Set[str] = {v.name for v in problem.variables}

    # Constraint level validation
    for idx, c in enumerate(problem.constraints):
        label = _constraint_label(c, idx)
        _require_finite(c.rhs, f"{label} right-hand side")
        _validate_terms(c.terms, declared, label)

    # Objective level validation
    obj = problem.objective
    _require_finite(obj.constant, "Objective constant")
    _validate_terms(obj.terms, declared, "Objective")


def _validate_unique(kind: str, names: List[str]) -> None:
    if len(set(names)) == len(names):
        return

    counts: Dict[str, int] = defaultdict(int)
    for n in names:
        counts[n] += 1
    dups = sorted([n for n, k in counts.items() if k > 1])

    raise MalformedProblemError(f"Duplicate {kind} names found: {dups}.")


def _validate_bounds(v: Variable) -> None:
    if v.lower is not None:
        _require_finite(v.lower, f"Variable '{v.name}' lower bound")
    if v.upper is not None:
        _require_finite(v.upper, f"Variable '{v.name}' upper bound")
    if v.lower is not None and v.upper is not None and v.lower > v.upper:
        raise MalformedProblemError(
            f"Variable '{v.name}' has lower bound {v.lower} above upper bound {v.upper}."
        )


def _validate_terms(terms: List[Term], declared: Set[str], label: str) -> None:
    for t in terms:
        if t.var not in declared:
            raise MalformedProblemError(
                f"{label} references undeclared variable '{t.var}'."
            )
        _require_finite(t.coef, f"{label} coefficient of '{t.var}'")


def _require_finite(x: float, what: str) -> None:
    if not math.isfinite(x):
        raise MalformedProblemError(f"{what} must be finite, got {x}.")
    if abs(x) > MAX_ABS_VALUE:
        raise MalformedProblemError(
            f"{what} magnitude {x:g} exceeds the supported limit {MAX_ABS_VALUE:g}."
        )


def _constraint_label(c: Constraint, idx: int) -> str:
    name: Optional[str] = c.name
    return f"Constraint '{name}'" if name is not None else f"Constraint #{idx}"
