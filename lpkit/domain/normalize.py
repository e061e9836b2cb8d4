from __future__ import annotations

from typing import Dict, List

from lpkit.domain.schema import Constraint, Problem, Term


def normalize_problem(problem: Problem) -> Problem:
    """
    normalization:
    - unnamed constraints get positional names c0, c1, ...
    - repeated variables inside one row (or the objective) are summed,
      first occurrence keeps its position
    - returns a copy; the input problem is left untouched
    """
    taken = {c.name for c in problem.constraints if c.name is not None}

    constraints: List[Constraint] = []
    for idx, c in enumerate(problem.constraints):
        name = c.name if c.name is not None else _positional_name(idx, taken)
        constraints.append(
            c.model_copy(update={"name": name, "terms": merge_terms(c.terms)})
        )

    objective = problem.objective.model_copy(
        update={"terms": merge_terms(problem.objective.terms)}
    )
    return problem.model_copy(
        update={"constraints": constraints, "objective": objective}
    )


def merge_terms(terms: List[Term]) -> List[Term]:
    merged: Dict[str, float] = {}
    for t in terms:
        merged[t.var] = merged.get(t.var, 0.0) + t.coef
    return [Term(var=v, coef=coef) for v, coef in merged.items()]


def _positional_name(idx: int, taken: set) -> str:
    name = f"c{idx}"
    while name in taken:
        name = f"_{name}"
    taken.add(name)
    return name
