from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from lpkit.core.errors import MalformedProblemError
from lpkit.domain.schema import (
    Constraint,
    Objective,
    Problem,
    Relation,
    Sense,
    Term,
    Variable,
)

TermsLike = Union[Mapping[str, float], Sequence[Tuple[str, float]]]


class ProblemBuilder:
    """Explicit declaration of variables, rows and the objective.

    Declaration order is kept: variables and constraints appear in the built
    problem in the order they were added. Reference checks (undeclared
    variables, non-finite numbers) are left to ``validate_problem`` so that a
    built problem and a hand-written one are checked the same way.
    """

    def __init__(self, name: Optional[str] = None) -> None:
        self.name = name
        self._variables: Dict[str, Variable] = {}
        self._constraints: List[Constraint] = []
        self._objective: Optional[Objective] = None

    def add_variable(
        self, name: str, lower: Optional[float] = 0.0, upper: Optional[float] = None
    ) -> str:
        if name in self._variables:
            raise MalformedProblemError(f"Variable '{name}' is already declared.")
        self._variables[name] = Variable(name=name, lower=lower, upper=upper)
        return name

    def add_variables(
        self,
        names: Iterable[str],
        lower: Optional[float] = 0.0,
        upper: Optional[float] = None,
    ) -> List[str]:
        return [self.add_variable(n, lower=lower, upper=upper) for n in names]

    def add_constraint(
        self,
        terms: TermsLike,
        relation: Union[Relation, str],
        rhs: float,
        name: Optional[str] = None,
    ) -> "ProblemBuilder":
        self._constraints.append(
            Constraint(
                name=name,
                terms=_to_terms(terms),
                relation=Relation(relation),
                rhs=rhs,
            )
        )
        return self

    def maximize(self, terms: TermsLike, constant: float = 0.0) -> "ProblemBuilder":
        return self._set_objective(terms, Sense.MAXIMIZE, constant)

    def minimize(self, terms: TermsLike, constant: float = 0.0) -> "ProblemBuilder":
        return self._set_objective(terms, Sense.MINIMIZE, constant)

    def _set_objective(
        self, terms: TermsLike, sense: Sense, constant: float
    ) -> "ProblemBuilder":
        if self._objective is not None:
            raise MalformedProblemError("Objective is already set.")
        self._objective = Objective(
            terms=_to_terms(terms), sense=sense, constant=constant
        )
        return self

    def build(self) -> Problem:
        if self._objective is None:
            raise MalformedProblemError("Problem has no objective.")
        return Problem(
            name=self.name,
            variables=list(self._variables.values()),
            constraints=list(self._constraints),
            objective=self._objective,
        )


def _to_terms(terms: TermsLike) -> List[Term]:
    pairs = terms.items() if isinstance(terms, Mapping) else terms
    return [Term(var=var, coef=coef) for var, coef in pairs]
