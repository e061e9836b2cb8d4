from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Sense(str, Enum):
    MAXIMIZE = "maximize"
    MINIMIZE = "minimize"


class Relation(str, Enum):
    EQ = "=="
    LE = "<="
    GE = ">="


class SolveStatus(str, Enum):
    OPTIMAL = "optimal"
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"
    ERROR = "error"


class StrictBaseModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class FrozenModel(StrictBaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class Variable(FrozenModel):
    name: str = Field(min_length=1)
    lower: Optional[float] = 0.0  # None -> unbounded below
    upper: Optional[float] = None  # None -> unbounded above


class Term(FrozenModel):
    var: str = Field(min_length=1)
    coef: float


class Constraint(FrozenModel):
    name: Optional[str] = Field(default=None, min_length=1)
    terms: List[Term] = Field(default_factory=list)
    relation: Relation
    rhs: float

    def activity(self, values: Dict[str, float]) -> float:
        return sum(t.coef * values.get(t.var, 0.0) for t in self.terms)


class Objective(FrozenModel):
    terms: List[Term] = Field(default_factory=list)
    sense: Sense = Sense.MAXIMIZE
    constant: float = 0.0


class Problem(FrozenModel):
    name: Optional[str] = None
    variables: List[Variable] = Field(default_factory=list)
    constraints: List[Constraint] = Field(default_factory=list)
    objective: Objective

    def variable(self, name: str) -> Variable:
        for v in self.variables:
            if v.name == name:
                return v
        raise KeyError(name)


class TightConstraint(StrictBaseModel):
    name: str
    slack: float


class Solution(StrictBaseModel):
    status: SolveStatus
    objective_value: Optional[float] = None

    values: Dict[str, float] = Field(default_factory=dict)
    duals: Dict[str, float] = Field(default_factory=dict)

    tight_constraints: List[TightConstraint] = Field(default_factory=list)
    message: Optional[str] = None

    @property
    def is_optimal(self) -> bool:
        return self.status == SolveStatus.OPTIMAL
