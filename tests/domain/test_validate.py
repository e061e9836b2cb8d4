import pytest

from lpkit.core.errors import DomainError, MalformedProblemError
from lpkit.domain.schema import Constraint, Objective, Problem, Relation, Term, Variable
from lpkit.domain.validate import validate_problem
from tests.problem_factory import ProblemFactory


class TestValidate:
    @pytest.mark.parametrize("problem", ProblemFactory.valid())
    def test_validate_problem_valid(self, problem: Problem):
        validate_problem(problem)

    @pytest.mark.parametrize(
        "problem,pattern",
        [
            (ProblemFactory.no_variables(), r"at least one variable"),
            (ProblemFactory.no_constraints(), r"at least one constraint"),
            (ProblemFactory.duplicate_variables(), r"Duplicate variable names found: \['x'\]"),
            (ProblemFactory.duplicate_constraints(), r"Duplicate constraint names found: \['c'\]"),
            (
                ProblemFactory.undeclared_in_constraint(),
                r"Constraint 'c' references undeclared variable 'ghost'",
            ),
            (
                ProblemFactory.undeclared_in_objective(),
                r"Objective references undeclared variable 'ghost'",
            ),
            (ProblemFactory.non_finite_coefficient(), r"coefficient of 'x' must be finite"),
            (
                ProblemFactory.huge_coefficient(),
                r"coefficient of 'x' magnitude 1e\+300 exceeds the supported limit 1e\+15",
            ),
            (ProblemFactory.non_finite_rhs(), r"right-hand side must be finite"),
            (ProblemFactory.non_finite_bound(), r"'x' upper bound must be finite"),
            (ProblemFactory.inverted_bounds(), r"lower bound 3.0 above upper bound 1.0"),
        ],
    )
    def test_validate_problem_malformed(self, problem: Problem, pattern: str):
        with pytest.raises(MalformedProblemError, match=pattern):
            validate_problem(problem)

    def test_malformed_is_a_domain_error(self):
        with pytest.raises(DomainError):
            validate_problem(ProblemFactory.no_variables())

    def test_unnamed_constraint_reported_by_position(self):
        p = Problem(
            variables=[Variable(name="x")],
            constraints=[
                Constraint(terms=[Term(var="x", coef=1)], relation=Relation.LE, rhs=1),
                Constraint(terms=[Term(var="y", coef=1)], relation=Relation.LE, rhs=1),
            ],
            objective=Objective(terms=[Term(var="x", coef=1)]),
        )
        with pytest.raises(MalformedProblemError, match=r"Constraint #1 references"):
            validate_problem(p)

    def test_non_finite_objective_constant(self):
        p = ProblemFactory.two_var_max().model_copy(
            update={"objective": Objective(terms=[], constant=float("-inf"))}
        )
        with pytest.raises(MalformedProblemError, match=r"Objective constant"):
            validate_problem(p)

    def test_equal_bounds_are_allowed(self):
        p = Problem(
            variables=[Variable(name="x", lower=2, upper=2)],
            constraints=[
                Constraint(
                    name="c", terms=[Term(var="x", coef=1)], relation=Relation.LE, rhs=5
                )
            ],
            objective=Objective(terms=[Term(var="x", coef=1)]),
        )
        validate_problem(p)

    def test_values_at_the_magnitude_limit_are_allowed(self):
        p = Problem(
            variables=[Variable(name="x", upper=1e15)],
            constraints=[
                Constraint(
                    name="c", terms=[Term(var="x", coef=-1e15)], relation=Relation.LE, rhs=5
                )
            ],
            objective=Objective(terms=[Term(var="x", coef=1)]),
        )
        validate_problem(p)

    def test_extreme_bound_is_rejected(self):
        p = Problem(
            variables=[Variable(name="x", lower=-1e20)],
            constraints=[
                Constraint(name="c", terms=[Term(var="x", coef=1)], relation=Relation.LE, rhs=5)
            ],
            objective=Objective(terms=[Term(var="x", coef=1)]),
        )
        with pytest.raises(MalformedProblemError, match=r"'x' lower bound magnitude"):
            validate_problem(p)
