from __future__ import annotations

import logging
from typing import Optional

from lpkit.core.config import Settings
from lpkit.core.errors import SolverFailureError
from lpkit.domain.normalize import normalize_problem
from lpkit.domain.schema import Problem, SolveStatus, Solution
from lpkit.domain.validate import validate_problem
from lpkit.solvers.lp.build import build_lp
from lpkit.solvers.lp.extract import extract_solution

logger = logging.getLogger(__name__)


def solve(problem: Problem, settings: Optional[Settings] = None) -> Solution:
    """Solve ``problem`` and return a fresh :class:`Solution`.

    Malformed problems raise ``MalformedProblemError`` before any solver is
    created. Infeasible and unbounded models come back as statuses; a solver
    that stops without a verdict raises ``SolverFailureError``.
    """
    settings = settings or Settings()

    spec = normalize_problem(problem)
    validate_problem(spec)

    built = build_lp(spec, settings)
    result = extract_solution(built, eps=settings.tight_eps)

    if result.status == SolveStatus.ERROR:
        logger.error("Solver failure on '%s': %s", spec.name or "<unnamed>", result.message)
        raise SolverFailureError(result.message or "Solver failed.")
    return result
