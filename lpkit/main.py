from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from lpkit.core.config import Settings
from lpkit.core.errors import DomainError, SolverFailureError
from lpkit.core.log import setup_logging
from lpkit.models.arbitrage import (
    DEFAULT_CAP,
    DEFAULT_QUOTES,
    build_arbitrage_problem,
    format_trades,
    trades,
)
from lpkit.models.financing import (
    build_financing_problem,
    financing_plan,
    format_financing_plan,
)
from lpkit.presentation.tables import format_solution
from lpkit.solvers.lp.solver import solve

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lpkit", description="Solve the financing and arbitrage LP exercises."
    )
    parser.add_argument(
        "--tolerance", type=float, default=None, help="Solver feasibility tolerance"
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    )

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("financing", help="Six-month short-term financing plan")

    arb = sub.add_parser("arbitrage", help="Triangular currency arbitrage")
    arb.add_argument("--home", default="USD")
    arb.add_argument("--cap", type=float, default=DEFAULT_CAP, help="Profit cap")
    arb.add_argument("--no-cap", action="store_true", help="Drop the profit cap")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.tolerance is not None:
        overrides["tolerance"] = args.tolerance
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    try:
        base = Settings.from_env()
        settings = Settings.model_validate({**base.model_dump(), **overrides})
    except ValidationError as exc:
        print(f"error: invalid settings: {exc}", file=sys.stderr)
        return 2
    setup_logging(settings)

    try:
        if args.command == "financing":
            problem = build_financing_problem()
            solution = solve(problem, settings)
            print(format_solution(problem, solution))
            if solution.is_optimal:
                print()
                print(format_financing_plan(financing_plan(solution)))
        else:
            cap = None if args.no_cap else args.cap
            problem = build_arbitrage_problem(DEFAULT_QUOTES, home=args.home, cap=cap)
            solution = solve(problem, settings)
            print(format_solution(problem, solution))
            if solution.is_optimal:
                print()
                print(format_trades(trades(DEFAULT_QUOTES, solution)))
    except DomainError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except SolverFailureError as exc:
        logger.error("Solver failed: %s", exc)
        print(f"solver failure: {exc}", file=sys.stderr)
        return 1
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":  # pragma: no cover
    run()
