"""Plain-text rendering of tables and solutions."""

from __future__ import annotations

from typing import List, Optional, Sequence

from lpkit.domain.schema import Problem, Solution


def format_table(headers: Sequence[str], rows: Sequence[Sequence[object]]) -> str:
    cells = [[str(h) for h in headers]] + [[_cell(v) for v in row] for row in rows]
    widths = [max(len(r[i]) for r in cells) for i in range(len(headers))]

    def line(row: List[str]) -> str:
        # first column left-aligned, numbers right-aligned
        parts = [row[0].ljust(widths[0])]
        parts += [c.rjust(w) for c, w in zip(row[1:], widths[1:])]
        return "  ".join(parts).rstrip()

    rule = "  ".join("-" * w for w in widths)
    return "\n".join([line(cells[0]), rule] + [line(r) for r in cells[1:]])


def format_solution(problem: Problem, solution: Solution) -> str:
    title = problem.name or "problem"
    head = f"{title}: {solution.status.value}"
    if solution.message:
        head += f" ({solution.message})"
    if not solution.is_optimal:
        return head

    lines = [head, f"objective = {_num(solution.objective_value)}", ""]
    rows = [
        [
            v.name,
            solution.values.get(v.name, 0.0),
            _bound(v.lower, "-inf"),
            _bound(v.upper, "inf"),
        ]
        for v in problem.variables
    ]
    lines.append(format_table(["variable", "value", "lower", "upper"], rows))

    if solution.tight_constraints:
        lines.append("")
        lines.append("binding: " + ", ".join(tc.name for tc in solution.tight_constraints))
    return "\n".join(lines)


def _cell(v: object) -> str:
    if isinstance(v, float):
        return _num(v)
    return str(v)


def _num(x: Optional[float]) -> str:
    if x is None:
        return "-"
    # avoid printing -0.00
    return f"{x:,.2f}" if abs(x) >= 0.005 else "0.00"


def _bound(x: Optional[float], missing: str) -> str:
    return missing if x is None else _num(x)
