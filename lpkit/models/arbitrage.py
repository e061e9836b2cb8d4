"""Currency triangular arbitrage.

Each quote prices one currency pair against its base currency: selling one
unit of ``base`` yields ``bid`` units of ``quote``; buying one unit of
``base`` costs ``ask`` units of ``quote``. Trades are chosen so that every
currency except the home one ends flat and the home currency collects the
profit. Without transaction costs a profitable cycle can be repeated forever,
so the model is unbounded unless ``cap`` limits the profit.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from lpkit.core.errors import DomainError
from lpkit.domain.builder import ProblemBuilder
from lpkit.domain.schema import Problem, Relation, Solution
from lpkit.presentation.tables import format_table

DEFAULT_CAP = 10_000.0


class Quote(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    base: str = Field(min_length=1)
    quote: str = Field(min_length=1)
    bid: float = Field(gt=0)
    ask: float = Field(gt=0)

    @model_validator(mode="after")
    def _check_pair(self) -> "Quote":
        if self.base == self.quote:
            raise ValueError(f"Quote pairs '{self.base}' with itself.")
        if self.bid > self.ask:
            raise ValueError(
                f"Quote {self.base}/{self.quote} has bid {self.bid} above ask {self.ask}."
            )
        return self


class Trade(BaseModel):
    sell: str
    buy: str
    amount: float
    received: float


DEFAULT_QUOTES = [
    Quote(base="EUR", quote="USD", bid=1.1000, ask=1.1002),
    Quote(base="GBP", quote="USD", bid=1.2700, ask=1.2702),
    Quote(base="EUR", quote="GBP", bid=0.8700, ask=0.8702),
]


def conversion_rates(quotes: Sequence[Quote]) -> Dict[Tuple[str, str], float]:
    """Units of ``dst`` received per unit of ``src`` sold, keyed by (src, dst)."""
    rates: Dict[Tuple[str, str], float] = {}
    for q in quotes:
        if (q.base, q.quote) in rates:
            raise DomainError(f"Duplicate quote for pair {q.base}/{q.quote}.")
        rates[(q.base, q.quote)] = q.bid
        rates[(q.quote, q.base)] = 1.0 / q.ask
    return rates


def currencies(quotes: Sequence[Quote]) -> List[str]:
    seen: List[str] = []
    for q in quotes:
        for c in (q.base, q.quote):
            if c not in seen:
                seen.append(c)
    return seen


def build_arbitrage_problem(
    quotes: Sequence[Quote] = DEFAULT_QUOTES,
    home: str = "USD",
    cap: Optional[float] = DEFAULT_CAP,
) -> Problem:
    rates = conversion_rates(quotes)
    names = currencies(quotes)
    if home not in names:
        raise DomainError(f"Home currency '{home}' does not appear in any quote.")

    b = ProblemBuilder(name="currency-arbitrage")
    trade_var: Dict[Tuple[str, str], str] = {
        pair: b.add_variable(_trade_name(*pair)) for pair in rates
    }
    profit = b.add_variable("profit", upper=cap)

    # received - sold == profit for home, == 0 for everything else
    for c in names:
        terms: List[Tuple[str, float]] = []
        for (src, dst), var in trade_var.items():
            if dst == c:
                terms.append((var, rates[(src, dst)]))
            if src == c:
                terms.append((var, -1.0))
        if c == home:
            terms.append((profit, -1.0))
        b.add_constraint(terms, Relation.EQ, 0.0, name=f"balance[{c}]")

    b.maximize({profit: 1.0})
    return b.build()


def arbitrage_cycle(quotes: Sequence[Quote], path: Sequence[str]) -> float:
    """Gross multiplier of converting along ``path`` (first == last currency)."""
    if len(path) < 2 or path[0] != path[-1]:
        raise DomainError("A cycle must start and end in the same currency.")
    rates = conversion_rates(quotes)
    gross = 1.0
    for src, dst in zip(path, path[1:]):
        if (src, dst) not in rates:
            raise DomainError(f"No quote converts {src} into {dst}.")
        gross *= rates[(src, dst)]
    return gross


def trades(
    quotes: Sequence[Quote], solution: Solution, eps: float = 1e-9
) -> List[Trade]:
    rates = conversion_rates(quotes)
    out: List[Trade] = []
    for (src, dst), rate in rates.items():
        amount = solution.values.get(_trade_name(src, dst), 0.0)
        if amount > eps:
            out.append(Trade(sell=src, buy=dst, amount=amount, received=amount * rate))
    return out


def format_trades(executed: Sequence[Trade]) -> str:
    if not executed:
        return "no trades"
    rows = [[f"{t.sell} -> {t.buy}", t.amount, t.received] for t in executed]
    return format_table(["trade", "sold", "received"], rows)


def _trade_name(src: str, dst: str) -> str:
    return f"x[{src}->{dst}]"
