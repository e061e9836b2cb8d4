import pytest
from pydantic import ValidationError

from lpkit.core.errors import DomainError
from lpkit.models.arbitrage import (
    DEFAULT_QUOTES,
    Quote,
    Trade,
    arbitrage_cycle,
    build_arbitrage_problem,
    conversion_rates,
    currencies,
    format_trades,
    trades,
)
from lpkit.solvers.lp.solver import solve
from tests.feasibility import assert_feasible

# EUR/GBP cross priced inside the other two spreads
CONSISTENT_QUOTES = [
    Quote(base="EUR", quote="USD", bid=1.1000, ask=1.1002),
    Quote(base="GBP", quote="USD", bid=1.2700, ask=1.2702),
    Quote(base="EUR", quote="GBP", bid=0.8660, ask=0.8668),
]


class TestQuotes:
    def test_conversion_rates_use_bid_and_inverse_ask(self):
        rates = conversion_rates(DEFAULT_QUOTES)
        assert rates[("EUR", "USD")] == pytest.approx(1.1000)
        assert rates[("USD", "EUR")] == pytest.approx(1 / 1.1002)
        assert len(rates) == 6

    def test_currencies_in_first_seen_order(self):
        assert currencies(DEFAULT_QUOTES) == ["EUR", "USD", "GBP"]

    def test_bid_above_ask_rejected(self):
        with pytest.raises(ValidationError, match="bid"):
            Quote(base="EUR", quote="USD", bid=1.2, ask=1.1)

    def test_self_pair_rejected(self):
        with pytest.raises(ValidationError, match="itself"):
            Quote(base="USD", quote="USD", bid=1, ask=1)

    def test_duplicate_pair_rejected(self):
        with pytest.raises(DomainError, match="Duplicate quote"):
            conversion_rates(DEFAULT_QUOTES + [DEFAULT_QUOTES[0]])

    def test_profitable_cycle(self):
        gross = arbitrage_cycle(DEFAULT_QUOTES, ["USD", "EUR", "GBP", "USD"])
        assert gross == pytest.approx(1.27 * 0.87 / 1.1002)
        assert gross > 1

    def test_reverse_cycle_loses(self):
        assert arbitrage_cycle(DEFAULT_QUOTES, ["USD", "GBP", "EUR", "USD"]) < 1

    @pytest.mark.parametrize(
        "path,pattern",
        [
            (["USD", "EUR"], "start and end"),
            (["USD"], "start and end"),
            (["USD", "JPY", "USD"], "No quote converts USD into JPY"),
        ],
    )
    def test_bad_cycle(self, path, pattern):
        with pytest.raises(DomainError, match=pattern):
            arbitrage_cycle(DEFAULT_QUOTES, path)


class TestArbitrageModel:
    def test_model_shape(self):
        p = build_arbitrage_problem()

        assert len(p.variables) == 7
        assert p.variable("profit").upper == 10_000
        assert [c.name for c in p.constraints] == [
            "balance[EUR]", "balance[USD]", "balance[GBP]",
        ]
        usd = {t.var: t.coef for t in p.constraints[1].terms}
        assert usd["profit"] == -1.0
        assert usd["x[USD->EUR]"] == -1.0
        assert usd["x[EUR->USD]"] == pytest.approx(1.1)

    def test_capped_profit_binds(self, settings):
        p = build_arbitrage_problem()
        res = solve(p, settings)

        assert res.status == "optimal"
        assert res.objective_value == pytest.approx(10_000, abs=1e-6)
        assert "upper_bound:profit" in [tc.name for tc in res.tight_constraints]
        assert_feasible(p, res, tol=1e-3)

    def test_uncapped_is_unbounded(self, settings):
        res = solve(build_arbitrage_problem(cap=None), settings)
        assert res.status == "unbounded"

    def test_consistent_quotes_have_no_profit(self, settings):
        res = solve(build_arbitrage_problem(CONSISTENT_QUOTES, cap=None), settings)

        assert res.status == "optimal"
        assert res.objective_value == pytest.approx(0.0, abs=1e-6)

    def test_unknown_home_currency(self):
        with pytest.raises(DomainError, match="JPY"):
            build_arbitrage_problem(home="JPY")

    def test_trades_net_to_profit(self, settings):
        res = solve(build_arbitrage_problem(), settings)
        made = trades(DEFAULT_QUOTES, res)

        assert made
        usd_in = sum(t.received for t in made if t.buy == "USD")
        usd_out = sum(t.amount for t in made if t.sell == "USD")
        assert usd_in - usd_out == pytest.approx(10_000, rel=1e-6)

    def test_trades_empty_for_idle_solution(self, settings):
        res = solve(build_arbitrage_problem(CONSISTENT_QUOTES), settings)
        assert trades(CONSISTENT_QUOTES, res) == []

    def test_format_trades(self):
        assert format_trades([]) == "no trades"
        out = format_trades([Trade(sell="USD", buy="EUR", amount=1100.2, received=1000)])
        assert "USD -> EUR" in out
        assert "1,100.20" in out
