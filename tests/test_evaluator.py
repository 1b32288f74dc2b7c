"""Win evaluator tests: line rules, scatter pays, wild multiplier, floors and caps."""
import pytest

from slot_engine.logic.evaluator import (
    JACKPOT_LINE_MULTIPLIER,
    WILD_LINE_BASE_VALUE,
    WinEvaluator,
)
from slot_engine.logic.models import Payline
from slot_engine.logic.tables import DEFAULT_PAYLINE_IDS, PAYLINES, PAYLINES_BY_ID

from tests.conftest import make_grid

TOP_ROW = Payline(id=1, cells=((0, 0), (0, 1), (0, 2)))
ALL_LINES = list(PAYLINES)
DEFAULT_LINES = [PAYLINES_BY_ID[pid] for pid in DEFAULT_PAYLINE_IDS]

# No line on the default set pays on this grid
DEAD_GRID = (
    ["cherry", "lemon", "orange"],
    ["plum", "bell", "bar"],
    ["seven", "watermelon", "crown"],
)


@pytest.fixture
def evaluator() -> WinEvaluator:
    return WinEvaluator(max_win_multiplier=1000)


class TestWorkedExamples:
    """Reference outcomes for fixed grids."""

    def test_cherry_top_row(self, evaluator):
        """Three cherries on payline 1 at bet 10 pay 2 * 10."""
        grid = make_grid(
            ["cherry", "cherry", "cherry"],
            ["lemon", "lemon", "orange"],
            ["plum", "bell", "bar"],
        )
        result = evaluator.score(grid, 10, [TOP_ROW])
        assert result.winning_payline_ids == {1}
        assert result.total_payout == 20
        assert result.applied_multiplier == 1
        assert result.is_jackpot is False

    def test_three_scatters_on_diagonal(self, evaluator):
        """3 scatters, no paying line, bet 5: 5 * 3 * 5 with multiplier floor 2."""
        grid = make_grid(
            ["scatter", "lemon", "orange"],
            ["plum", "scatter", "bar"],
            ["seven", "watermelon", "scatter"],
        )
        result = evaluator.score(grid, 5, DEFAULT_LINES)
        assert result.winning_payline_ids == set()
        assert result.total_payout == 75
        assert result.applied_multiplier == 2
        assert result.scatter_count == 3


class TestLineRules:
    """Tests for single payline matching."""

    def test_dead_grid_pays_nothing(self, evaluator):
        result = evaluator.score(make_grid(*DEAD_GRID), 1, DEFAULT_LINES)
        assert result.total_payout == 0
        assert result.line_wins == []
        assert result.applied_multiplier == 1

    def test_wild_substitutes_for_matching_symbol(self, evaluator):
        grid = make_grid(["bell", "wild", "bell"], DEAD_GRID[1], DEAD_GRID[2])
        line_win = evaluator.check_line(grid, TOP_ROW, 2)
        assert line_win.symbol_id == "bell"
        assert line_win.amount == 16

    def test_two_wilds_with_paying_symbol_pay_that_symbol(self, evaluator):
        grid = make_grid(["wild", "wild", "star"], DEAD_GRID[1], DEAD_GRID[2])
        assert evaluator.check_line(grid, TOP_ROW, 1).amount == 75

    def test_two_wilds_with_scatter_pay_wild_base(self, evaluator):
        grid = make_grid(["wild", "scatter", "wild"], DEAD_GRID[1], DEAD_GRID[2])
        line_win = evaluator.check_line(grid, TOP_ROW, 3)
        assert line_win.symbol_id == "wild"
        assert line_win.amount == WILD_LINE_BASE_VALUE * 3

    def test_three_wilds_pay_wild_base(self, evaluator):
        grid = make_grid(["wild", "wild", "wild"], DEAD_GRID[1], DEAD_GRID[2])
        assert evaluator.check_line(grid, TOP_ROW, 1).amount == WILD_LINE_BASE_VALUE

    def test_single_wild_with_mismatch_loses(self, evaluator):
        grid = make_grid(["cherry", "wild", "lemon"], DEAD_GRID[1], DEAD_GRID[2])
        assert evaluator.check_line(grid, TOP_ROW, 1) is None

    @pytest.mark.parametrize("symbol_id", ["scatter", "bonus"])
    def test_non_paying_roles_never_win_lines(self, evaluator, symbol_id):
        grid = make_grid([symbol_id] * 3, DEAD_GRID[1], DEAD_GRID[2])
        assert evaluator.check_line(grid, TOP_ROW, 1) is None

    def test_line_order_does_not_matter(self, evaluator):
        rows = (["wild", "wild", "cherry"], ["cherry", "wild", "wild"], ["wild", "cherry", "wild"])
        amounts = {
            evaluator.check_line(make_grid(row, DEAD_GRID[1], DEAD_GRID[2]), TOP_ROW, 1).amount
            for row in rows
        }
        assert amounts == {2}


class TestJackpot:
    """Tests for jackpot lines."""

    def test_jackpot_line_pays_fixed_multiplier(self, evaluator):
        grid = make_grid(["jackpot", "jackpot", "jackpot"], DEAD_GRID[1], DEAD_GRID[2])
        result = evaluator.score(grid, 2, [TOP_ROW])
        assert result.is_jackpot is True
        assert result.total_payout == JACKPOT_LINE_MULTIPLIER * 2
        assert result.applied_multiplier == JACKPOT_LINE_MULTIPLIER

    def test_jackpot_with_wild_compounds_wild_multiplier(self, evaluator):
        grid = make_grid(["jackpot", "wild", "jackpot"], DEAD_GRID[1], DEAD_GRID[2])
        result = evaluator.score(grid, 1, [TOP_ROW])
        # 100 * 1.5, reported multiplier stays the jackpot floor
        assert result.total_payout == 150
        assert result.wild_multiplier == 1.5
        assert result.applied_multiplier == JACKPOT_LINE_MULTIPLIER


class TestScatterAndWildMultiplier:
    """Tests for grid-wide components."""

    def test_two_scatters_pay_nothing(self, evaluator):
        grid = make_grid(["scatter", "lemon", "orange"], ["plum", "scatter", "bar"], DEAD_GRID[2])
        assert evaluator.score(grid, 5, DEFAULT_LINES).total_payout == 0

    def test_four_scatters(self, evaluator):
        grid = make_grid(
            ["scatter", "lemon", "scatter"],
            ["plum", "bell", "bar"],
            ["scatter", "watermelon", "scatter"],
        )
        result = evaluator.score(grid, 2, DEFAULT_LINES)
        assert result.total_payout == 2 * 4 * 5
        assert result.scatter_payout == 40

    def test_wild_without_winning_line_adds_no_multiplier(self, evaluator):
        grid = make_grid(["cherry", "wild", "lemon"], DEAD_GRID[1], DEAD_GRID[2])
        result = evaluator.score(grid, 1, [TOP_ROW])
        assert result.total_payout == 0
        assert result.wild_multiplier == 1.0

    def test_wild_multiplier_counts_every_wild_on_grid(self, evaluator):
        """Line pays 2; two wilds anywhere on the grid -> x2.0."""
        grid = make_grid(
            ["cherry", "cherry", "cherry"],
            ["plum", "wild", "bar"],
            ["seven", "watermelon", "wild"],
        )
        result = evaluator.score(grid, 1, [TOP_ROW])
        assert result.wild_multiplier == 2.0
        assert result.total_payout == 4
        assert result.applied_multiplier == 2.0

    def test_wild_multiplier_applies_to_scatter_pay_too(self, evaluator):
        grid = make_grid(
            ["cherry", "cherry", "cherry"],
            ["scatter", "wild", "scatter"],
            ["seven", "scatter", "bar"],
        )
        result = evaluator.score(grid, 1, [TOP_ROW])
        # (2 + 1 * 3 * 5) * 1.5 = 25.5 -> 25
        assert result.total_payout == 25
        assert result.applied_multiplier == 2

    def test_payout_floored_to_integer(self, evaluator):
        grid = make_grid(["lemon", "wild", "lemon"], DEAD_GRID[1], DEAD_GRID[2])
        result = evaluator.score(grid, 1, [TOP_ROW])
        # 3 * 1.5 = 4.5 -> 4
        assert result.total_payout == 4
        assert isinstance(result.total_payout, int)


class TestCapsAndBigWins:
    """Tests for max win cap and big win flag."""

    def test_payout_capped_at_max_win_multiplier(self):
        evaluator = WinEvaluator(max_win_multiplier=50)
        grid = make_grid(["star", "star", "star"], DEAD_GRID[1], DEAD_GRID[2])
        result = evaluator.score(grid, 2, [TOP_ROW])
        assert result.total_payout == 100
        assert result.is_capped is True

    def test_big_win_threshold(self, evaluator):
        grid = make_grid(["bar", "bar", "bar"], DEAD_GRID[1], DEAD_GRID[2])
        assert evaluator.score(grid, 1, [TOP_ROW]).is_big_win is True
        grid = make_grid(["bell", "bell", "bell"], DEAD_GRID[1], DEAD_GRID[2])
        assert evaluator.score(grid, 1, [TOP_ROW]).is_big_win is False


class TestSpinMultiplier:
    """Free spins multiply the payout before flooring and the cap."""

    def test_multiplies_line_pay(self, evaluator):
        grid = make_grid(["cherry", "cherry", "cherry"], DEAD_GRID[1], DEAD_GRID[2])
        result = evaluator.score(grid, 1, [TOP_ROW], spin_multiplier=3)
        assert result.total_payout == 6
        assert result.applied_multiplier == 3

    def test_multiplies_scatter_pay(self, evaluator):
        grid = make_grid(
            ["scatter", "lemon", "orange"],
            ["plum", "scatter", "bar"],
            ["seven", "watermelon", "scatter"],
        )
        result = evaluator.score(grid, 5, DEFAULT_LINES, spin_multiplier=2)
        assert result.total_payout == 150

    def test_losing_spin_stays_zero(self, evaluator):
        result = evaluator.score(make_grid(*DEAD_GRID), 1, DEFAULT_LINES, spin_multiplier=4)
        assert result.total_payout == 0

    def test_cap_still_applies(self):
        evaluator = WinEvaluator(max_win_multiplier=50)
        grid = make_grid(["star", "star", "star"], DEAD_GRID[1], DEAD_GRID[2])
        result = evaluator.score(grid, 2, [TOP_ROW], spin_multiplier=2)
        assert result.total_payout == 100
        assert result.is_capped is True


class TestPurityAndLinearity:
    """Scoring depends only on grid, bet and paylines."""

    GRID = (
        ["orange", "wild", "orange"],
        ["orange", "plum", "plum"],
        ["orange", "plum", "bar"],
    )

    def test_same_input_same_payout(self, evaluator):
        grid = make_grid(*self.GRID)
        first = evaluator.score(grid, 3, ALL_LINES)
        second = evaluator.score(grid, 3, ALL_LINES)
        assert first.total_payout == second.total_payout
        assert first.winning_payline_ids == second.winning_payline_ids

    @pytest.mark.parametrize("factor", [2, 3, 10])
    def test_payout_scales_linearly_with_bet(self, evaluator, factor):
        """One wild (x1.5) and even bets keep the payout integral, so no flooring."""
        grid = make_grid(*self.GRID)
        base = evaluator.score(grid, 2, ALL_LINES).total_payout
        assert base > 0
        assert evaluator.score(grid, 2 * factor, ALL_LINES).total_payout == base * factor


class TestSummary:
    def test_summary_uses_symbol_ids(self, evaluator):
        grid = make_grid(["cherry", "cherry", "cherry"], DEAD_GRID[1], DEAD_GRID[2])
        summary = evaluator.score(grid, 1, [TOP_ROW]).summary()
        assert summary["grid"][0] == ["cherry", "cherry", "cherry"]
        assert summary["winning_payline_ids"] == [1]
        assert summary["total_payout"] == 2
        assert summary["triggered_bonus"] is None
