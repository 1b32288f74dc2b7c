"""Reel generator tests: weighted walk, fallback and volatility overrides."""
from collections import Counter

from slot_engine.logic.models import VolatilityTier
from slot_engine.logic.reels import ReelGenerator
from slot_engine.logic.rng import ParkMillerRNG
from slot_engine.logic.rtp import RTPController
from slot_engine.logic.tables import HIGH_VALUE_SYMBOLS, LOW_VALUE_SYMBOLS, SYMBOLS, get_symbol

from tests.conftest import ScriptedRNG

NEUTRAL_WEIGHTS = RTPController().effective_weights(1.0)


def symbol_share(volatility: VolatilityTier, pool_ids: set[str], grids: int = 3000) -> float:
    reels = ReelGenerator(ParkMillerRNG(seed=2024))
    counts: Counter[str] = Counter()
    for _ in range(grids):
        for row in reels.generate_grid(NEUTRAL_WEIGHTS, volatility):
            counts.update(symbol.id for symbol in row)
    return sum(counts[symbol_id] for symbol_id in pool_ids) / (grids * 9)


class TestWeightedDraw:
    """Tests for the cumulative weight walk."""

    def test_zero_draw_returns_first_symbol(self):
        reels = ReelGenerator(ScriptedRNG([0.0]))
        assert reels.draw_weighted(NEUTRAL_WEIGHTS) == SYMBOLS[0]

    def test_top_draw_returns_last_symbol(self):
        reels = ReelGenerator(ScriptedRNG([0.9999]))
        assert reels.draw_weighted(NEUTRAL_WEIGHTS) == SYMBOLS[-1]

    def test_walk_stops_when_running_sum_reaches_draw(self):
        # Two equal weights: r exactly at the first boundary picks the first symbol
        weights = [0.5, 0.5] + [0.0] * (len(SYMBOLS) - 2)
        reels = ReelGenerator(ScriptedRNG([0.5]))
        assert reels.draw_weighted(weights) == SYMBOLS[0]

    def test_short_walk_falls_back_to_last_symbol(self):
        """Weights summing below r never cross it; the last entry is returned."""
        weights = [0.01] * len(SYMBOLS)
        reels = ReelGenerator(ScriptedRNG([0.99]))
        assert reels.draw_weighted(weights) == SYMBOLS[-1]


class TestGenerateGrid:
    """Tests for grid shape and draw counts."""

    def test_grid_is_three_by_three(self):
        reels = ReelGenerator(ParkMillerRNG(seed=1))
        grid = reels.generate_grid(NEUTRAL_WEIGHTS, VolatilityTier.MEDIUM)
        assert len(grid) == 3
        assert all(len(row) == 3 for row in grid)

    def test_medium_uses_one_draw_per_cell(self):
        rng = ScriptedRNG([0.0])
        ReelGenerator(rng).generate_grid(NEUTRAL_WEIGHTS, VolatilityTier.MEDIUM)
        assert rng.calls == 9

    def test_high_override_picks_high_value_symbol(self):
        """Override draw 0.05 < 0.10, then a uniform pick at index 0."""
        rng = ScriptedRNG([0.05, 0.0])
        grid = ReelGenerator(rng).generate_grid(NEUTRAL_WEIGHTS, VolatilityTier.HIGH)
        assert all(symbol == HIGH_VALUE_SYMBOLS[0] for row in grid for symbol in row)
        assert rng.calls == 18

    def test_low_override_picks_low_value_symbol(self):
        """Override draw 0.2 < 0.30, then a uniform pick at the last index."""
        rng = ScriptedRNG([0.2, 0.99] * 9)
        grid = ReelGenerator(rng).generate_grid(NEUTRAL_WEIGHTS, VolatilityTier.LOW)
        assert all(symbol == LOW_VALUE_SYMBOLS[-1] for row in grid for symbol in row)

    def test_no_override_falls_through_to_weighted_draw(self):
        """High tier, override draw misses: the next draw walks the weights."""
        rng = ScriptedRNG([0.5, 0.0] * 9)
        grid = ReelGenerator(rng).generate_grid(NEUTRAL_WEIGHTS, VolatilityTier.HIGH)
        assert all(symbol == SYMBOLS[0] for row in grid for symbol in row)

    def test_override_pools(self):
        assert {s.id for s in HIGH_VALUE_SYMBOLS} == {"diamond", "crown", "star", "jackpot"}
        assert all(0 < s.base_value <= 10 for s in LOW_VALUE_SYMBOLS)
        assert len(LOW_VALUE_SYMBOLS) == 7


class TestCustomCatalogue:
    """Override pools come from the generator's own catalogue."""

    LOW_ONLY = tuple(get_symbol(symbol_id) for symbol_id in ("cherry", "lemon", "orange"))
    MIXED = tuple(get_symbol(symbol_id) for symbol_id in ("cherry", "star", "scatter"))

    def test_pools_built_from_catalogue(self):
        reels = ReelGenerator(ScriptedRNG([0.0]), symbols=self.MIXED)
        assert [s.id for s in reels.high_value_symbols] == ["star"]
        assert [s.id for s in reels.low_value_symbols] == ["cherry"]

    def test_high_override_stays_in_catalogue(self):
        reels = ReelGenerator(ScriptedRNG([0.05, 0.0]), symbols=self.MIXED)
        grid = reels.generate_grid([0.5, 0.3, 0.2], VolatilityTier.HIGH)
        assert all(symbol.id == "star" for row in grid for symbol in row)

    def test_empty_pool_uses_weighted_draw(self):
        """No high value symbols: one draw per cell, no override draw."""
        rng = ScriptedRNG([0.05])
        reels = ReelGenerator(rng, symbols=self.LOW_ONLY)
        grid = reels.generate_grid([0.4, 0.3, 0.3], VolatilityTier.HIGH)
        assert rng.calls == 9
        assert all(symbol.id == "cherry" for row in grid for symbol in row)


class TestVolatilityShape:
    """Statistical shape of the volatility tiers."""

    def test_high_tier_draws_more_high_value_symbols(self):
        pool = {s.id for s in HIGH_VALUE_SYMBOLS}
        assert symbol_share(VolatilityTier.HIGH, pool) > symbol_share(VolatilityTier.MEDIUM, pool) + 0.05

    def test_low_tier_draws_more_low_value_symbols(self):
        pool = {s.id for s in LOW_VALUE_SYMBOLS}
        assert symbol_share(VolatilityTier.LOW, pool) > symbol_share(VolatilityTier.MEDIUM, pool) + 0.03
