"""Reel generator: weighted 3x3 grid draws with volatility overrides."""
from slot_engine.logic.models import Symbol, VolatilityTier
from slot_engine.logic.rng import RNGBase
from slot_engine.logic.tables import (
    GRID_COLS,
    GRID_ROWS,
    HIGH_VALUE_THRESHOLD,
    LOW_VALUE_CEILING,
    SYMBOLS,
)

# Per-cell override chance by volatility tier
HIGH_VOLATILITY_OVERRIDE_CHANCE = 0.10
LOW_VOLATILITY_OVERRIDE_CHANCE = 0.30


class ReelGenerator:
    """Draws grids from the catalogue using the engine's RNG."""

    def __init__(self, rng: RNGBase, symbols: tuple[Symbol, ...] = SYMBOLS):
        self.rng = rng
        self.symbols = symbols
        self.high_value_symbols = tuple(
            s for s in symbols if s.base_value >= HIGH_VALUE_THRESHOLD
        )
        self.low_value_symbols = tuple(
            s for s in symbols if 0 < s.base_value <= LOW_VALUE_CEILING
        )

    def generate_grid(
        self, weights: list[float], volatility: VolatilityTier
    ) -> list[list[Symbol]]:
        """
        Generate a 3x3 grid, grid[row][col].

        Args:
            weights: normalized draw weights aligned with the catalogue
            volatility: tier selecting the per-cell override

        Each of the 9 cells is drawn independently.
        """
        return [
            [self._draw_cell(weights, volatility) for _ in range(GRID_COLS)]
            for _ in range(GRID_ROWS)
        ]

    def _draw_cell(self, weights: list[float], volatility: VolatilityTier) -> Symbol:
        # A tier with an empty override pool falls back to the weighted draw
        if volatility == VolatilityTier.HIGH:
            if self.high_value_symbols and self.rng.random() < HIGH_VOLATILITY_OVERRIDE_CHANCE:
                return self.rng.choice(self.high_value_symbols)
        elif volatility == VolatilityTier.LOW:
            if self.low_value_symbols and self.rng.random() < LOW_VOLATILITY_OVERRIDE_CHANCE:
                return self.rng.choice(self.low_value_symbols)
        return self.draw_weighted(weights)

    def draw_weighted(self, weights: list[float]) -> Symbol:
        """Walk the cumulative weights until the running sum reaches r."""
        r = self.rng.random()
        cumulative = 0.0
        for symbol, weight in zip(self.symbols, weights):
            cumulative += weight
            if cumulative >= r:
                return symbol
        # Float drift left the walk short of r
        return self.symbols[-1]
