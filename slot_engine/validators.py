"""Input validators for bets, payline selections and game config."""
import math
from collections.abc import Iterable

from slot_engine.errors import (
    ConfigurationError,
    InvalidBet,
    InvalidGrid,
    InvalidPaylineSelection,
)
from slot_engine.logic.models import GameConfig, Payline, Symbol, VolatilityTier
from slot_engine.logic.tables import (
    DEFAULT_PAYLINE_IDS,
    GRID_COLS,
    GRID_ROWS,
    PAYLINES_BY_ID,
)


def validate_bet(bet: float, max_bet: float | None = None) -> None:
    """
    Validate bet amount.

    Raises INVALID_BET if bet is not a positive finite number or exceeds
    max_bet when one is given.
    """
    if isinstance(bet, bool) or not isinstance(bet, (int, float)):
        raise InvalidBet(f"Bet amount {bet!r} is not a number.", bet=repr(bet))
    if not math.isfinite(bet) or bet <= 0:
        raise InvalidBet(f"Bet amount {bet} must be positive.", bet=bet)
    if max_bet is not None and bet > max_bet:
        raise InvalidBet(
            f"Bet amount {bet} exceeds maximum {max_bet}.",
            bet=bet,
            max_bet=max_bet,
        )


def resolve_paylines(active_payline_ids: Iterable[int]) -> list[Payline]:
    """
    Map selected payline ids to paylines.

    An empty selection means the default lines. Raises
    INVALID_PAYLINE_SELECTION for any id not in the payline table.
    """
    ids = list(active_payline_ids) or list(DEFAULT_PAYLINE_IDS)
    unknown = [pid for pid in ids if pid not in PAYLINES_BY_ID]
    if unknown:
        raise InvalidPaylineSelection(
            f"Unknown payline ids: {unknown}. Valid: 1..{len(PAYLINES_BY_ID)}",
            unknown=unknown,
        )
    # Duplicate ids in a selection are evaluated once
    return [PAYLINES_BY_ID[pid] for pid in dict.fromkeys(ids)]


def validate_grid(grid: list[list[Symbol]]) -> None:
    """Raises INVALID_GRID unless grid is GRID_ROWS rows of GRID_COLS symbols."""
    if not isinstance(grid, (list, tuple)) or len(grid) != GRID_ROWS:
        raise InvalidGrid(f"Grid must have {GRID_ROWS} rows.")
    for row_index, row in enumerate(grid):
        if not isinstance(row, (list, tuple)) or len(row) != GRID_COLS:
            raise InvalidGrid(
                f"Grid row {row_index} must have {GRID_COLS} cells.",
                row=row_index,
            )
        if not all(isinstance(cell, Symbol) for cell in row):
            raise InvalidGrid(f"Grid row {row_index} holds a non-symbol cell.", row=row_index)


def validate_target_rtp(target_rtp: float) -> None:
    """Raises CONFIGURATION_ERROR unless 0 < target_rtp < 1."""
    if not isinstance(target_rtp, (int, float)) or not 0 < target_rtp < 1:
        raise ConfigurationError(
            f"Target RTP {target_rtp} must be in (0, 1).",
            target_rtp=target_rtp,
        )


def validate_config(config: GameConfig) -> None:
    """Run all range checks on a game config."""
    validate_target_rtp(config.target_rtp)

    if config.volatility_tier not in tuple(VolatilityTier):
        raise ConfigurationError(
            f"Unknown volatility tier {config.volatility_tier!r}.",
        )
    if not config.max_win_multiplier > 0:
        raise ConfigurationError(
            f"Max win multiplier {config.max_win_multiplier} must be positive.",
        )
    if not 0 <= config.bonus_base_chance <= 1:
        raise ConfigurationError(
            f"Bonus base chance {config.bonus_base_chance} must be in [0, 1].",
        )
    if config.max_bet is not None and not config.max_bet > 0:
        raise ConfigurationError(f"Max bet {config.max_bet} must be positive.")
