"""Bonus trigger detection and bonus round lifecycle."""
from slot_engine.config import settings
from slot_engine.errors import BonusStateError
from slot_engine.logic.evaluator import count_role
from slot_engine.logic.models import BonusKind, BonusRound, Symbol, SymbolRole
from slot_engine.logic.rng import RNGBase

MIN_BONUS_SYMBOLS = 3
MIN_SCATTER_SYMBOLS = 3

# Free spins: 10-24 spins at 2x-4x
FREE_SPINS_MIN = 10
FREE_SPINS_SPREAD = 15
FREE_SPINS_MULTIPLIER_MIN = 2
FREE_SPINS_MULTIPLIER_SPREAD = 3

# Pick bonus: each prize is inflated by up to 2x its base
PICK_BONUS_PICKS = 3
PICK_BONUS_LADDER = (50, 100, 200, 500, 1000, 2000)

# Wheel bonus: discrete multiplier distribution
WHEEL_MULTIPLIERS = (2, 3, 5, 10, 25, 50, 100)
WHEEL_WEIGHTS = (0.30, 0.25, 0.20, 0.15, 0.05, 0.03, 0.02)


class BonusDetector:
    """
    Decides whether a grid triggers a bonus, and builds the round.

    Priority, first match wins:
    1. 3+ bonus symbols -> pick_bonus
    2. 3+ scatter symbols -> free_spins
    3. one RNG draw below bonus_base_chance -> wheel_bonus
    """

    def __init__(self, rng: RNGBase):
        self.rng = rng

    def detect(self, grid: list[list[Symbol]], bonus_base_chance: float) -> BonusKind | None:
        if count_role(grid, SymbolRole.BONUS) >= MIN_BONUS_SYMBOLS:
            return BonusKind.PICK_BONUS
        if count_role(grid, SymbolRole.SCATTER) >= MIN_SCATTER_SYMBOLS:
            return BonusKind.FREE_SPINS
        if self.rng.random() < bonus_base_chance:
            return BonusKind.WHEEL_BONUS
        return None

    def create_round(self, kind: BonusKind) -> BonusRound:
        """Instantiate the round for a triggered bonus kind."""
        if kind == BonusKind.FREE_SPINS:
            return BonusRound(
                kind=kind,
                remaining_spins=FREE_SPINS_MIN + int(self.rng.random() * FREE_SPINS_SPREAD),
                multiplier=FREE_SPINS_MULTIPLIER_MIN
                + int(self.rng.random() * FREE_SPINS_MULTIPLIER_SPREAD),
            )
        if kind == BonusKind.PICK_BONUS:
            return BonusRound(
                kind=kind,
                remaining_picks=PICK_BONUS_PICKS,
                prizes=self._pick_prizes(),
            )
        return BonusRound(kind=kind, wheel_multiplier=self._wheel_multiplier())

    def _pick_prizes(self) -> list[int]:
        return [value + int(self.rng.random() * value) for value in PICK_BONUS_LADDER]

    def _wheel_multiplier(self) -> int:
        r = self.rng.random()
        cumulative = 0.0
        for multiplier, weight in zip(WHEEL_MULTIPLIERS, WHEEL_WEIGHTS):
            cumulative += weight
            if r <= cumulative:
                return multiplier
        return WHEEL_MULTIPLIERS[0]


def select_pick(bonus_round: BonusRound | None, index: int) -> int:
    """
    Reveal one prize of an active pick bonus.

    Raises BONUS_STATE_ERROR if there is no active pick round, no picks are
    left, or the index is out of range or already revealed.
    """
    if bonus_round is None or bonus_round.kind != BonusKind.PICK_BONUS:
        raise BonusStateError("No active pick bonus round.")
    if bonus_round.remaining_picks <= 0:
        raise BonusStateError("No picks remaining.", remaining_picks=0)
    if not 0 <= index < len(bonus_round.prizes):
        raise BonusStateError(
            f"Pick index {index} out of range 0..{len(bonus_round.prizes) - 1}.",
            index=index,
        )
    if index in bonus_round.selected:
        raise BonusStateError(f"Pick index {index} already revealed.", index=index)

    bonus_round.selected.append(index)
    bonus_round.remaining_picks -= 1
    return bonus_round.prizes[index]


def play_free_spin(bonus_round: BonusRound | None, payout: int) -> None:
    """
    Count one free spin against an active free spins round.

    The spin payout, already multiplied by the round multiplier, is added to
    the round total. Raises BONUS_STATE_ERROR without a free spins round or
    with no spins left.
    """
    if bonus_round is None or bonus_round.kind != BonusKind.FREE_SPINS:
        raise BonusStateError("No active free spins round.")
    if bonus_round.remaining_spins <= 0:
        raise BonusStateError("No free spins remaining.", remaining_spins=0)

    bonus_round.remaining_spins -= 1
    bonus_round.spins_played += 1
    bonus_round.total_won += payout


def round_payout(bonus_round: BonusRound) -> int:
    """
    Payout from the round's terminal state.

    - pick_bonus: sum of revealed prizes, first prize if none revealed
    - wheel_bonus: wheel multiplier * fixed wheel stake
    - free_spins: total won across the spins played so far
    """
    if bonus_round.kind == BonusKind.PICK_BONUS:
        if not bonus_round.selected:
            return bonus_round.prizes[0] if bonus_round.prizes else 0
        return sum(bonus_round.prizes[i] for i in bonus_round.selected)
    if bonus_round.kind == BonusKind.WHEEL_BONUS:
        return bonus_round.wheel_multiplier * settings.wheel_bonus_stake
    return bonus_round.total_won
