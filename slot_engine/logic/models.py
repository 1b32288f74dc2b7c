"""Game records: symbols, paylines, config, session state and spin results."""
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from slot_engine.config import settings
from slot_engine.errors import ConfigurationError


class SymbolRole(str, Enum):
    """Special role a symbol plays in evaluation."""
    NORMAL = "normal"
    WILD = "wild"
    SCATTER = "scatter"
    BONUS = "bonus"
    JACKPOT = "jackpot"


class VolatilityTier(str, Enum):
    """Variance profile of the reel generator."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class BonusKind(str, Enum):
    """Bonus feature kinds."""
    FREE_SPINS = "free_spins"
    PICK_BONUS = "pick_bonus"
    WHEEL_BONUS = "wheel_bonus"


class Symbol(BaseModel):
    """Catalogue entry. rarity_weight is relative, normalized at draw time."""
    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    base_value: float = Field(ge=0)
    rarity_weight: float = Field(gt=0, le=1)
    role: SymbolRole = SymbolRole.NORMAL

    @property
    def is_wild(self) -> bool:
        return self.role == SymbolRole.WILD

    @property
    def pays_on_line(self) -> bool:
        """Normal symbols with a value, and the jackpot, pay on paylines."""
        if self.role == SymbolRole.JACKPOT:
            return True
        return self.role == SymbolRole.NORMAL and self.base_value > 0


class Payline(BaseModel):
    """Three (row, col) cells over the 3x3 grid."""
    model_config = ConfigDict(frozen=True)

    id: int
    cells: tuple[tuple[int, int], tuple[int, int], tuple[int, int]]
    name: str = ""


class GameConfig(BaseModel):
    """
    Engine configuration.

    Range checks live in validators.validate_config so that bad values
    surface as ConfigurationError rather than a pydantic ValidationError.
    """
    target_rtp: float = 0.96
    volatility_tier: VolatilityTier = VolatilityTier.MEDIUM
    max_win_multiplier: float = 1000.0
    bonus_base_chance: float = 0.05
    max_bet: float | None = None

    @classmethod
    def from_settings(cls) -> "GameConfig":
        """Build the default config from environment settings."""
        try:
            return cls(
                target_rtp=settings.target_rtp,
                volatility_tier=settings.volatility_tier,
                max_win_multiplier=settings.max_win_multiplier,
                bonus_base_chance=settings.bonus_base_chance,
                max_bet=settings.max_bet,
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings: {e}") from e


class SessionState(BaseModel):
    """
    Running counters for one session.

    Owned by the engine and mutated once per completed spin:
    - free spins only bump free_spins_played and the big win / jackpot counts
    - total_wagered / total_won feed the RTP controller
    - current_win_streak / max_win_streak track consecutive paying spins
    - big_win_count / bonus_round_count / jackpot_count for reporting
    """
    balance: float = settings.starting_balance
    total_wagered: float = 0.0
    total_won: float = 0.0
    spins_played: int = 0
    big_win_count: int = 0
    bonus_round_count: int = 0
    jackpot_count: int = 0
    current_win_streak: int = 0
    max_win_streak: int = 0
    last_win_amount: int = 0
    free_spins_played: int = 0

    def record_spin(self, bet: float, payout: int, is_big_win: bool, is_jackpot: bool) -> None:
        """Apply one completed spin."""
        self.total_wagered += bet
        self.total_won += payout
        self.spins_played += 1
        self.last_win_amount = payout

        if payout > 0:
            self.current_win_streak += 1
        else:
            self.current_win_streak = 0
        self.max_win_streak = max(self.max_win_streak, self.current_win_streak)

        if is_big_win:
            self.big_win_count += 1
        if is_jackpot:
            self.jackpot_count += 1

    def record_free_spin(self, is_big_win: bool, is_jackpot: bool) -> None:
        """Apply one free spin. Wager, winnings and streaks are left alone."""
        self.free_spins_played += 1
        if is_big_win:
            self.big_win_count += 1
        if is_jackpot:
            self.jackpot_count += 1

    def reset_for_new_session(self) -> None:
        """Zero every counter."""
        self.balance = settings.starting_balance
        self.total_wagered = 0.0
        self.total_won = 0.0
        self.spins_played = 0
        self.big_win_count = 0
        self.bonus_round_count = 0
        self.jackpot_count = 0
        self.current_win_streak = 0
        self.max_win_streak = 0
        self.last_win_amount = 0
        self.free_spins_played = 0


class LineWin(BaseModel):
    """Payout detail for one winning payline."""
    payline_id: int
    symbol_id: str
    wild_count: int = 0
    amount: float = 0.0
    is_jackpot: bool = False


class BonusRound(BaseModel):
    """Active bonus feature. At most one is live per engine."""
    kind: BonusKind
    is_active: bool = True

    # free_spins
    remaining_spins: int = 0
    multiplier: int = 1
    spins_played: int = 0
    total_won: int = 0

    # pick_bonus
    remaining_picks: int = 0
    prizes: list[int] = Field(default_factory=list)
    selected: list[int] = Field(default_factory=list)

    # wheel_bonus
    wheel_multiplier: int = 0


class SpinResult(BaseModel):
    """Result of evaluating one grid."""
    grid: list[list[Symbol]] = Field(default_factory=list)  # 3x3, grid[row][col]
    bet: float = 0.0
    winning_payline_ids: set[int] = Field(default_factory=set)
    line_wins: list[LineWin] = Field(default_factory=list)
    total_payout: int = 0
    applied_multiplier: float = 1.0
    is_jackpot: bool = False
    triggered_bonus: BonusKind | None = None

    # Bonus round bookkeeping
    is_free_spin: bool = False
    completed_bonus: BonusKind | None = None
    bonus_payout: int = 0

    # Audit fields
    scatter_count: int = 0
    wild_count: int = 0
    scatter_payout: float = 0.0
    wild_multiplier: float = 1.0
    is_big_win: bool = False
    is_capped: bool = False

    def symbol_ids(self) -> list[list[str]]:
        """Grid as symbol ids, for logging and audit rows."""
        return [[symbol.id for symbol in row] for row in self.grid]

    def summary(self) -> dict[str, Any]:
        """Compact dict for telemetry."""
        return {
            "grid": self.symbol_ids(),
            "bet": self.bet,
            "winning_payline_ids": sorted(self.winning_payline_ids),
            "total_payout": self.total_payout,
            "applied_multiplier": self.applied_multiplier,
            "is_jackpot": self.is_jackpot,
            "triggered_bonus": self.triggered_bonus.value if self.triggered_bonus else None,
            "is_free_spin": self.is_free_spin,
            "bonus_payout": self.bonus_payout,
        }
