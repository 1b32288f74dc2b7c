"""Slot engine: owns RNG, config, session state and the active bonus round."""
import logging
import secrets
from collections.abc import Iterable
from typing import Any

from slot_engine.analytics import volatility_metrics
from slot_engine.config_hash import get_config_hash
from slot_engine.errors import GameError
from slot_engine.logic.bonus import (
    BonusDetector,
    play_free_spin,
    round_payout,
    select_pick,
)
from slot_engine.logic.evaluator import WinEvaluator
from slot_engine.logic.models import (
    BonusKind,
    BonusRound,
    GameConfig,
    SessionState,
    SpinResult,
    Symbol,
)
from slot_engine.logic.reels import ReelGenerator
from slot_engine.logic.rng import LCG_MODULUS, ParkMillerRNG, RNGBase
from slot_engine.logic.rtp import RTPController
from slot_engine.telemetry import (
    BonusCompletedEvent,
    BonusTriggeredEvent,
    SpinProcessedEvent,
    SpinRejectedEvent,
    TelemetryService,
    telemetry_service,
)
from slot_engine.validators import (
    resolve_paylines,
    validate_bet,
    validate_config,
    validate_grid,
    validate_target_rtp,
)

logger = logging.getLogger(__name__)


class SlotEngine:
    """
    Outcome engine for one session.

    Implements:
    - Grid generation with RTP-adjusted weights and volatility overrides
    - Payline, scatter and wild evaluation
    - Bonus trigger detection and bonus round lifecycle, free spins play-down
    - Session bookkeeping (sole owner of SessionState)

    Single caller, single writer: calls must not overlap. Each session gets
    its own engine so RNG streams and state are never shared.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        seed: int | None = None,
        rng: RNGBase | None = None,
        telemetry: TelemetryService | None = None,
    ):
        config = config or GameConfig.from_settings()
        validate_config(config)
        self.config = config

        if rng is None:
            if seed is None:
                # Drawn once so the session stays replayable from engine.seed
                seed = secrets.randbelow(LCG_MODULUS - 1) + 1
            rng = ParkMillerRNG(seed)
        self.rng = rng
        self.telemetry = telemetry or telemetry_service

        self._rtp = RTPController()
        self._reels = ReelGenerator(self.rng)
        self._detector = BonusDetector(self.rng)
        self._state = SessionState()
        self._bonus_round: BonusRound | None = None
        self._last_adjustment: float | None = None
        self._config_hash = get_config_hash(self.config)

        logger.info(
            "Engine created: seed=%s config_hash=%s volatility=%s target_rtp=%s",
            self.seed,
            self._config_hash,
            self.config.volatility_tier.value,
            self.config.target_rtp,
        )

    @property
    def seed(self) -> int:
        return getattr(self.rng, "seed", 0)

    @property
    def config_hash(self) -> str:
        return self._config_hash

    # === Spin path ===

    def generate_grid(self) -> list[list[Symbol]]:
        """Draw a 3x3 grid after folding the current RTP adjustment into the weights."""
        self._last_adjustment = self._rtp.update(self._state, self.config.target_rtp)
        weights = self._rtp.effective_weights(self._rtp.premium_scale)
        return self._reels.generate_grid(weights, self.config.volatility_tier)

    def evaluate(
        self,
        grid: list[list[Symbol]],
        bet: float,
        active_payline_ids: Iterable[int] = (),
        max_bet: float | None = None,
    ) -> SpinResult:
        """
        Score a grid, run bonus detection and record the spin.

        Args:
            grid: 3x3 grid, grid[row][col]
            bet: amount wagered, must be positive
            active_payline_ids: selected lines; empty selects the default lines
            max_bet: caller limit, falls back to config.max_bet

        Returns:
            SpinResult owned by the caller

        While a free spins round is live the call is a free spin: the payout
        is multiplied by the round multiplier, counted against the round and
        paid out with the round rather than recorded as a wager and win. The
        round closes itself after its last spin.

        A new trigger closes any live round first (reported in
        completed_bonus and bonus_payout) and replaces it.

        Validation happens before any RNG draw; on error nothing is mutated.
        """
        paylines = self._validate_spin_input(bet, active_payline_ids, max_bet, grid)

        free_round = self._bonus_round
        if free_round is not None and free_round.kind != BonusKind.FREE_SPINS:
            free_round = None
        spin_multiplier = free_round.multiplier if free_round is not None else 1

        # 1) Score
        evaluator = WinEvaluator(max_win_multiplier=self.config.max_win_multiplier)
        result = evaluator.score(grid, bet, paylines, spin_multiplier=spin_multiplier)

        # 2) Free spins play-down
        if free_round is not None:
            result.is_free_spin = True
            play_free_spin(free_round, result.total_payout)
            if free_round.remaining_spins == 0:
                self._close_bonus_round(result)

        # 3) Bonus detection, a trigger replaces any live round
        kind = self._detector.detect(grid, self.config.bonus_base_chance)
        if kind is not None:
            if self._bonus_round is not None:
                self._close_bonus_round(result)
            self._start_bonus_round(kind)
            result.triggered_bonus = kind

        # 4) Session bookkeeping, exactly once
        if result.is_free_spin:
            self._state.record_free_spin(
                is_big_win=result.is_big_win,
                is_jackpot=result.is_jackpot,
            )
        else:
            self._state.record_spin(
                bet=bet,
                payout=result.total_payout,
                is_big_win=result.is_big_win,
                is_jackpot=result.is_jackpot,
            )
        logger.debug("Spin %d evaluated: %s", self._state.spins_played, result.summary())

        if result.triggered_bonus is not None:
            self.telemetry.emit_bonus_triggered(
                BonusTriggeredEvent(
                    seed=self.seed,
                    spin_number=self._state.spins_played,
                    kind=result.triggered_bonus.value,
                )
            )
        self.telemetry.emit_spin_processed(
            SpinProcessedEvent(
                seed=self.seed,
                spin_number=self._state.spins_played,
                config_hash=self._config_hash,
                bet=bet,
                active_payline_ids=[line.id for line in paylines],
                total_payout=result.total_payout,
                applied_multiplier=result.applied_multiplier,
                is_jackpot=result.is_jackpot,
                triggered_bonus=result.triggered_bonus.value if result.triggered_bonus else None,
                rtp_adjustment=self._last_adjustment,
                premium_scale=self._rtp.premium_scale,
                is_free_spin=result.is_free_spin,
            )
        )
        return result

    def spin(
        self,
        bet: float,
        active_payline_ids: Iterable[int] = (),
        max_bet: float | None = None,
    ) -> SpinResult:
        """Validate, generate a grid and evaluate it."""
        active_payline_ids = list(active_payline_ids)
        self._validate_spin_input(bet, active_payline_ids, max_bet)
        grid = self.generate_grid()
        return self.evaluate(grid, bet, active_payline_ids, max_bet)

    def detect_bonus(self, grid: list[list[Symbol]]) -> BonusKind | None:
        """Standalone detection. Consumes a draw on the chance rule; starts no round."""
        return self._detector.detect(grid, self.config.bonus_base_chance)

    def _validate_spin_input(
        self,
        bet: float,
        active_payline_ids: Iterable[int],
        max_bet: float | None,
        grid: list[list[Symbol]] | None = None,
    ):
        limit = max_bet if max_bet is not None else self.config.max_bet
        try:
            validate_bet(bet, limit)
            if grid is not None:
                validate_grid(grid)
            return resolve_paylines(active_payline_ids)
        except GameError as e:
            logger.debug("Spin rejected: %s", e.message)
            self.telemetry.emit_spin_rejected(
                SpinRejectedEvent(seed=self.seed, reason=e.code.value, message=e.message)
            )
            raise

    # === Bonus rounds ===

    def _start_bonus_round(self, kind: BonusKind) -> None:
        self._bonus_round = self._detector.create_round(kind)
        self._state.bonus_round_count += 1
        logger.debug("Bonus round started: %s", self._bonus_round)

    def get_bonus_round(self) -> BonusRound | None:
        """Copy of the active bonus round, if any."""
        if self._bonus_round is None:
            return None
        return self._bonus_round.model_copy(deep=True)

    def select_pick(self, index: int) -> int:
        """Reveal one prize of the active pick bonus."""
        return select_pick(self._bonus_round, index)

    def complete_bonus_round(self) -> int:
        """
        Close the active bonus round and return its payout.

        No active round is a no-op returning 0. A free spins round closed
        early pays what its played spins have won.
        """
        if self._bonus_round is None:
            return 0
        return self._close_bonus_round()

    def _close_bonus_round(self, result: SpinResult | None = None) -> int:
        bonus_round = self._bonus_round
        payout = round_payout(bonus_round)
        bonus_round.is_active = False
        self._bonus_round = None

        if result is not None:
            result.completed_bonus = bonus_round.kind
            result.bonus_payout = payout
        logger.debug("Bonus round completed: %s payout=%d", bonus_round.kind.value, payout)
        self.telemetry.emit_bonus_completed(
            BonusCompletedEvent(seed=self.seed, kind=bonus_round.kind.value, payout=payout)
        )
        return payout

    # === Session & config ===

    def get_session_state(self) -> SessionState:
        """Read-only snapshot of the session counters."""
        return self._state.model_copy(deep=True)

    def current_rtp(self) -> float:
        """Realized RTP, 0 on an empty session."""
        if self._state.total_wagered > 0:
            return self._state.total_won / self._state.total_wagered
        return 0.0

    def volatility_metrics(self) -> dict[str, Any]:
        return volatility_metrics(self._state)

    def adjust_target_rtp(self, new_rtp: float) -> None:
        """Change the target RTP. Out-of-range values keep the prior target."""
        validate_target_rtp(new_rtp)
        old_rtp = self.config.target_rtp
        self.config = self.config.model_copy(update={"target_rtp": float(new_rtp)})
        self._config_hash = get_config_hash(self.config)
        logger.info("Target RTP adjusted: %s -> %s", old_rtp, new_rtp)

    def reset(self) -> None:
        """Zero session state, controller scale and any bonus round. RNG is not reseeded."""
        self._state.reset_for_new_session()
        self._rtp.reset()
        self._bonus_round = None
        self._last_adjustment = None
        logger.info("Engine reset: seed=%s", self.seed)
