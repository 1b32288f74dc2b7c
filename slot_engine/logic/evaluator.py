"""Win evaluator: paylines, scatter pays, wild multiplier and floors."""
import logging
import math

from slot_engine.config import settings
from slot_engine.logic.models import LineWin, Payline, SpinResult, Symbol, SymbolRole

logger = logging.getLogger(__name__)

# Line value for wild-only lines (3 wilds, or 2+ wilds with no paying match)
WILD_LINE_BASE_VALUE = 5
# Jackpot lines pay this many bets and report it as the multiplier floor
JACKPOT_LINE_MULTIPLIER = 100
MIN_WILDS_FOR_WILD_LINE = 2

# Scatter pays bet * count * SCATTER_PAY_PER_SYMBOL for MIN_SCATTERS or more
MIN_SCATTERS = 3
SCATTER_PAY_PER_SYMBOL = 5
SCATTER_MULTIPLIER_FLOOR = 2

# Each wild anywhere on the grid adds this much to the multiplier
WILD_MULTIPLIER_STEP = 0.5


def count_role(grid: list[list[Symbol]], role: SymbolRole) -> int:
    """Count symbols with the given role across all cells."""
    return sum(1 for row in grid for symbol in row if symbol.role == role)


class WinEvaluator:
    """
    Scores a grid against a set of paylines.

    Scoring is a pure function of grid, bet and paylines; session
    bookkeeping is left to the engine.
    """

    def __init__(
        self,
        max_win_multiplier: float,
        big_win_threshold_x: float = settings.big_win_threshold_x,
    ):
        self.max_win_multiplier = max_win_multiplier
        self.big_win_threshold_x = big_win_threshold_x

    def score(
        self,
        grid: list[list[Symbol]],
        bet: float,
        paylines: list[Payline],
        spin_multiplier: int = 1,
    ) -> SpinResult:
        """
        Score one grid.

        spin_multiplier scales the whole spin (free spins round multiplier)
        before flooring and the cap.

        Returns:
            SpinResult with payout, winning lines and multiplier;
            triggered_bonus is left for the bonus detector.
        """
        line_wins: list[LineWin] = []
        line_total = 0.0
        jackpot_floor = 1

        # 1) Paylines
        for payline in paylines:
            line_win = self.check_line(grid, payline, bet)
            if line_win is None:
                continue
            line_wins.append(line_win)
            line_total += line_win.amount
            if line_win.is_jackpot:
                jackpot_floor = JACKPOT_LINE_MULTIPLIER

        # 2) Scatter pays, anywhere on the grid
        scatter_count = count_role(grid, SymbolRole.SCATTER)
        scatter_payout = 0.0
        scatter_floor = 1
        if scatter_count >= MIN_SCATTERS:
            scatter_payout = bet * scatter_count * SCATTER_PAY_PER_SYMBOL
            scatter_floor = SCATTER_MULTIPLIER_FLOOR

        # 3) Wild multiplier, only when a line won
        wild_count = count_role(grid, SymbolRole.WILD)
        wild_multiplier = 1.0
        if line_wins and wild_count > 0:
            wild_multiplier = 1 + WILD_MULTIPLIER_STEP * wild_count

        # 4) Aggregate, floor to currency unit, cap
        total = (line_total + scatter_payout) * wild_multiplier * spin_multiplier
        total_payout = math.floor(total)
        max_payout = math.floor(bet * self.max_win_multiplier)
        is_capped = False
        if total_payout > max_payout:
            logger.info("Payout %d capped at %d (bet=%s)", total_payout, max_payout, bet)
            total_payout = max_payout
            is_capped = True

        # Floors are reported, not compounded
        applied_multiplier = float(
            max(jackpot_floor, scatter_floor, wild_multiplier * spin_multiplier)
        )

        return SpinResult(
            grid=grid,
            bet=bet,
            winning_payline_ids={line_win.payline_id for line_win in line_wins},
            line_wins=line_wins,
            total_payout=total_payout,
            applied_multiplier=applied_multiplier,
            is_jackpot=jackpot_floor > 1,
            scatter_count=scatter_count,
            wild_count=wild_count,
            scatter_payout=scatter_payout,
            wild_multiplier=wild_multiplier,
            is_big_win=total_payout >= bet * self.big_win_threshold_x,
            is_capped=is_capped,
        )

    def check_line(
        self, grid: list[list[Symbol]], payline: Payline, bet: float
    ) -> LineWin | None:
        """
        Check a single payline.

        Wins when every non-wild symbol shares one line-paying id, or when
        the line holds 2+ wilds (wild base value). Returns None otherwise.
        """
        symbols = [grid[row][col] for row, col in payline.cells]
        wilds = sum(1 for s in symbols if s.is_wild)
        others = {s.id: s for s in symbols if not s.is_wild}

        if len(others) == 1:
            matched = next(iter(others.values()))
            if matched.pays_on_line:
                if matched.role == SymbolRole.JACKPOT:
                    return LineWin(
                        payline_id=payline.id,
                        symbol_id=matched.id,
                        wild_count=wilds,
                        amount=JACKPOT_LINE_MULTIPLIER * bet,
                        is_jackpot=True,
                    )
                return LineWin(
                    payline_id=payline.id,
                    symbol_id=matched.id,
                    wild_count=wilds,
                    amount=matched.base_value * bet,
                )

        if wilds >= MIN_WILDS_FOR_WILD_LINE:
            return LineWin(
                payline_id=payline.id,
                symbol_id="wild",
                wild_count=wilds,
                amount=WILD_LINE_BASE_VALUE * bet,
            )
        return None
