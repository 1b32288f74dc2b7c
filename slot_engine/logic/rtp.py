"""RTP controller: steers realized return toward the configured target."""
from slot_engine.logic.models import SessionState, Symbol, SymbolRole
from slot_engine.logic.tables import HIGH_VALUE_THRESHOLD, SYMBOLS

ADJUSTMENT_GAIN = 0.5
ADJUSTMENT_MIN = 0.5
ADJUSTMENT_MAX = 2.0

# Bounds of the accumulated premium weight scale
PREMIUM_SCALE_MIN = 0.05
PREMIUM_SCALE_MAX = 4.0


def is_premium(symbol: Symbol) -> bool:
    """Symbols whose draw weight follows the controller."""
    if symbol.role in (SymbolRole.WILD, SymbolRole.JACKPOT):
        return True
    return symbol.base_value >= HIGH_VALUE_THRESHOLD


class RTPController:
    """
    Trend controller over the symbol weights.

    Each grid draw computes the clamped proportional adjustment from the
    session's realized RTP and folds it into a running premium scale:

        premium_scale = clamp(premium_scale * adjustment, 0.05, 4.0)

    The scale multiplies the weights of premium symbols only; every other
    symbol keeps its catalogue weight and the set is renormalized. A cold
    session keeps raising the premium share until realized RTP reaches the
    target, a hot one keeps lowering it. No single spin outcome is forced.

    Targets between roughly 0.80 and 0.99 are reachable on every volatility
    tier. Below that the scale pins at PREMIUM_SCALE_MIN and the game pays
    its floor RTP.
    """

    def __init__(self, symbols: tuple[Symbol, ...] = SYMBOLS):
        self.symbols = symbols
        self._premium = [is_premium(symbol) for symbol in symbols]
        self.premium_scale = 1.0

    @staticmethod
    def current_rtp(state: SessionState, target_rtp: float) -> float:
        """Realized RTP, or the target itself on an empty session."""
        if state.total_wagered > 0:
            return state.total_won / state.total_wagered
        return target_rtp

    def adjustment(self, state: SessionState, target_rtp: float) -> float:
        """clamp(1 + (target - current) * 0.5, 0.5, 2.0)."""
        current = self.current_rtp(state, target_rtp)
        raw = 1 + (target_rtp - current) * ADJUSTMENT_GAIN
        return max(ADJUSTMENT_MIN, min(ADJUSTMENT_MAX, raw))

    def update(self, state: SessionState, target_rtp: float) -> float:
        """Fold one adjustment into the premium scale. Returns the adjustment."""
        adjustment = self.adjustment(state, target_rtp)
        scaled = self.premium_scale * adjustment
        self.premium_scale = max(PREMIUM_SCALE_MIN, min(PREMIUM_SCALE_MAX, scaled))
        return adjustment

    def reset(self) -> None:
        self.premium_scale = 1.0

    def adjusted_weights(self, premium_scale: float) -> list[float]:
        """Raw (unnormalized) weights for a premium scale. Always positive."""
        return [
            symbol.rarity_weight * premium_scale if premium else symbol.rarity_weight
            for symbol, premium in zip(self.symbols, self._premium)
        ]

    def effective_weights(self, premium_scale: float) -> list[float]:
        """Adjusted weights renormalized to sum to 1."""
        weights = self.adjusted_weights(premium_scale)
        total = 0.0
        for weight in weights:
            total += weight
        return [weight / total for weight in weights]
