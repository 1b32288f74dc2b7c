"""Session analytics helpers for reporting layers."""
from typing import Any

from slot_engine.logic.models import SessionState

# Rough variance proxy: average win per spin scaled by this factor
VARIANCE_FACTOR = 2.5


def expected_value(bet: float, rtp: float) -> float:
    """Long-run return on a bet at the given RTP."""
    return bet * rtp


def session_profit(state: SessionState) -> float:
    """Player profit for the session (negative when the house is ahead)."""
    return state.total_won - state.total_wagered


def win_frequency(state: SessionState) -> float:
    """Big wins per spin."""
    if state.spins_played == 0:
        return 0.0
    return state.big_win_count / state.spins_played


def hit_frequency(state: SessionState) -> float:
    """Big wins and bonus rounds per spin."""
    if state.spins_played == 0:
        return 0.0
    return (state.big_win_count + state.bonus_round_count) / state.spins_played


def volatility_metrics(state: SessionState) -> dict[str, Any]:
    """
    Approximate volatility profile of the session.

    Returns:
        variance: average win per spin * VARIANCE_FACTOR
        hit_frequency: (big wins + bonus rounds) per spin
    """
    spins = state.spins_played
    avg_win = state.total_won / spins if spins > 0 else 0.0
    return {
        "variance": avg_win * VARIANCE_FACTOR,
        "hit_frequency": hit_frequency(state),
    }


def format_currency(amount: float, currency: str = "USD") -> str:
    """Format an amount as e.g. '$1,234.50' (USD) or '1,234.50 EUR'."""
    if currency == "USD":
        sign = "-" if amount < 0 else ""
        return f"{sign}${abs(amount):,.2f}"
    return f"{amount:,.2f} {currency}"


def format_percentage(value: float) -> str:
    """Format a ratio as a percentage with two decimals."""
    return f"{value * 100:.2f}%"
