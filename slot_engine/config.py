"""Engine settings derived from environment, with game defaults."""
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Engine settings with defaults for a standard 3x3 cabinet."""

    model_config = ConfigDict(env_prefix="SLOT_")

    # Result schema
    protocol_version: str = "1.0"

    # Game config defaults
    target_rtp: float = 0.96
    volatility_tier: str = "medium"
    max_win_multiplier: float = 1000.0
    bonus_base_chance: float = 0.05
    max_bet: float | None = None

    # Paylines used when the caller selects none
    default_payline_count: int = 10

    # Win bookkeeping
    big_win_threshold_x: float = 10.0

    # Bonus rounds
    wheel_bonus_stake: int = 100

    # Session (informational, the engine never moves money)
    starting_balance: float = 1000.0


settings = Settings()
