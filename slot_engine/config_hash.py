"""Config hash computation.

Shared by:
- scripts/audit_sim.py (CSV audit)
- telemetry spin_processed events

The hash MUST be computed identically in both locations.
"""
import hashlib
import json

from slot_engine.logic.models import GameConfig
from slot_engine.logic.tables import PAYLINES, SYMBOLS


def get_config_hash(config: GameConfig) -> str:
    """
    Generate hash of the game configuration and static tables.

    Returns 16-char hex hash of config snapshot.
    """
    config_snapshot = {
        "target_rtp": config.target_rtp,
        "volatility_tier": config.volatility_tier.value,
        "max_win_multiplier": config.max_win_multiplier,
        "bonus_base_chance": config.bonus_base_chance,
        "max_bet": config.max_bet,
        "symbols": [
            [s.id, s.base_value, s.rarity_weight, s.role.value] for s in SYMBOLS
        ],
        "paylines": [[line.id, [list(cell) for cell in line.cells]] for line in PAYLINES],
    }
    canonical = json.dumps(config_snapshot, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode()).hexdigest()[:16]
