"""Static symbol catalogue and payline table for the 3x3 cabinet."""
from slot_engine.config import settings
from slot_engine.logic.models import Payline, Symbol, SymbolRole

GRID_ROWS = 3
GRID_COLS = 3

# Symbols at or above this value count as high-value (volatility override, premium weight)
HIGH_VALUE_THRESHOLD = 25
# Low-volatility override pool: 0 < base_value <= LOW_VALUE_CEILING
LOW_VALUE_CEILING = 10

# Ordered from most to least common. The wild weight is tuned so the default
# 10-line medium game returns close to 96% before RTP adjustment.
SYMBOLS: tuple[Symbol, ...] = (
    Symbol(id="cherry", display_name="Cherry", base_value=2, rarity_weight=0.25),
    Symbol(id="lemon", display_name="Lemon", base_value=3, rarity_weight=0.22),
    Symbol(id="orange", display_name="Orange", base_value=4, rarity_weight=0.20),
    Symbol(id="plum", display_name="Plum", base_value=5, rarity_weight=0.17),
    Symbol(id="watermelon", display_name="Watermelon", base_value=6, rarity_weight=0.14),
    Symbol(id="bell", display_name="Bell", base_value=8, rarity_weight=0.10),
    Symbol(id="bar", display_name="Bar", base_value=10, rarity_weight=0.08),
    Symbol(id="seven", display_name="Lucky 7", base_value=15, rarity_weight=0.06),
    Symbol(id="diamond", display_name="Diamond", base_value=25, rarity_weight=0.04),
    Symbol(id="crown", display_name="Crown", base_value=50, rarity_weight=0.025),
    Symbol(id="star", display_name="Star", base_value=75, rarity_weight=0.02),
    Symbol(id="wild", display_name="Wild", base_value=0, rarity_weight=0.0155, role=SymbolRole.WILD),
    Symbol(id="scatter", display_name="Scatter", base_value=0, rarity_weight=0.025, role=SymbolRole.SCATTER),
    Symbol(id="bonus", display_name="Bonus", base_value=0, rarity_weight=0.02, role=SymbolRole.BONUS),
    Symbol(id="jackpot", display_name="Jackpot", base_value=1000, rarity_weight=0.005, role=SymbolRole.JACKPOT),
)

SYMBOLS_BY_ID: dict[str, Symbol] = {symbol.id: symbol for symbol in SYMBOLS}

HIGH_VALUE_SYMBOLS: tuple[Symbol, ...] = tuple(
    s for s in SYMBOLS if s.base_value >= HIGH_VALUE_THRESHOLD
)
LOW_VALUE_SYMBOLS: tuple[Symbol, ...] = tuple(
    s for s in SYMBOLS if 0 < s.base_value <= LOW_VALUE_CEILING
)

PAYLINES: tuple[Payline, ...] = (
    # Rows
    Payline(id=1, cells=((0, 0), (0, 1), (0, 2)), name="Top Row"),
    Payline(id=2, cells=((1, 0), (1, 1), (1, 2)), name="Middle Row"),
    Payline(id=3, cells=((2, 0), (2, 1), (2, 2)), name="Bottom Row"),
    # Columns
    Payline(id=4, cells=((0, 0), (1, 0), (2, 0)), name="Left Column"),
    Payline(id=5, cells=((0, 1), (1, 1), (2, 1)), name="Center Column"),
    Payline(id=6, cells=((0, 2), (1, 2), (2, 2)), name="Right Column"),
    # Diagonals
    Payline(id=7, cells=((0, 0), (1, 1), (2, 2)), name="Diagonal Down"),
    Payline(id=8, cells=((2, 0), (1, 1), (0, 2)), name="Diagonal Up"),
    # V shapes
    Payline(id=9, cells=((0, 0), (1, 1), (0, 2)), name="V Top"),
    Payline(id=10, cells=((2, 0), (1, 1), (2, 2)), name="V Bottom"),
    Payline(id=11, cells=((0, 0), (2, 1), (0, 2)), name="Inverted V Top"),
    Payline(id=12, cells=((2, 0), (0, 1), (2, 2)), name="Inverted V Bottom"),
    # Zigzags
    Payline(id=13, cells=((0, 0), (2, 1), (1, 2)), name="Zigzag 1"),
    Payline(id=14, cells=((2, 0), (0, 1), (1, 2)), name="Zigzag 2"),
    Payline(id=15, cells=((1, 0), (0, 1), (2, 2)), name="Zigzag 3"),
    Payline(id=16, cells=((1, 0), (2, 1), (0, 2)), name="Zigzag 4"),
    # Corners
    Payline(id=17, cells=((0, 0), (0, 1), (1, 2)), name="L Shape 1"),
    Payline(id=18, cells=((0, 0), (1, 0), (2, 1)), name="L Shape 2"),
    Payline(id=19, cells=((2, 0), (2, 1), (1, 2)), name="L Shape 3"),
    Payline(id=20, cells=((2, 2), (1, 2), (0, 1)), name="L Shape 4"),
    # Triples (same cells as the columns, paid as separate lines)
    Payline(id=21, cells=((0, 0), (1, 0), (2, 0)), name="Left Triple"),
    Payline(id=22, cells=((0, 1), (1, 1), (2, 1)), name="Center Triple"),
    Payline(id=23, cells=((0, 2), (1, 2), (2, 2)), name="Right Triple"),
    # Specials
    Payline(id=24, cells=((0, 1), (1, 0), (1, 2)), name="T Shape"),
    Payline(id=25, cells=((1, 0), (0, 1), (2, 1)), name="Cross Shape"),
)

PAYLINES_BY_ID: dict[int, Payline] = {line.id: line for line in PAYLINES}

DEFAULT_PAYLINE_IDS: tuple[int, ...] = tuple(
    line.id for line in PAYLINES[: settings.default_payline_count]
)


def get_symbol(symbol_id: str) -> Symbol:
    """Look up a catalogue symbol by id."""
    return SYMBOLS_BY_ID[symbol_id]
