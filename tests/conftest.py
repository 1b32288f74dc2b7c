"""Pytest fixtures for engine tests."""
from typing import Any

import pytest

from slot_engine.logic.engine import SlotEngine
from slot_engine.logic.models import GameConfig, Symbol
from slot_engine.logic.rng import RNGBase
from slot_engine.logic.tables import get_symbol
from slot_engine.telemetry import TelemetryService


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (long simulations)"
    )


class ScriptedRNG(RNGBase):
    """RNG that replays a fixed list of values, then repeats the last one."""

    def __init__(self, values: list[float], seed: int = 0):
        self.values = list(values)
        self.seed = seed
        self.calls = 0

    def random(self) -> float:
        index = min(self.calls, len(self.values) - 1)
        self.calls += 1
        return self.values[index]


class RecordingTelemetrySink:
    """Sink that keeps every event for assertions."""

    def __init__(self):
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        self.events.append((event_name, data))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]


class FailingTelemetrySink:
    """Sink that always raises."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        raise RuntimeError("sink down")


def make_grid(*rows: list[str]) -> list[list[Symbol]]:
    """Build a grid from rows of symbol ids."""
    return [[get_symbol(symbol_id) for symbol_id in row] for row in rows]


@pytest.fixture
def recording_sink() -> RecordingTelemetrySink:
    return RecordingTelemetrySink()


@pytest.fixture
def telemetry(recording_sink: RecordingTelemetrySink) -> TelemetryService:
    """TelemetryService wired to a recording sink."""
    return TelemetryService(sink=recording_sink)


@pytest.fixture
def engine(telemetry: TelemetryService) -> SlotEngine:
    """Seeded engine with default config and no chance-based wheel bonus."""
    return SlotEngine(
        config=GameConfig(bonus_base_chance=0.0),
        seed=42,
        telemetry=telemetry,
    )


@pytest.fixture
def scripted_engine(telemetry: TelemetryService):
    """Factory for engines driven by a ScriptedRNG."""

    def _make(values: list[float], **config: Any) -> SlotEngine:
        return SlotEngine(
            config=GameConfig(**config),
            rng=ScriptedRNG(values),
            telemetry=telemetry,
        )

    return _make
