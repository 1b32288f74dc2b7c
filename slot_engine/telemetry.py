"""Engine telemetry: spin, rejection and bonus lifecycle events."""
import logging
from dataclasses import dataclass
from typing import Any, Protocol


logger = logging.getLogger(__name__)


class TelemetrySink(Protocol):
    """Protocol for telemetry sinks."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Emit a telemetry event."""
        ...


class LoggingTelemetrySink:
    """Default sink that logs telemetry events."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Log telemetry event."""
        logger.info("TELEMETRY %s: %s", event_name, data)


class NullTelemetrySink:
    """Drops every event. For long simulations where per-spin logging dominates."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        pass


@dataclass
class SpinProcessedEvent:
    """spin_processed telemetry event."""

    seed: int
    spin_number: int
    config_hash: str
    bet: float
    active_payline_ids: list[int]
    total_payout: int
    applied_multiplier: float
    is_jackpot: bool
    triggered_bonus: str | None
    rtp_adjustment: float | None
    premium_scale: float
    is_free_spin: bool

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for emission."""
        return {
            "seed": self.seed,
            "spin_number": self.spin_number,
            "config_hash": self.config_hash,
            "bet": self.bet,
            "active_payline_ids": self.active_payline_ids,
            "total_payout": self.total_payout,
            "applied_multiplier": self.applied_multiplier,
            "is_jackpot": self.is_jackpot,
            "triggered_bonus": self.triggered_bonus,
            "rtp_adjustment": self.rtp_adjustment,
            "premium_scale": self.premium_scale,
            "is_free_spin": self.is_free_spin,
        }


@dataclass
class SpinRejectedEvent:
    """spin_rejected telemetry event."""

    seed: int
    reason: str  # "INVALID_BET" | "INVALID_PAYLINE_SELECTION" | ...
    message: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for emission."""
        return {
            "seed": self.seed,
            "reason": self.reason,
            "message": self.message,
        }


@dataclass
class BonusTriggeredEvent:
    """bonus_triggered telemetry event."""

    seed: int
    spin_number: int
    kind: str

    def to_dict(self) -> dict[str, Any]:
        return {"seed": self.seed, "spin_number": self.spin_number, "kind": self.kind}


@dataclass
class BonusCompletedEvent:
    """bonus_completed telemetry event."""

    seed: int
    kind: str
    payout: int

    def to_dict(self) -> dict[str, Any]:
        return {"seed": self.seed, "kind": self.kind, "payout": self.payout}


class TelemetryService:
    """Service for emitting engine telemetry events."""

    def __init__(self, sink: TelemetrySink | None = None):
        self._sink = sink or LoggingTelemetrySink()
        self._sink_errors = 0  # Counter for sink failures

    @property
    def sink_errors(self) -> int:
        return self._sink_errors

    def set_sink(self, sink: TelemetrySink) -> None:
        """Set the telemetry sink (useful for testing)."""
        self._sink = sink

    def _safe_emit(self, event_name: str, data: dict[str, Any]) -> None:
        """
        Emit event with exception safety.

        Sink failures MUST NOT break a spin.
        """
        try:
            self._sink.emit(event_name, data)
        except Exception as e:
            self._sink_errors += 1
            logger.warning(
                "Telemetry sink error (count=%d): %s - %s",
                self._sink_errors,
                event_name,
                str(e),
            )

    def emit_spin_processed(self, event: SpinProcessedEvent) -> None:
        self._safe_emit("spin_processed", event.to_dict())

    def emit_spin_rejected(self, event: SpinRejectedEvent) -> None:
        self._safe_emit("spin_rejected", event.to_dict())

    def emit_bonus_triggered(self, event: BonusTriggeredEvent) -> None:
        self._safe_emit("bonus_triggered", event.to_dict())

    def emit_bonus_completed(self, event: BonusCompletedEvent) -> None:
        self._safe_emit("bonus_completed", event.to_dict())


# Global instance
telemetry_service = TelemetryService()
