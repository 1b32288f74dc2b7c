#!/usr/bin/env python3
"""
Audit simulation script.

Generates a headless simulation CSV for RTP and bonus audits.

Usage:
    python -m scripts.audit_sim --volatility medium --rounds 100000 --seed AUDIT_2025 --out out/audit_medium.csv
    python -m scripts.audit_sim --volatility high --rounds 100000 --seed AUDIT_2025 --lines 25 --out out/audit_high.csv
"""
import argparse
import csv
import logging
import subprocess
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from slot_engine.config import settings
from slot_engine.config_hash import get_config_hash
from slot_engine.logic.engine import SlotEngine
from slot_engine.logic.models import BonusKind, GameConfig, VolatilityTier
from slot_engine.logic.rng import ParkMillerRNG, seed_to_int
from slot_engine.logic.tables import PAYLINES
from slot_engine.telemetry import NullTelemetrySink, TelemetryService


@dataclass
class SimulationStats:
    """Statistics accumulated during simulation."""
    total_wagered: float = 0.0
    total_won: float = 0.0
    rounds: int = 0
    free_spins: int = 0
    wins: int = 0
    big_wins: int = 0
    jackpots: int = 0
    capped_count: int = 0
    win_x_values: list[float] = field(default_factory=list)
    max_win_x_observed: float = 0.0
    # Bonus tracking
    bonus_entries: int = 0
    free_spins_entries: int = 0
    pick_bonus_entries: int = 0
    wheel_bonus_entries: int = 0
    bonus_payout_total: float = 0.0
    # Controller tracking
    max_win_streak: int = 0

    @property
    def rtp(self) -> float:
        """Realized base game RTP as a fraction. Free spins are not wagered."""
        return self.total_won / self.total_wagered if self.total_wagered > 0 else 0.0


def get_git_commit() -> str:
    """Get current git commit hash (short)."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            capture_output=True,
            text=True,
            cwd=Path(__file__).parent.parent,
            timeout=5,
        )
        if result.returncode == 0:
            return result.stdout.strip()
    except (subprocess.TimeoutExpired, FileNotFoundError):
        pass
    return "unknown"


def get_timestamp_iso() -> str:
    """Get ISO 8601 UTC timestamp."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def build_config(volatility: str, target_rtp: float) -> GameConfig:
    return GameConfig(
        target_rtp=target_rtp,
        volatility_tier=VolatilityTier(volatility),
        max_win_multiplier=settings.max_win_multiplier,
        bonus_base_chance=settings.bonus_base_chance,
    )


def check_cached_result(
    output_path: str, config_hash: str, rounds: int, seed: str, lines: int
) -> bool:
    """
    Check if valid cached result exists.

    Returns True if cache is valid (same config_hash, rounds, seed, lines).
    """
    path = Path(output_path)
    if not path.exists():
        return False

    try:
        with open(path, "r") as f:
            reader = csv.DictReader(f)
            row = next(reader, None)
            if row is None:
                return False

            if row.get("config_hash") != config_hash:
                return False
            if int(row.get("rounds", 0)) != rounds:
                return False
            if row.get("seed") != seed:
                return False
            if int(row.get("lines", 0)) != lines:
                return False

            return True
    except (OSError, csv.Error, ValueError):
        return False


def run_simulation(
    volatility: str,
    rounds: int,
    seed_str: str,
    target_rtp: float = settings.target_rtp,
    lines: int = settings.default_payline_count,
    bet: float = 1.0,
    verbose: bool = False,
) -> SimulationStats:
    """
    Run headless simulation.

    Args:
        volatility: 'low', 'medium' or 'high'
        rounds: Number of spins to simulate
        seed_str: Seed string for reproducibility
        target_rtp: Controller target
        lines: Number of paylines played (first N of the table)
        bet: Stake per spin
        verbose: Print progress

    Pick and wheel rounds are completed right after the spin that triggers
    them. Free spins rounds play down over the following spins. Bonus
    payouts, free spin wins included, are reported separately from the
    base game RTP.
    """
    engine = SlotEngine(
        config=build_config(volatility, target_rtp),
        rng=ParkMillerRNG(seed_to_int(seed_str)),
        telemetry=TelemetryService(sink=NullTelemetrySink()),
    )
    payline_ids = [line.id for line in PAYLINES[:lines]]

    stats = SimulationStats()
    progress_interval = max(1, rounds // 100)

    for round_count in range(rounds):
        if verbose and round_count % progress_interval == 0:
            pct = (round_count / rounds) * 100
            print(f"\rProgress: {pct:.1f}%", end="", flush=True)

        result = engine.spin(bet, payline_ids)

        stats.rounds += 1
        if result.is_free_spin:
            stats.free_spins += 1
        else:
            stats.total_wagered += bet
            stats.total_won += result.total_payout

        if result.total_payout > 0:
            stats.wins += 1
        if result.is_big_win:
            stats.big_wins += 1
        if result.is_jackpot:
            stats.jackpots += 1
        if result.is_capped:
            stats.capped_count += 1

        win_x = result.total_payout / bet
        stats.win_x_values.append(win_x)
        if win_x > stats.max_win_x_observed:
            stats.max_win_x_observed = win_x

        stats.bonus_payout_total += result.bonus_payout
        if result.triggered_bonus is not None:
            stats.bonus_entries += 1
            if result.triggered_bonus == BonusKind.FREE_SPINS:
                stats.free_spins_entries += 1
            elif result.triggered_bonus == BonusKind.PICK_BONUS:
                stats.pick_bonus_entries += 1
                stats.bonus_payout_total += engine.complete_bonus_round()
            else:
                stats.wheel_bonus_entries += 1
                stats.bonus_payout_total += engine.complete_bonus_round()

    # A free spins round still running at the end pays what it has won
    stats.bonus_payout_total += engine.complete_bonus_round()
    stats.max_win_streak = engine.get_session_state().max_win_streak

    if verbose:
        print("\rProgress: 100.0%")

    return stats


def calculate_percentile(values: list[float], percentile: float) -> float:
    """Calculate percentile from sorted list."""
    if not values:
        return 0.0
    sorted_vals = sorted(values)
    idx = int(len(sorted_vals) * percentile / 100)
    idx = min(idx, len(sorted_vals) - 1)
    return sorted_vals[idx]


def generate_csv(
    volatility: str,
    rounds: int,
    seed_str: str,
    stats: SimulationStats,
    output_path: str,
    target_rtp: float = settings.target_rtp,
    lines: int = settings.default_payline_count,
) -> None:
    """Generate audit CSV file."""
    timestamp = get_timestamp_iso()
    git_commit = get_git_commit()
    config_hash = get_config_hash(build_config(volatility, target_rtp))

    def rate(count: int) -> float:
        return (count / stats.rounds * 100) if stats.rounds > 0 else 0

    bonus_payout_per_spin = stats.bonus_payout_total / stats.rounds if stats.rounds > 0 else 0

    # Column order: timestamp, git_commit, config_hash first
    row = {
        "timestamp": timestamp,
        "git_commit": git_commit,
        "config_hash": config_hash,
        "volatility": volatility,
        "target_rtp": f"{target_rtp:.4f}",
        "lines": lines,
        "rounds": rounds,
        "seed": seed_str,
        "free_spins": stats.free_spins,
        "rtp": f"{stats.rtp * 100:.4f}",
        "hit_freq": f"{rate(stats.wins):.4f}",
        "big_win_rate": f"{rate(stats.big_wins):.4f}",
        "jackpots": stats.jackpots,
        "bonus_entry_rate": f"{rate(stats.bonus_entries):.4f}",
        "free_spins_rate": f"{rate(stats.free_spins_entries):.6f}",
        "pick_bonus_rate": f"{rate(stats.pick_bonus_entries):.6f}",
        "wheel_bonus_rate": f"{rate(stats.wheel_bonus_entries):.6f}",
        "bonus_payout_per_spin": f"{bonus_payout_per_spin:.4f}",
        "p95_win_x": f"{calculate_percentile(stats.win_x_values, 95):.2f}",
        "p99_win_x": f"{calculate_percentile(stats.win_x_values, 99):.2f}",
        "max_win_x": f"{stats.max_win_x_observed:.2f}",
        "max_win_streak": stats.max_win_streak,
        "capped_rate": f"{rate(stats.capped_count):.6f}",
    }

    # Ensure output directory exists
    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    with open(output_file, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=row.keys())
        writer.writeheader()
        writer.writerow(row)

    print(f"CSV written to: {output_path}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Slot engine audit simulation")
    parser.add_argument(
        "--volatility",
        choices=[tier.value for tier in VolatilityTier],
        default=settings.volatility_tier,
        help="Volatility tier",
    )
    parser.add_argument(
        "--rounds",
        type=int,
        required=True,
        help="Number of spins to simulate",
    )
    parser.add_argument(
        "--seed",
        type=str,
        required=True,
        help="Seed string for reproducibility",
    )
    parser.add_argument(
        "--target-rtp",
        type=float,
        default=settings.target_rtp,
        help="Target RTP in (0, 1)",
    )
    parser.add_argument(
        "--lines",
        type=int,
        default=settings.default_payline_count,
        choices=range(1, len(PAYLINES) + 1),
        metavar=f"1..{len(PAYLINES)}",
        help="Number of paylines played",
    )
    parser.add_argument(
        "--out",
        type=str,
        required=True,
        help="Output CSV path",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show progress",
    )
    parser.add_argument(
        "--skip-if-cached",
        action="store_true",
        help="Skip simulation if valid cached result exists",
    )

    args = parser.parse_args(argv)
    if args.rounds <= 0:
        parser.error("--rounds must be positive")
    logging.basicConfig(level=logging.WARNING)

    config_hash = get_config_hash(build_config(args.volatility, args.target_rtp))
    print(
        f"Running simulation: volatility={args.volatility}, rounds={args.rounds}, "
        f"seed={args.seed}, lines={args.lines}"
    )
    print(f"Target RTP: {args.target_rtp:.4f}")
    print(f"Config hash: {config_hash}")

    if args.skip_if_cached:
        if check_cached_result(args.out, config_hash, args.rounds, args.seed, args.lines):
            print(f"Using cached result: {args.out}")
            print("(Skipping simulation - cache valid for config_hash, rounds, seed, lines)")
            return 0

    stats = run_simulation(
        volatility=args.volatility,
        rounds=args.rounds,
        seed_str=args.seed,
        target_rtp=args.target_rtp,
        lines=args.lines,
        verbose=args.verbose,
    )

    generate_csv(
        volatility=args.volatility,
        rounds=args.rounds,
        seed_str=args.seed,
        stats=stats,
        output_path=args.out,
        target_rtp=args.target_rtp,
        lines=args.lines,
    )

    print(f"\nSummary:")
    print(f"  Rounds: {stats.rounds} (free spins: {stats.free_spins})")
    print(f"  Total wagered: {stats.total_wagered:.2f}")
    print(f"  Total won: {stats.total_won:.2f}")
    print(f"  RTP: {stats.rtp * 100:.4f}%")
    print(f"  Hit frequency: {(stats.wins / stats.rounds * 100):.4f}%")
    print(f"  Big wins: {stats.big_wins}")
    print(f"  Jackpots: {stats.jackpots}")
    print(f"  Bonus entries: {stats.bonus_entries} ({(stats.bonus_entries / stats.rounds * 100):.4f}%)")
    print(f"  Bonus payout total: {stats.bonus_payout_total:.2f}")
    print(f"  Max win_x observed: {stats.max_win_x_observed:.2f}x")
    print(f"  Capped count: {stats.capped_count}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
