#!/usr/bin/env python3
"""
Sea State CLI Tool.

Commands:
- simulate: run simulated attitude through the engine
- replay: feed recorded SignalK deltas (JSON lines) through the service
- show-config: print the effective settings

Usage:
    seastate simulate --period 8 --samples 120
    seastate replay recording.jsonl --vessel-name "Zennora"
    seastate show-config
"""
import argparse
import json
import logging
import sys
from dataclasses import asdict

from .config import get_settings
from .estimation.engine import SeaStateEngine
from .sensors.signalk import build_delta, vessel_source
from .sensors.simulator import AttitudeSimulator
from .service import SeaStateService

logger = logging.getLogger(__name__)


def simulate(
    period: float,
    samples: int,
    pitch_amplitude: float,
    roll_amplitude: float,
    heading: float,
    noise: float,
    as_delta: bool = False,
    seed=None,
) -> None:
    """Run the simulator through a fresh engine and print each result."""
    settings = get_settings()
    config = settings.engine_config()
    engine = SeaStateEngine(config)

    sim = AttitudeSimulator(
        wave_period_s=period,
        pitch_amplitude_deg=pitch_amplitude,
        roll_amplitude_deg=roll_amplitude,
        heading_deg=heading,
        noise_deg=noise,
        seed=seed,
    )
    engine.update_heading(sim.heading)
    source = vessel_source(settings.vessel_name, "derived")

    for sample in sim.samples(samples, update_rate_ms=config.update_rate_ms):
        result = engine.process(sample)
        if result is None:
            continue
        if as_delta:
            print(json.dumps(build_delta(result, source)))
        else:
            print(json.dumps(result.to_dict()))


def replay(path: str, vessel_name=None) -> None:
    """Feed a JSON-lines file of SignalK deltas through the service."""
    settings = get_settings()
    service = SeaStateService(
        settings.engine_config(),
        sink=lambda delta: print(json.dumps(delta)),
        vessel_name=vessel_name or settings.vessel_name,
        heading_path=settings.heading_path,
    )

    with open(path, encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                service.submit_delta(json.loads(line))
            except json.JSONDecodeError as e:
                logger.warning(f"{path}:{line_no}: invalid JSON ({e})")
                continue
            service.drain()

    stats = service.get_stats()
    print(
        f"Replayed {stats['deltas_received']} deltas: "
        f"{stats['ticks_processed']} results, {stats['ticks_skipped']} skipped, "
        f"{stats['parse_errors']} parse errors",
        file=sys.stderr,
    )


def show_config() -> None:
    """Print effective settings and the engine snapshot derived from them."""
    settings = get_settings()
    config = settings.engine_config()
    print(json.dumps({
        "settings": asdict(settings),
        "engine": asdict(config),
        "buffer_capacity": config.buffer_capacity,
    }, indent=2))


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Sea state from vessel attitude",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Simulate 8 s waves on the beam for two minutes:
    seastate simulate --period 8 --roll-amplitude 6 --pitch-amplitude 1 --samples 120

  Replay a recorded SignalK stream:
    seastate replay recording.jsonl

Engine parameters come from SEASTATE_* environment variables (see show-config).
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    sim_parser = subparsers.add_parser("simulate", help="Run simulated attitude through the engine")
    sim_parser.add_argument("--period", type=float, default=8.0, help="Wave period in seconds (default: 8)")
    sim_parser.add_argument("--samples", type=int, default=120, help="Number of samples (default: 120)")
    sim_parser.add_argument("--pitch-amplitude", type=float, default=2.0, help="Pitch amplitude in degrees")
    sim_parser.add_argument("--roll-amplitude", type=float, default=5.0, help="Roll amplitude in degrees")
    sim_parser.add_argument("--heading", type=float, default=270.0, help="Vessel heading in degrees")
    sim_parser.add_argument("--noise", type=float, default=0.0, help="Noise std dev in degrees")
    sim_parser.add_argument("--seed", type=int, help="Random seed for noise")
    sim_parser.add_argument("--delta", action="store_true", help="Print SignalK deltas instead of results")

    replay_parser = subparsers.add_parser("replay", help="Replay SignalK deltas from a JSON-lines file")
    replay_parser.add_argument("path", help="File with one SignalK delta per line")
    replay_parser.add_argument("--vessel-name", help="Vessel name for the emitted $source")

    subparsers.add_parser("show-config", help="Print effective configuration")

    args = parser.parse_args(argv)

    get_settings().configure_logging()

    if args.command == "simulate":
        simulate(
            args.period, args.samples, args.pitch_amplitude, args.roll_amplitude,
            args.heading, args.noise, as_delta=args.delta, seed=args.seed,
        )
    elif args.command == "replay":
        replay(args.path, args.vessel_name)
    elif args.command == "show-config":
        show_config()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
