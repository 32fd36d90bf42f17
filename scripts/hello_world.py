"""Play a one second 440 Hz sine tone through ffplay."""
from __future__ import annotations

import argparse
from pathlib import Path

from ziq import Constant, SineOscillator, ZiqApplication
from ziq.config import DEFAULT_CONFIG_PATH
from ziq.timebase import seconds


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to configuration file")
    parser.add_argument("--frequency", type=float, default=440.0, help="Tone frequency in Hz (default: 440)")
    parser.add_argument("--duration", type=float, default=1.0, help="Duration in seconds (default: 1.0)")
    parser.add_argument("--output", type=Path, help="Write the PCM dump here instead of playing it")
    args = parser.parse_args()

    osc = SineOscillator(Constant(args.frequency))
    app = ZiqApplication.from_file(args.config)
    duration = seconds(args.duration)
    if args.output:
        path = app.export(osc, duration, args.output)
        print(f"[hello_world] wrote {path} @ {app.sample_rate} Hz")
    else:
        app.play(osc, duration)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
