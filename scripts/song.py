"""Loop a kick sample under a rising sine sweep and play the mix.

The kick must be a mono PCM WAV file.  The mix repeats every half of the
total duration; the sweep climbs from 440 Hz to 880 Hz over the first third.
"""
from __future__ import annotations

import argparse
from pathlib import Path

from ziq import Amplitude, Combine, Constant, Lerp, Loop, SineOscillator, ZiqApplication, import_wav
from ziq.config import DEFAULT_CONFIG_PATH
from ziq.timebase import seconds


def build_song(kick_path: Path, total: int):
    kick = import_wav(kick_path)
    kick = Amplitude(kick, Constant(0.5))
    kick = Loop(kick, seconds(0.5))

    freq = Lerp(440.0, 880.0, total // 3)
    sine = Amplitude(SineOscillator(freq), Constant(0.5))

    return Loop(Combine(sine, kick), total // 2)


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("kick", type=Path, help="Mono WAV file used as the kick drum")
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to configuration file")
    parser.add_argument("--duration", type=float, default=10.0, help="Total duration in seconds (default: 10)")
    parser.add_argument("--output", type=Path, help="Write the PCM dump here instead of playing it")
    parser.add_argument("--summary", action="store_true", help="Print the signal graph before rendering")
    args = parser.parse_args()

    total = seconds(args.duration)
    song = build_song(args.kick, total)
    app = ZiqApplication.from_file(args.config)
    if args.summary:
        print(app.summary(song, total))
    if args.output:
        path = app.export(song, total, args.output)
        print(f"[song] wrote {path} @ {app.sample_rate} Hz")
    else:
        app.play(song, total)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
