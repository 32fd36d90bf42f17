"""High level orchestration: configuration, rendering, export and playback."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import numpy as np

from .config import AppConfig, load_configuration
from .diagnostics import configure_logging
from .pcm import encode_pcm, save_pcm
from .player import FFPlayPlayer, Player, SoundDevicePlayer
from .renderer import Renderer
from .signals import Signal
from .timebase import as_duration, as_seconds

logger = logging.getLogger(__name__)


def build_player(config: AppConfig) -> Player:
    """Instantiate the playback backend named in ``config.player``."""

    player_cfg = config.player
    if player_cfg.backend == "sounddevice":
        return SoundDevicePlayer()
    return FFPlayPlayer(
        player_cfg.executable,
        timeout=player_cfg.timeout,
        show_waveform=player_cfg.show_waveform,
    )


@dataclass(slots=True)
class ZiqApplication:
    """Runtime container tying a configuration to the render/playback pipeline.

    The application never holds signal state; every call receives the signal
    to render.  A player may be injected (tests substitute a fake one), which
    otherwise comes from the configured backend.
    """

    config: AppConfig
    renderer: Renderer = field(init=False)
    player: Optional[Player] = None

    def __post_init__(self) -> None:
        self.renderer = Renderer(
            sample_rate=self.config.sample_rate,
            block_frames=self.config.render.frames_per_block,
            workers=self.config.render.workers,
        )
        configure_logging(self.config.logging.level, self.config.logging.file)
        if self.player is None:
            self.player = build_player(self.config)

    @classmethod
    def from_config(cls, config: AppConfig, *, player: Optional[Player] = None) -> "ZiqApplication":
        return cls(config=config, player=player)

    @classmethod
    def from_file(cls, path: str | Path, *, player: Optional[Player] = None) -> "ZiqApplication":
        return cls.from_config(load_configuration(path), player=player)

    @property
    def sample_rate(self) -> int:
        return self.renderer.sample_rate

    def render(self, signal: Signal, duration, start=0) -> np.ndarray:
        """Render ``signal`` over ``[start, start + duration)`` at the configured rate."""

        return self.renderer.render(signal, duration, start)

    def encode(self, signal: Signal, duration, start=0) -> bytes:
        return encode_pcm(self.render(signal, duration, start))

    def export(self, signal: Signal, duration, path: str | Path, start=0) -> Path:
        """Write the rendered PCM dump and its JSON side-car to ``path``."""

        frames = self.render(signal, duration, start)
        target = save_pcm(path, frames, sample_rate=self.sample_rate)
        logger.info("Exported %d frames to %s", frames.shape[0], target)
        return target

    def play(self, signal: Signal, duration) -> None:
        duration = as_duration(duration)
        pcm_bytes = self.encode(signal, duration)
        self.player.play(pcm_bytes, self.sample_rate, duration)

    def summary(self, signal: Optional[Signal] = None, duration=None) -> str:
        """Return a human-readable description of the configuration and ``signal``."""

        lines = [
            f"Sample rate: {self.sample_rate} Hz",
            f"Frames per block: {self.renderer.block_frames}",
            f"Render workers: {self.renderer.workers}",
            f"Player: {self.config.player.backend} ({self.config.player.executable})",
        ]
        if duration is not None:
            lines.append(f"Duration: {as_seconds(as_duration(duration)):.3f} s")
        if signal is not None:
            lines.append("Signal graph:")
            lines.append(json.dumps(signal.describe(), indent=2))
        return "\n".join(lines)


__all__ = ["ZiqApplication", "build_player"]
