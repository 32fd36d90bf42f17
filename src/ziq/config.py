"""Configuration loading for rendering and playback."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from .errors import AudioIOError, ConstructionError
from .utils import DEFAULT_FRAMES_PER_BLOCK, DEFAULT_SAMPLE_RATE

_REPO_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_PATH = _REPO_ROOT / "configs" / "default.json"

PLAYER_BACKENDS = ("ffplay", "sounddevice")


@dataclass(slots=True)
class RenderConfig:
    """Block size and parallelism used when sampling signals."""

    frames_per_block: int = DEFAULT_FRAMES_PER_BLOCK
    workers: int = 1


@dataclass(slots=True)
class PlayerConfig:
    backend: str = "ffplay"
    executable: str = "ffplay"
    timeout: float | None = None
    show_waveform: bool = True


@dataclass(slots=True)
class LoggingConfig:
    level: str = "WARNING"
    file: str | None = None


@dataclass(slots=True)
class AppConfig:
    sample_rate: int = DEFAULT_SAMPLE_RATE
    render: RenderConfig = field(default_factory=RenderConfig)
    player: PlayerConfig = field(default_factory=PlayerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def default(cls) -> "AppConfig":
        return cls()


def _positive_int(data: Mapping[str, Any], key: str, default: int, prefix: str) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConstructionError(f"{prefix}{key} must be an integer, got {value!r}")
    if value <= 0:
        raise ConstructionError(f"{prefix}{key} must be positive")
    return value


def _normalise_render(data: Mapping[str, Any]) -> RenderConfig:
    return RenderConfig(
        frames_per_block=_positive_int(data, "frames_per_block", DEFAULT_FRAMES_PER_BLOCK, "render."),
        workers=_positive_int(data, "workers", 1, "render."),
    )


def _normalise_player(data: Mapping[str, Any]) -> PlayerConfig:
    backend = str(data.get("backend", "ffplay"))
    if backend not in PLAYER_BACKENDS:
        raise ConstructionError(
            f"player.backend must be one of {', '.join(PLAYER_BACKENDS)}, got {backend!r}"
        )
    timeout = data.get("timeout")
    if timeout is not None:
        timeout = float(timeout)
        if timeout <= 0:
            raise ConstructionError("player.timeout must be positive when set")
    executable = str(data.get("executable", "ffplay"))
    if not executable:
        raise ConstructionError("player.executable must be provided")
    return PlayerConfig(
        backend=backend,
        executable=executable,
        timeout=timeout,
        show_waveform=bool(data.get("show_waveform", True)),
    )


def _normalise_logging(data: Mapping[str, Any]) -> LoggingConfig:
    file = data.get("file")
    return LoggingConfig(
        level=str(data.get("level", "WARNING")).upper(),
        file=None if not file else str(file),
    )


def parse_configuration(raw: Mapping[str, Any]) -> AppConfig:
    """Build an :class:`AppConfig` from already-decoded JSON data."""

    sample_rate = _positive_int(raw, "sample_rate", DEFAULT_SAMPLE_RATE, "")
    return AppConfig(
        sample_rate=sample_rate,
        render=_normalise_render(dict(raw.get("render", {}) or {})),
        player=_normalise_player(dict(raw.get("player", {}) or {})),
        logging=_normalise_logging(dict(raw.get("logging", {}) or {})),
    )


def load_configuration(path: str | Path) -> AppConfig:
    """Load an :class:`AppConfig` from ``path``."""

    try:
        with open(path, "r", encoding="utf8") as fh:
            raw = json.load(fh)
    except OSError as exc:
        raise AudioIOError(f"open config: {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConstructionError(f"invalid config {path}: {exc}") from exc
    return parse_configuration(raw)


__all__ = [
    "AppConfig",
    "DEFAULT_CONFIG_PATH",
    "LoggingConfig",
    "PLAYER_BACKENDS",
    "PlayerConfig",
    "RenderConfig",
    "load_configuration",
    "parse_configuration",
]
