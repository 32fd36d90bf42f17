"""Playback of rendered PCM through external players.

:class:`FFPlayPlayer` writes the PCM bytes to a temporary ``.pcm`` file and
launches ``ffplay`` configured for little-endian float64 input.  The process
runner and the executable lookup are injected so the player can be exercised
without ffplay installed.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import tempfile
from importlib import import_module
from types import ModuleType
from typing import Callable, List, Optional, Protocol

from .errors import ConstructionError, PlaybackError, PlaybackTimeoutError
from .pcm import decode_pcm, encode_pcm
from .renderer import render_frames
from .signals import Signal
from .timebase import as_duration
from .utils import validate_sample_rate

logger = logging.getLogger(__name__)


class Player(Protocol):
    def play(self, pcm_bytes: bytes, sample_rate: int, duration: Optional[int] = None) -> None:
        ...


def build_ffplay_command(
    sample_rate: int,
    path: str,
    *,
    executable: str = "ffplay",
    show_waveform: bool = True,
) -> List[str]:
    """Return the argument vector that plays a raw f64le file with ffplay."""

    command = [executable, "-f", "f64le", "-ar", str(sample_rate), "-autoexit"]
    if show_waveform:
        command += ["-showmode", "1"]
    else:
        command.append("-nodisp")
    command.append(path)
    return command


def _validate_payload(pcm_bytes: bytes, sample_rate: int) -> int:
    rate = validate_sample_rate(sample_rate)
    if not pcm_bytes:
        raise ConstructionError("no PCM data was provided")
    return rate


class FFPlayPlayer:
    """Plays PCM buffers by handing a temporary file to ``ffplay``."""

    def __init__(
        self,
        executable: str = "ffplay",
        *,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
        which: Callable[[str], Optional[str]] = shutil.which,
        timeout: Optional[float] = None,
        show_waveform: bool = True,
    ) -> None:
        self.executable = executable
        self.timeout = timeout
        self.show_waveform = show_waveform
        self._runner = runner
        self._which = which

    def check_available(self) -> str:
        """Return the resolved executable path or raise :class:`PlaybackError`."""

        resolved = self._which(self.executable)
        if not resolved:
            raise PlaybackError(f"{self.executable} executable lookup: not found on PATH")
        return resolved

    def play(self, pcm_bytes: bytes, sample_rate: int, duration: Optional[int] = None) -> None:
        """Block until the external player exits.

        ``duration`` (ns) is informational; the player stops at the end of the
        data.  The temporary file is removed whether or not playback succeeds.
        """

        rate = _validate_payload(pcm_bytes, sample_rate)
        executable = self.check_available()
        fd, path = tempfile.mkstemp(prefix="audio_", suffix=".pcm")
        try:
            try:
                with os.fdopen(fd, "wb") as fh:
                    fh.write(pcm_bytes)
            except OSError as exc:
                raise PlaybackError(f"write PCM file: {path}: {exc}") from exc
            command = build_ffplay_command(
                rate, path, executable=executable, show_waveform=self.show_waveform
            )
            logger.info("Playing %d bytes @ %d Hz: %s", len(pcm_bytes), rate, " ".join(command))
            if duration is not None:
                logger.debug("Expected playback duration: %dns", as_duration(duration))
            self._run(command)
        finally:
            try:
                os.remove(path)
            except FileNotFoundError:
                pass

    def _run(self, command: List[str]) -> None:
        try:
            self._runner(
                command,
                check=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            logger.warning("Playback exceeded %.3fs deadline", self.timeout or 0.0)
            raise PlaybackTimeoutError(f"play PCM file using {self.executable}: timed out") from exc
        except subprocess.CalledProcessError as exc:
            output = exc.output
            if isinstance(output, bytes):
                output = output.decode("utf-8", "replace")
            logger.warning("%s exited with status %s", self.executable, exc.returncode)
            message = f"play PCM file using {self.executable}: exit status {exc.returncode}"
            if output:
                message += f": {output.strip()}"
            raise PlaybackError(message) from exc
        except OSError as exc:
            raise PlaybackError(f"play PCM file using {self.executable}: {exc}") from exc


def _load_sounddevice() -> ModuleType:
    try:
        return import_module("sounddevice")
    except ImportError as exc:
        raise PlaybackError("sounddevice is not installed") from exc
    except OSError as exc:  # PortAudio library missing
        raise PlaybackError(f"sounddevice unavailable: {exc}") from exc


class SoundDevicePlayer:
    """Plays PCM buffers on the default output device via :mod:`sounddevice`."""

    def __init__(self, *, loader: Callable[[], ModuleType] = _load_sounddevice) -> None:
        self._loader = loader

    def play(self, pcm_bytes: bytes, sample_rate: int, duration: Optional[int] = None) -> None:
        rate = _validate_payload(pcm_bytes, sample_rate)
        sd = self._loader()
        frames = decode_pcm(pcm_bytes)
        logger.info("Playing %d frames @ %d Hz on the default device", frames.shape[0], rate)
        try:
            sd.play(frames, samplerate=rate, blocking=True)
        except Exception as exc:
            raise PlaybackError(f"play PCM frames using sounddevice: {exc}") from exc


def play_signal(
    signal: Signal,
    duration,
    *,
    player: Player,
    sample_rate: Optional[int] = None,
) -> None:
    """Render ``signal`` for ``duration`` and hand the PCM bytes to ``player``."""

    rate = validate_sample_rate(sample_rate, allow_default=True)
    duration = as_duration(duration)
    frames = render_frames(signal, rate, 0, duration)
    player.play(encode_pcm(frames), rate, duration)


__all__ = [
    "FFPlayPlayer",
    "Player",
    "SoundDevicePlayer",
    "build_ffplay_command",
    "play_signal",
]
