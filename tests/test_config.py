import json
from pathlib import Path

import pytest

from ziq.config import DEFAULT_CONFIG_PATH, AppConfig, load_configuration, parse_configuration
from ziq.errors import AudioIOError, ConstructionError


def test_default_configuration_loads(tmp_path: Path) -> None:
    config = load_configuration(DEFAULT_CONFIG_PATH)
    assert isinstance(config, AppConfig)
    assert config.sample_rate == 44100
    assert config.render.frames_per_block == 1024
    assert config.render.workers == 1
    assert config.player.backend == "ffplay"
    assert config.player.timeout is None
    assert config.logging.level == "WARNING"


def test_defaults_fill_missing_sections(tmp_path: Path) -> None:
    path = tmp_path / "minimal.json"
    path.write_text('{"sample_rate": 8000}')

    config = load_configuration(path)

    assert config.sample_rate == 8000
    assert config.render == AppConfig.default().render
    assert config.player.executable == "ffplay"


@pytest.mark.parametrize(
    "raw, key",
    [
        ({"sample_rate": 0}, "sample_rate"),
        ({"sample_rate": 44100.5}, "sample_rate"),
        ({"render": {"workers": 0}}, "render.workers"),
        ({"render": {"frames_per_block": -1}}, "render.frames_per_block"),
        ({"player": {"backend": "alsa"}}, "player.backend"),
        ({"player": {"timeout": -2}}, "player.timeout"),
    ],
)
def test_configuration_validation(raw, key) -> None:
    with pytest.raises(ConstructionError) as excinfo:
        parse_configuration(raw)
    assert key in str(excinfo.value)


def test_player_settings_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "custom.json"
    path.write_text(
        json.dumps(
            {
                "player": {"backend": "sounddevice", "timeout": 12, "show_waveform": False},
                "logging": {"level": "debug", "file": "logs/ziq.log"},
            }
        )
    )

    config = load_configuration(path)

    assert config.player.backend == "sounddevice"
    assert config.player.timeout == 12.0
    assert config.player.show_waveform is False
    assert config.logging.level == "DEBUG"
    assert config.logging.file == "logs/ziq.log"


def test_missing_configuration_file(tmp_path: Path) -> None:
    with pytest.raises(AudioIOError, match="missing.json"):
        load_configuration(tmp_path / "missing.json")


def test_invalid_json(tmp_path: Path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    with pytest.raises(ConstructionError):
        load_configuration(bad)
