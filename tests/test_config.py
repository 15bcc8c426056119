# tests/test_config.py

import pytest

from config import EXPERT, PRESETS, GameConfig, OnlineConfig, DEFAULT_URL
from errors import ConfigurationError


def test_presets_are_valid():
    for name, preset in PRESETS.items():
        assert preset.validate() is preset
        assert preset.name.lower() == name


def test_expert_dimensions():
    assert (EXPERT.width, EXPERT.height, EXPERT.mines) == (30, 16, 99)


@pytest.mark.parametrize("width,height,mines", [(0, 5, 1), (5, 5, 0), (3, 3, 9)])
def test_invalid_game_config(width, height, mines):
    with pytest.raises(ConfigurationError):
        GameConfig(width, height, mines).validate()


def test_online_config_from_env(monkeypatch):
    monkeypatch.setenv("MINESWEEPER_URL", "https://example.test/game")
    monkeypatch.setenv("MINESWEEPER_DELAY", "0.2")
    monkeypatch.setenv("MINESWEEPER_HEADLESS", "true")

    config = OnlineConfig.from_env()

    assert config.url == "https://example.test/game"
    assert config.delay == pytest.approx(0.2)
    assert config.headless is True


def test_online_config_defaults(monkeypatch):
    for name in ("MINESWEEPER_URL", "MINESWEEPER_DELAY", "MINESWEEPER_HEADLESS"):
        monkeypatch.delenv(name, raising=False)

    config = OnlineConfig.from_env()

    assert config.url == DEFAULT_URL
    assert config.headless is False
