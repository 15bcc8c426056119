"""
Central configuration: board presets, live-play settings and logging level.

Live-play settings can be overridden from the environment or a ``.env``
file next to this module:

    MINESWEEPER_URL        game page to open
    MINESWEEPER_DELAY      pause after each reveal click, in seconds
    MINESWEEPER_HEADLESS   "1"/"true" to run Chrome without a window
    MINESWEEPER_LOG_LEVEL  DEBUG, INFO, WARNING, ...
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

from dotenv import load_dotenv

from board import validate_dimensions

BASE_DIR = Path(__file__).resolve().parent
load_dotenv(dotenv_path=BASE_DIR / ".env")

LOG_LEVEL = os.getenv("MINESWEEPER_LOG_LEVEL", "WARNING").upper()

DEFAULT_URL = "https://minesweeper.online/"
DEFAULT_DELAY = 0.05


@dataclass(frozen=True)
class GameConfig:
    """Size and mine count of a simulated board."""
    width: int
    height: int
    mines: int
    name: str = "Custom"

    def validate(self) -> "GameConfig":
        validate_dimensions(self.width, self.height, self.mines)
        return self


BEGINNER = GameConfig(width=9, height=9, mines=10, name="Beginner")
INTERMEDIATE = GameConfig(width=16, height=16, mines=40, name="Intermediate")
EXPERT = GameConfig(width=30, height=16, mines=99, name="Expert")

PRESETS: Dict[str, GameConfig] = {
    "beginner": BEGINNER,
    "intermediate": INTERMEDIATE,
    "expert": EXPERT,
}

DEFAULT_GAME = INTERMEDIATE


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class OnlineConfig:
    """Settings for playing in a real browser."""
    url: str = DEFAULT_URL
    delay: float = DEFAULT_DELAY
    headless: bool = False

    @classmethod
    def from_env(cls) -> "OnlineConfig":
        return cls(
            url=os.getenv("MINESWEEPER_URL", DEFAULT_URL),
            delay=float(os.getenv("MINESWEEPER_DELAY", DEFAULT_DELAY)),
            headless=_env_flag("MINESWEEPER_HEADLESS"),
        )
