from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv


@dataclass(frozen=True)
class Settings:
    """Runtime settings read from the environment (and an optional .env)."""

    quiz_catalog: str = "data/puzzles.json"
    hangman_catalog: str = "data/hangman.json"
    store_path: str = "~/.ordafellan/store.json"
    log_level: str = "INFO"


def load_settings() -> Settings:
    """
    Load `.env` (searched from the working directory up) and build Settings.

    Existing environment variables win over `.env` values. Epochs and the
    wrong-guess limit are constants in `core` and are not configurable.
    """
    load_dotenv(find_dotenv(usecwd=True), override=False)
    defaults = Settings()
    return Settings(
        quiz_catalog=os.getenv("ORDAFELLAN_QUIZ_CATALOG", defaults.quiz_catalog),
        hangman_catalog=os.getenv("ORDAFELLAN_HANGMAN_CATALOG", defaults.hangman_catalog),
        store_path=os.getenv("ORDAFELLAN_STORE", defaults.store_path),
        log_level=os.getenv("ORDAFELLAN_LOG_LEVEL", defaults.log_level).upper(),
    )
