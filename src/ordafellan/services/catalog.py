from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, List, TypeVar

import requests

from ordafellan.core.puzzles import (
    CatalogError,
    HangmanPuzzle,
    QuizPuzzle,
    parse_hangman_puzzles,
    parse_quiz_puzzles,
)

logger = logging.getLogger(__name__)

_TIMEOUT_SECONDS = 10

T = TypeVar("T")


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def fetch_json(source: str) -> Any:
    """
    Fetch and decode a JSON document from a URL or a local file path.

    Raises
    ------
    CatalogError
        On network/HTTP errors, missing files or a body that is not JSON.
    """
    if _is_url(source):
        try:
            resp = requests.get(source, timeout=_TIMEOUT_SECONDS, headers={"Cache-Control": "no-store"})
            resp.raise_for_status()
            return resp.json()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else "?"
            raise CatalogError(f"Failed to load puzzles: {status}") from exc
        except ValueError as exc:
            raise CatalogError(f"Puzzle catalog at {source} is not valid JSON") from exc
        except requests.RequestException as exc:
            raise CatalogError(f"Failed to load puzzles: {exc}") from exc

    path = Path(source)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise CatalogError(f"Failed to load puzzles from {path}: {exc}") from exc
    except ValueError as exc:
        raise CatalogError(f"Puzzle catalog {path} is not valid JSON") from exc


def _load(source: str, parse: Callable[[Any], List[T]], label: str) -> List[T]:
    puzzles = parse(fetch_json(source))
    logger.info("Loaded %d %s puzzles from %s", len(puzzles), label, source)
    return puzzles


def load_quiz_puzzles(source: str) -> List[QuizPuzzle]:
    """One-shot load of the quiz catalog; raises CatalogError on any problem."""
    return _load(source, parse_quiz_puzzles, "quiz")


def load_hangman_puzzles(source: str) -> List[HangmanPuzzle]:
    """One-shot load of the hangman catalog; raises CatalogError on any problem."""
    return _load(source, parse_hangman_puzzles, "hangman")
