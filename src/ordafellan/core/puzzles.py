from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Generic, List, Optional, Sequence, Tuple, TypeVar

from .daily import DateLike, day_index


class CatalogError(RuntimeError):
    """A puzzle catalog could not be fetched or failed validation."""


@dataclass(frozen=True)
class HangmanPuzzle:
    id: str
    solution: str
    hint: Optional[str] = None


@dataclass(frozen=True)
class QuizPuzzle:
    id: str
    word: str
    prompt: str
    choices: Tuple[str, ...]
    answer_index: int
    explain: Optional[str] = None


P = TypeVar("P", HangmanPuzzle, QuizPuzzle)


@dataclass(frozen=True)
class DailyPick(Generic[P]):
    """A puzzle together with the day index it was selected for."""

    puzzle: P
    day_index: int

    def day_key(self, date_iso: str) -> str:
        """
        Composite key scoping one day's saved progress.

        Date, day index and puzzle id are all included so that moving the
        epoch or reshuffling the catalog never resurrects a stale save.
        """
        return f"{date_iso}__{self.day_index}__{self.puzzle.id}"


def pick(puzzles: Sequence[P], index: int) -> DailyPick[P]:
    """
    Select the puzzle for `index`, wrapping around the catalog.

    The catalog is cyclic: indices past the end, or before the epoch
    (negative), still resolve to a well-defined entry.
    """
    n = len(puzzles)
    return DailyPick(puzzle=puzzles[((index % n) + n) % n], day_index=index)


def pick_for_date(puzzles: Sequence[P], d: DateLike, epoch: date) -> DailyPick[P]:
    return pick(puzzles, day_index(d, epoch))


def _optional_text(record: dict, key: str) -> Optional[str]:
    value = record.get(key)
    return value if isinstance(value, str) and value else None


def parse_quiz_puzzles(data: Any) -> List[QuizPuzzle]:
    """
    Validate a decoded quiz catalog and convert it to `QuizPuzzle` records.

    Rules
    -----
    - Payload must be a non-empty list of objects.
    - Every entry needs a `word` and a `prompt`.
    - `choices` must be a list of exactly 4 non-empty strings.
    - `answerIndex` must be an integer in 0..3.

    Raises
    ------
    CatalogError
        On the first violation; no partial list is ever returned.
    """
    if not isinstance(data, list) or not data:
        raise CatalogError("Quiz catalog is empty.")

    puzzles: List[QuizPuzzle] = []
    for i, p in enumerate(data):
        if not isinstance(p, dict):
            raise CatalogError(f"Puzzle {i} is not an object")
        if not p.get("word") or not p.get("prompt"):
            raise CatalogError(f"Puzzle {i} missing word/prompt")
        choices = p.get("choices")
        if (
            not isinstance(choices, list)
            or len(choices) != 4
            or not all(isinstance(c, str) and c.strip() for c in choices)
        ):
            raise CatalogError(f"Puzzle {i} must have 4 choices")
        answer = p.get("answerIndex")
        if not isinstance(answer, int) or isinstance(answer, bool) or not 0 <= answer <= 3:
            raise CatalogError(f"Puzzle {i} answerIndex must be 0..3")
        puzzles.append(
            QuizPuzzle(
                id=str(p.get("id") or i),
                word=str(p["word"]),
                prompt=str(p["prompt"]),
                choices=tuple(choices),
                answer_index=answer,
                explain=_optional_text(p, "explain"),
            )
        )
    return puzzles


def parse_hangman_puzzles(data: Any) -> List[HangmanPuzzle]:
    """Validate a decoded hangman catalog (non-empty list with id + solution)."""
    if not isinstance(data, list) or not data:
        raise CatalogError("Hangman puzzle list is empty.")

    puzzles: List[HangmanPuzzle] = []
    for i, p in enumerate(data):
        if not isinstance(p, dict):
            raise CatalogError(f"Hangman puzzle {i} is not an object")
        if not p.get("id") or not isinstance(p.get("solution"), str) or not p["solution"].strip():
            raise CatalogError(f"Hangman puzzle {i} missing id/solution")
        puzzles.append(HangmanPuzzle(id=str(p["id"]), solution=p["solution"], hint=_optional_text(p, "hint")))
    return puzzles
