from __future__ import annotations

import re
import unicodedata
from typing import AbstractSet, FrozenSet, Iterable, Literal

from .puzzles import HangmanPuzzle, QuizPuzzle
from .state import DayResult, GameStatus, HangmanState

MAX_WRONG = 6
PLACEHOLDER = "•"

# Faroese alphabet plus the loanword letters found on the keyboard.
_LETTER_RE = re.compile(r"[a-záðíóúýæø]")

KeyFeedback = Literal["unused", "correct", "wrong"]


def norm(ch: str) -> str:
    """
    Normalize a typed or displayed character for comparison.

    Composes combining accents (NFC) and lowercases, but never strips
    diacritics: 'ó' and 'o' stay different letters.
    """
    return unicodedata.normalize("NFC", ch or "").lower()


def is_guessable_letter(ch: str) -> bool:
    return _LETTER_RE.fullmatch(norm(ch)) is not None


def _compose(text: str) -> str:
    # catalogs may store accents as combining marks; compose before iterating
    return unicodedata.normalize("NFC", text or "")


def required_letters(solution: str) -> FrozenSet[str]:
    """Distinct normalized letters that must all be guessed to win."""
    return frozenset(norm(raw) for raw in _compose(solution) if is_guessable_letter(raw))


def mask(solution: str, guessed: AbstractSet[str]) -> str:
    """
    Return `solution` with every unguessed letter replaced by a placeholder.

    Notes
    -----
    - Spaces, punctuation and digits are shown as-is.
    - Revealed letters keep the casing and accent of the solution, not of
      the guess that revealed them. Combining accents are composed first.
    """
    out = []
    for raw in _compose(solution):
        if not is_guessable_letter(raw):
            out.append(raw)
        else:
            out.append(raw if norm(raw) in guessed else PLACEHOLDER)
    return "".join(out)


def new_state() -> HangmanState:
    return HangmanState(guesses=(), wrong=0, status="playing")


def _outcome(needed: FrozenSet[str], guessed: AbstractSet[str], wrong: int) -> GameStatus:
    """
    Derive status from the guesses alone.

    Rules
    -----
    - Won  : every required letter guessed (an empty requirement never wins).
    - Lost : `wrong >= MAX_WRONG`.
    - Else : playing.
    """
    if needed and needed <= guessed:
        return "won"
    if wrong >= MAX_WRONG:
        return "lost"
    return "playing"


def guess(puzzle: HangmanPuzzle, state: HangmanState, raw_letter: str) -> HangmanState:
    """
    Apply a single-letter guess and return a new HangmanState.

    Behavior
    --------
    - Ignores input once the game is won or lost.
    - Ignores anything that is not one guessable letter after normalization.
    - Repeated guesses are no-ops.
    - Increments `wrong` by 1 if the letter is not in the solution.
    """
    if state.status != "playing":
        return state

    letter = norm(raw_letter)
    if not is_guessable_letter(letter):
        return state  # ignore invalid input silently

    if letter in state.guesses:
        return state

    guesses = state.guesses + (letter,)
    needed = required_letters(puzzle.solution)
    wrong = state.wrong + (0 if letter in needed else 1)

    return HangmanState(guesses=guesses, wrong=wrong, status=_outcome(needed, set(guesses), wrong))


def restore(puzzle: HangmanPuzzle, guesses: Iterable[str]) -> HangmanState:
    """
    Rebuild a state by replaying saved guesses through `guess`.

    Stored `wrong`/`status` values are never trusted; they are recomputed so a
    restored state always satisfies the engine's invariants.
    """
    state = new_state()
    for letter in guesses:
        state = guess(puzzle, state, letter)
    return state


def lives_left(state: HangmanState) -> int:
    return MAX_WRONG - min(max(state.wrong, 0), MAX_WRONG)


def letter_feedback(puzzle: HangmanPuzzle, state: HangmanState, letter: str) -> KeyFeedback:
    """Colouring hint for an on-screen key."""
    ch = norm(letter)
    if ch not in state.guesses:
        return "unused"
    return "correct" if ch in required_letters(puzzle.solution) else "wrong"


def grade_choice(puzzle: QuizPuzzle, date_iso: str, choice_index: int) -> DayResult:
    """
    Grade a multiple-choice answer for the day `date_iso`.

    Raises
    ------
    ValueError
        If `choice_index` does not point at one of the puzzle's choices.
    """
    if not 0 <= choice_index < len(puzzle.choices):
        raise ValueError(f"choice_index must be 0..{len(puzzle.choices) - 1}, got {choice_index}")
    return DayResult(date=date_iso, choice_index=choice_index, correct=choice_index == puzzle.answer_index)
