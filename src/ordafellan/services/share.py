from __future__ import annotations

from ordafellan.core.engine import MAX_WRONG, lives_left
from ordafellan.core.state import DayResult, HangmanState, Stats

APP_NAME = "Orðafellan"


def _outcome(correct: bool) -> str:
    return "✅" if correct else "❌"


def quiz_share_text(result: DayResult, stats: Stats, countdown: str) -> str:
    """
    Spoiler-free summary of a quiz day.

    Only the date, right/wrong, the streak and the countdown are shared;
    neither the word nor the chosen option ever appears.
    """
    return "\n".join(
        [
            f"{APP_NAME} — {result.date}",
            _outcome(result.correct),
            f"Streak: {stats.streak}",
            f"New in: {countdown}",
        ]
    )


def hangman_share_text(date_iso: str, state: HangmanState, stats: Stats, countdown: str) -> str:
    """
    Spoiler-free summary of a finished hangman day.

    Includes lives left out of the maximum, but not the saying or any of the
    guessed letters.
    """
    if not state.finished:
        raise ValueError("Share text is only available once the game has ended.")
    return "\n".join(
        [
            f"{APP_NAME} Hangman — {date_iso}",
            f"{_outcome(state.status == 'won')} {lives_left(state)}/{MAX_WRONG}",
            f"Streak: {stats.streak}",
            f"New in: {countdown}",
        ]
    )
