from __future__ import annotations

from dataclasses import replace

from .daily import days_between
from .state import DayResult, Stats


def _extends_streak(last_played: str, today: str) -> bool:
    try:
        return days_between(last_played, today) == 1
    except ValueError:
        return False  # unreadable history counts as a gap


def apply_result(stats: Stats, result: DayResult) -> Stats:
    """
    Fold one completed day into the ledger and return the new Stats.

    Rules
    -----
    - `played` always goes up by one; `wins` only for a correct result.
    - Correct: the streak grows only when the previous result was exactly one
      local day earlier; no history, a same-day replay or any gap restarts it
      at 1.
    - Incorrect: the streak drops to 0 regardless of history.
    - `max_streak` keeps the peak; `last_played` becomes `result.date`.

    Notes
    -----
    Pure but not idempotent: applying the same result twice counts it twice.
    `GameSession` is responsible for calling this once per day.
    """
    if result.correct:
        if stats.last_played and _extends_streak(stats.last_played, result.date):
            streak = stats.streak + 1
        else:
            streak = 1
    else:
        streak = 0

    return replace(
        stats,
        played=stats.played + 1,
        wins=stats.wins + (1 if result.correct else 0),
        streak=streak,
        max_streak=max(stats.max_streak, streak),
        last_played=result.date,
    )
