from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Literal, Optional, Tuple


GameStatus = Literal["playing", "won", "lost"]

_STATUSES = ("playing", "won", "lost")


@dataclass(frozen=True)
class HangmanState:
    """
    Immutable container for one day's hangman progress.

    Notes
    -----
    - The engine "returns a new state" after each guess; nothing mutates
      an existing instance.
    - `guesses` keeps insertion order so the saved history reads naturally,
      but the logic only ever treats it as a set.
    - `wrong` and `status` are derived by `core.engine`; this class only
      checks that the values are in range.
    """

    guesses: Tuple[str, ...] = ()
    wrong: int = 0
    status: GameStatus = "playing"

    def __post_init__(self) -> None:
        object.__setattr__(self, "guesses", tuple(self.guesses or ()))
        if self.wrong < 0:
            raise ValueError("`wrong` must be >= 0.")
        if self.status not in _STATUSES:
            raise ValueError("`status` must be one of {'playing', 'won', 'lost'}.")

    @property
    def finished(self) -> bool:
        return self.status != "playing"

    def to_dict(self) -> Dict[str, Any]:
        return {"guesses": list(self.guesses), "wrong": self.wrong, "status": self.status}


@dataclass(frozen=True)
class DayResult:
    """Outcome of one completed day. `choice_index` is -1 for hangman."""

    date: str
    choice_index: int
    correct: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date, "choiceIndex": self.choice_index, "correct": self.correct}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DayResult":
        """
        Build a DayResult from its stored JSON shape.

        Raises
        ------
        ValueError
            If a field is missing or has the wrong type.
        """
        date = data.get("date")
        choice = data.get("choiceIndex")
        correct = data.get("correct")
        if not isinstance(date, str) or not date:
            raise ValueError("`date` must be a non-empty string.")
        if not isinstance(choice, int) or isinstance(choice, bool):
            raise ValueError("`choiceIndex` must be an integer.")
        if not isinstance(correct, bool):
            raise ValueError("`correct` must be a boolean.")
        return cls(date=date, choice_index=choice, correct=correct)


@dataclass(frozen=True)
class Stats:
    """
    Per-device statistics ledger.

    Fields
    ------
    played, wins : int
        Completed days and correct days.
    streak, max_streak : int
        Current and best run of consecutive correct days.
    last_played : str | None
        ISO date of the last applied result.
    last_applied : str | None
        Tagged DayKey of the last applied result; used by the session to
        refuse counting the same day twice.
    """

    played: int = 0
    wins: int = 0
    streak: int = 0
    max_streak: int = 0
    last_played: Optional[str] = None
    last_applied: Optional[str] = None

    def __post_init__(self) -> None:
        for name in ("played", "wins", "streak", "max_streak"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValueError(f"`{name}` must be a non-negative integer.")
        if self.wins > self.played:
            raise ValueError("`wins` cannot exceed `played`.")

    @property
    def win_rate(self) -> float:
        return (self.wins / self.played * 100.0) if self.played else 0.0

    def with_applied(self, key: str) -> "Stats":
        return replace(self, last_applied=key)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "played": self.played,
            "wins": self.wins,
            "streak": self.streak,
            "maxStreak": self.max_streak,
        }
        if self.last_played is not None:
            data["lastPlayed"] = self.last_played
        if self.last_applied is not None:
            data["lastApplied"] = self.last_applied
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Stats":
        last_played = data.get("lastPlayed")
        last_applied = data.get("lastApplied")
        if last_played is not None and not isinstance(last_played, str):
            raise ValueError("`lastPlayed` must be a string.")
        if last_applied is not None and not isinstance(last_applied, str):
            raise ValueError("`lastApplied` must be a string.")
        return cls(
            played=data.get("played"),
            wins=data.get("wins"),
            streak=data.get("streak"),
            max_streak=data.get("maxStreak"),
            last_played=last_played,
            last_applied=last_applied,
        )
