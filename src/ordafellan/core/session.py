from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence

from . import engine
from .daily import HANGMAN_EPOCH, QUIZ_EPOCH, local_date, to_iso_date
from .puzzles import CatalogError, DailyPick, HangmanPuzzle, QuizPuzzle, pick_for_date
from .state import DayResult, HangmanState, Stats
from .stats import apply_result
from .storage import GameStore, PuzzleKind

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """
    Everything one player session needs, passed around explicitly.

    Holds the typed store, the loaded catalogs, the current Stats and the
    local date the session considers "today". Only results for `today` feed
    the ledger; earlier days can be replayed from the archive and are saved,
    but they never touch the streak.
    """

    store: GameStore
    quiz_puzzles: List[QuizPuzzle] = field(default_factory=list)
    hangman_puzzles: List[HangmanPuzzle] = field(default_factory=list)
    today: date = field(default_factory=date.today)
    stats: Stats = field(default_factory=Stats)

    @classmethod
    def open(
        cls,
        store: GameStore,
        quiz_puzzles: Sequence[QuizPuzzle] = (),
        hangman_puzzles: Sequence[HangmanPuzzle] = (),
        today: Optional[date] = None,
    ) -> "GameSession":
        return cls(
            store=store,
            quiz_puzzles=list(quiz_puzzles),
            hangman_puzzles=list(hangman_puzzles),
            today=local_date(today) if today is not None else date.today(),
            stats=store.load_stats(),
        )

    # -- day resolution -------------------------------------------------

    def _day(self, day: Optional[date]) -> date:
        d = local_date(day) if day is not None else self.today
        if d > self.today:
            raise ValueError(f"Puzzle for {to_iso_date(d)} is not available yet.")
        return d

    def is_archive(self, day: Optional[date] = None) -> bool:
        return self._day(day) != self.today

    def quiz_pick(self, day: Optional[date] = None) -> DailyPick[QuizPuzzle]:
        if not self.quiz_puzzles:
            raise CatalogError("Quiz catalog is not loaded.")
        return pick_for_date(self.quiz_puzzles, self._day(day), QUIZ_EPOCH)

    def hangman_pick(self, day: Optional[date] = None) -> DailyPick[HangmanPuzzle]:
        if not self.hangman_puzzles:
            raise CatalogError("Hangman catalog is not loaded.")
        return pick_for_date(self.hangman_puzzles, self._day(day), HANGMAN_EPOCH)

    # -- hangman --------------------------------------------------------

    def hangman_state(self, day: Optional[date] = None) -> HangmanState:
        d = self._day(day)
        picked = self.hangman_pick(d)
        saved = self.store.load_hangman_guesses(picked.day_key(to_iso_date(d)))
        if saved is None:
            return engine.new_state()
        return engine.restore(picked.puzzle, saved)

    def guess(self, letter: str, day: Optional[date] = None) -> HangmanState:
        """
        Apply one guess to the day's hangman game and persist it.

        Invalid or repeated letters, and guesses after the game ended, leave
        the state (and the store) untouched. The stats ledger is updated on
        the playing -> won/lost edge only.
        """
        d = self._day(day)
        date_iso = to_iso_date(d)
        picked = self.hangman_pick(d)
        day_key = picked.day_key(date_iso)

        before = self.hangman_state(d)
        after = engine.guess(picked.puzzle, before, letter)
        if after == before:
            return before

        self.store.save_hangman(day_key, after)
        if not before.finished and after.finished:
            result = DayResult(date=date_iso, choice_index=-1, correct=after.status == "won")
            self._complete("hang", day_key, result)
        return after

    # -- quiz -----------------------------------------------------------

    def quiz_result(self, day: Optional[date] = None) -> Optional[DayResult]:
        d = self._day(day)
        return self.store.load_day_result(self.quiz_pick(d).day_key(to_iso_date(d)))

    def choose(self, choice_index: int, day: Optional[date] = None) -> DayResult:
        """
        Answer the day's quiz. Only the first answer counts; later calls
        return the stored result unchanged.
        """
        d = self._day(day)
        date_iso = to_iso_date(d)
        picked = self.quiz_pick(d)
        day_key = picked.day_key(date_iso)

        existing = self.store.load_day_result(day_key)
        if existing is not None:
            return existing

        result = engine.grade_choice(picked.puzzle, date_iso, choice_index)
        self.store.save_day_result(day_key, result)
        self._complete("quiz", day_key, result)
        return result

    # -- ledger ---------------------------------------------------------

    def _complete(self, kind: PuzzleKind, day_key: str, result: DayResult) -> None:
        if result.date != to_iso_date(self.today):
            logger.debug("Archive result for %s not counted in stats", result.date)
            return
        tag = f"{kind}__{day_key}"
        if self.stats.last_applied == tag:
            logger.info("Stats already updated for %s; skipping", tag)
            return
        self.stats = apply_result(self.stats, result).with_applied(tag)
        self.store.save_stats(self.stats)
        logger.info(
            "Recorded %s result for %s (streak=%d, played=%d)",
            "correct" if result.correct else "incorrect",
            result.date,
            self.stats.streak,
            self.stats.played,
        )
