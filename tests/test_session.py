from datetime import date, timedelta

import pytest

from ordafellan.core.daily import HANGMAN_EPOCH, QUIZ_EPOCH, day_index
from ordafellan.core.puzzles import CatalogError, HangmanPuzzle, QuizPuzzle
from ordafellan.core.session import GameSession
from ordafellan.core.state import DayResult, Stats
from ordafellan.core.storage import GameStore, MemoryStore

TODAY = date(2026, 1, 10)

QUIZ = [
    QuizPuzzle(id=f"q{i}", word=f"orð{i}", prompt="?", choices=("a", "b", "c", "d"), answer_index=i % 4)
    for i in range(3)
]
HANGMAN = [HangmanPuzzle(id="h0", solution="Ól"), HangmanPuzzle(id="h1", solution="Eg")]


def _open(backend=None, today=TODAY):
    store = GameStore(backend if backend is not None else MemoryStore())
    return GameSession.open(store, quiz_puzzles=QUIZ, hangman_puzzles=HANGMAN, today=today)


def test_picks_are_deterministic():
    session = _open()
    q = session.quiz_pick()
    h = session.hangman_pick()
    assert q.day_index == day_index(TODAY, QUIZ_EPOCH)
    assert h.day_index == day_index(TODAY, HANGMAN_EPOCH)
    assert q.puzzle == QUIZ[q.day_index % len(QUIZ)]
    assert _open().quiz_pick() == q


def test_hangman_win_updates_stats_once():
    session = _open()
    solution = session.hangman_pick().puzzle.solution
    letters = sorted({ch.lower() for ch in solution})

    for ch in letters:
        state = session.guess(ch)
    assert state.status == "won"
    assert (session.stats.played, session.stats.wins, session.stats.streak) == (1, 1, 1)

    # further guesses after the end change nothing
    assert session.guess("x") == state
    assert session.stats.played == 1


def test_hangman_progress_is_persisted():
    backend = MemoryStore()
    session = _open(backend)
    session.guess("x")
    session.guess("x")
    reopened = _open(backend)
    state = reopened.hangman_state()
    assert state.guesses == ("x",)
    assert state.wrong == 1


def test_hangman_loss_resets_streak():
    backend = MemoryStore()
    GameStore(backend).save_stats(Stats(played=3, wins=3, streak=3, max_streak=3, last_played="2026-01-09"))
    session = _open(backend)
    for ch in "bcdfhj":
        session.guess(ch)
    assert session.hangman_state().status == "lost"
    assert session.stats.streak == 0
    assert session.stats.max_streak == 3
    assert GameStore(backend).load_stats() == session.stats


def test_quiz_answer_counts_once():
    session = _open()
    puzzle = session.quiz_pick().puzzle
    first = session.choose(puzzle.answer_index)
    assert first.correct
    again = session.choose((puzzle.answer_index + 1) % 4)
    assert again == first
    assert session.quiz_result() == first
    assert session.stats.played == 1


def test_consecutive_days_build_streak():
    backend = MemoryStore()
    for offset in range(3):
        session = _open(backend, today=TODAY + timedelta(days=offset))
        session.choose(session.quiz_pick().puzzle.answer_index)
    assert (session.stats.streak, session.stats.max_streak, session.stats.played) == (3, 3, 3)


def test_archive_day_is_saved_but_not_counted():
    session = _open()
    yesterday = TODAY - timedelta(days=1)
    assert session.is_archive(yesterday)
    result = session.choose(0, day=yesterday)
    assert result.date == "2026-01-09"
    assert session.quiz_result(yesterday) == result
    assert session.quiz_result() is None
    assert session.stats == Stats()


def test_future_day_is_locked():
    session = _open()
    with pytest.raises(ValueError):
        session.quiz_pick(TODAY + timedelta(days=1))


def test_same_day_key_is_not_applied_twice():
    session = _open()
    picked = session.quiz_pick()
    result = DayResult(date="2026-01-10", choice_index=0, correct=True)
    session._complete("quiz", picked.day_key("2026-01-10"), result)
    session._complete("quiz", picked.day_key("2026-01-10"), result)
    assert session.stats.played == 1
    assert session.stats.last_applied == f"quiz__{picked.day_key('2026-01-10')}"


def test_missing_catalog_raises():
    session = GameSession.open(GameStore(MemoryStore()), today=TODAY)
    with pytest.raises(CatalogError):
        session.hangman_pick()
