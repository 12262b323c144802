import json

import pytest

from ordafellan.core.state import DayResult, HangmanState, Stats
from ordafellan.core.storage import (
    KEY_STATS,
    GameStore,
    JsonFileStore,
    MemoryStore,
    day_state_key,
)


@pytest.fixture(params=["memory", "file"])
def backend(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    return JsonFileStore(tmp_path / "store.json")


def test_set_then_get(backend):
    backend.set("k", '{"a": 1}')
    assert backend.get("k") == '{"a": 1}'


def test_unknown_key_is_none(backend):
    assert backend.get("missing") is None


def test_file_store_survives_reopen(tmp_path):
    path = tmp_path / "nested" / "store.json"
    JsonFileStore(path).set("k", "v")
    assert JsonFileStore(path).get("k") == "v"


def test_corrupt_file_reads_as_empty(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonFileStore(path)
    assert store.get("k") is None
    store.set("k", "v")
    assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v"}


def test_non_object_file_reads_as_empty(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("[1, 2]", encoding="utf-8")
    assert JsonFileStore(path).get("0") is None


def test_keys_are_namespaced_by_kind():
    assert day_state_key("quiz", "2026-01-01__9__q1") == "ff_day_v3_quiz__2026-01-01__9__q1"
    assert day_state_key("hang", "2026-01-01__9__q1") != day_state_key("quiz", "2026-01-01__9__q1")


def test_stats_round_trip(backend):
    store = GameStore(backend)
    stats = Stats(played=5, wins=4, streak=2, max_streak=3, last_played="2026-01-05", last_applied="quiz__x")
    store.save_stats(stats)
    assert store.load_stats() == stats


def test_stats_default_when_absent():
    assert GameStore(MemoryStore()).load_stats() == Stats()


@pytest.mark.parametrize(
    "raw",
    [
        "{oops",
        "[]",
        '"text"',
        '{"played": 1}',
        '{"played": -1, "wins": 0, "streak": 0, "maxStreak": 0}',
        '{"played": 1, "wins": 2, "streak": 0, "maxStreak": 0}',
        '{"played": "1", "wins": 0, "streak": 0, "maxStreak": 0}',
        '{"played": 1, "wins": 0, "streak": 0, "maxStreak": 0, "lastPlayed": 5}',
    ],
)
def test_corrupt_stats_fall_back_to_default(raw):
    store = GameStore(MemoryStore({KEY_STATS: raw}))
    assert store.load_stats() == Stats()


def test_stats_json_shape():
    backend = MemoryStore()
    GameStore(backend).save_stats(Stats(played=1, wins=1, streak=1, max_streak=1, last_played="2026-01-01"))
    assert json.loads(backend.get(KEY_STATS)) == {
        "played": 1,
        "wins": 1,
        "streak": 1,
        "maxStreak": 1,
        "lastPlayed": "2026-01-01",
    }


def test_day_result_round_trip(backend):
    store = GameStore(backend)
    result = DayResult(date="2026-01-01", choice_index=3, correct=False)
    store.save_day_result("2026-01-01__9__q1", result)
    assert store.load_day_result("2026-01-01__9__q1") == result
    assert store.load_day_result("2026-01-02__10__q2") is None


@pytest.mark.parametrize("raw", ["nope", "{}", '{"date": "2026-01-01", "choiceIndex": "1", "correct": true}'])
def test_malformed_day_result_is_absent(raw):
    store = GameStore(MemoryStore({day_state_key("quiz", "k"): raw}))
    assert store.load_day_result("k") is None


def test_hangman_guesses_round_trip(backend):
    store = GameStore(backend)
    store.save_hangman("k", HangmanState(guesses=("á", "b"), wrong=1, status="playing"))
    assert store.load_hangman_guesses("k") == ("á", "b")
    assert store.load_hangman_guesses("other") is None


@pytest.mark.parametrize("raw", ["[", '{"guesses": "ab"}', '{"guesses": [1, 2]}', "null"])
def test_malformed_hangman_save_is_absent(raw):
    store = GameStore(MemoryStore({day_state_key("hang", "k"): raw}))
    assert store.load_hangman_guesses("k") is None
