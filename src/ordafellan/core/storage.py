from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Protocol, Tuple

from .state import DayResult, HangmanState, Stats

logger = logging.getLogger(__name__)

PuzzleKind = Literal["quiz", "hang"]

# Schema versions live in the key prefix; bumping one makes old saves
# invisible instead of misread.
KEY_STATS = "ff_stats_v2"
KEY_DAY_PREFIX = "ff_day_v3_"


def day_state_key(kind: PuzzleKind, day_key: str) -> str:
    return f"{KEY_DAY_PREFIX}{kind}__{day_key}"


class KeyValueStore(Protocol):
    """Device-local string store. `get` returns None for unknown keys."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Non-persistent store, used for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """
    Key/value store persisted as one JSON object on disk.

    Notes
    -----
    - The file is re-read on every `get` so two app reruns never hold stale
      copies; there is still no locking across processes.
    - A missing, unreadable or non-object file is treated as empty.
    - Writes go to a temporary file that replaces the original, so a crash
      mid-write leaves the previous contents intact.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path).expanduser()

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable store %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring store %s: top level is not an object", self.path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".store-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise


def _load_json(store: KeyValueStore, key: str) -> Any:
    raw = store.get(key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("Discarding corrupt value under %s", key)
        return None


class GameStore:
    """
    Typed access to the persisted records of the game.

    Every loader falls back to a default (fresh stats, no saved day) when the
    stored value is missing, corrupt or of the wrong shape; nothing here
    raises on bad data.
    """

    def __init__(self, backend: KeyValueStore) -> None:
        self.backend = backend

    def _save(self, key: str, payload: Any) -> None:
        self.backend.set(key, json.dumps(payload, ensure_ascii=False))

    # -- stats ----------------------------------------------------------

    def load_stats(self) -> Stats:
        data = _load_json(self.backend, KEY_STATS)
        if not isinstance(data, dict):
            return Stats()
        try:
            return Stats.from_dict(data)
        except (TypeError, ValueError) as exc:
            logger.warning("Resetting unreadable stats: %s", exc)
            return Stats()

    def save_stats(self, stats: Stats) -> None:
        self._save(KEY_STATS, stats.to_dict())

    # -- hangman --------------------------------------------------------

    def load_hangman_guesses(self, day_key: str) -> Optional[Tuple[str, ...]]:
        """
        Return the saved guesses for `day_key`, or None if there is no usable
        save. Only the guesses are returned; the engine rebuilds the rest.
        """
        data = _load_json(self.backend, day_state_key("hang", day_key))
        if not isinstance(data, dict):
            return None
        guesses = data.get("guesses")
        if not isinstance(guesses, list) or not all(isinstance(g, str) for g in guesses):
            logger.warning("Discarding malformed hangman save for %s", day_key)
            return None
        return tuple(guesses)

    def save_hangman(self, day_key: str, state: HangmanState) -> None:
        self._save(day_state_key("hang", day_key), state.to_dict())

    # -- quiz -----------------------------------------------------------

    def load_day_result(self, day_key: str) -> Optional[DayResult]:
        data = _load_json(self.backend, day_state_key("quiz", day_key))
        if not isinstance(data, dict):
            return None
        try:
            return DayResult.from_dict(data)
        except ValueError as exc:
            logger.warning("Discarding malformed quiz result for %s: %s", day_key, exc)
            return None

    def save_day_result(self, day_key: str, result: DayResult) -> None:
        self._save(day_state_key("quiz", day_key), result.to_dict())
