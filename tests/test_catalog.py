import json
from pathlib import Path

import pytest
import requests

from ordafellan.core.puzzles import CatalogError
from ordafellan.services import catalog

DATA_DIR = Path(__file__).resolve().parent.parent / "data"

QUIZ_PAYLOAD = [
    {"id": "q1", "word": "Lundi", "prompt": "Hvat?", "choices": ["a", "b", "c", "d"], "answerIndex": 0}
]


class _FakeResponse:
    def __init__(self, payload=None, status=200, body_error=False):
        self.payload = payload
        self.status_code = status
        self.body_error = body_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)

    def json(self):
        if self.body_error:
            raise ValueError("no json")
        return self.payload


def _patch_get(monkeypatch, response=None, exc=None):
    calls = []

    def fake_get(url, **kwargs):
        calls.append((url, kwargs))
        if exc is not None:
            raise exc
        return response

    monkeypatch.setattr(catalog.requests, "get", fake_get)
    return calls


def test_load_quiz_from_url(monkeypatch):
    calls = _patch_get(monkeypatch, _FakeResponse(QUIZ_PAYLOAD))
    puzzles = catalog.load_quiz_puzzles("https://example.org/data/puzzles.json")
    assert [p.word for p in puzzles] == ["Lundi"]
    assert calls[0][1]["timeout"] == 10


def test_http_error_is_catalog_error(monkeypatch):
    _patch_get(monkeypatch, _FakeResponse(status=404))
    with pytest.raises(CatalogError, match="404"):
        catalog.load_quiz_puzzles("https://example.org/puzzles.json")


def test_network_error_is_catalog_error(monkeypatch):
    _patch_get(monkeypatch, exc=requests.ConnectionError("down"))
    with pytest.raises(CatalogError):
        catalog.load_hangman_puzzles("http://example.org/hangman.json")


def test_non_json_body_is_catalog_error(monkeypatch):
    _patch_get(monkeypatch, _FakeResponse(body_error=True))
    with pytest.raises(CatalogError, match="not valid JSON"):
        catalog.load_hangman_puzzles("https://example.org/hangman.json")


def test_invalid_shape_is_catalog_error(monkeypatch):
    _patch_get(monkeypatch, _FakeResponse([{**QUIZ_PAYLOAD[0], "answerIndex": 7}]))
    with pytest.raises(CatalogError, match="answerIndex"):
        catalog.load_quiz_puzzles("https://example.org/puzzles.json")


def test_load_from_local_file(tmp_path):
    path = tmp_path / "hangman.json"
    path.write_text(json.dumps([{"id": "h1", "solution": "Eingin er smiður"}]), encoding="utf-8")
    puzzles = catalog.load_hangman_puzzles(str(path))
    assert puzzles[0].solution == "Eingin er smiður"


def test_missing_local_file(tmp_path):
    with pytest.raises(CatalogError):
        catalog.load_quiz_puzzles(str(tmp_path / "nope.json"))


def test_bundled_catalogs_are_valid():
    assert catalog.load_quiz_puzzles(str(DATA_DIR / "puzzles.json"))
    assert catalog.load_hangman_puzzles(str(DATA_DIR / "hangman.json"))
