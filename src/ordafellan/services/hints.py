from __future__ import annotations

import logging
import os
import re
from typing import Optional

from openai import OpenAI

from ordafellan.core.engine import is_guessable_letter, norm
from ordafellan.core.puzzles import HangmanPuzzle

logger = logging.getLogger(__name__)

# Letters only, so trailing punctuation never sticks to a word.
_WORD_RE = re.compile(r"[^\W\d_]+")


# Reject a hint if it contains the saying or any of its longer words (case-insensitive).
def _leaks_answer(text: str, solution: str) -> bool:
    low = norm(text)
    if norm(solution) in low:
        return True
    hint_words = set(_WORD_RE.findall(low))
    return any(len(w) > 3 and w in hint_words for w in _WORD_RE.findall(norm(solution)))


def _local_fallback_hint(solution: str) -> str:
    """Always-available local hint (structure only, no letters)."""
    words = solution.split()
    letters = sum(1 for ch in solution if is_guessable_letter(ch))
    return f"The saying has {len(words)} words and {letters} letters."


def llm_hint(solution: str, model: Optional[str] = None, temperature: float = 0.8) -> str:
    """
    Return ONE hint for `solution` using an LLM; fallback locally on failure.

    Rules:
    - OFFLINE_MODE=true (the default) or a missing OPENAI_API_KEY skips the LLM.
    - The hint must not contain the saying or any of its longer words.
    - On any error or rule violation, return a deterministic local hint.
    """
    api_key = os.getenv("OPENAI_API_KEY", "")
    offline = os.getenv("OFFLINE_MODE", "true").lower() == "true"
    if offline or not api_key:
        return _local_fallback_hint(solution)

    mdl = model or os.getenv("MODEL_NAME", "gpt-4o-mini")

    system = "You give gentle clues for a Faroese word-guessing game."
    user = (
        f"The hidden saying is '{solution}'. "
        "Give exactly ONE short hint, in the same language, that helps a player recognise it. "
        "Do NOT include the saying or any of its words. Reply with the hint only."
    )

    try:
        client = OpenAI(api_key=api_key)
        resp = client.chat.completions.create(
            model=mdl,
            messages=[{"role": "system", "content": system},
                      {"role": "user", "content": user}],
            temperature=temperature,
            max_tokens=80,
        )
        text = (resp.choices[0].message.content or "").strip()
        if not text or _leaks_answer(text, solution):
            return _local_fallback_hint(solution)
        words = text.split()
        if len(words) > 25:
            text = " ".join(words[:25])
        return text
    except Exception as exc:  # any client/API failure falls back
        logger.warning("LLM hint failed, using local hint: %s", exc)
        return _local_fallback_hint(solution)


def hint_for(puzzle: HangmanPuzzle) -> str:
    """Authored hint when the catalog has one, otherwise a generated one."""
    return puzzle.hint or llm_hint(puzzle.solution)


__all__ = ["llm_hint", "hint_for"]
