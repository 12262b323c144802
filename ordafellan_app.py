from __future__ import annotations

import logging
from datetime import date, timedelta

import streamlit as st

from ordafellan.config import load_settings

settings = load_settings()  # also loads .env into the process env
logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# --- Core game imports ---
from ordafellan.core.daily import (
    HANGMAN_EPOCH,
    QUIZ_EPOCH,
    format_countdown,
    seconds_until_next_local_midnight,
    to_iso_date,
)
from ordafellan.core.engine import MAX_WRONG, letter_feedback, lives_left, mask
from ordafellan.core.puzzles import CatalogError
from ordafellan.core.session import GameSession
from ordafellan.core.storage import GameStore, JsonFileStore

# --- Services ---
from ordafellan.services.catalog import load_hangman_puzzles, load_quiz_puzzles
from ordafellan.services.hints import hint_for
from ordafellan.services.share import hangman_share_text, quiz_share_text

KEYBOARD_ROWS = [
    ["A", "Á", "B", "C", "D", "Ð", "E", "F", "G", "H"],
    ["I", "Í", "J", "K", "L", "M", "N", "O", "Ó", "P"],
    ["Q", "R", "S", "T", "U", "Ú", "V", "W", "X", "Y", "Ý", "Z", "Æ", "Ø"],
]

_KEY_BADGE = {"unused": "", "correct": "✓", "wrong": "×"}


# =======================================
# Session-state helpers
# =======================================

def _ensure_session() -> GameSession:
    """
    Load both catalogs once per browser session and build the GameSession.

    A failed load is terminal for the session: the error is remembered and
    shown on every rerun, with no retry.
    """
    if "load_error" in st.session_state:
        st.error(st.session_state["load_error"])
        st.stop()

    today = date.today()
    session = st.session_state.get("session")
    if isinstance(session, GameSession) and session.today == today:
        return session

    try:
        if "catalogs" not in st.session_state:
            st.session_state["catalogs"] = (
                load_quiz_puzzles(settings.quiz_catalog),
                load_hangman_puzzles(settings.hangman_catalog),
            )
    except CatalogError as exc:
        st.session_state["load_error"] = str(exc)
        st.error(str(exc))
        st.stop()

    quiz, hangman = st.session_state["catalogs"]
    store = GameStore(JsonFileStore(settings.store_path))
    session = GameSession.open(store, quiz_puzzles=quiz, hangman_puzzles=hangman, today=today)
    st.session_state["session"] = session
    return session


def _countdown() -> str:
    return format_countdown(seconds_until_next_local_midnight())


# =========
# Views
# =========

def _quiz_view(session: GameSession, day: date) -> None:
    picked = session.quiz_pick(day)
    puzzle = picked.puzzle
    result = session.quiz_result(day)

    st.subheader("Dagsins orð")
    st.markdown(f"## {puzzle.word}")
    st.write(puzzle.prompt)

    for idx, choice in enumerate(puzzle.choices):
        label = choice
        if result is not None:
            if idx == puzzle.answer_index:
                label = f"{choice} ✓"
            elif idx == result.choice_index:
                label = f"{choice} ×"
        if st.button(label, key=f"choice-{picked.day_key(to_iso_date(day))}-{idx}",
                     disabled=result is not None, use_container_width=True):
            session.choose(idx, day)
            st.rerun()

    if result is None:
        return

    if result.correct:
        st.success("Rætt ✅")
    else:
        st.error("Ikki heilt ❌")
    if puzzle.explain:
        st.info(puzzle.explain)

    if not session.is_archive(day):
        st.caption("Share result (copy below). Only right/wrong is shared, never the word.")
        st.code(quiz_share_text(result, session.stats, _countdown()), language=None)


def _hangman_view(session: GameSession, day: date) -> None:
    picked = session.hangman_pick(day)
    puzzle = picked.puzzle
    state = session.hangman_state(day)
    day_iso = to_iso_date(day)

    st.subheader("Dagsins orðatak")
    st.markdown(f"### `{mask(puzzle.solution, set(state.guesses))}`")
    st.caption(f"Lives: {'●' * lives_left(state)}{'○' * (MAX_WRONG - lives_left(state))}")
    st.progress(state.wrong / MAX_WRONG)

    with st.expander("Need a hint?"):
        hint_key = f"hint-{picked.day_key(day_iso)}"
        if st.button("✨ Show hint", key=f"btn-{hint_key}"):
            with st.spinner("Thinking..."):
                st.session_state[hint_key] = hint_for(puzzle)
        if st.session_state.get(hint_key):
            st.info(st.session_state[hint_key])

    # ---- On-screen keyboard ----
    for row in KEYBOARD_ROWS:
        cols = st.columns(len(row))
        for col, letter in zip(cols, row):
            feedback = letter_feedback(puzzle, state, letter)
            label = f"{letter}{_KEY_BADGE[feedback]}"
            if col.button(label, key=f"key-{day_iso}-{letter}",
                          disabled=feedback != "unused" or state.finished):
                session.guess(letter, day)
                st.rerun()

    # ---- Typed guesses (physical keyboard) ----
    with st.form("guess_form", clear_on_submit=True):
        typed = st.text_input("Or type a letter:", max_chars=1)
        if st.form_submit_button("Guess") and typed:
            session.guess(typed, day)
            st.rerun()

    if state.status == "won":
        st.success("🎉 Rætt! You found the saying.")
    elif state.status == "lost":
        st.error(f"💀 Ikki heilt. The saying was: **{puzzle.solution}**")

    if state.finished and not session.is_archive(day):
        st.caption("Share result (copy below). The saying itself is never shared.")
        st.code(hangman_share_text(day_iso, state, session.stats, _countdown()), language=None)


# =========
# The App
# =========

def main() -> None:
    st.set_page_config(page_title="Orðafellan", page_icon="🧩", layout="centered")
    st.title("🧩 Orðafellan")
    st.caption("Eitt spæl um dagin")

    session = _ensure_session()

    # ---- Sidebar ----
    with st.sidebar:
        st.header("Game")
        mode = st.radio("Mode", ["Quiz", "Hangman"], index=0)
        epoch = QUIZ_EPOCH if mode == "Quiz" else HANGMAN_EPOCH
        day = st.date_input(
            "Day",
            value=session.today,
            min_value=min(epoch, session.today - timedelta(days=1)),
            max_value=session.today,
        )
        if session.is_archive(day):
            st.caption("Archive day: progress is saved but does not count toward stats.")

        with st.expander("📊 Stats", expanded=True):
            s = session.stats
            c1, c2 = st.columns(2); c1.metric("Played", s.played); c2.metric("Wins", s.wins)
            c3, c4 = st.columns(2); c3.metric("Streak", s.streak); c4.metric("Best", s.max_streak)
            st.caption(f"Win rate: {s.win_rate:.0f}%")

    st.caption(f"{to_iso_date(day)} · New puzzle in {_countdown()}")

    if mode == "Quiz":
        _quiz_view(session, day)
    else:
        _hangman_view(session, day)

    st.divider()
    st.caption("One puzzle per day · Stats saved on this device")


if __name__ == "__main__":
    main()
