import threading
from datetime import date

import pytest

from src.ritual_sessions.ritual_sessions.core.enums import SessionType
from src.ritual_sessions.ritual_sessions.core.exceptions import ConcurrentTransitionError
from src.ritual_sessions.ritual_sessions.sessions.locks import TransitionLocks
from src.ritual_sessions.ritual_sessions.sessions.model import SessionKey

KEY = SessionKey(date(2026, 10, 12), SessionType.STANDUP)


def test_second_holder_fails_fast():
    locks = TransitionLocks()
    with locks.hold(KEY):
        assert locks.is_held(KEY)
        with pytest.raises(ConcurrentTransitionError):
            with locks.hold(KEY):
                pass
    assert not locks.is_held(KEY)


def test_keys_are_independent():
    locks = TransitionLocks()
    other = SessionKey(date(2026, 10, 12), SessionType.LEARNING_HOUR)
    with locks.hold(KEY):
        with locks.hold(other):
            assert locks.is_held(other)


def test_released_after_an_error():
    locks = TransitionLocks()
    with pytest.raises(RuntimeError):
        with locks.hold(KEY):
            raise RuntimeError("boom")
    assert not locks.is_held(KEY)


def test_only_one_thread_wins():
    locks = TransitionLocks()
    inside = threading.Event()
    release = threading.Event()
    outcomes = []

    def first():
        with locks.hold(KEY):
            inside.set()
            release.wait(timeout=5)
        outcomes.append("first")

    t = threading.Thread(target=first)
    t.start()
    assert inside.wait(timeout=5)
    try:
        with pytest.raises(ConcurrentTransitionError):
            with locks.hold(KEY):
                outcomes.append("second")
    finally:
        release.set()
        t.join(timeout=5)

    assert outcomes == ["first"]
