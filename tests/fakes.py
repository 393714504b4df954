# tests/fakes.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from taskmaster.services.security import PasswordHasher


class FakeClock:
    """
    Deterministic clock for timestamp assertions.

    Every call returns a time one second after the previous one.
    """

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 1, 1, 9, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + timedelta(seconds=1)
        return now


class CountingHasher(PasswordHasher):
    """Real bcrypt hasher that records how often each verification path runs."""

    def __init__(self, rounds: int = 4) -> None:
        super().__init__(rounds=rounds)
        self.verify_calls = 0
        self.dummy_calls = 0

    def verify(self, password: str, password_hash: str) -> bool:
        self.verify_calls += 1
        return super().verify(password, password_hash)

    def dummy_verify(self) -> None:
        self.dummy_calls += 1
        super().dummy_verify()


class FailingSession:
    """
    Stand-in for a Session whose every storage call fails with the given error.
    """

    def __init__(self, error: Exception) -> None:
        self.error = error
        self.rolled_back = False

    def add(self, obj: object) -> None:
        pass

    def commit(self) -> None:
        raise self.error

    def refresh(self, obj: object) -> None:
        raise self.error

    def exec(self, statement: object) -> None:
        raise self.error

    def connection(self) -> None:
        raise self.error

    def rollback(self) -> None:
        self.rolled_back = True
