"""Seconds-and-nanoseconds timestamps."""

from __future__ import annotations

import math

_NSEC_PER_SEC = 1_000_000_000


class TimeStamp:
    """A point in time stored as whole seconds plus nanoseconds.

    The value is always normalised so that ``0 <= nsec < 1e9``.
    """

    __slots__ = ("_sec", "_nsec")

    def __init__(self, sec: int = 0, nsec: int = 0) -> None:
        carry, nsec = divmod(int(nsec), _NSEC_PER_SEC)
        self._sec = int(sec) + carry
        self._nsec = nsec

    @classmethod
    def from_seconds(cls, seconds: float) -> TimeStamp:
        """Build a timestamp from a time expressed in seconds."""
        whole = math.floor(seconds)
        return cls(whole, round((seconds - whole) * _NSEC_PER_SEC))

    @property
    def sec(self) -> int:
        return self._sec

    @property
    def nsec(self) -> int:
        return self._nsec

    def _key(self) -> tuple[int, int]:
        return (self._sec, self._nsec)

    def __float__(self) -> float:
        return self._sec + self._nsec * 1e-9

    def __add__(self, other: TimeStamp) -> TimeStamp:
        if not isinstance(other, TimeStamp):
            return NotImplemented
        return TimeStamp(self._sec + other._sec, self._nsec + other._nsec)

    def __sub__(self, other: TimeStamp) -> TimeStamp:
        if not isinstance(other, TimeStamp):
            return NotImplemented
        return TimeStamp(self._sec - other._sec, self._nsec - other._nsec)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeStamp):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __lt__(self, other: TimeStamp) -> bool:
        if not isinstance(other, TimeStamp):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: TimeStamp) -> bool:
        if not isinstance(other, TimeStamp):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: TimeStamp) -> bool:
        if not isinstance(other, TimeStamp):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: TimeStamp) -> bool:
        if not isinstance(other, TimeStamp):
            return NotImplemented
        return self._key() >= other._key()

    def __repr__(self) -> str:
        return f"TimeStamp(sec={self._sec}, nsec={self._nsec})"