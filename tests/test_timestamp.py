import math

import pytest

from rfslam.timestamp import TimeStamp


def test_default_is_zero():
    t = TimeStamp()
    assert (t.sec, t.nsec) == (0, 0)
    assert float(t) == 0.0


def test_overflowing_nanoseconds_are_carried():
    t = TimeStamp(0, 1_500_000_000)
    assert (t.sec, t.nsec) == (1, 500_000_000)


def test_negative_nanoseconds_borrow_a_second():
    t = TimeStamp(2, -1)
    assert t.sec == 1
    assert t.nsec == 999_999_999


@pytest.mark.parametrize(
    "a, b",
    [((1, 700_000_000), (0, 600_000_000)), ((5, 0), (3, 999_999_999)), ((-2, 10), (4, 5))],
)
def test_add_then_subtract_round_trip(a, b):
    ta, tb = TimeStamp(*a), TimeStamp(*b)
    assert (ta + tb) - tb == ta
    assert 0 <= (ta + tb).nsec < 1_000_000_000
    assert 0 <= (ta - tb).nsec < 1_000_000_000


def test_subtraction_result_float_matches_difference():
    ta = TimeStamp(3, 250_000_000)
    tb = TimeStamp(1, 750_000_000)
    assert math.isclose(float(ta - tb), float(ta) - float(tb), abs_tol=1e-9)


def test_ordering():
    early = TimeStamp(1, 999_999_999)
    late = TimeStamp(2, 0)
    assert early < late
    assert early <= late
    assert late > early
    assert late >= early
    assert not late < early
    assert early <= TimeStamp(1, 999_999_999)
    assert early >= TimeStamp(1, 999_999_999)


def test_equality_and_hash():
    assert TimeStamp(1, 2) == TimeStamp(1, 2)
    assert not TimeStamp(1, 2) == TimeStamp(1, 3)
    assert len({TimeStamp(1, 2), TimeStamp(0, 1_000_000_002)}) == 1


@pytest.mark.parametrize("seconds", [0.0, 0.1, 12.345, 1e5 + 0.25, -0.5, -3.75])
def test_from_seconds_round_trip(seconds):
    t = TimeStamp.from_seconds(seconds)
    assert math.isclose(float(t), seconds, abs_tol=1e-9)
    assert 0 <= t.nsec < 1_000_000_000


def test_comparison_with_other_type_raises():
    with pytest.raises(TypeError):
        TimeStamp(1, 0) < 1.0