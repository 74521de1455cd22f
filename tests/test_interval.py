from __future__ import annotations
import datetime
import random
import pytest

from chronorange import (
    ArithmeticOverflowError,
    Boundary,
    CalendarMonth,
    CalendarYear,
    CanonicalizationError,
    EmptyIntervalError,
    Interval,
    InvalidIntervalError,
    UnsupportedForInfiniteError,
    date_interval,
    period_interval,
    sort_key,
    timestamp_interval,
)


def test_open_boundaries_must_differ(ints):
    with pytest.raises(InvalidIntervalError):
        Interval.between(Boundary.open(5), Boundary.open(5), ints)

    empty = Interval.empty_with_anchor(5, ints)

    assert empty.is_empty
    assert not empty


def test_invalid_intervals(ints):
    with pytest.raises(InvalidIntervalError):
        Interval.closed(5, 4, ints)

    with pytest.raises(InvalidIntervalError):
        Interval.closed(0, 2000, ints)

    with pytest.raises(InvalidIntervalError):
        Interval.between(Boundary.infinite_future(), Boundary.closed(5), ints)

    with pytest.raises(InvalidIntervalError):
        Interval.between(Boundary.closed(5), Boundary.infinite_past(), ints)

    with pytest.raises(InvalidIntervalError):
        date_interval(datetime.date(2020, 1, 1), datetime.datetime(2020, 1, 2))


def test_emptiness(ints):
    assert Interval.open(5, 6, ints).is_empty
    assert Interval.open_closed(5, 5, ints).is_empty
    assert not Interval.closed(5, 5, ints).is_empty
    assert not Interval.infinite(ints).is_empty
    assert Interval.closed(5, 5, ints)


def test_emptiness_at_timeline_edges(ints):
    assert Interval.between(Boundary.open(1000), Boundary.infinite_future(), ints).is_empty
    assert Interval.between(Boundary.infinite_past(), Boundary.open(-1000), ints).is_empty
    assert not Interval.between(Boundary.closed(1000), Boundary.infinite_future(), ints).is_empty
    assert not Interval.between(Boundary.infinite_past(), Boundary.closed(-1000), ints).is_empty


def test_contains_points(ints):
    interval = Interval.closed_open(1, 5, ints)

    assert 4 in interval
    assert 1 in interval
    assert 5 not in interval
    assert 'x' not in interval
    assert interval.contains(4)
    assert 7 in Interval.since(5, ints)


def test_contains_intervals(ints):
    interval = Interval.closed_open(1, 10, ints)

    assert interval.contains(Interval.closed(2, 9, ints))
    assert not interval.contains(Interval.closed(2, 10, ints))
    assert interval.contains(interval)
    assert Interval.infinite(ints).contains(interval)
    assert not Interval.infinite(ints).contains(Interval.since(3, ints))


def test_before_and_after(ints):
    assert Interval.closed_open(1, 5, ints).is_before(5)
    assert not Interval.closed(1, 5, ints).is_before(5)
    assert Interval.closed(1, 5, ints).is_before(6)
    assert Interval.open_closed(3, 5, ints).is_after(3)
    assert not Interval.closed(3, 5, ints).is_after(3)
    assert Interval.closed_open(1, 5, ints).is_before(Interval.closed(5, 8, ints))
    assert Interval.closed(6, 8, ints).is_after(Interval.closed(1, 5, ints))
    assert not Interval.since(1, ints).is_before(100)


def test_to_canonical(ints, days):
    assert Interval.open_closed(1, 5, ints).to_canonical() == Interval.closed_open(2, 6, ints)
    assert Interval.closed_open(1, 5, days).to_canonical() == Interval.closed(1, 4, days)

    canonical = Interval.closed_open(1, 5, ints)
    assert canonical.to_canonical() is canonical

    with pytest.raises(CanonicalizationError):
        Interval.closed_open(5, 5, days).to_canonical()

    with pytest.raises(CanonicalizationError):
        Interval.closed(1, 1000, ints).to_canonical()


def test_length(ints):
    assert Interval.closed(1, 5, ints).length() == 5
    assert Interval.closed_open(1, 5, ints).length() == 4
    assert Interval.open(1, 5, ints).length() == 3
    assert Interval.empty_with_anchor(1, ints).length() == 0

    with pytest.raises(UnsupportedForInfiniteError):
        Interval.since(1, ints).length()


def test_duration():
    day = timestamp_interval(datetime.datetime(2020, 1, 1), datetime.datetime(2020, 1, 2))
    january = date_interval(datetime.date(2020, 1, 1), datetime.date(2020, 1, 31))

    assert day.duration() == datetime.timedelta(days=1)
    assert january.duration() == 31
    assert CalendarYear(2020).as_interval().duration() == 366


def test_random(ints):
    interval = Interval.open_closed(1, 5, ints)
    rng = random.Random(1234)

    for _ in range(50):
        assert interval.random(rng) in interval

    assert Interval.closed(3, 3, ints).random() == 3

    with pytest.raises(UnsupportedForInfiniteError):
        Interval.since(1, ints).random()

    with pytest.raises(EmptyIntervalError):
        Interval.empty_with_anchor(1, ints).random()


def test_collapse(ints):
    assert Interval.closed(3, 7, ints).collapse() == Interval.empty_with_anchor(3, ints)
    assert Interval.open_closed(3, 7, ints).collapse() == Interval.empty_with_anchor(4, ints)

    with pytest.raises(UnsupportedForInfiniteError):
        Interval.until(3, ints).collapse()


def test_with_boundaries(ints):
    interval = Interval.closed_open(1, 5, ints)

    assert interval.with_start(lambda p: p - 1) == Interval.closed_open(0, 5, ints)
    assert interval.with_end(9) == Interval.closed_open(1, 9, ints)
    assert interval.with_open_start() == Interval.open(1, 5, ints)
    assert interval.with_closed_end() == Interval.closed(1, 5, ints)
    assert interval.with_open_end() is interval

    with pytest.raises(UnsupportedForInfiniteError):
        Interval.until(5, ints).with_closed_start()

    with pytest.raises(UnsupportedForInfiniteError):
        Interval.since(5, ints).with_end(lambda p: p + 1)

    with pytest.raises(InvalidIntervalError):
        interval.with_start(6)


def test_move(ints):
    assert Interval.closed_open(1, 5, ints).move(10) == Interval.closed_open(11, 15, ints)
    assert Interval.since(1, ints).move(-3) == Interval.since(-2, ints)

    with pytest.raises(ArithmeticOverflowError):
        Interval.closed_open(1, 5, ints).move(1000)


def test_atomic(ints, days):
    assert Interval.atomic(5, ints) == Interval.closed_open(5, 6, ints)
    assert Interval.atomic(5, days) == Interval.closed(5, 5, days)
    assert Interval.atomic(1000, ints) == Interval.closed(1000, 1000, ints)


def test_until(ints, days):
    assert Interval.until(5, ints).end.is_open
    assert Interval.until(5, days).end.is_closed
    assert Interval.until(5, ints).start.is_infinite_past


def test_str(ints):
    assert str(Interval.closed_open(1, 5, ints)) == '[1/5)'
    assert str(Interval.infinite(ints)) == '(-∞/+∞)'
    assert str(Interval.since(3, ints)) == '[3/+∞)'
    assert str(date_interval(datetime.date(2020, 1, 1), datetime.date(2020, 1, 10))) == (
        '[2020-01-01/2020-01-10]'
    )


def test_find_intersection_of_dates():
    a = date_interval(datetime.date(2020, 1, 1), datetime.date(2020, 1, 10))
    b = date_interval(datetime.date(2020, 1, 5), datetime.date(2020, 1, 15))

    assert a.find_intersection(b) == date_interval(datetime.date(2020, 1, 5), datetime.date(2020, 1, 10))
    assert a & b == b & a


def test_find_intersection(ints):
    assert Interval.closed_open(1, 3, ints).find_intersection(Interval.closed_open(5, 8, ints)) is None
    assert Interval.closed_open(1, 5, ints).find_intersection(Interval.closed_open(5, 8, ints)) is None
    assert Interval.open(1, 5, ints) & Interval.open(4, 8, ints) is None
    assert Interval.since(3, ints) & Interval.until(5, ints) == Interval.closed_open(3, 5, ints)
    assert Interval.infinite(ints) & Interval.infinite(ints) == Interval.infinite(ints)
    assert Interval.open_closed(1, 6, ints) & Interval.closed(3, 9, ints) == Interval.closed_open(3, 7, ints)


def test_different_timelines(ints, days):
    with pytest.raises(InvalidIntervalError):
        Interval.closed(1, 2, ints).intersects(Interval.closed(1, 2, days))


def test_period_interval():
    q = period_interval(CalendarMonth(2020, 1), CalendarMonth(2020, 3))

    assert q.length() == 3
    assert CalendarMonth(2020, 2) in q

    with pytest.raises(InvalidIntervalError):
        period_interval(CalendarMonth(2020, 1), CalendarYear(2020))


def test_sort_key(ints):
    intervals = [
        Interval.closed(3, 4, ints),
        Interval.closed_open(1, 9, ints),
        Interval.closed(1, 2, ints),
    ]

    assert sorted(intervals, key=sort_key) == [
        Interval.closed(1, 2, ints),
        Interval.closed_open(1, 9, ints),
        Interval.closed(3, 4, ints),
    ]
