from __future__ import annotations
import itertools
import pytest
from hypothesis import assume, given, strategies as st

from chronorange import (
    Boundary,
    CalendarMonth,
    IntegerTimeline,
    Interval,
    IntervalRelation,
    InvalidIntervalError,
    period_interval,
)


INTS = IntegerTimeline(-1000, 1000)
DAYS = IntegerTimeline(-1000, 1000, calendrical=True)
SMALL = IntegerTimeline(0, 6)
SMALL_DAYS = IntegerTimeline(0, 6, calendrical=True)


def points(timeline):
    '''Time points of the timeline, its minimum and maximum included.'''

    near = st.integers(
        min_value=max(timeline.minimum, -50),
        max_value=min(timeline.maximum, 50),
    )
    return st.one_of(near, st.sampled_from([timeline.minimum, timeline.maximum]))


@st.composite
def intervals(draw, timeline, points):

    def boundary(infinite):
        kind = draw(st.sampled_from(['closed', 'open', 'infinite']))
        if kind == 'infinite':
            return infinite
        return getattr(Boundary, kind)(draw(points))

    start = boundary(Boundary.infinite_past())
    end = boundary(Boundary.infinite_future())

    try:
        return Interval.between(start, end, timeline)
    except InvalidIntervalError:
        assume(False)


pairs = st.sampled_from([INTS, DAYS, SMALL, SMALL_DAYS]).flatmap(
    lambda tl: st.tuples(intervals(tl, points(tl)), intervals(tl, points(tl)))
)


@given(pairs)
def test_exactly_one_relation(pair):
    a, b = pair
    matching = [r for r in IntervalRelation if r.matches(a, b)]

    assert matching == [a.relation_to(b)]


@given(pairs)
def test_inverse_relation(pair):
    a, b = pair

    assert b.relation_to(a) == a.relation_to(b).inverse()


@given(pairs)
def test_equivalence_is_symmetric(pair):
    a, b = pair

    assert a.equivalent_to(a)
    assert a.equivalent_to(b) == b.equivalent_to(a)


@given(pairs)
def test_intersection(pair):
    a, b = pair
    intersection = a.find_intersection(b)

    assert a.intersects(b) == (intersection is not None)
    if intersection is not None:
        assert a.contains(intersection) or not intersection.is_finite
        assert intersection.equivalent_to(b.find_intersection(a))


@given(st.sampled_from([INTS, DAYS]).flatmap(
    lambda tl: intervals(tl, st.integers(min_value=-50, max_value=50))
))
def test_canonical_form(interval):
    # Empty calendrical intervals have no closed form.
    assume(not (interval.is_empty and interval.timeline.is_calendrical))
    canonical = interval.to_canonical()

    assert canonical.to_canonical() is canonical
    assert canonical.equivalent_to(interval)
    assert canonical.is_empty == interval.is_empty
    if interval.is_finite:
        assert canonical.length() == interval.length()
        if not interval.is_empty:
            assert interval.contains(interval)


def _all_intervals(timeline):
    starts = [Boundary.infinite_past()]
    ends = [Boundary.infinite_future()]
    for point in range(timeline.minimum, timeline.maximum + 1):
        starts += [Boundary.closed(point), Boundary.open(point)]
        ends += [Boundary.closed(point), Boundary.open(point)]

    found = []
    for start, end in itertools.product(starts, ends):
        try:
            found.append(Interval.between(start, end, timeline))
        except InvalidIntervalError:
            pass
    return found


@pytest.mark.parametrize('calendrical', [False, True])
def test_every_pair_on_small_timeline(calendrical):
    timeline = IntegerTimeline(0, 3, calendrical=calendrical)
    every = _all_intervals(timeline)

    assert any(i.is_empty for i in every)
    for a, b in itertools.product(every, repeat=2):
        relation = a.relation_to(b)

        assert [r for r in IntervalRelation if r.matches(a, b)] == [relation]
        assert b.relation_to(a) == relation.inverse()


months = st.integers(min_value=2019 * 12, max_value=2021 * 12)
spans = st.integers(min_value=0, max_value=12)


@given(months, spans, months, spans)
def test_month_abuts_by_proleptic_numbers(s1, n1, s2, n2):
    e1 = s1 + n1
    e2 = s2 + n2

    a = period_interval(CalendarMonth.from_proleptic(s1), CalendarMonth.from_proleptic(e1))
    b = period_interval(CalendarMonth.from_proleptic(s2), CalendarMonth.from_proleptic(e2))

    assert a.abuts(b) == (e1 + 1 == s2 or e2 + 1 == s1)
