from __future__ import annotations
import datetime
import logging
import pytest

from chronorange import (
    DATE_AXIS,
    EmptyIntervalError,
    IntegerTimeline,
    Interval,
    IntervalCollection,
    InvalidIntervalError,
    date_interval,
)


def d(day: int) -> datetime.date:
    return datetime.date(2020, 1, day)


def collection(timeline, *bounds):
    return IntervalCollection(timeline, [Interval.closed_open(s, e, timeline) for s, e in bounds])


def test_sorted(ints):
    c = collection(ints, (5, 8), (1, 3), (2, 4))

    assert list(c) == [
        Interval.closed_open(1, 3, ints),
        Interval.closed_open(2, 4, ints),
        Interval.closed_open(5, 8, ints),
    ]
    assert len(c) == 3
    assert str(c) == '{[1/3),[2/4),[5/8)}'
    assert c == collection(ints, (1, 3), (2, 4), (5, 8))


def test_empty_intervals_are_dropped(ints):
    c = IntervalCollection(ints, [Interval.empty_with_anchor(1, ints)])

    assert not c
    assert len(c) == 0


def test_queries(ints):
    c = collection(ints, (5, 8), (1, 3), (2, 4))

    assert not c.is_disjunct()
    assert collection(ints, (1, 3), (3, 5)).is_disjunct()
    assert c.encloses(6)
    assert not c.encloses(4)
    assert c.contains(Interval.closed_open(2, 4, ints))
    assert not c.contains(Interval.closed(2, 3, ints))


def test_bounds(ints):
    c = collection(ints, (5, 8), (1, 3), (2, 4))

    assert c.minimum == 1
    assert c.maximum == 7
    assert c.range() == Interval.closed_open(1, 8, ints)

    open_ended = c.plus(Interval.since(5, ints))

    assert open_ended.maximum is None
    assert open_ended.range() == Interval.since(1, ints)

    with pytest.raises(EmptyIntervalError):
        IntervalCollection(ints).minimum


def test_blocks_and_gaps(ints):
    c = collection(ints, (5, 8), (1, 3), (2, 4))

    assert c.with_blocks() == collection(ints, (1, 4), (5, 8))
    assert c.with_gaps() == collection(ints, (4, 5))
    assert collection(ints, (1, 3), (3, 5)).with_gaps() == IntervalCollection(ints)


def test_date_blocks_and_gaps():
    c = IntervalCollection(DATE_AXIS, [
        date_interval(d(1), d(5)),
        date_interval(d(15), d(20)),
        date_interval(d(6), d(10)),
    ])

    assert list(c.with_blocks()) == [date_interval(d(1), d(10)), date_interval(d(15), d(20))]
    assert list(c.with_gaps()) == [date_interval(d(11), d(14))]


def test_plus(ints):
    c = collection(ints, (1, 3))

    assert c.plus(Interval.closed_open(0, 1, ints)) == collection(ints, (0, 1), (1, 3))
    assert len(c.plus([Interval.closed(5, 6, ints), Interval.closed(7, 8, ints)])) == 3


def test_minus(ints):
    c = collection(ints, (0, 10))

    assert c.minus(Interval.closed_open(3, 5, ints)) == collection(ints, (0, 3), (5, 10))
    assert c.minus(c) == IntervalCollection(ints)
    assert c.minus(Interval.infinite(ints)) == IntervalCollection(ints)
    assert c.minus([]) == c


def test_union(ints):
    assert collection(ints, (1, 4)).union(collection(ints, (3, 6))) == collection(ints, (1, 6))


def test_intersect(ints):
    a = collection(ints, (1, 5), (7, 9))
    b = collection(ints, (3, 8))

    assert a.intersect(b) == collection(ints, (3, 5), (7, 8))


def test_xor(ints):
    a = collection(ints, (1, 5))
    b = collection(ints, (3, 8))

    assert a.xor(b) == collection(ints, (1, 3), (5, 8))
    assert a.xor(IntervalCollection(ints)) == a


def test_with_time_window(ints):
    c = collection(ints, (1, 3), (5, 8))

    assert c.with_time_window(Interval.closed_open(2, 6, ints)) == collection(ints, (2, 3), (5, 6))
    assert c.with_time_window(Interval.infinite(ints)) is c


def test_with_complement(ints):
    c = collection(ints, (1, 3), (5, 8))

    assert c.with_complement(Interval.closed_open(0, 10, ints)) == collection(ints, (0, 1), (3, 5), (8, 10))
    assert list(c.with_complement(Interval.infinite(ints))) == [
        Interval.until(1, ints),
        Interval.closed_open(3, 5, ints),
        Interval.since(8, ints),
    ]


def test_with_intersection(ints):
    c = collection(ints, (1, 5), (3, 8), (4, 6))

    assert c.with_intersection() == collection(ints, (4, 5))
    assert collection(ints, (1, 2), (3, 4)).with_intersection() == IntervalCollection(ints)


def test_with_splits(ints):
    assert collection(ints, (1, 5), (3, 8)).with_splits() == collection(ints, (1, 3), (3, 5), (5, 8))


def test_with_splits_at_timeline_minimum():
    tl = IntegerTimeline(0, 8)
    c = IntervalCollection(tl, [Interval.until(7, tl), Interval.closed_open(0, 3, tl)])

    assert c.with_splits() == collection(tl, (0, 3), (3, 7))


def test_precedence_graph(ints):
    graph = collection(ints, (1, 3), (3, 5), (7, 9)).precedence_graph()

    assert set(graph.edges) == {(0, 1), (0, 2), (1, 2)}
    assert graph.edges[0, 1]['relation'] == 'meets'
    assert graph.edges[0, 2]['relation'] == 'precedes'
    assert graph.nodes[2]['interval'] == Interval.closed_open(7, 9, ints)


def test_overlap_graph(ints, caplog):
    c = collection(ints, (1, 4), (3, 6), (8, 9))

    with caplog.at_level(logging.DEBUG, logger='chronorange'):
        graph = c.overlap_graph()

    assert {tuple(sorted(edge)) for edge in graph.edges} == {(0, 1)}
    assert 'Built overlap graph with 3 nodes and 1 edges' in caplog.text
    assert c.overlap_groups() == [collection(ints, (1, 4), (3, 6)), collection(ints, (8, 9))]


def test_wrong_timeline(ints, days):
    with pytest.raises(InvalidIntervalError):
        IntervalCollection(ints, [Interval.closed(1, 2, days)])
