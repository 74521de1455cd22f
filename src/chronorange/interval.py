from __future__ import annotations
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, Callable, Generic, TypeVar
import datetime
import math
import random as _random
import threading

from .boundary import Boundary, Edge, compare_at_end, compare_at_start
from .errors import (
    ArithmeticOverflowError,
    CanonicalizationError,
    EmptyIntervalError,
    InvalidIntervalError,
    UnsupportedForInfiniteError,
)
from .moment import Moment
from .periods import CalendarPeriod
from .relation import IntervalRelation
from .timeline import (
    CLOCK_AXIS,
    DATE_AXIS,
    MOMENT_AXIS,
    TIMESTAMP_AXIS,
    PeriodTimeline,
    Timeline,
)


T = TypeVar('T')

_local = threading.local()


def _thread_random() -> _random.Random:
    '''A random generator owned by the current thread.'''

    rng = getattr(_local, 'rng', None)
    if rng is None:
        rng = _random.Random()
        _local.rng = rng
    return rng



@dataclass(frozen=True)
class Interval(Generic[T]):
    '''An interval on a timeline, bounded by two boundaries.

    Each boundary is a time point (open or closed) or an infinity.
    The start must not lie after the end, and the boundaries must not
    be both open and simultaneous. Emptiness is derived from the
    boundaries: '[5/5)' is an empty interval anchored at 5.

    On a calendrical timeline (dates, months, years...) the canonical
    form is closed, otherwise it is half-open.'''


    _start: Boundary[T]
    _end: Boundary[T]
    _timeline: Timeline[T]


    def _check(self) -> None:
        '''Raises if the interval has been set incorrectly.'''

        start, end, timeline = self._start, self._end, self._timeline

        if start.is_infinite_future:
            raise InvalidIntervalError('The start cannot lie in the infinite future.')
        if end.is_infinite_past:
            raise InvalidIntervalError('The end cannot lie in the infinite past.')

        for boundary in (start, end):
            if not boundary.is_infinite and not timeline.contains_point(boundary.point):
                raise InvalidIntervalError(
                    f'The time point {boundary.point!r} does not belong to {timeline}.'
                )

        if Boundary.is_after(start, end, timeline):
            raise InvalidIntervalError(f'Start after end: {start}/{end}.')

        if start.is_open and end.is_open and Boundary.is_simultaneous(start, end, timeline):
            if start.is_infinite:
                raise InvalidIntervalError('Infinite boundaries must not be equal.')
            raise InvalidIntervalError(f'Open start equal to open end: {start}/{end}.')


    def __post_init__(self) -> None:
        self._check()


    def __str__(self) -> str:
        start = '-∞' if self._start.is_infinite else str(self._start.point)
        end = '+∞' if self._end.is_infinite else str(self._end.point)
        left = '(' if self._start.is_open else '['
        right = ')' if self._end.is_open else ']'
        return f'{left}{start}/{end}{right}'


    def __bool__(self) -> bool:
        '''Checks whether the interval is non-empty.'''

        return not self.is_empty


    def __contains__(self, point: object) -> bool:
        '''Checks whether the time point falls within the interval.'''

        if not self._timeline.contains_point(point):
            return False

        tl = self._timeline
        start, end = self._start, self._end

        if start.is_infinite:
            start_ok = True
        elif start.is_open:
            start_ok = tl.is_before(start.point, point)
        else:
            start_ok = not tl.is_after(start.point, point)

        if not start_ok:
            return False

        if end.is_infinite:
            return True
        if end.is_open:
            return tl.is_after(end.point, point)
        return not tl.is_before(end.point, point)


    def __and__(self, other: Interval[T]) -> Interval[T] | None:
        '''The intersection of two intervals, 'None' if it is empty.'''

        if not isinstance(other, Interval):
            return NotImplemented

        return self.find_intersection(other)


    # Constructors.

    @classmethod
    def between(cls, start: Boundary[T], end: Boundary[T], timeline: Timeline[T]) -> Interval[T]:
        '''Creates an interval from two boundaries.'''

        return cls(start, end, timeline)


    @classmethod
    def closed(cls, start: T, end: T, timeline: Timeline[T]) -> Interval[T]:
        return cls(Boundary.closed(start), Boundary.closed(end), timeline)


    @classmethod
    def closed_open(cls, start: T, end: T, timeline: Timeline[T]) -> Interval[T]:
        return cls(Boundary.closed(start), Boundary.open(end), timeline)


    @classmethod
    def open_closed(cls, start: T, end: T, timeline: Timeline[T]) -> Interval[T]:
        return cls(Boundary.open(start), Boundary.closed(end), timeline)


    @classmethod
    def open(cls, start: T, end: T, timeline: Timeline[T]) -> Interval[T]:
        return cls(Boundary.open(start), Boundary.open(end), timeline)


    @classmethod
    def since(cls, start: T, timeline: Timeline[T]) -> Interval[T]:
        '''Creates an interval from a closed start to the infinite future.'''

        return cls(Boundary.closed(start), Boundary.infinite_future(), timeline)


    @classmethod
    def until(cls, end: T, timeline: Timeline[T]) -> Interval[T]:
        '''Creates an interval from the infinite past to an end which
        is closed on calendrical timelines and open otherwise.'''

        edge = Edge.CLOSED if timeline.is_calendrical else Edge.OPEN
        return cls(Boundary.infinite_past(), Boundary.of(edge, end), timeline)


    @classmethod
    def infinite(cls, timeline: Timeline[T]) -> Interval[T]:
        '''Creates the entire timeline.'''

        return cls(Boundary.infinite_past(), Boundary.infinite_future(), timeline)


    @classmethod
    def atomic(cls, point: T, timeline: Timeline[T]) -> Interval[T]:
        '''Creates the smallest non-empty interval containing the time point.'''

        if timeline.is_calendrical:
            return cls.closed(point, point, timeline)

        following = timeline.step_forward(point)
        if following is None:
            return cls.closed(point, point, timeline)

        return cls.closed_open(point, following, timeline)


    @classmethod
    def empty_with_anchor(cls, anchor: T, timeline: Timeline[T]) -> Interval[T]:
        '''Creates the empty interval '[anchor/anchor)'.'''

        return cls.closed_open(anchor, anchor, timeline)


    # Properties.

    @property
    def start(self) -> Boundary[T]:
        return self._start


    @property
    def end(self) -> Boundary[T]:
        return self._end


    @property
    def timeline(self) -> Timeline[T]:
        return self._timeline


    @property
    def is_finite(self) -> bool:
        '''Checks whether neither boundary is infinite.'''

        return not (self._start.is_infinite or self._end.is_infinite)


    @property
    def is_empty(self) -> bool:
        '''Checks whether the interval contains no time point.'''

        start, end = self._positions()
        return start == end


    # Normalized time points. 'None' stands for an infinite boundary
    # or for a step beyond the timeline.

    def _closed_start(self) -> T | None:
        if self._start.is_infinite:
            return None
        if self._start.is_open:
            return self._timeline.step_forward(self._start.point)
        return self._start.point


    def _closed_end(self) -> T | None:
        if self._end.is_infinite:
            return None
        if self._end.is_open:
            return self._timeline.step_backwards(self._end.point)
        return self._end.point


    def _open_end(self) -> T | None:
        if self._end.is_infinite:
            return None
        if self._end.is_closed:
            return self._timeline.step_forward(self._end.point)
        return self._end.point


    def _same_timeline(self, other: Interval[T]) -> None:
        if other._timeline != self._timeline:
            raise InvalidIntervalError(
                f'Intervals on different timelines: {self._timeline} and {other._timeline}.'
            )


    # Containment and ordering with respect to single time points
    # or other intervals.

    def contains(self, other: Any) -> bool:
        '''Checks whether this interval contains a time point or another
        interval. An infinite interval is never contained.'''

        if not isinstance(other, Interval):
            return other in self

        self._same_timeline(other)

        if not other.is_finite:
            return False

        tl = self._timeline
        start_a = self._closed_start()
        start_b = other._closed_start()

        if start_b is None:
            return False
        if not self._start.is_infinite:
            if start_a is None or tl.is_after(start_a, start_b):
                return False

        if self._end.is_infinite:
            return True

        end_b = other._end.point

        if other._end.is_open and tl.is_simultaneous(start_b, end_b):
            # 'other' is empty, it only needs a place inside 'self'.
            end_a = self._closed_end()
            return end_a is not None and not tl.is_after(start_b, end_a)

        if tl.is_calendrical:
            end_a = self._closed_end()
            end_b = other._closed_end()
            return end_a is not None and end_b is not None and not tl.is_before(end_a, end_b)

        end_a = self._open_end()
        if end_a is None:
            # Closed at the maximum of the timeline.
            return True

        end_b = other._open_end()
        if end_b is None:
            return False

        return not tl.is_before(end_a, end_b)


    def is_before(self, other: Any) -> bool:
        '''Checks whether this interval ends before the time point
        or before the start of the other interval.'''

        if self._end.is_infinite:
            return False

        tl = self._timeline
        end = self._end.point

        if isinstance(other, Interval):
            self._same_timeline(other)

            if other._start.is_infinite:
                return False

            point = other._closed_start()
            if point is None:
                # Open start at the maximum of the timeline.
                return True
        else:
            point = other

        if self._end.is_open:
            return not tl.is_after(end, point)
        return tl.is_before(end, point)


    def is_after(self, other: Any) -> bool:
        '''Checks whether this interval starts after the time point
        or after the end of the other interval.'''

        if isinstance(other, Interval):
            return other.is_before(self)

        if self._start.is_infinite:
            return False

        start = self._closed_start()
        if start is None:
            return True

        return self._timeline.is_after(start, other)


    # Derived intervals.

    def to_canonical(self) -> Interval[T]:
        '''Converts the interval to the closed form on calendrical
        timelines and to the half-open form on all others.'''

        tl = self._timeline
        start, end = self._start, self._end

        if not start.is_infinite and start.is_open:
            point = tl.step_forward(start.point)
            if point is None:
                raise CanonicalizationError(f'Cannot canonicalize this interval: {self}.')
            start = Boundary.closed(point)

        if not end.is_infinite:
            if tl.is_calendrical and end.is_open:
                point = tl.step_backwards(end.point)
                if point is None:
                    raise CanonicalizationError(f'Cannot canonicalize this interval: {self}.')
                end = Boundary.closed(point)
            elif not tl.is_calendrical and end.is_closed:
                point = tl.step_forward(end.point)
                if point is None:
                    raise CanonicalizationError(f'Cannot canonicalize this interval: {self}.')
                end = Boundary.open(point)

        if start is self._start and end is self._end:
            return self

        try:
            return Interval(start, end, tl)
        except InvalidIntervalError as e:
            # Empty calendrical intervals have no closed form.
            raise CanonicalizationError(f'Cannot canonicalize this interval: {self}.') from e


    def collapse(self) -> Interval[T]:
        '''Creates the empty interval anchored at the start.'''

        if self._start.is_infinite:
            raise UnsupportedForInfiniteError(
                'An interval with infinite past cannot be collapsed.'
            )

        point = self._closed_start()
        if point is None:
            raise CanonicalizationError(f'Cannot collapse this interval: {self}.')

        return Interval.empty_with_anchor(point, self._timeline)


    def with_start(self, point: T | Callable[[T], T]) -> Interval[T]:
        '''Replaces the time point of the start and keeps its edge.
        A callable receives the old time point.'''

        if callable(point):
            if self._start.is_infinite:
                raise UnsupportedForInfiniteError(
                    'Operator cannot be applied on an infinite interval boundary.'
                )
            point = point(self._start.point)

        return Interval(Boundary.of(self._start.edge, point), self._end, self._timeline)


    def with_end(self, point: T | Callable[[T], T]) -> Interval[T]:
        '''Replaces the time point of the end and keeps its edge.
        A callable receives the old time point.'''

        if callable(point):
            if self._end.is_infinite:
                raise UnsupportedForInfiniteError(
                    'Operator cannot be applied on an infinite interval boundary.'
                )
            point = point(self._end.point)

        return Interval(self._start, Boundary.of(self._end.edge, point), self._timeline)


    def with_open_start(self) -> Interval[T]:
        if self._start.is_open:
            return self

        return Interval(Boundary.open(self._start.point), self._end, self._timeline)


    def with_closed_start(self) -> Interval[T]:
        if self._start.is_infinite:
            raise UnsupportedForInfiniteError('Infinite past cannot be included.')
        if self._start.is_closed:
            return self

        return Interval(Boundary.closed(self._start.point), self._end, self._timeline)


    def with_open_end(self) -> Interval[T]:
        if self._end.is_open:
            return self

        return Interval(self._start, Boundary.open(self._end.point), self._timeline)


    def with_closed_end(self) -> Interval[T]:
        if self._end.is_infinite:
            raise UnsupportedForInfiniteError('Infinite future cannot be included.')
        if self._end.is_closed:
            return self

        return Interval(self._start, Boundary.closed(self._end.point), self._timeline)


    def move(self, amount: Any) -> Interval[T]:
        '''Shifts both finite boundaries by the same amount (see
        'Timeline.shift'). Infinite boundaries stay where they are.'''

        def moved(boundary: Boundary[T]) -> Boundary[T]:
            if boundary.is_infinite:
                return boundary

            point = self._timeline.shift(boundary.point, amount)
            if point is None:
                raise ArithmeticOverflowError(
                    f'Cannot move {boundary} by {amount} on {self._timeline}.'
                )

            return Boundary.of(boundary.edge, point)

        return Interval(moved(self._start), moved(self._end), self._timeline)


    # Measures.

    def length(self) -> int:
        '''Number of smallest units (days, microseconds, months...)
        within the interval.'''

        if not self.is_finite:
            raise UnsupportedForInfiniteError('An infinite interval has no finite duration.')

        tl = self._timeline
        count = tl.ordinal(self._end.point) - tl.ordinal(self._start.point)

        if self._start.is_open:
            count -= 1
        if self._end.is_closed:
            count += 1

        return max(count, 0)


    def duration(self) -> Any:
        '''The length expressed as amount of the timeline: 'timedelta'
        on timestamp, moment and clock timelines, number of units
        on the others.'''

        return self._timeline.units(self.length())


    def random(self, rng: _random.Random | None = None) -> T:
        '''Picks a time point of the interval at random.

        Without an explicit generator, a generator owned by the calling
        thread is used.'''

        if not self.is_finite:
            raise UnsupportedForInfiniteError(
                f'Cannot get random time point in an infinite interval: {self}'
            )
        if self.is_empty:
            raise EmptyIntervalError(f'Cannot get random time point in an empty interval: {self}')

        tl = self._timeline
        low = tl.ordinal(self._start.point) + (1 if self._start.is_open else 0)
        high = tl.ordinal(self._end.point) - (1 if self._end.is_open else 0)

        if low > high:
            raise EmptyIntervalError(f'Cannot get random time point in an empty interval: {self}')

        return tl.from_ordinal((rng or _thread_random()).randint(low, high))


    # Allen relations.

    def _positions(self) -> tuple[float, float]:
        '''Start and end as positions between time points: the ordinal
        of the first time point and the ordinal after the last one.

        Infinities become '-inf' and '+inf'. An empty interval collapses
        to its anchor, so both positions are equal.'''

        tl = self._timeline

        if self._start.is_infinite:
            lo = -math.inf
        else:
            lo = tl.ordinal(self._start.point) + (1 if self._start.is_open else 0)

        if self._end.is_infinite:
            hi = math.inf
        else:
            hi = tl.ordinal(self._end.point) + (1 if self._end.is_closed else 0)

        first = tl.ordinal(tl.minimum) if self._start.is_infinite else lo
        last = tl.ordinal(tl.maximum) + 1 if self._end.is_infinite else hi

        if first >= last:
            return first, first

        return lo, hi


    def _relation(self, other: Interval[T]) -> IntervalRelation:
        '''Computes the one relation which holds between the intervals.

        Relations are decided on positions, so boundaries at the limits
        of the timeline need no stepping. Calendrical intervals touch
        when they share their last and first time point. Empty intervals
        take part as zero-length half-open intervals at their anchor,
        and they never meet another interval themselves.'''

        self._same_timeline(other)

        start_a, end_a = self._positions()
        start_b, end_b = other._positions()
        empty_a = start_a == end_a
        empty_b = start_b == end_b
        calendrical = self._timeline.is_calendrical and not (empty_a or empty_b)

        def ends_before(end, start):
            if calendrical:
                return end <= start
            return end < start

        def touches(start1, end1, start2, end2, empty1):
            if calendrical:
                # Both span more than one time point.
                return end1 - 1 == start2 and start1 < start2 and start2 < end2 - 1
            return not empty1 and end1 == start2

        if ends_before(end_a, start_b):
            return IntervalRelation.PRECEDES
        if ends_before(end_b, start_a):
            return IntervalRelation.PRECEDED_BY
        if touches(start_a, end_a, start_b, end_b, empty_a):
            return IntervalRelation.MEETS
        if touches(start_b, end_b, start_a, end_a, empty_b):
            return IntervalRelation.MET_BY

        return _OVERLAPPING[_compare(start_a, start_b), _compare(end_a, end_b)]


    def equivalent_to(self, other: Interval[T]) -> bool:
        '''Checks whether both intervals start and end together, no
        matter how the boundaries are written.'''

        return self._relation(other) is IntervalRelation.EQUIVALENT


    def precedes(self, other: Interval[T]) -> bool:
        '''Checks whether this interval ends before the other one starts.

        Half-open intervals need a gap in between. Calendrical intervals
        are compared by their closed ends, so that '[1/10]' precedes
        '[11/20]' and meets '[10/20]'.'''

        return self._relation(other) is IntervalRelation.PRECEDES


    def preceded_by(self, other: Interval[T]) -> bool:
        return other.precedes(self)


    def meets(self, other: Interval[T]) -> bool:
        '''Checks whether the other interval starts where this one ends.'''

        return self._relation(other) is IntervalRelation.MEETS


    def met_by(self, other: Interval[T]) -> bool:
        return other.meets(self)


    def overlaps(self, other: Interval[T]) -> bool:
        '''Checks whether this interval starts first and ends inside
        the other one.'''

        return self._relation(other) is IntervalRelation.OVERLAPS


    def overlapped_by(self, other: Interval[T]) -> bool:
        return other.overlaps(self)


    def finishes(self, other: Interval[T]) -> bool:
        '''Checks whether this interval starts after the other one and
        both end together.'''

        return self._relation(other) is IntervalRelation.FINISHES


    def finished_by(self, other: Interval[T]) -> bool:
        return other.finishes(self)


    def starts(self, other: Interval[T]) -> bool:
        '''Checks whether both intervals start together and this one
        ends first.'''

        return self._relation(other) is IntervalRelation.STARTS


    def started_by(self, other: Interval[T]) -> bool:
        return other.starts(self)


    def encloses(self, other: Interval[T]) -> bool:
        '''Checks whether this interval starts before and ends after
        the other one.'''

        return self._relation(other) is IntervalRelation.ENCLOSES


    def enclosed_by(self, other: Interval[T]) -> bool:
        return other.encloses(self)


    def relation_to(self, other: Interval[T]) -> IntervalRelation:
        '''Determines the Allen relation of this interval to the other one.'''

        return IntervalRelation.between(self, other)


    # Combination.

    def intersects(self, other: Interval[T]) -> bool:
        '''Checks whether both intervals share at least one time point.'''

        self._same_timeline(other)

        if self.is_empty or other.is_empty:
            return False

        tl = self._timeline

        def starts_before_end(a: Interval[T], b: Interval[T]) -> bool:
            if a._start.is_infinite or b._end.is_infinite:
                return True

            start = a._closed_start()
            if start is None:
                return False
            if b._end.is_open:
                return tl.is_before(start, b._end.point)
            return not tl.is_after(start, b._end.point)

        return starts_before_end(self, other) and starts_before_end(other, self)


    def abuts(self, other: Interval[T]) -> bool:
        '''Checks whether the intervals touch each other without gap
        and without a common time point.'''

        self._same_timeline(other)

        if self.is_empty or other.is_empty:
            return False

        tl = self._timeline
        start_a = self._closed_start()
        start_b = other._closed_start()
        end_a = self._open_end()
        end_b = other._open_end()

        if end_a is None or start_b is None:
            return start_a is not None and end_b is not None and tl.is_simultaneous(start_a, end_b)
        if start_a is None or end_b is None:
            return tl.is_simultaneous(end_a, start_b)

        return tl.is_simultaneous(end_a, start_b) ^ tl.is_simultaneous(start_a, end_b)


    def find_intersection(self, other: Interval[T]) -> Interval[T] | None:
        '''Determines the common part of both intervals, 'None' if
        there is none.'''

        self._same_timeline(other)

        if self.is_empty or other.is_empty:
            return None

        tl = self._timeline

        if self._start.is_infinite and other._start.is_infinite:
            start: Boundary[T] = self._start
        else:
            candidates = [
                i._closed_start() for i in (self, other) if not i._start.is_infinite
            ]
            if any(c is None for c in candidates):
                return None
            start = Boundary.closed(max(candidates, key=cmp_to_key(tl.compare)))

        if self._end.is_infinite and other._end.is_infinite:
            end: Boundary[T] = self._end
        elif tl.is_calendrical:
            candidates = [i._closed_end() for i in (self, other) if not i._end.is_infinite]
            if any(c is None for c in candidates):
                return None
            end = Boundary.closed(min(candidates, key=cmp_to_key(tl.compare)))
        else:
            finite = [i for i in (self, other) if not i._end.is_infinite]
            candidates = [i._open_end() for i in finite]
            # A closed end at the maximum stays as it is.
            reachable = [c for c in candidates if c is not None]
            if reachable:
                end = Boundary.open(min(reachable, key=cmp_to_key(tl.compare)))
            else:
                end = finite[0]._end

        if Boundary.is_after(start, end, tl):
            return None

        intersection = Interval(start, end, tl)
        return None if intersection.is_empty else intersection



def _compare(a: float, b: float) -> int:
    return (a > b) - (a < b)


# Relations of intervals which neither precede nor meet each other,
# by the order of their starts and of their ends.
_OVERLAPPING = {
    (0, 0): IntervalRelation.EQUIVALENT,
    (0, -1): IntervalRelation.STARTS,
    (0, 1): IntervalRelation.STARTED_BY,
    (-1, -1): IntervalRelation.OVERLAPS,
    (-1, 0): IntervalRelation.FINISHED_BY,
    (-1, 1): IntervalRelation.ENCLOSES,
    (1, -1): IntervalRelation.ENCLOSED_BY,
    (1, 0): IntervalRelation.FINISHES,
    (1, 1): IntervalRelation.OVERLAPPED_BY,
}



def interval_comparator(a: Interval[T], b: Interval[T]) -> int:
    '''Orders intervals by their starts and then by their ends.'''

    result = compare_at_start(a.start, b.start, a.timeline)
    if result == 0:
        result = compare_at_end(a.end, b.end, a.timeline)
    return result


sort_key = cmp_to_key(interval_comparator)


def date_interval(start: datetime.date, end: datetime.date) -> Interval[datetime.date]:
    '''Closed interval of calendar dates.'''

    return Interval.closed(start, end, DATE_AXIS)


def timestamp_interval(
    start: datetime.datetime, end: datetime.datetime
) -> Interval[datetime.datetime]:
    '''Half-open interval of local timestamps.'''

    return Interval.closed_open(start, end, TIMESTAMP_AXIS)


def moment_interval(start: Moment, end: Moment) -> Interval[Moment]:
    '''Half-open interval of global moments.'''

    return Interval.closed_open(start, end, MOMENT_AXIS)


def clock_interval(start: datetime.time, end: datetime.time) -> Interval[datetime.time]:
    '''Half-open interval of wall clock times.'''

    return Interval.closed_open(start, end, CLOCK_AXIS)


def period_interval(start: CalendarPeriod, end: CalendarPeriod) -> Interval[CalendarPeriod]:
    '''Closed interval of calendar years, quarters, months or weeks.'''

    if type(start) is not type(end):
        raise InvalidIntervalError(
            f'Mixed calendar units: {type(start).__name__} and {type(end).__name__}.'
        )

    return Interval.closed(start, end, PeriodTimeline(type(start)))
