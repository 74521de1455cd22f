from __future__ import annotations
from functools import cmp_to_key, reduce
from typing import Any, Generic, Iterable, Iterator, TypeVar
import logging

import networkx as nx

from .boundary import Boundary
from .errors import EmptyIntervalError, InternalConsistencyError, InvalidIntervalError
from .interval import Interval, sort_key
from .timeline import Timeline
from .tree import IntervalTree


logger = logging.getLogger(__name__)

T = TypeVar('T')

# Closed form of a non-empty interval: first and last time point,
# 'None' standing for the infinite past and future.
_Span = tuple[Any, Any]



class IntervalCollection(Generic[T]):
    '''An immutable, sorted collection of non-empty intervals on one
    timeline. The intervals may overlap.

    All operations create new collections.'''


    def __init__(self, timeline: Timeline[T], intervals: Iterable[Interval[T]] = ()) -> None:

        kept: list[Interval[T]] = []
        for interval in intervals:
            if interval.timeline != timeline:
                raise InvalidIntervalError(
                    f'The interval {interval} does not belong to {timeline}.'
                )
            if not interval.is_empty:
                kept.append(interval)

        kept.sort(key=sort_key)

        self._timeline = timeline
        self._intervals = tuple(kept)


    def __iter__(self) -> Iterator[Interval[T]]:
        return iter(self._intervals)


    def __len__(self) -> int:
        return len(self._intervals)


    def __bool__(self) -> bool:
        return bool(self._intervals)


    def __getitem__(self, index: int) -> Interval[T]:
        return self._intervals[index]


    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IntervalCollection):
            return NotImplemented

        return self._timeline == other._timeline and self._intervals == other._intervals


    def __hash__(self) -> int:
        return hash(self._intervals)


    def __str__(self) -> str:
        return '{' + ','.join(str(i) for i in self._intervals) + '}'


    def __repr__(self) -> str:
        return f'IntervalCollection({self._timeline}, {self})'


    @property
    def timeline(self) -> Timeline[T]:
        return self._timeline


    @property
    def intervals(self) -> tuple[Interval[T], ...]:
        return self._intervals


    def _create(self, intervals: Iterable[Interval[T]]) -> IntervalCollection[T]:
        return IntervalCollection(self._timeline, intervals)


    # Queries.

    def is_disjunct(self) -> bool:
        '''Checks whether no two intervals share a time point.'''

        tl = self._timeline

        for current, following in zip(self._intervals, self._intervals[1:]):
            if current.end.is_infinite or following.start.is_infinite:
                return False

            end = current.end.point
            start = following.start.point

            if current.end.is_open:
                if tl.is_after(end, start):
                    return False
            elif not tl.is_before(end, start):
                return False

        return True


    def encloses(self, point: T) -> bool:
        '''Checks whether any interval contains the time point.'''

        for interval in self._intervals:
            if point in interval:
                return True
            if interval.is_after(point):
                break

        return False


    def contains(self, interval: Interval[T]) -> bool:
        '''Checks whether the collection holds an interval equal to the given one.'''

        return interval in self._intervals


    @property
    def minimum(self) -> T | None:
        '''The earliest time point, 'None' for the infinite past.'''

        if not self._intervals:
            raise EmptyIntervalError('An empty collection has no minimum.')

        return self._spans()[0][0]


    @property
    def maximum(self) -> T | None:
        '''The latest time point, 'None' for the infinite future.'''

        if not self._intervals:
            raise EmptyIntervalError('An empty collection has no maximum.')

        latest = None
        for _, last in self._spans():
            if last is None:
                return None
            if latest is None or self._timeline.is_after(last, latest):
                latest = last

        return latest


    def range(self) -> Interval[T]:
        '''The smallest interval which covers the whole collection.'''

        return self._interval(self.minimum, self.maximum)


    # Derived collections.

    def plus(self, other: Interval[T] | Iterable[Interval[T]]) -> IntervalCollection[T]:
        '''Adds one interval or many intervals.'''

        if isinstance(other, Interval):
            other = [other]

        return self._create([*self._intervals, *other])


    def minus(self, other: Interval[T] | Iterable[Interval[T]]) -> IntervalCollection[T]:
        '''Removes the time points of one interval or many intervals
        from every interval of the collection.'''

        if other is self:
            return self._create(())

        subtrahend = self._create([other] if isinstance(other, Interval) else other)

        if not self._intervals or not subtrahend:
            return self

        parts: list[Interval[T]] = []
        for minuend in self._intervals:
            parts.extend(subtrahend.with_complement(minuend))

        return self._create(parts)


    def with_time_window(self, window: Interval[T]) -> IntervalCollection[T]:
        '''Restricts the intervals to the time window.'''

        if window.is_empty:
            return self._create(())
        if window.start.is_infinite and window.end.is_infinite:
            return self

        parts: list[Interval[T]] = []
        for interval in self._intervals:
            intersection = interval.find_intersection(window)
            if intersection is None:
                continue

            parts.append(interval if window.contains(interval) else intersection)

        return self._create(parts)


    def with_complement(self, window: Interval[T]) -> IntervalCollection[T]:
        '''The parts of the time window which no interval covers.'''

        if window.is_empty:
            return self._create(())

        tl = self._timeline
        first, last = _span(window)

        gaps: list[_Span] = []
        cursor = first

        for lo, hi in self.with_time_window(window)._blocks():
            if lo is not None:
                gap_end = tl.step_backwards(lo)
                if gap_end is not None and (cursor is None or not tl.is_after(cursor, gap_end)):
                    gaps.append((cursor, gap_end))

            cursor = None if hi is None else tl.step_forward(hi)
            if cursor is None:
                break
        else:
            if cursor is None or last is None or not tl.is_after(cursor, last):
                gaps.append((cursor, last))

        return self._create(self._interval(lo, hi) for lo, hi in gaps)


    def with_gaps(self) -> IntervalCollection[T]:
        '''The holes between the intervals.'''

        tl = self._timeline
        blocks = self._blocks()
        gaps: list[Interval[T]] = []

        for (_, hi), (lo, _) in zip(blocks, blocks[1:]):
            # Blocks are separated by at least one time point.
            gaps.append(self._interval(tl.step_forward(hi), tl.step_backwards(lo)))

        return self._create(gaps)


    def with_blocks(self) -> IntervalCollection[T]:
        '''Merges overlapping and adjacent intervals.'''

        if len(self._intervals) < 2:
            return self

        return self._create(self._interval(lo, hi) for lo, hi in self._blocks())


    def with_splits(self) -> IntervalCollection[T]:
        '''Cuts the intervals at every boundary of another interval, so
        that the parts do not overlap but cover the same time points.'''

        if self.is_disjunct():
            return self

        tl = self._timeline
        spans = self._spans()

        dividers: set[T] = set()
        for lo, hi in spans:
            if lo is not None:
                dividers.add(lo)
            if hi is not None:
                following = tl.step_forward(hi)
                if following is not None:
                    dividers.add(following)

        ordered = sorted(dividers, key=cmp_to_key(tl.compare))
        # The part after the last divider reaches the end of the timeline.
        tail = None if any(hi is None for _, hi in spans) else tl.maximum

        segments: list[_Span] = []
        if any(lo is None for lo, _ in spans):
            if not ordered:
                segments.append((None, tail))
            else:
                # Nothing precedes a divider at the minimum of the timeline.
                leading = tl.step_backwards(ordered[0])
                if leading is not None:
                    segments.append((None, leading))

        for index, lo in enumerate(ordered):
            if index + 1 < len(ordered):
                segments.append((lo, tl.step_backwards(ordered[index + 1])))
            else:
                segments.append((lo, tail))

        parts: list[Interval[T]] = []
        for lo, hi in segments:
            sample = hi if lo is None else lo
            if sample is None or self.encloses(sample):
                parts.append(self._interval(lo, hi))

        return self._create(parts)


    def with_intersection(self) -> IntervalCollection[T]:
        '''The common part of all intervals.'''

        if len(self._intervals) < 2:
            return self

        def meet(a: Interval[T] | None, b: Interval[T]) -> Interval[T] | None:
            return None if a is None else a.find_intersection(b)

        common = reduce(meet, self._intervals[1:], self._intervals[0])
        return self._create(() if common is None else (common,))


    def union(self, other: IntervalCollection[T]) -> IntervalCollection[T]:
        '''All time points of both collections, merged into blocks.'''

        return self.plus(other).with_blocks()


    def intersect(self, other: IntervalCollection[T]) -> IntervalCollection[T]:
        '''The time points which both collections cover, merged into blocks.'''

        parts: list[Interval[T]] = []

        for a in self._intervals:
            for b in other._intervals:
                common = a.find_intersection(b)
                if common is not None:
                    parts.append(common)

        return self._create(parts).with_blocks()


    def xor(self, other: IntervalCollection[T]) -> IntervalCollection[T]:
        '''The time points which exactly one of the collections covers.'''

        if not self._intervals:
            return other
        if not other._intervals:
            return self

        both = self.intersect(other)
        return self.union(other).minus(both).with_blocks()


    # Graph views.

    def precedence_graph(self) -> nx.DiGraph:
        '''Directed graph of the intervals (nodes are positions in the
        collection) with an edge from every interval to each interval
        which it precedes or meets.'''

        graph = nx.DiGraph()

        for index, interval in enumerate(self._intervals):
            graph.add_node(index, interval=interval)

        for i, a in enumerate(self._intervals):
            for j, b in enumerate(self._intervals):
                if a.precedes(b):
                    graph.add_edge(i, j, relation='precedes')
                elif a.meets(b):
                    graph.add_edge(i, j, relation='meets')

        if not nx.is_directed_acyclic_graph(graph):
            cycle = nx.find_cycle(graph)
            raise InternalConsistencyError(f'Cycle detected: {cycle}.')

        logger.debug(
            'Built precedence graph with %d nodes and %d edges',
            graph.number_of_nodes(),
            graph.number_of_edges(),
        )
        return graph


    def overlap_graph(self) -> nx.Graph:
        '''Undirected graph of the intervals with an edge between every
        two intervals which share a time point.'''

        graph = nx.Graph()
        tree = IntervalTree.on(self._timeline, self._intervals)

        positions: dict[Interval[T], list[int]] = {}
        for index, interval in enumerate(self._intervals):
            graph.add_node(index, interval=interval)
            positions.setdefault(interval, []).append(index)

        for index, interval in enumerate(self._intervals):
            for found in tree.find_intersections(interval):
                for other in positions[found]:
                    if other != index:
                        graph.add_edge(index, other)

        logger.debug(
            'Built overlap graph with %d nodes and %d edges',
            graph.number_of_nodes(),
            graph.number_of_edges(),
        )
        return graph


    def overlap_groups(self) -> list[IntervalCollection[T]]:
        '''Splits the collection into groups of transitively overlapping
        intervals, ordered by their earliest start.'''

        graph = self.overlap_graph()

        groups = [
            self._create(self._intervals[i] for i in component)
            for component in nx.connected_components(graph)
        ]
        groups.sort(key=lambda group: sort_key(group[0]))
        return groups


    # Closed spans.

    def _spans(self) -> list[_Span]:
        return [_span(interval) for interval in self._intervals]


    def _blocks(self) -> list[_Span]:
        '''Merged spans of overlapping or adjacent intervals, sorted.'''

        tl = self._timeline
        blocks: list[list] = []

        for lo, hi in self._spans():
            if blocks:
                last = blocks[-1][1]
                if last is None:
                    break

                following = tl.step_forward(last)
                if following is None or lo is None or not tl.is_after(lo, following):
                    if hi is None or tl.is_after(hi, last):
                        blocks[-1][1] = hi
                    continue

            blocks.append([lo, hi])

        return [(lo, hi) for lo, hi in blocks]


    def _interval(self, lo: T | None, hi: T | None) -> Interval[T]:
        '''Creates the interval of a closed span in the canonical form.'''

        tl = self._timeline

        start: Boundary[T] = Boundary.infinite_past() if lo is None else Boundary.closed(lo)

        if hi is None:
            end: Boundary[T] = Boundary.infinite_future()
        elif tl.is_calendrical:
            end = Boundary.closed(hi)
        else:
            following = tl.step_forward(hi)
            end = Boundary.closed(hi) if following is None else Boundary.open(following)

        return Interval(start, end, tl)



def _span(interval: Interval[T]) -> _Span:
    '''First and last time point of a non-empty interval.'''

    lo = None if interval.start.is_infinite else interval._closed_start()
    hi = None if interval.end.is_infinite else interval._closed_end()
    return lo, hi
