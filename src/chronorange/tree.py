from __future__ import annotations
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, Callable, Generic, Iterable, Iterator, TypeVar
import datetime
import logging
import sys

from .boundary import Boundary, compare_at_end, compare_at_start
from .errors import ArithmeticOverflowError, InvalidIntervalError
from .interval import Interval, interval_comparator
from .moment import Moment
from .timeline import CLOCK_AXIS, DATE_AXIS, MOMENT_AXIS, TIMESTAMP_AXIS, Timeline


logger = logging.getLogger(__name__)

T = TypeVar('T')

Visitor = Callable[[Interval[Any]], bool]



@dataclass(eq=False)
class _Node(Generic[T]):
    interval: Interval[T]
    max: Boundary[T]
    height: int = 1
    left: _Node[T] | None = None
    right: _Node[T] | None = None



def _height(node: _Node[Any] | None) -> int:
    return 0 if node is None else node.height


def _balance(node: _Node[Any] | None) -> int:
    if node is None:
        return 0

    return _height(node.left) - _height(node.right)



class IntervalTree(Generic[T]):
    '''Immutable, augmented AVL tree of intervals on one timeline.

    The nodes are ordered by the starts of the intervals. Every node
    also records the greatest end within its subtree, which lets the
    searches skip whole subtrees. Empty intervals are not stored.

    The tree is built once and is only read afterwards, so it can be
    shared between threads.'''


    def __init__(self, timeline: Timeline[T], intervals: Iterable[Interval[T]] = ()) -> None:

        ordered: list[Interval[T]] = []
        for interval in intervals:
            if interval.timeline != timeline:
                raise InvalidIntervalError(
                    f'The interval {interval} does not belong to {timeline}.'
                )
            if not interval.is_empty:
                ordered.append(interval)

        if len(ordered) > sys.maxsize:
            raise ArithmeticOverflowError('Too many intervals for one tree.')

        # Equal starts go to the right subtree, so a stable pre-sort
        # yields in-order traversal by start and then by end.
        ordered.sort(key=cmp_to_key(interval_comparator))

        root: _Node[T] | None = None
        for interval in ordered:
            root = self._insert(root, interval, timeline)

        self._root = root
        self._size = len(ordered)
        self._timeline = timeline

        logger.debug('Built interval tree of %d intervals with height %d', self._size, self.height)


    def __len__(self) -> int:
        return self._size


    def __bool__(self) -> bool:
        return self._root is not None


    def __iter__(self) -> Iterator[Interval[T]]:
        '''Yields the intervals sorted by start and then by end.'''

        stack: list[_Node[T]] = []
        node = self._root

        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left

            node = stack.pop()
            yield node.interval
            node = node.right


    def __str__(self) -> str:
        return f'IntervalTree[{self._timeline}, size={self._size}]'


    # Constructors.

    @classmethod
    def on(cls, timeline: Timeline[T], intervals: Iterable[Interval[T]]) -> IntervalTree[T]:
        return cls(timeline, intervals)


    @classmethod
    def on_date_axis(
        cls, intervals: Iterable[Interval[datetime.date]]
    ) -> IntervalTree[datetime.date]:
        return cls(DATE_AXIS, intervals)    # type: ignore[arg-type]


    @classmethod
    def on_timestamp_axis(
        cls, intervals: Iterable[Interval[datetime.datetime]]
    ) -> IntervalTree[datetime.datetime]:
        return cls(TIMESTAMP_AXIS, intervals)    # type: ignore[arg-type]


    @classmethod
    def on_moment_axis(cls, intervals: Iterable[Interval[Moment]]) -> IntervalTree[Moment]:
        return cls(MOMENT_AXIS, intervals)    # type: ignore[arg-type]


    @classmethod
    def on_clock_axis(
        cls, intervals: Iterable[Interval[datetime.time]]
    ) -> IntervalTree[datetime.time]:
        return cls(CLOCK_AXIS, intervals)    # type: ignore[arg-type]


    @property
    def timeline(self) -> Timeline[T]:
        return self._timeline


    @property
    def height(self) -> int:
        return _height(self._root)


    # Queries.

    def find_intersections(self, query: T | Interval[T]) -> list[Interval[T]]:
        '''Finds the stored intervals which share at least one time point
        with the given time point or interval, sorted by start.'''

        tl = self._timeline

        if isinstance(query, Interval):
            if query.is_empty:
                return []

            low = query.start.point
            high = query.end.point

            if low is not None and query.start.is_open:
                low = tl.step_forward(low)
                if low is None:
                    return []
            if high is not None and query.end.is_closed:
                high = tl.step_forward(high)

            return self.search(low, high)

        if not tl.contains_point(query):
            raise InvalidIntervalError(f'The time point {query!r} does not belong to {tl}.')

        return self.search(query, tl.step_forward(query))


    def search(self, low: T | None, high: T | None) -> list[Interval[T]]:
        '''Finds the stored intervals which intersect the half-open range
        from 'low' (inclusive) to 'high' (exclusive). 'None' means
        unbounded.'''

        found: list[Interval[T]] = []
        self._find_intersections(low, high, self._root, found)
        return found


    def contains(self, interval: Interval[T]) -> bool:
        '''Checks whether the tree stores an interval equal to the given one.'''

        if interval.is_empty:
            return False

        low = interval.start.point
        if low is not None and interval.start.is_open:
            low = self._timeline.step_forward(low)

        found: list[Interval[T]] = []
        self._find_by_equals(interval, low, found, self._root)
        return bool(found)


    def accept(self, visitor: Visitor) -> None:
        '''Passes the intervals sorted by start to the visitor until
        the visitor returns 'True'.'''

        self._accept(visitor, self._root)


    # Building.

    @classmethod
    def _insert(cls, node: _Node[T] | None, interval: Interval[T], timeline: Timeline[T]) -> _Node[T]:

        if node is None:
            return _Node(interval, interval.end)

        if compare_at_start(node.interval.start, interval.start, timeline) > 0:
            node.left = cls._insert(node.left, interval, timeline)
        else:
            node.right = cls._insert(node.right, interval, timeline)

        node.height = max(_height(node.left), _height(node.right)) + 1
        node.max = cls._find_max(node, timeline)

        balance = _balance(node)

        if balance < -1:
            if _balance(node.right) > 0:
                node.right = cls._rotate_right(node.right, timeline)    # type: ignore[arg-type]
            return cls._rotate_left(node, timeline)

        if balance > 1:
            if _balance(node.left) < 0:
                node.left = cls._rotate_left(node.left, timeline)    # type: ignore[arg-type]
            return cls._rotate_right(node, timeline)

        return node


    @classmethod
    def _rotate_left(cls, node: _Node[T], timeline: Timeline[T]) -> _Node[T]:

        pivot = node.right
        assert pivot is not None

        node.right = pivot.left
        pivot.left = node

        node.height = max(_height(node.left), _height(node.right)) + 1
        pivot.height = max(_height(pivot.left), _height(pivot.right)) + 1
        node.max = cls._find_max(node, timeline)
        pivot.max = cls._find_max(pivot, timeline)
        return pivot


    @classmethod
    def _rotate_right(cls, node: _Node[T], timeline: Timeline[T]) -> _Node[T]:

        pivot = node.left
        assert pivot is not None

        node.left = pivot.right
        pivot.right = node

        node.height = max(_height(node.left), _height(node.right)) + 1
        pivot.height = max(_height(pivot.left), _height(pivot.right)) + 1
        node.max = cls._find_max(node, timeline)
        pivot.max = cls._find_max(pivot, timeline)
        return pivot


    @staticmethod
    def _find_max(node: _Node[T], timeline: Timeline[T]) -> Boundary[T]:
        '''The greatest end of the node and its children.'''

        greatest = node.interval.end

        for child in (node.left, node.right):
            if child is not None and compare_at_end(child.max, greatest, timeline) > 0:
                greatest = child.max

        return greatest


    # Searching.

    def _find_intersections(
        self,
        low: T | None,
        high: T | None,
        node: _Node[T] | None,
        found: list[Interval[T]],
    ) -> None:

        if node is None:
            return

        tl = self._timeline

        # Nothing in this subtree ends after 'low'.
        if low is not None and not node.max.is_infinite:
            if node.max.is_open:
                if tl.compare(node.max.point, low) <= 0:
                    return
            elif tl.compare(node.max.point, low) < 0:
                return

        self._find_intersections(low, high, node.left, found)

        start = node.interval.start
        starts_before_high = start.is_infinite or high is None
        if not starts_before_high:
            if start.is_closed:
                starts_before_high = tl.compare(start.point, high) < 0
            else:
                closed = tl.step_forward(start.point)
                starts_before_high = closed is not None and tl.compare(closed, high) < 0

        if not starts_before_high:
            # The right subtree only holds later starts.
            return

        end = node.interval.end
        ends_after_low = end.is_infinite or low is None
        if not ends_after_low:
            if end.is_open:
                ends_after_low = tl.compare(low, end.point) < 0
            else:
                ends_after_low = tl.compare(low, end.point) <= 0

        if ends_after_low:
            found.append(node.interval)

        self._find_intersections(low, high, node.right, found)


    def _find_by_equals(
        self,
        interval: Interval[T],
        low: T | None,
        found: list[Interval[T]],
        node: _Node[T] | None,
    ) -> bool:
        '''Searches in order and returns 'True' to stop the search.'''

        if node is None:
            return False

        if self._find_by_equals(interval, low, found, node.left):
            return True

        if interval == node.interval:
            found.append(node.interval)
            return True

        if (low is not None and node.interval.is_after(low)) or (
            interval.start.is_infinite and not node.interval.start.is_infinite
        ):
            return True

        return self._find_by_equals(interval, low, found, node.right)


    @classmethod
    def _accept(cls, visitor: Visitor, node: _Node[T] | None) -> bool:

        if node is None:
            return False

        if cls._accept(visitor, node.left):
            return True

        if visitor(node.interval):
            return True

        return cls._accept(visitor, node.right)
