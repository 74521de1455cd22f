from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Generic, TypeVar

from .timeline import Timeline


T = TypeVar('T')



class Edge(Enum):
    '''Specifies whether a finite boundary belongs to the interval.'''

    OPEN = auto()
    CLOSED = auto()



@dataclass(frozen=True)
class Boundary(Generic[T]):
    '''One edge of an interval: a time point which is included
    or excluded, or one of the two infinities.

    Infinite boundaries carry no time point and are always open.
    Use the constructors instead of the raw fields.'''


    class Kind(Enum):
        '''Where the boundary lies.'''

        FINITE = auto()
        PAST = auto()
        FUTURE = auto()


    _kind: Kind = Kind.FINITE
    _edge: Edge = Edge.CLOSED
    _point: T | None = None


    def _is_valid(self) -> bool:

        match self._kind:
            case Boundary.Kind.FINITE:
                return self._point is not None

            case Boundary.Kind.PAST | Boundary.Kind.FUTURE:
                return self._point is None and self._edge is Edge.OPEN

        return False


    def __post_init__(self) -> None:
        if not self._is_valid():
            raise ValueError('The boundary has been set incorrectly.')


    def __str__(self) -> str:

        match self._kind:
            case Boundary.Kind.PAST:
                return '(-∞)'

            case Boundary.Kind.FUTURE:
                return '(+∞)'

        if self._edge is Edge.OPEN:
            return f'({self._point})'
        else:
            return f'[{self._point}]'


    @classmethod
    def closed(cls, point: T) -> Boundary[T]:
        '''Creates a finite boundary which includes its time point.'''

        return cls(Boundary.Kind.FINITE, Edge.CLOSED, point)


    @classmethod
    def open(cls, point: T) -> Boundary[T]:
        '''Creates a finite boundary which excludes its time point.'''

        return cls(Boundary.Kind.FINITE, Edge.OPEN, point)


    @classmethod
    def of(cls, edge: Edge, point: T) -> Boundary[T]:
        return cls(Boundary.Kind.FINITE, edge, point)


    @classmethod
    def infinite_past(cls) -> Boundary[T]:
        return cls(Boundary.Kind.PAST, Edge.OPEN, None)


    @classmethod
    def infinite_future(cls) -> Boundary[T]:
        return cls(Boundary.Kind.FUTURE, Edge.OPEN, None)


    @property
    def point(self) -> T | None:
        '''The time point, 'None' if the boundary is infinite.'''

        return self._point


    @property
    def edge(self) -> Edge:
        return self._edge


    @property
    def kind(self) -> Kind:
        return self._kind


    @property
    def is_open(self) -> bool:
        return self._edge is Edge.OPEN


    @property
    def is_closed(self) -> bool:
        return self._edge is Edge.CLOSED


    @property
    def is_infinite(self) -> bool:
        return self._kind is not Boundary.Kind.FINITE


    @property
    def is_infinite_past(self) -> bool:
        return self._kind is Boundary.Kind.PAST


    @property
    def is_infinite_future(self) -> bool:
        return self._kind is Boundary.Kind.FUTURE


    @staticmethod
    def is_after(start: Boundary[T], end: Boundary[T], timeline: Timeline[T]) -> bool:
        '''Raw ordering of two boundaries. The edges are ignored.'''

        if start._kind is Boundary.Kind.PAST:
            return False
        if start._kind is Boundary.Kind.FUTURE:
            return end._kind is not Boundary.Kind.FUTURE
        if end._kind is Boundary.Kind.PAST:
            return True
        if end._kind is Boundary.Kind.FUTURE:
            return False

        assert start._point is not None and end._point is not None
        return timeline.is_after(start._point, end._point)


    @staticmethod
    def is_simultaneous(start: Boundary[T], end: Boundary[T], timeline: Timeline[T]) -> bool:
        '''Raw equality of the positions of two boundaries.'''

        if start._kind is not Boundary.Kind.FINITE or end._kind is not Boundary.Kind.FINITE:
            return start._kind is end._kind

        assert start._point is not None and end._point is not None
        return timeline.is_simultaneous(start._point, end._point)



def compare_at_start(b1: Boundary[T], b2: Boundary[T], timeline: Timeline[T]) -> int:
    '''Compares two start boundaries.

    An open start lies just after its time point, so the closed one
    of two mismatched edges is stepped back before comparing.
    Infinite starts are taken as the infinite past.'''

    if b1.is_infinite:
        return 0 if b2.is_infinite else -1
    if b2.is_infinite:
        return 1

    t1 = b1.point
    t2 = b2.point
    assert t1 is not None and t2 is not None

    if b1.is_open and b2.is_closed:
        t2 = timeline.step_backwards(t2)
        if t2 is None:
            return 1
    elif b1.is_closed and b2.is_open:
        t1 = timeline.step_backwards(t1)
        if t1 is None:
            return -1

    return timeline.compare(t1, t2)


def compare_at_end(b1: Boundary[T], b2: Boundary[T], timeline: Timeline[T]) -> int:
    '''Compares two end boundaries.

    An open end lies just before its time point, so the closed one
    of two mismatched edges is stepped forward before comparing.
    Infinite ends are taken as the infinite future.'''

    if b1.is_infinite:
        return 0 if b2.is_infinite else 1
    if b2.is_infinite:
        return -1

    t1 = b1.point
    t2 = b2.point
    assert t1 is not None and t2 is not None

    if b1.is_open and b2.is_closed:
        t2 = timeline.step_forward(t2)
        if t2 is None:
            return -1
    elif b1.is_closed and b2.is_open:
        t1 = timeline.step_forward(t1)
        if t1 is None:
            return 1

    return timeline.compare(t1, t2)
