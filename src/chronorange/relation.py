from __future__ import annotations
from enum import Enum
from typing import TYPE_CHECKING, Any
import logging

from .errors import InternalConsistencyError, InvalidIntervalError

if TYPE_CHECKING:
    from .interval import Interval


logger = logging.getLogger(__name__)



class IntervalRelation(Enum):
    '''The 13 relations of Allen's interval algebra.

    The members are ordered such that the relation at position 'i' and
    the one at position '12 - i' are inverse to each other.'''

    PRECEDES = 'precedes'
    MEETS = 'meets'
    OVERLAPS = 'overlaps'
    FINISHES = 'finishes'
    STARTS = 'starts'
    ENCLOSES = 'encloses'
    EQUIVALENT = 'equivalent_to'
    ENCLOSED_BY = 'enclosed_by'
    STARTED_BY = 'started_by'
    FINISHED_BY = 'finished_by'
    OVERLAPPED_BY = 'overlapped_by'
    MET_BY = 'met_by'
    PRECEDED_BY = 'preceded_by'


    def __str__(self) -> str:
        return self.name


    @property
    def index(self) -> int:
        return _ORDER.index(self)


    def inverse(self) -> IntervalRelation:
        '''The relation seen from the other interval.'''

        return _ORDER[12 - self.index]


    def matches(self, a: Interval[Any], b: Interval[Any]) -> bool:
        '''Checks whether this relation holds between the intervals.'''

        return bool(getattr(a, self.value)(b))


    @staticmethod
    def between(a: Interval[Any], b: Interval[Any]) -> IntervalRelation:
        '''Determines the one relation which holds between the intervals.

        The candidates are narrowed down by comparing the starts first.'''

        if a.timeline != b.timeline:
            raise InvalidIntervalError(
                f'Intervals on different timelines: {a.timeline} and {b.timeline}.'
            )

        start_a = a._positions()[0]
        start_b = b._positions()[0]
        order = (start_a > start_b) - (start_a < start_b)

        if order > 0:
            candidates = _A_AFTER_B
        elif order == 0:
            candidates = _EQUAL_START
        else:
            candidates = _A_BEFORE_B

        for relation in candidates:
            if relation.matches(a, b):
                return relation

        logger.error('No relation found between %s and %s', a, b)
        raise InternalConsistencyError(f'Cannot determine the relation between {a} and {b}.')



_ORDER = list(IntervalRelation)

_A_AFTER_B = (
    IntervalRelation.ENCLOSED_BY,
    IntervalRelation.FINISHES,
    IntervalRelation.OVERLAPPED_BY,
    IntervalRelation.MET_BY,
    IntervalRelation.PRECEDED_BY,
)

_EQUAL_START = (
    IntervalRelation.STARTS,
    IntervalRelation.EQUIVALENT,
    IntervalRelation.STARTED_BY,
)

_A_BEFORE_B = (
    IntervalRelation.PRECEDES,
    IntervalRelation.MEETS,
    IntervalRelation.OVERLAPS,
    IntervalRelation.FINISHED_BY,
    IntervalRelation.ENCLOSES,
)
