'''Intervals on timelines: Allen relations, interval trees and streaming.'''

from .boundary import Boundary, Edge, compare_at_end, compare_at_start
from .collection import IntervalCollection
from .errors import (
    ArithmeticOverflowError,
    CanonicalizationError,
    EmptyIntervalError,
    InternalConsistencyError,
    IntervalError,
    InvalidIntervalError,
    UnsupportedForInfiniteError,
)
from .interval import (
    Interval,
    clock_interval,
    date_interval,
    interval_comparator,
    moment_interval,
    period_interval,
    sort_key,
    timestamp_interval,
)
from .moment import UTC, Moment
from .periods import CalendarMonth, CalendarPeriod, CalendarQuarter, CalendarWeek, CalendarYear
from .relation import IntervalRelation
from .settings import Settings
from .streaming import (
    DayRange,
    plus_months,
    stream,
    stream_daily,
    stream_dates,
    stream_excluding,
    stream_intervals,
)
from .timeline import (
    CLOCK_AXIS,
    DATE_AXIS,
    MOMENT_AXIS,
    MONTH_AXIS,
    QUARTER_AXIS,
    TIMESTAMP_AXIS,
    WEEK_AXIS,
    YEAR_AXIS,
    ClockTimeline,
    DateTimeline,
    IntegerTimeline,
    MomentTimeline,
    PeriodTimeline,
    TimestampTimeline,
    Timeline,
)
from .tree import IntervalTree
