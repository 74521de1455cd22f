from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, TypeVar
import datetime

from .moment import UTC, Moment
from .periods import CalendarMonth, CalendarPeriod, CalendarQuarter, CalendarWeek, CalendarYear


T = TypeVar('T')

_MICRO = datetime.timedelta(microseconds=1)
_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=UTC)



class Timeline(ABC, Generic[T]):
    '''Ordering and stepping of one type of time points.

    Stepping moves a time point by the smallest unit of the timeline.
    It returns 'None' instead of leaving the representable range.'''


    @property
    def is_calendrical(self) -> bool:
        '''Calendrical intervals are closed in their canonical form,
        all others are half-open.'''

        return False


    @property
    @abstractmethod
    def minimum(self) -> T: ...


    @property
    @abstractmethod
    def maximum(self) -> T: ...


    @abstractmethod
    def ordinal(self, point: T) -> int:
        '''The position of the time point counted in smallest units.'''


    @abstractmethod
    def from_ordinal(self, number: int) -> T: ...


    def compare(self, a: T, b: T) -> int:
        return (a > b) - (a < b)    # type: ignore[operator]


    def is_before(self, a: T, b: T) -> bool:
        return self.compare(a, b) < 0


    def is_after(self, a: T, b: T) -> bool:
        return self.compare(a, b) > 0


    def is_simultaneous(self, a: T, b: T) -> bool:
        return self.compare(a, b) == 0


    def step_forward(self, point: T) -> T | None:
        if self.compare(point, self.maximum) >= 0:
            return None

        return self.from_ordinal(self.ordinal(point) + 1)


    def step_backwards(self, point: T) -> T | None:
        if self.compare(point, self.minimum) <= 0:
            return None

        return self.from_ordinal(self.ordinal(point) - 1)


    def shift(self, point: T, amount: Any) -> T | None:
        '''Moves the time point by a number of smallest units. Returns
        'None' outside the representable range.'''

        number = self.ordinal(point) + amount

        if not self.ordinal(self.minimum) <= number <= self.ordinal(self.maximum):
            return None

        return self.from_ordinal(number)


    def distance(self, a: T, b: T) -> Any:
        '''The amount which shifts 'a' to 'b'.'''

        return self.ordinal(b) - self.ordinal(a)


    def units(self, count: int) -> Any:
        '''The amount which covers the given number of smallest units.'''

        return count


    def contains_point(self, point: object) -> bool:
        '''Checks whether the object is a time point of this timeline.'''

        try:
            return (
                self.compare(self.minimum, point) <= 0    # type: ignore[arg-type]
                and self.compare(point, self.maximum) <= 0    # type: ignore[arg-type]
            )
        except TypeError:
            return False



@dataclass(frozen=True)
class IntegerTimeline(Timeline[int]):
    '''Bounded integers. Mainly useful for scheduling slots
    and for exploring the interval algebra.'''

    lower: int = -(2 ** 63)
    upper: int = 2 ** 63 - 1
    calendrical: bool = False


    def __post_init__(self) -> None:
        if self.lower > self.upper:
            raise ValueError('The minimum of a timeline cannot exceed its maximum.')


    def __str__(self) -> str:
        return f'IntegerTimeline[{self.lower}..{self.upper}]'


    @property
    def is_calendrical(self) -> bool:
        return self.calendrical


    @property
    def minimum(self) -> int:
        return self.lower


    @property
    def maximum(self) -> int:
        return self.upper


    def ordinal(self, point: int) -> int:
        return point


    def from_ordinal(self, number: int) -> int:
        return number


    def contains_point(self, point: object) -> bool:
        return (
            isinstance(point, int)
            and not isinstance(point, bool)
            and self.lower <= point <= self.upper
        )



@dataclass(frozen=True)
class DateTimeline(Timeline[datetime.date]):
    '''Calendar dates, stepping by one day.'''


    def __str__(self) -> str:
        return 'DateTimeline'


    @property
    def is_calendrical(self) -> bool:
        return True


    @property
    def minimum(self) -> datetime.date:
        return datetime.date.min


    @property
    def maximum(self) -> datetime.date:
        return datetime.date.max


    def ordinal(self, point: datetime.date) -> int:
        return point.toordinal()


    def from_ordinal(self, number: int) -> datetime.date:
        return datetime.date.fromordinal(number)


    def contains_point(self, point: object) -> bool:
        return isinstance(point, datetime.date) and not isinstance(point, datetime.datetime)



@dataclass(frozen=True)
class TimestampTimeline(Timeline[datetime.datetime]):
    '''Local (naive) timestamps, stepping by one microsecond.'''


    def __str__(self) -> str:
        return 'TimestampTimeline'


    @property
    def minimum(self) -> datetime.datetime:
        return datetime.datetime.min


    @property
    def maximum(self) -> datetime.datetime:
        return datetime.datetime.max


    def ordinal(self, point: datetime.datetime) -> int:
        return (point - datetime.datetime.min) // _MICRO


    def from_ordinal(self, number: int) -> datetime.datetime:
        return datetime.datetime.min + number * _MICRO


    def step_forward(self, point: datetime.datetime) -> datetime.datetime | None:
        if point >= datetime.datetime.max:
            return None

        return point + _MICRO


    def step_backwards(self, point: datetime.datetime) -> datetime.datetime | None:
        if point <= datetime.datetime.min:
            return None

        return point - _MICRO


    def shift(self, point: datetime.datetime, amount: Any) -> datetime.datetime | None:
        '''Moves the timestamp by a 'timedelta' (or by microseconds).'''

        if isinstance(amount, int):
            amount = amount * _MICRO

        try:
            return point + amount
        except OverflowError:
            return None


    def units(self, count: int) -> datetime.timedelta:
        return count * _MICRO


    def distance(self, a: datetime.datetime, b: datetime.datetime) -> datetime.timedelta:
        return b - a


    def contains_point(self, point: object) -> bool:
        return isinstance(point, datetime.datetime) and point.tzinfo is None



@dataclass(frozen=True)
class MomentTimeline(Timeline[Moment]):
    '''Global moments, stepping by one microsecond.'''


    def __str__(self) -> str:
        return 'MomentTimeline'


    @property
    def minimum(self) -> Moment:
        return Moment(datetime.datetime.min.replace(tzinfo=UTC))


    @property
    def maximum(self) -> Moment:
        return Moment(datetime.datetime.max.replace(tzinfo=UTC))


    def ordinal(self, point: Moment) -> int:
        return (point.utc - _EPOCH) // _MICRO


    def from_ordinal(self, number: int) -> Moment:
        return Moment(_EPOCH + number * _MICRO)


    def step_forward(self, point: Moment) -> Moment | None:
        return self.shift(point, _MICRO)


    def step_backwards(self, point: Moment) -> Moment | None:
        return self.shift(point, -_MICRO)


    def shift(self, point: Moment, amount: Any) -> Moment | None:
        '''Moves the moment by a 'timedelta' (or by microseconds).
        The zone of the moment is kept.'''

        if isinstance(amount, int):
            amount = amount * _MICRO

        try:
            shifted = point.utc + amount
        except OverflowError:
            return None

        try:
            return Moment(shifted.astimezone(point.datetime.tzinfo))
        except OverflowError:
            # The instant exists, but not as wall time in the zone.
            return Moment(shifted)


    def units(self, count: int) -> datetime.timedelta:
        return count * _MICRO


    def distance(self, a: Moment, b: Moment) -> datetime.timedelta:
        return b - a


    def contains_point(self, point: object) -> bool:
        return isinstance(point, Moment)



@dataclass(frozen=True)
class ClockTimeline(Timeline[datetime.time]):
    '''Wall clock times of one day, stepping by one microsecond.

    The end of the day (24:00) cannot be represented; the latest time
    point is 23:59:59.999999.'''


    def __str__(self) -> str:
        return 'ClockTimeline'


    @property
    def minimum(self) -> datetime.time:
        return datetime.time.min


    @property
    def maximum(self) -> datetime.time:
        return datetime.time.max


    def ordinal(self, point: datetime.time) -> int:
        return (
            ((point.hour * 60 + point.minute) * 60 + point.second) * 1_000_000
            + point.microsecond
        )


    def from_ordinal(self, number: int) -> datetime.time:
        seconds, micros = divmod(number, 1_000_000)
        minutes, second = divmod(seconds, 60)
        hour, minute = divmod(minutes, 60)
        return datetime.time(hour, minute, second, micros)


    def shift(self, point: datetime.time, amount: Any) -> datetime.time | None:
        '''Moves the clock time by a 'timedelta' (or by microseconds)
        without wrapping around midnight.'''

        if isinstance(amount, datetime.timedelta):
            amount = amount // _MICRO

        return super().shift(point, amount)


    def units(self, count: int) -> datetime.timedelta:
        return count * _MICRO


    def distance(self, a: datetime.time, b: datetime.time) -> datetime.timedelta:
        return (self.ordinal(b) - self.ordinal(a)) * _MICRO


    def contains_point(self, point: object) -> bool:
        return isinstance(point, datetime.time) and point.tzinfo is None



@dataclass(frozen=True)
class PeriodTimeline(Timeline[CalendarPeriod]):
    '''Calendar units (years, quarters, months or weeks) as time points.'''

    kind: type[CalendarPeriod]


    def __str__(self) -> str:
        return f'PeriodTimeline[{self.kind.UNIT}]'


    @property
    def is_calendrical(self) -> bool:
        return True


    @property
    def minimum(self) -> CalendarPeriod:
        return self.kind.minimum()


    @property
    def maximum(self) -> CalendarPeriod:
        return self.kind.maximum()


    def ordinal(self, point: CalendarPeriod) -> int:
        return point.proleptic


    def from_ordinal(self, number: int) -> CalendarPeriod:
        return self.kind.from_proleptic(number)


    def compare(self, a: CalendarPeriod, b: CalendarPeriod) -> int:
        pa = a.proleptic
        pb = b.proleptic
        return (pa > pb) - (pa < pb)


    def contains_point(self, point: object) -> bool:
        return isinstance(point, self.kind)



DATE_AXIS = DateTimeline()
TIMESTAMP_AXIS = TimestampTimeline()
MOMENT_AXIS = MomentTimeline()
CLOCK_AXIS = ClockTimeline()
YEAR_AXIS = PeriodTimeline(CalendarYear)
QUARTER_AXIS = PeriodTimeline(CalendarQuarter)
MONTH_AXIS = PeriodTimeline(CalendarMonth)
WEEK_AXIS = PeriodTimeline(CalendarWeek)
