from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Iterator
import datetime

from .errors import ArithmeticOverflowError

if TYPE_CHECKING:
    from .interval import Interval



MIN_YEAR = datetime.MINYEAR
MAX_YEAR = datetime.MAXYEAR



class CalendarPeriod:
    '''Common behaviour of calendar units which are used as time points
    of their own.

    Every period has a proleptic number: consecutive periods have
    consecutive numbers. A period also covers a closed range
    of calendar dates.'''

    UNIT: ClassVar[str] = 'period'


    @property
    def proleptic(self) -> int:
        raise NotImplementedError


    @classmethod
    def from_proleptic(cls, number: int):
        raise NotImplementedError


    @classmethod
    def from_date(cls, date: datetime.date):
        raise NotImplementedError


    @property
    def first_day(self) -> datetime.date:
        raise NotImplementedError


    @property
    def last_day(self) -> datetime.date:
        raise NotImplementedError


    @classmethod
    def minimum(cls):
        return cls.from_date(datetime.date.min)


    @classmethod
    def maximum(cls):
        return cls.from_date(datetime.date.max)


    def __contains__(self, date: object) -> bool:
        '''Checks whether the calendar date falls into the period.'''

        if not isinstance(date, datetime.date) or isinstance(date, datetime.datetime):
            return False

        return self.first_day <= date <= self.last_day


    def __iter__(self) -> Iterator[datetime.date]:
        day = self.first_day
        for _ in range(self.length):
            yield day
            day += datetime.timedelta(days=1)


    @property
    def length(self) -> int:
        '''Number of days in the period.'''

        return (self.last_day - self.first_day).days + 1


    def plus(self, amount: int):
        '''Moves the period by the given number of units.'''

        number = self.proleptic + amount
        cls = type(self)

        if not cls.minimum().proleptic <= number <= cls.maximum().proleptic:
            raise ArithmeticOverflowError(f'{cls.__name__} out of range: {number}.')

        return cls.from_proleptic(number)


    def minus(self, amount: int):
        return self.plus(-amount)


    def as_interval(self) -> Interval[datetime.date]:
        '''The period as closed interval of calendar dates.'''

        from .interval import date_interval

        return date_interval(self.first_day, self.last_day)



@dataclass(frozen=True, order=True)
class CalendarYear(CalendarPeriod):
    '''A whole year of the gregorian calendar.'''

    UNIT: ClassVar[str] = 'year'

    year: int


    def __post_init__(self) -> None:
        if not MIN_YEAR <= self.year <= MAX_YEAR:
            raise ValueError(f'Year out of range: {self.year}.')


    def __str__(self) -> str:
        return f'{self.year:04d}'


    @property
    def proleptic(self) -> int:
        return self.year


    @classmethod
    def from_proleptic(cls, number: int) -> CalendarYear:
        return cls(number)


    @classmethod
    def from_date(cls, date: datetime.date) -> CalendarYear:
        return cls(date.year)


    @property
    def first_day(self) -> datetime.date:
        return datetime.date(self.year, 1, 1)


    @property
    def last_day(self) -> datetime.date:
        return datetime.date(self.year, 12, 31)



@dataclass(frozen=True, order=True)
class CalendarQuarter(CalendarPeriod):
    '''A quarter year, Q1 to Q4.'''

    UNIT: ClassVar[str] = 'quarter'

    year: int
    quarter: int


    def __post_init__(self) -> None:
        if not MIN_YEAR <= self.year <= MAX_YEAR:
            raise ValueError(f'Year out of range: {self.year}.')
        if not 1 <= self.quarter <= 4:
            raise ValueError(f'Quarter out of range: {self.quarter}.')


    def __str__(self) -> str:
        return f'{self.year:04d}-Q{self.quarter}'


    @property
    def proleptic(self) -> int:
        return self.year * 4 + self.quarter - 1


    @classmethod
    def from_proleptic(cls, number: int) -> CalendarQuarter:
        year, index = divmod(number, 4)
        return cls(year, index + 1)


    @classmethod
    def from_date(cls, date: datetime.date) -> CalendarQuarter:
        return cls(date.year, (date.month - 1) // 3 + 1)


    @property
    def first_day(self) -> datetime.date:
        return datetime.date(self.year, 3 * self.quarter - 2, 1)


    @property
    def last_day(self) -> datetime.date:
        return CalendarMonth(self.year, 3 * self.quarter).last_day



@dataclass(frozen=True, order=True)
class CalendarMonth(CalendarPeriod):
    '''A month of a gregorian year.'''

    UNIT: ClassVar[str] = 'month'

    year: int
    month: int


    def __post_init__(self) -> None:
        if not MIN_YEAR <= self.year <= MAX_YEAR:
            raise ValueError(f'Year out of range: {self.year}.')
        if not 1 <= self.month <= 12:
            raise ValueError(f'Month out of range: {self.month}.')


    def __str__(self) -> str:
        return f'{self.year:04d}-{self.month:02d}'


    @property
    def proleptic(self) -> int:
        return self.year * 12 + self.month - 1


    @classmethod
    def from_proleptic(cls, number: int) -> CalendarMonth:
        year, index = divmod(number, 12)
        return cls(year, index + 1)


    @classmethod
    def from_date(cls, date: datetime.date) -> CalendarMonth:
        return cls(date.year, date.month)


    @property
    def first_day(self) -> datetime.date:
        return datetime.date(self.year, self.month, 1)


    @property
    def last_day(self) -> datetime.date:
        if self.month == 12:
            return datetime.date(self.year, 12, 31)

        return datetime.date(self.year, self.month + 1, 1) - datetime.timedelta(days=1)


    def at_day(self, day: int) -> datetime.date:
        return datetime.date(self.year, self.month, day)



@dataclass(frozen=True, order=True)
class CalendarWeek(CalendarPeriod):
    '''An ISO-8601 week (monday to sunday) of a week-based year.

    The last week of year 9999 is not supported because its sunday
    lies outside the range of 'datetime.date'.'''

    UNIT: ClassVar[str] = 'week'

    year: int
    week: int


    def __post_init__(self) -> None:
        try:
            monday = datetime.date.fromisocalendar(self.year, self.week, 1)
        except ValueError as e:
            raise ValueError(f'Invalid ISO week: {self.year}-W{self.week:02d}.') from e

        if monday > datetime.date.max - datetime.timedelta(days=6):
            raise ValueError(f'Week out of range: {self.year}-W{self.week:02d}.')


    def __str__(self) -> str:
        return f'{self.year:04d}-W{self.week:02d}'


    @property
    def proleptic(self) -> int:
        # 0001-01-01 is a monday and has the ordinal 1.
        return (self.first_day.toordinal() - 1) // 7


    @classmethod
    def from_proleptic(cls, number: int) -> CalendarWeek:
        monday = datetime.date.fromordinal(number * 7 + 1)
        iso = monday.isocalendar()
        return cls(iso[0], iso[1])


    @classmethod
    def from_date(cls, date: datetime.date) -> CalendarWeek:
        iso = date.isocalendar()
        return cls(iso[0], iso[1])


    @classmethod
    def maximum(cls) -> CalendarWeek:
        return cls.from_date(datetime.date.max - datetime.timedelta(days=7))


    @property
    def first_day(self) -> datetime.date:
        return datetime.date.fromisocalendar(self.year, self.week, 1)


    @property
    def last_day(self) -> datetime.date:
        return datetime.date.fromisocalendar(self.year, self.week, 7)
