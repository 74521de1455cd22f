from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Iterator, TypeVar
import calendar
import datetime

from .errors import ArithmeticOverflowError, InvalidIntervalError, UnsupportedForInfiniteError
from .interval import Interval
from .settings import Settings
from .timeline import DATE_AXIS


T = TypeVar('T')



@dataclass(frozen=True)
class DayRange:
    '''A closed range of calendar dates.

    Iterating computes every date from the start, so a range can be
    iterated many times and split into parts which are iterated
    independently, e.g. by different worker threads.'''

    start: datetime.date
    end: datetime.date


    def __post_init__(self) -> None:
        if self.start > self.end:
            raise InvalidIntervalError(f'Start after end: {self.start}/{self.end}.')


    def __str__(self) -> str:
        return f'[{self.start}/{self.end}]'


    def __len__(self) -> int:
        return (self.end - self.start).days + 1


    def __iter__(self) -> Iterator[datetime.date]:
        first = self.start.toordinal()
        for number in range(first, self.end.toordinal() + 1):
            yield datetime.date.fromordinal(number)


    def __contains__(self, date: object) -> bool:
        if not isinstance(date, datetime.date) or isinstance(date, datetime.datetime):
            return False

        return self.start <= date <= self.end


    def split(self, settings: Settings | None = None) -> tuple[DayRange, DayRange] | None:
        '''Splits the range in two, preferably in the middle or at the end
        of a month. Returns 'None' if the range is too small to split.'''

        threshold = (settings or Settings()).split_threshold

        s = self.start.toordinal()
        e = self.end.toordinal()

        spread = e - s - 3
        if spread < threshold:
            return None

        middle = datetime.date.fromordinal(spread // 2 + s)
        half_months = len(self) < 180 and middle.day <= 15

        if half_months:
            cut = s + spread // 2 + (15 - middle.day)
        else:
            days = calendar.monthrange(middle.year, middle.month)[1]
            cut = s + spread // 2 + (days - middle.day)

        if cut > e - threshold:
            return None

        return (
            DayRange(self.start, datetime.date.fromordinal(cut)),
            DayRange(datetime.date.fromordinal(cut + 1), self.end),
        )


    def chunks(self, n: int, settings: Settings | None = None) -> list[DayRange]:
        '''Splits the range repeatedly into at most 'n' parts. The parts
        keep the order of the dates.'''

        if n < 1:
            raise ValueError('The number of chunks must be positive.')

        parts = [self]

        while len(parts) < n:
            # Split the largest part first.
            index = max(range(len(parts)), key=lambda i: len(parts[i]))
            halves = parts[index].split(settings)
            if halves is None:
                break
            parts[index:index + 1] = halves

        return parts


    @classmethod
    def of(cls, interval: Interval[datetime.date]) -> DayRange | None:
        '''The dates of a date interval, 'None' if it is empty.'''

        if interval.timeline != DATE_AXIS:
            raise InvalidIntervalError(f'Not a date interval: {interval}.')
        if not interval.is_finite:
            raise UnsupportedForInfiniteError('Streaming is not supported for infinite intervals.')
        if interval.is_empty:
            return None

        canonical = interval.to_canonical()
        return cls(canonical.start.point, canonical.end.point)    # type: ignore[arg-type]



def plus_months(date: datetime.date, months: int) -> datetime.date:
    '''Adds months to a date. The day is reduced to the last day
    of the target month if needed.'''

    number = date.year * 12 + date.month - 1 + months
    year, index = divmod(number, 12)

    if not datetime.MINYEAR <= year <= datetime.MAXYEAR:
        raise ArithmeticOverflowError(f'Cannot add {months} months to {date}.')

    month = index + 1
    day = min(date.day, calendar.monthrange(year, month)[1])
    return datetime.date(year, month, day)


def stream_daily(interval: Interval[datetime.date]) -> Iterator[datetime.date]:
    '''Yields every date of a finite date interval.'''

    days = DayRange.of(interval)
    if days is None:
        return iter(())

    return iter(days)


def stream_dates(
    interval: Interval[datetime.date], months: int = 0, days: int = 0
) -> Iterator[datetime.date]:
    '''Yields the dates 'start + i * (months, days)' within a finite
    date interval, 'i' counting from zero.

    Months are added first; days which do not exist in the target month
    are reduced to the last day of that month.'''

    if months < 0 or days < 0 or months == days == 0:
        raise ValueError(f'The step must be positive: {months} months, {days} days.')

    date_range = DayRange.of(interval)
    if date_range is None:
        return

    if months == 0 and days == 1:
        yield from date_range
        return

    start, end = date_range.start, date_range.end
    index = 0

    while True:
        try:
            date = plus_months(start, months * index) + datetime.timedelta(days=days * index)
        except (ArithmeticOverflowError, OverflowError):
            return

        if date > end:
            return

        yield date
        index += 1


def stream_excluding(
    interval: Interval[datetime.date], exclusion: Callable[[datetime.date], bool]
) -> Iterator[datetime.date]:
    '''Yields the dates of the interval which are not excluded.'''

    return (date for date in stream_daily(interval) if not exclusion(date))


def _canonical_range(interval: Interval[T]) -> Interval[T] | None:

    if not interval.is_finite:
        raise UnsupportedForInfiniteError('Streaming is not supported for infinite intervals.')
    if interval.is_empty:
        return None

    return interval.to_canonical()


def _check_step(step: Any) -> None:

    # Works for unit counts and for 'timedelta'.
    if not step > step * 0:
        raise ValueError(f'The step must be positive: {step}.')


def stream(interval: Interval[T], step: Any, backwards: bool = False) -> Iterator[T]:
    '''Yields the time points 'start + i * step' of a finite interval,
    or 'end - i * step' when streaming backwards.

    The step is an amount of the timeline (see 'Timeline.shift'). On
    half-open intervals, streaming backwards starts one step before
    the open end.'''

    _check_step(step)

    canonical = _canonical_range(interval)
    if canonical is None:
        return

    tl = canonical.timeline
    start = canonical.start.point
    end = canonical.end.point
    closed = canonical.end.is_closed
    index = 0

    while True:
        if backwards:
            offset = index if closed else index + 1
            point = tl.shift(end, -(step * offset))
            if point is None or tl.is_before(point, start):
                return
        else:
            point = tl.shift(start, step * index)
            if point is None or tl.is_after(point, end) or (not closed and tl.is_simultaneous(point, end)):
                return

        yield point
        index += 1


def stream_intervals(interval: Interval[T], step: Any, backwards: bool = False) -> Iterator[Interval[T]]:
    '''Yields consecutive intervals of length 'step' which cover
    a finite interval. The last one is truncated at the boundary.

    The parts are in the canonical form of the timeline: closed on
    calendrical timelines, half-open on all others.'''

    _check_step(step)

    canonical = _canonical_range(interval)
    if canonical is None:
        return

    tl = canonical.timeline
    start = canonical.start.point
    end = canonical.end.point
    closed = tl.is_calendrical
    index = 0

    while True:
        if backwards:
            upper = tl.shift(end, -(step * index))
            if upper is None or tl.is_before(upper, start) or (not closed and tl.is_simultaneous(upper, start)):
                return

            lower = tl.shift(upper, -step)
            if lower is not None and closed:
                lower = tl.step_forward(lower)
            if lower is None or tl.is_before(lower, start):
                lower = start
        else:
            lower = tl.shift(start, step * index)
            if lower is None or tl.is_after(lower, end) or (not closed and tl.is_simultaneous(lower, end)):
                return

            upper = tl.shift(lower, step)
            if upper is not None and closed:
                upper = tl.step_backwards(upper)
            if upper is None or tl.is_after(upper, end):
                upper = end

        if closed:
            yield Interval.closed(lower, upper, tl)
        else:
            yield Interval.closed_open(lower, upper, tl)

        index += 1
