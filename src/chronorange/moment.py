from __future__ import annotations
from dataclasses import dataclass
from functools import total_ordering
from typing import TYPE_CHECKING, overload
import datetime
import sys
import zoneinfo

if TYPE_CHECKING:
    from .settings import Settings



UTC = zoneinfo.ZoneInfo('Etc/UTC')



@dataclass(frozen=True)
@total_ordering
class Moment:
    '''A point on the global time axis, recorded in an IANA time zone.

    Two moments are equal if they denote the same UTC instant, even
    if they were recorded in different zones.

    Requirements:
    - 'tzinfo' must be 'zoneinfo.ZoneInfo'.'''


    _dt: datetime.datetime


    def __post_init__(self) -> None:
        tz = self._dt.tzinfo

        if not isinstance(tz, zoneinfo.ZoneInfo) or tz.utcoffset(self._dt) is None:
            raise ValueError('The time zone has been set incorrectly.')


    def __str__(self) -> str:
        return f'{self._dt.isoformat()}[{self.timezone_iana}]'


    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Moment):
            return NotImplemented

        return self.utc == other.utc


    def __hash__(self) -> int:
        return hash(self.utc)


    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Moment):
            return NotImplemented

        return self.utc < other.utc


    def __add__(self, other: datetime.timedelta) -> Moment:
        '''Shifts the moment on the UTC axis and keeps its zone.'''

        if not isinstance(other, datetime.timedelta):
            return NotImplemented

        shifted = self.utc + other
        return Moment(shifted.astimezone(self._dt.tzinfo))


    @overload
    def __sub__(self, other: datetime.timedelta) -> Moment: ...


    @overload
    def __sub__(self, other: Moment) -> datetime.timedelta: ...


    def __sub__(self, other: datetime.timedelta | Moment) -> Moment | datetime.timedelta:

        if isinstance(other, datetime.timedelta):
            return self + (-other)

        if isinstance(other, Moment):
            return self.utc - other.utc

        return NotImplemented


    @classmethod
    def of(cls, dt: datetime.datetime) -> Moment:
        '''Creates a moment from an aware datetime. Fixed offsets are
        converted to UTC because they have no IANA name.'''

        if dt.tzinfo is None:
            raise ValueError('A moment needs an aware datetime.')

        if not isinstance(dt.tzinfo, zoneinfo.ZoneInfo):
            dt = dt.astimezone(UTC)

        return cls(dt)


    @classmethod
    def from_utc(cls, dt_iso: str) -> Moment:
        '''Parse an ISO 8601 string denoting a UTC instant.

        Accepted examples:
         - '2026-01-20T10:36'         (assumed UTC),
         - '2026-01-20T10:36Z'        (UTC),
         - '2026-01-20T10:36+00:00'   (zero offset).'''

        # 'fromisoformat' only accepts the suffix 'Z' since Python 3.11.
        if sys.version_info < (3, 11) and dt_iso.endswith('Z'):
            dt_iso = dt_iso[:-1] + '+00:00'

        try:
            dt = datetime.datetime.fromisoformat(dt_iso)
        except ValueError as e:
            raise ValueError(f'Invalid ISO 8601 datetime string: {dt_iso}') from e

        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        else:
            if dt.utcoffset() != datetime.timedelta(0):
                raise ValueError(f"The timestamp '{dt_iso}' is not in UTC.")
            dt = dt.astimezone(UTC)

        return cls(dt)


    @classmethod
    def now(cls, settings: Settings | None = None) -> Moment:
        '''Creates a moment for the current time in the configured zone,
        or in the local zone if no settings are given.'''

        from .settings import Settings

        tz = (settings or Settings()).zone()
        return cls(datetime.datetime.now(tz))


    @classmethod
    def now_utc(cls) -> Moment:
        return cls(datetime.datetime.now(UTC))


    @property
    def datetime(self) -> datetime.datetime:
        return self._dt


    @property
    def utc(self) -> datetime.datetime:
        '''The same instant as an aware datetime in UTC.'''

        return self._dt.astimezone(UTC)


    @property
    def timezone_iana(self) -> str:
        tz = self._dt.tzinfo
        assert isinstance(tz, zoneinfo.ZoneInfo)
        return tz.key


    def to_timezone(self, timezone_iana: str) -> Moment:
        '''Creates the same moment as seen in another time zone.'''

        try:
            tz = zoneinfo.ZoneInfo(timezone_iana)
        except Exception as e:
            raise ValueError(f'Invalid IANA time zone: {timezone_iana}') from e

        return Moment(self._dt.astimezone(tz))


    def to_utc(self) -> Moment:
        return Moment(self.utc)


    @property
    def utc_iso(self) -> str:
        '''Returns an ISO 8601 string in UTC.'''

        return self.utc.replace(tzinfo=None).isoformat() + 'Z'
