from __future__ import annotations
from dataclasses import dataclass, fields
from pathlib import Path
import logging
import zoneinfo
import tzlocal
import yaml


logger = logging.getLogger(__name__)


_LOG_LEVELS = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}



@dataclass
class Settings:
    '''Library settings.

    The settings live under the 'chronorange' key of a YAML file:

        chronorange:
          timezone: Europe/Berlin
          split_threshold: 7
          log_level: INFO

    All keys are optional.'''

    timezone: str | None = None
    split_threshold: int = 7
    log_level: str = 'WARNING'


    def __post_init__(self) -> None:
        self.validate()


    def validate(self) -> None:

        if self.timezone is not None and not isinstance(self.timezone, str):
            raise ValueError('\'timezone\' must be a string.')

        # 'bool' is a subclass of 'int', but it is not a day count.
        if (
            not isinstance(self.split_threshold, int)
            or isinstance(self.split_threshold, bool)
            or self.split_threshold < 1
        ):
            raise ValueError('\'split_threshold\' must be a positive integer.')

        if not isinstance(self.log_level, str) or self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f'Unknown log level: {self.log_level!r}.')


    def zone(self) -> zoneinfo.ZoneInfo:
        '''Returns the configured time zone, or the local one if none
        is configured.'''

        name = self.timezone

        if name is None:
            try:
                name = tzlocal.get_localzone_name()
            except Exception as e:
                raise RuntimeError('Failed to determine local time zone.') from e

        try:
            return zoneinfo.ZoneInfo(name)
        except Exception as e:
            raise ValueError(f'Invalid IANA time zone: {name}') from e


    def configure_logging(self) -> None:
        '''Applies the configured level to the library loggers.'''

        logging.getLogger('chronorange').setLevel(self.log_level.upper())


    @classmethod
    def load_from_yaml(cls, filename: str | Path) -> Settings:
        '''Load settings from YAML file.'''

        path = Path(filename)

        with path.open('r', encoding='utf-8') as f:
            data = yaml.safe_load(f)

        if data is None:
            data = {}

        if not isinstance(data, dict):
            raise ValueError('YAML root must be a mapping.')

        section = data.get('chronorange', {})
        if section is None:
            section = {}

        if not isinstance(section, dict):
            raise ValueError('\'chronorange\' must be a mapping.')

        known = {f.name for f in fields(cls)}

        for key in section:
            if key not in known:
                raise ValueError(f'Unknown setting: \'{key}\'.')

        settings = cls(**section)
        logger.info('Loaded settings from %s', path)
        return settings
