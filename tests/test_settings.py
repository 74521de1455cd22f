from __future__ import annotations
import logging
import zoneinfo
import pytest

from chronorange import Settings


def test_defaults():
    settings = Settings()

    assert settings.timezone is None
    assert settings.split_threshold == 7
    assert settings.log_level == 'WARNING'


def test_validation():
    with pytest.raises(ValueError):
        Settings(split_threshold=0)

    with pytest.raises(ValueError):
        Settings(split_threshold=True)

    with pytest.raises(ValueError):
        Settings(log_level='LOUD')

    with pytest.raises(ValueError):
        Settings(timezone=1)


def test_zone():
    assert Settings(timezone='Europe/Berlin').zone() == zoneinfo.ZoneInfo('Europe/Berlin')

    with pytest.raises(ValueError):
        Settings(timezone='Mars/Olympus').zone()


def test_load_from_yaml(tmp_path, caplog):
    path = tmp_path / 'settings.yaml'
    path.write_text(
        'chronorange:\n'
        '  timezone: Europe/Berlin\n'
        '  split_threshold: 14\n'
        '  log_level: debug\n',
        encoding='utf-8',
    )

    with caplog.at_level(logging.INFO, logger='chronorange'):
        settings = Settings.load_from_yaml(path)

    assert settings == Settings('Europe/Berlin', 14, 'debug')
    assert 'Loaded settings' in caplog.text


def test_load_from_empty_yaml(tmp_path):
    path = tmp_path / 'settings.yaml'
    path.write_text('', encoding='utf-8')

    assert Settings.load_from_yaml(path) == Settings()


@pytest.mark.parametrize('content', [
    '- a\n- b\n',
    'chronorange: 5\n',
    'chronorange:\n  colour: red\n',
    'chronorange:\n  split_threshold: -1\n',
])
def test_load_from_invalid_yaml(tmp_path, content):
    path = tmp_path / 'settings.yaml'
    path.write_text(content, encoding='utf-8')

    with pytest.raises(ValueError):
        Settings.load_from_yaml(path)


def test_configure_logging():
    logger = logging.getLogger('chronorange')
    previous = logger.level

    try:
        Settings(log_level='debug').configure_logging()
        assert logger.level == logging.DEBUG
    finally:
        logger.setLevel(previous)
