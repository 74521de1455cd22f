from __future__ import annotations
import pytest

from chronorange import IntegerTimeline


@pytest.fixture
def ints() -> IntegerTimeline:
    '''Half-open integer timeline.'''

    return IntegerTimeline(-1000, 1000)


@pytest.fixture
def days() -> IntegerTimeline:
    '''Integer timeline with closed canonical form, like calendar dates.'''

    return IntegerTimeline(-1000, 1000, calendrical=True)
