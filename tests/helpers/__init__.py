"""Test helpers for KidRewards tests.

    from tests.helpers import FakeClock, TEST_START, get_coordinator
"""

from tests.helpers.clock import TEST_START, TEST_TZ, FakeClock
from tests.helpers.setup import get_coordinator, get_entity_id

__all__ = ["TEST_START", "TEST_TZ", "FakeClock", "get_coordinator", "get_entity_id"]
