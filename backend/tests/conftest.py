"""
Shared test fixtures
"""
import pytest
from datetime import datetime, timedelta


class FakeClock:
    """Manually advanced clock"""

    def __init__(self):
        self.current = datetime(2024, 1, 1, 12, 0, 0)

    def __call__(self):
        return self.current

    def advance(self, seconds: float):
        self.current += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    """Clock frozen at a fixed instant until advanced"""
    return FakeClock()
