import pytest

from invaders.config import SimulationConfig
from invaders.coordinator import InvaderRecord
from invaders.protocol import ACTIVE, DISABLED
from invaders.transport import LocalFabric


class FixedRandom:
    """Random source that always draws the same value (the top of the range by default)."""

    def __init__(self, value=None):
        self.value = value

    def randrange(self, n):
        return n - 1 if self.value is None else self.value


def make_records(rows, cols, alive=None):
    records = []
    for i in range(rows):
        for j in range(cols):
            status = ACTIVE if alive is None or (i, j) in alive else DISABLED
            records.append(InvaderRecord(status))
    return records


@pytest.fixture
def config():
    return SimulationConfig(tick_seconds=0.0, quiet=True, seed=7)


@pytest.fixture
def fabric():
    return LocalFabric(10)
