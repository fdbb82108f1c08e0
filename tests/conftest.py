import pytest
from fastapi.testclient import TestClient


class SequenceRandom:
    """Random source that returns predetermined draws in [0, 1]."""

    def __init__(self, values):
        self._values = iter(values)

    def random(self) -> float:
        try:
            return next(self._values)
        except StopIteration:
            raise AssertionError("Not enough mocked random values for this test.")


@pytest.fixture
def sequence_random():
    # Build a random source from a list of draws for deterministic rolls.
    return SequenceRandom


@pytest.fixture
def client():
    from dice_server.main import app

    # Lifespan (scheduler) is not started without a context manager.
    return TestClient(app)
