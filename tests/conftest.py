import pytest

from dialectic.logger import configure_logger


@pytest.fixture(autouse=True)
def quiet_logger():
    """Keep the global structured logger from writing files during tests."""
    configure_logger(enabled=False)
    yield
    configure_logger(enabled=False)


@pytest.fixture()
def first_turn():
    return {
        "content": "x",
        "role": "performer",
        "continuationRequested": True,
        "turnIndex": 1,
        "totalTurnsPlanned": 3,
    }


@pytest.fixture()
def second_turn():
    return {
        "content": "The proposal skips the failure case",
        "role": "evaluator",
        "continuationRequested": True,
        "turnIndex": 2,
        "totalTurnsPlanned": 3,
        "standardsApplied": ["Accuracy", "Depth"],
    }
