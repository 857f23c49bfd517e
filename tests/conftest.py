import pytest

from participants import Participant


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    """Keep developer environment variables out of the tests."""
    for name in ("PAYMENT_SPLITTER_TOLERANCE", "PAYMENT_SPLITTER_LOG_LEVEL", "PAYMENT_SPLITTER_DATASET"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def people():
    """Four participants: A, B, C, D."""
    return {name: Participant(name) for name in "ABCD"}


@pytest.fixture
def two_person_doc():
    """A pays 100 for A and B."""
    return {
        "label": "Test",
        "year": 2024,
        "participants": ["A", "B"],
        "expenses": [{"amount": 100, "payer": "A", "beneficiaries": "all"}],
    }
