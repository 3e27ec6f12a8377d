from unittest.mock import MagicMock

import pytest

from pitchscore.backend.history import HistoryStore, build_history_entry
from pitchscore.backend.llm_client import ModelInvoker
from pitchscore.backend.models import EvaluationResult
from pitchscore.backend.storage import InMemoryStateStore


SAMPLE_MODEL_OUTPUT = (
    "Sure! Here is the JSON:\n"
    '{"score":0.75,"category_scores":{"clarity":0.8,"depth":0.6,"structure":0.9},'
    '"insights":["Good energy"],"verdict":"Strong pitch"}\n'
    "Let me know if you need more."
)

SAMPLE_RESULT = {
    "score": 0.75,
    "category_scores": {"clarity": 0.8, "depth": 0.6, "structure": 0.9},
    "insights": ["Good energy"],
    "verdict": "Strong pitch",
}


@pytest.fixture
def invoker():
    """Model invoker that never touches the network."""
    mock = MagicMock(spec=ModelInvoker)
    mock.invoke.return_value = SAMPLE_MODEL_OUTPUT
    return mock


@pytest.fixture
def state_store():
    return InMemoryStateStore()


@pytest.fixture
def history_store(state_store):
    return HistoryStore(state_store)


@pytest.fixture
def make_entry():
    def _make(score=None, categories=None, transcript="Hi, I'm Alex..."):
        payload = {}
        if score is not None:
            payload["score"] = score
        if categories is not None:
            payload["category_scores"] = categories
        return build_history_entry(transcript, EvaluationResult.model_validate(payload))

    return _make


class FailingStateStore(InMemoryStateStore):
    """Reads work; every write fails the way a full disk would."""

    def set(self, key, value):
        raise OSError("disk full")
