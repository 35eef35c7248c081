import pytest

from tensorcore.environment import env


@pytest.fixture(autouse=True)
def reset_flags(monkeypatch):
    monkeypatch.delenv("TENSORCORE_FLAGS", raising=False)
    env().reset()
    yield
    env().reset()
