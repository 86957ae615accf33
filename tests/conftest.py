import os

import pytest

# headless Qt for CI
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


class FakeClock:
    """Millisecond clock driven by the test."""

    def __init__(self, start_ms: float = 1_000.0):
        self.now = float(start_ms)

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float):
        self.now += float(ms)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def data_dir(tmp_path, monkeypatch):
    d = tmp_path / "appdata"
    monkeypatch.setenv("ROUNDCOUNTER_DATA_DIR", str(d))
    monkeypatch.delenv("ROUNDCOUNTER_VISITOR_BACKEND", raising=False)
    return d
