from datetime import datetime

import pytest

import rank_storage
import storage
from config import LOCAL_TZ


@pytest.fixture
def store(tmp_path, monkeypatch):
    """Point both JSON stores at a temp dir."""
    monkeypatch.setattr(storage, "DATA_FILE", tmp_path / "progress.json")
    monkeypatch.setattr(rank_storage, "FILE", tmp_path / "grinding.json")
    return tmp_path


@pytest.fixture
def local_ms():
    """Epoch millis for a wall-clock time in the bot's timezone."""
    def make(year, month, day, hour=12, minute=0):
        return int(datetime(year, month, day, hour, minute, tzinfo=LOCAL_TZ).timestamp() * 1000)
    return make


@pytest.fixture
def noon(local_ms):
    return local_ms(2026, 10, 17)
