from datetime import datetime
from pathlib import Path

import pytest

from src.config import settings

REPO_MEDIA_DIR = Path(__file__).resolve().parent.parent / "media"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def now():
    """Pinned clock: 5 March 2024, 9:05am."""
    return datetime(2024, 3, 5, 9, 5, 0)


@pytest.fixture
def media_dir(tmp_path, monkeypatch):
    """Isolated media folder holding the real report templates."""
    for source in REPO_MEDIA_DIR.iterdir():
        (tmp_path / source.name).write_bytes(source.read_bytes())
    monkeypatch.setattr(settings, "MEDIA_DIR", tmp_path)
    return tmp_path

