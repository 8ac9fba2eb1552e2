# Test configuration
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).parent.parent

# Add repo root to path so tests can import modules
sys.path.insert(0, str(REPO_ROOT))

from edge_gateway.config import Settings  # noqa: E402


@pytest.fixture
def settings(monkeypatch) -> Settings:
    """Settings with no backend configured and no .env file."""
    monkeypatch.delenv("BACKEND_URL", raising=False)
    monkeypatch.delenv("NEXT_PUBLIC_BACKEND_URL", raising=False)
    return Settings(_env_file=None)
