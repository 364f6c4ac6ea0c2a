"""
Pytest configuration and fixtures.
"""

import pytest

from shared.config import Settings


@pytest.fixture
def test_env_file(tmp_path):
    """Create a temporary .env file for testing."""
    env_file = tmp_path / ".env"
    env_content = """
OPENAI_API_KEY=sk-test123456789012345678901234567890
OPENAI_MODEL=gpt-4o
OUTPUT_DIR=./videos
MAX_RETRIES=4
MANIM_TIMEOUT=90
LOG_LEVEL=DEBUG
"""
    env_file.write_text(env_content)
    return env_file


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every settings variable that could leak in from the host environment."""
    for field in Settings.model_fields:
        monkeypatch.delenv(field.upper(), raising=False)
        monkeypatch.delenv(field, raising=False)
