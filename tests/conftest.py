"""Root pytest configuration.

Test Structure:
    tests/
    ├── unit/              # Fast, isolated tests (mocks only)
    └── integration/       # In-memory SQLite persistence and API tests
"""

from pathlib import Path

import pytest
from dotenv import load_dotenv

from pazireshino_config import clear_settings_cache

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Load .env.dev for tests (same as local development)
CONFIG_DIR = PROJECT_ROOT / "config"
if (CONFIG_DIR / ".env.dev").exists():
    load_dotenv(CONFIG_DIR / ".env.dev")
elif (CONFIG_DIR / ".env").exists():
    load_dotenv(CONFIG_DIR / ".env")


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Never let a cached Settings instance leak between tests."""
    clear_settings_cache()
    yield
    clear_settings_cache()
