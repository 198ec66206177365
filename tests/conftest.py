from datetime import date

import pytest


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_planner.db")
    return db_path


@pytest.fixture
def today():
    """A fixed Monday used as the injected current date."""
    return date(2024, 1, 1)
