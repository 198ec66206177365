"""Runtime settings read from the environment."""
import os
from pathlib import Path

DB_PATH = os.environ.get("STUDY_PLANNER_DB", str(Path.home() / ".study_planner" / "planner.db"))
LOG_LEVEL = os.environ.get("STUDY_PLANNER_LOG_LEVEL", "WARNING").upper()
