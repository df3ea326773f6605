# backend/settings/test.py
"""
PATH: backend/settings/test.py

TEST SETTINGS
- SQLite unless DATABASE_URL points elsewhere (the runner creates a throwaway DB)
- Quiet logging: warnings and above only
"""

from __future__ import annotations

from backend.logging_config import get_logging_config

from .base import *  # noqa: F403

DEBUG = False

LOGGING = get_logging_config(debug=False, level="WARNING", log_format="console")
