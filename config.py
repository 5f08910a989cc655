"""
Configuration: loads settings from environment / .env file.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths
PROJECT_ROOT = Path(__file__).parent

# Postgres (empty → in-memory store)
DATABASE_URL = os.getenv("DATABASE_URL", "")

# API
API_HOST = os.getenv("FORGE_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("FORGE_API_PORT", "8000"))

# Logging
LOG_LEVEL = os.getenv("FORGE_LOG_LEVEL", "INFO").upper()

# Observer
POLL_INTERVAL_SEC = float(os.getenv("FORGE_POLL_INTERVAL_SEC", "10"))
LOG_LIMIT = int(os.getenv("FORGE_LOG_LIMIT", "50"))
SESSION_LIMIT = int(os.getenv("FORGE_SESSION_LIMIT", "5"))

# Priorities (lower sorts first)
BASE_PRIORITY = float(os.getenv("FORGE_BASE_PRIORITY", "100"))
FRONT_PRIORITY = float(os.getenv("FORGE_FRONT_PRIORITY", "0"))
MOVE_UP_DELTA = float(os.getenv("FORGE_MOVE_UP_DELTA", "1.5"))

# New features
DEFAULT_CATEGORY = os.getenv("FORGE_DEFAULT_CATEGORY", "general")

# Engine config defaults (used when a key has never been written)
DEFAULT_NOTIFICATION_EMAIL = os.getenv("FORGE_NOTIFICATION_EMAIL", "")
