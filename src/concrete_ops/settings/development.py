import os

from .base import *  # noqa: F401,F403
from .base import _flag

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = _flag("AUTO_INIT_DB", "1")
# Optional: also seed demo data on startup
AUTO_SEED_DB = _flag("AUTO_SEED_DB", "0")

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
