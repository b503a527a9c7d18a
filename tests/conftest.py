"""
Shared test setup.

Settings are read at import time and JWT_SECRET has no default, so the
environment must be prepared before any portal module is imported.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-signing-secret-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("APP_ENV", "dev")

from portal.core import security  # noqa: E402

# Minimum bcrypt cost keeps the suite fast; production uses BCRYPT_ROUNDS=12.
security.BCRYPT_ROUNDS = 4
