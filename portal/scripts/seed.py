"""
Seed the initial accounts from settings. Safe to run repeatedly:

  python -m portal.scripts.seed

Uses SEED_SUPER_ADMIN_EMAIL / SEED_SUPER_ADMIN_PASSWORD (role SUPER_ADMIN) and,
if set, SEED_USER_EMAIL / SEED_USER_PASSWORD (role USER). Existing accounts are
left untouched.
"""

import logging
import sys
from typing import TYPE_CHECKING

from pydantic import SecretStr

from portal.core.config import get_settings
from portal.core.database import SessionLocal
from portal.core.security import hash_password
from portal.models.user import Role
from portal.services.user_store import UserStore

if TYPE_CHECKING:
    from portal.core.config import Settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def _ensure_user(
    store: UserStore,
    email: str,
    name: str,
    password: SecretStr,
    role: Role,
) -> bool:
    """Create the account unless the email exists; True if a row was inserted."""
    if store.find_by_email(email) is not None:
        logger.info("Seed account already exists: %s", email)
        return False
    store.insert(email, name, hash_password(password.get_secret_value()), role)
    logger.info("Created seed account %s with role %s", email, role.value)
    return True


def run_seed(store: UserStore, settings: "Settings") -> int:
    """Create configured seed accounts; returns how many were inserted."""
    created = 0
    accounts = (
        (
            settings.SEED_SUPER_ADMIN_EMAIL,
            settings.SEED_SUPER_ADMIN_NAME,
            settings.SEED_SUPER_ADMIN_PASSWORD,
            Role.SUPER_ADMIN,
        ),
        (
            settings.SEED_USER_EMAIL,
            settings.SEED_USER_NAME,
            settings.SEED_USER_PASSWORD,
            Role.USER,
        ),
    )
    for email, name, password, role in accounts:
        if not email:
            continue
        if password is None or not password.get_secret_value():
            logger.warning("Skipping seed account %s: no password configured", email)
            continue
        if _ensure_user(store, email, name, password, role):
            created += 1
    return created


def main() -> int:
    settings = get_settings()
    if not settings.SEED_SUPER_ADMIN_EMAIL:
        logger.warning("SEED_SUPER_ADMIN_EMAIL is not set; no super admin will be seeded.")
    db = SessionLocal()
    try:
        created = run_seed(UserStore(db), settings)
        logger.info("Seeding completed: accounts_created=%s", created)
        return 0
    except Exception as e:
        logger.exception("Seeding failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
