"""
Create a user out-of-band (e.g. the first super admin). Run from project root:
  python -m portal.scripts.create_user EMAIL NAME PASSWORD [role]
Example:
  python -m portal.scripts.create_user admin@example.com "Site Admin" your-secure-password SUPER_ADMIN
"""
import argparse
import logging
import sys

from portal.core.database import SessionLocal
from portal.core.errors import DuplicateEmail, PortalError
from portal.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN, hash_password
from portal.models.user import Role
from portal.services.user_store import UserStore, normalize_email

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a portal user (no registration UI).")
    parser.add_argument("email", help="Login email (stored lowercased)")
    parser.add_argument("name", help="Display name")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument(
        "role",
        nargs="?",
        default=Role.USER.value,
        choices=[r.value for r in Role],
    )
    args = parser.parse_args(argv)

    email = normalize_email(args.email)
    if not email or "@" not in email or len(email) > 255:
        print("Invalid email.", file=sys.stderr)
        return 1
    name = args.name.strip()
    if not name:
        print("Name must be non-empty.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    db = SessionLocal()
    try:
        store = UserStore(db)
        if store.find_by_email(email) is not None:
            print(f"User '{email}' already exists.", file=sys.stderr)
            return 1
        store.insert(email, name, hash_password(args.password), Role(args.role))
        print(f"Created user '{email}' with role '{args.role}'.")
        return 0
    except DuplicateEmail:
        print(f"User '{email}' already exists.", file=sys.stderr)
        return 1
    except PortalError as e:
        logger.error("User creation failed: %s", e.message)
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    sys.exit(main())
