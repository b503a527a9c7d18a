"""Test helpers: isolated in-memory databases and seeded users."""

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from portal.core.database import build_engine
from portal.core.security import get_token_issuer, hash_password
from portal.models import Base, Role, User
from portal.schemas.auth import CurrentUser

DEFAULT_PASSWORD = "correct-horse"


def make_session_factory(
    expire_on_commit: bool = False,
) -> tuple[Engine, sessionmaker[Session]]:
    """
    Fresh in-memory SQLite database with the schema created.

    Seeded objects stay readable across commits by default; pass
    expire_on_commit=True to get the same session behavior as SessionLocal.
    """
    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    return engine, sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=expire_on_commit,
    )


def add_user(
    session: Session,
    email: str,
    role: Role = Role.USER,
    name: str = "Test User",
    password: str = DEFAULT_PASSWORD,
) -> User:
    user = User(
        email=email.lower(),
        name=name,
        password_hash=hash_password(password),
        role=role,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def identity_for(user: User) -> CurrentUser:
    return CurrentUser(id=user.id, email=user.email, role=user.role)


def token_for(user: User) -> str:
    return get_token_issuer().issue(user.id, user.email, user.role)


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
