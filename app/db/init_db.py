# app/db/init_db.py
import logging

from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.base import Base
from app.db.session import engine, SessionLocal

logger = logging.getLogger(__name__)

ADMIN_ROLES = ["admin", "editor"]


def init_db() -> None:
    # Create all tables if not exist
    from app import models  # noqa: F401  import to ensure modules define models
    Base.metadata.create_all(bind=engine)


def seed_admin(db: Session) -> None:
    """Create the configured admin user and staff record if missing."""
    from app.services.auth_service import AuthService

    if not (settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD):
        return
    svc = AuthService(db)
    user = svc.get_user_by_email(settings.ADMIN_EMAIL)
    if user is None:
        from app.schemas.user import RegisterRequest

        user = svc.register(
            RegisterRequest(
                name=settings.ADMIN_NAME,
                email=settings.ADMIN_EMAIL,
                password=settings.ADMIN_PASSWORD,
            )
        )
        logger.info("Seeded admin user %s", user.email)
    svc.ensure_staff(user, ADMIN_ROLES)


def init_all() -> None:
    init_db()
    db = SessionLocal()
    try:
        seed_admin(db)
    finally:
        db.close()
