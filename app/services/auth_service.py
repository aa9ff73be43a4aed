# app/services/auth_service.py
import datetime
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import Unauthenticated
from app.core.security import (
    generate_token_secret,
    hash_password,
    hash_token,
    split_token,
    token_matches,
    verify_password,
)
from app.models.staff import Staff
from app.models.token import PersonalAccessToken
from app.models.user import User
from app.schemas.user import LoginRequest, RegisterRequest
from app.services.validation import Validator

logger = logging.getLogger(__name__)


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    # -------------------
    # Users
    # -------------------
    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def register(self, payload: RegisterRequest) -> User:
        v = Validator()
        name = v.required_string("name", payload.name)
        email = v.required_string("email", payload.email)
        if email is not None and self.get_user_by_email(email):
            v.add("email", "The email has already been taken.")
        if len(payload.password) < 6:
            v.add("password", "The password field must be at least 6 characters.")
        elif len(payload.password.encode("utf-8")) > 72:
            # bcrypt only looks at the first 72 bytes
            v.add("password", "The password field must not be greater than 72 bytes.")
        v.raise_if_failed()

        user = User(name=name, email=email, password=hash_password(payload.password))
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info("Registered user %s", user.id)
        return user

    def ensure_staff(self, user: User, roles: List[str]) -> Staff:
        staff = self.get_staff(user)
        if staff is None:
            staff = Staff(user_id=user.id, roles=list(roles))
            self.db.add(staff)
        else:
            staff.roles = sorted(set(staff.roles or []) | set(roles))
        self.db.commit()
        self.db.refresh(staff)
        return staff

    def get_staff(self, user: User) -> Optional[Staff]:
        return self.db.query(Staff).filter(Staff.user_id == user.id).first()

    # -------------------
    # Tokens
    # -------------------
    def issue_token(self, user: User, name: str = "auth_token") -> str:
        secret = generate_token_secret()
        expires_at = None
        if settings.TOKEN_EXPIRE_MINUTES:
            expires_at = _utcnow() + datetime.timedelta(minutes=settings.TOKEN_EXPIRE_MINUTES)
        token = PersonalAccessToken(
            user_id=user.id,
            name=name,
            token=hash_token(secret),
            expires_at=expires_at,
        )
        self.db.add(token)
        self.db.commit()
        self.db.refresh(token)
        return f"{token.id}|{secret}"

    def login(self, payload: LoginRequest) -> str:
        user = self.get_user_by_email(payload.email)
        if not user or not verify_password(payload.password, user.password):
            raise Unauthenticated("The provided credentials are incorrect.")
        return self.issue_token(user)

    def resolve_token(self, raw: Optional[str]) -> Optional[PersonalAccessToken]:
        """Find the live token for a bearer value, stamping last_used_at."""
        if not raw:
            return None
        parts = split_token(raw)
        if parts is None:
            return None
        token_id, secret = parts

        token = self.db.get(PersonalAccessToken, token_id)
        if token is None or not token_matches(secret, token.token):
            return None
        now = _utcnow()
        if token.expires_at is not None and token.expires_at <= now:
            return None

        token.last_used_at = now
        self.db.commit()
        return token

    def revoke_token(self, token: PersonalAccessToken) -> None:
        self.db.delete(token)
        self.db.commit()
