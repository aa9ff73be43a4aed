# app/core/dependencies.py
from functools import lru_cache
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.access import (
    ADMIN,
    AUTHENTICATED,
    EDITOR,
    STAFF,
    AccessContext,
    AccessPolicy,
    authorize,
)
from app.db.session import get_db
from app.services.storage import ObjectStore, build_object_store

# the access chain decides on 401s, not the framework
bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def _object_store() -> ObjectStore:
    return build_object_store()


def get_object_store() -> ObjectStore:
    return _object_store()


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    return credentials.credentials if credentials else None


class Gate:
    """FastAPI dependency that runs the access chain for one policy."""

    def __init__(self, policy: AccessPolicy):
        self.policy = policy

    def __call__(
        self,
        db: Session = Depends(get_db),
        bearer: Optional[str] = Depends(get_bearer_token),
    ) -> AccessContext:
        return authorize(db, bearer, self.policy)

    def __repr__(self) -> str:
        return f"Gate({self.policy.capability.name}, role={self.policy.role!r})"


require_auth = Gate(AUTHENTICATED)
require_staff = Gate(STAFF)
require_editor = Gate(EDITOR)
require_admin = Gate(ADMIN)
