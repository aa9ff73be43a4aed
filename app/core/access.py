# app/core/access.py
"""
Access control chain.

A route declares an AccessPolicy. authorize() runs the stages the policy
needs, in order, threading one AccessContext through them:

    resolve_user   bearer token -> user          (Unauthenticated)
    resolve_staff  user -> staff role set        (StaffOnly)
    check_role     required role in role set     (MissingRole)

The first failing stage ends the request.
"""

import enum
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, Optional

from sqlalchemy.orm import Session

from app.core.errors import MissingRole, StaffOnly, Unauthenticated
from app.models.token import PersonalAccessToken
from app.models.user import User
from app.services.auth_service import AuthService


class Capability(enum.IntEnum):
    NONE = 0
    AUTHENTICATED = 1
    STAFF = 2
    ROLE = 3


@dataclass(frozen=True)
class AccessPolicy:
    capability: Capability
    role: Optional[str] = None

    def __post_init__(self):
        if (self.capability == Capability.ROLE) != (self.role is not None):
            raise ValueError("a role is required exactly when capability is ROLE")


@dataclass
class AccessContext:
    bearer: Optional[str] = None
    user: Optional[User] = None
    token: Optional[PersonalAccessToken] = None
    staff_roles: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def user_id(self) -> Optional[int]:
        return self.user.id if self.user else None


def resolve_user(ctx: AccessContext, auth: AuthService, policy: AccessPolicy) -> None:
    token = auth.resolve_token(ctx.bearer)
    if token is None or token.user is None:
        raise Unauthenticated()
    ctx.token = token
    ctx.user = token.user


def resolve_staff(ctx: AccessContext, auth: AuthService, policy: AccessPolicy) -> None:
    staff = auth.get_staff(ctx.user)
    if staff is None:
        raise StaffOnly()
    ctx.staff_roles = frozenset(staff.roles or [])


def check_role(ctx: AccessContext, auth: AuthService, policy: AccessPolicy) -> None:
    if policy.role not in ctx.staff_roles:
        raise MissingRole(policy.role)


Stage = Callable[[AccessContext, AuthService, AccessPolicy], None]

STAGES: tuple[tuple[Capability, Stage], ...] = (
    (Capability.AUTHENTICATED, resolve_user),
    (Capability.STAFF, resolve_staff),
    (Capability.ROLE, check_role),
)

PUBLIC = AccessPolicy(Capability.NONE)
AUTHENTICATED = AccessPolicy(Capability.AUTHENTICATED)
STAFF = AccessPolicy(Capability.STAFF)
EDITOR = AccessPolicy(Capability.ROLE, "editor")
ADMIN = AccessPolicy(Capability.ROLE, "admin")


def authorize(db: Session, bearer: Optional[str], policy: AccessPolicy) -> AccessContext:
    ctx = AccessContext(bearer=bearer)
    auth = AuthService(db)
    for level, stage in STAGES:
        if policy.capability < level:
            break
        stage(ctx, auth, policy)
    return ctx
