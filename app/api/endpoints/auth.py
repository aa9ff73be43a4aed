# app/api/endpoints/auth.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core import responses
from app.core.access import AccessContext
from app.core.dependencies import get_db, require_admin, require_auth
from app.schemas.user import LoginRequest, RegisterRequest, TokenOut, UserOut
from app.services.auth_service import AuthService

router = APIRouter()


@router.post("/login", summary="Login and get token")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    svc = AuthService(db)
    token = svc.login(payload)
    return responses.success(TokenOut(access_token=token), "Login successful")


@router.post("/logout", summary="Logout and revoke token")
def logout(ctx: AccessContext = Depends(require_auth), db: Session = Depends(get_db)):
    AuthService(db).revoke_token(ctx.token)
    return responses.success(None, "Logged out successfully")


@router.post("/register", summary="Register a new user (admin only)")
def register(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
    _: AccessContext = Depends(require_admin),
):
    user = AuthService(db).register(payload)
    return responses.created(UserOut.model_validate(user), "User registered successfully")
