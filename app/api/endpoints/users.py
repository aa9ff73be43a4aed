# app/api/endpoints/users.py
from fastapi import APIRouter, Depends

from app.core.access import AccessContext
from app.core.dependencies import require_admin, require_auth, require_editor, require_staff
from app.schemas.user import StaffRolesOut, UserOut

router = APIRouter()


@router.get("/user", response_model=UserOut)
def current_user(ctx: AccessContext = Depends(require_auth)):
    return ctx.user


@router.get("/staff/roles", response_model=StaffRolesOut)
def staff_roles(ctx: AccessContext = Depends(require_staff)):
    return StaffRolesOut(user_id=ctx.user_id, roles=sorted(ctx.staff_roles))


@router.get("/editor/demo")
def editor_demo(ctx: AccessContext = Depends(require_editor)):
    return {"message": "Hello Editor", "user_id": ctx.user_id}


@router.get("/admin/demo")
def admin_demo(ctx: AccessContext = Depends(require_admin)):
    return {"message": "Hello Admin", "user_id": ctx.user_id}
