# app/api/endpoints/categories.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.api.forms import override_method, parse_payload
from app.core import responses
from app.core.access import AccessContext
from app.core.dependencies import get_db, get_object_store, require_auth
from app.schemas.category import CategoryCreate, CategoryUpdate
from app.services.category_service import CategoryService
from app.services.storage import ObjectStore

router = APIRouter()

FILE_FIELDS = ("image",)


def get_service(
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
) -> CategoryService:
    return CategoryService(db, store)


@router.get("", summary="Get all categories")
def list_categories(svc: CategoryService = Depends(get_service)):
    categories = svc.list_categories()
    return responses.success([svc.present(c) for c in categories], "Categories retrieved successfully")


@router.post("", summary="Create a new category")
async def create_category(
    request: Request,
    svc: CategoryService = Depends(get_service),
    _: AccessContext = Depends(require_auth),
):
    payload = await parse_payload(request, CategoryCreate, FILE_FIELDS)
    category = svc.create_category(payload)
    return responses.created(svc.present(category), "Category created successfully")


@router.get("/{category_id}", summary="Get a specific category")
def get_category(category_id: int, svc: CategoryService = Depends(get_service)):
    category = svc.get_category(category_id)
    return responses.success(svc.present(category), "Category retrieved successfully")


@router.api_route("/{category_id}", methods=["PUT", "PATCH"], summary="Update a category")
async def update_category(
    category_id: int,
    request: Request,
    svc: CategoryService = Depends(get_service),
    _: AccessContext = Depends(require_auth),
):
    payload = await parse_payload(request, CategoryUpdate, FILE_FIELDS)
    category = svc.update_category(category_id, payload)
    return responses.success(svc.present(category), "Category updated successfully")


@router.post("/{category_id}", summary="Update a category (method override)")
async def update_category_override(
    category_id: int,
    request: Request,
    svc: CategoryService = Depends(get_service),
    ctx: AccessContext = Depends(require_auth),
):
    method = await override_method(request)
    if method not in ("PUT", "PATCH"):
        return responses.error("Method not allowed", 405)
    return await update_category(category_id, request, svc, ctx)


@router.delete("/{category_id}", summary="Delete a category")
def delete_category(
    category_id: int,
    svc: CategoryService = Depends(get_service),
    _: AccessContext = Depends(require_auth),
):
    svc.delete_category(category_id)
    return responses.success(None, "Category deleted successfully")

