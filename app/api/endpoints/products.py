# app/api/endpoints/products.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.api.forms import override_method, parse_payload
from app.core import responses
from app.core.access import AccessContext
from app.core.dependencies import get_db, get_object_store, require_auth
from app.schemas.product import ProductCreate, ProductUpdate
from app.services.product_service import ProductService
from app.services.storage import ObjectStore

router = APIRouter()

FILE_FIELDS = ("image", "catalog_pdf")


def get_service(
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
) -> ProductService:
    return ProductService(db, store)


@router.get("", summary="Get all products")
def list_products(
    category_id: Optional[int] = Query(None),
    svc: ProductService = Depends(get_service),
):
    products = svc.list_products(category_id=category_id)
    return responses.success([svc.present(p) for p in products], "Products retrieved successfully")


@router.post("", summary="Create a new product")
async def create_product(
    request: Request,
    svc: ProductService = Depends(get_service),
    _: AccessContext = Depends(require_auth),
):
    payload = await parse_payload(request, ProductCreate, FILE_FIELDS)
    product = svc.create_product(payload)
    return responses.created(svc.present(product), "Product created successfully")


@router.get("/{product_id}", summary="Get a specific product")
def get_product(product_id: int, svc: ProductService = Depends(get_service)):
    product = svc.get_product(product_id)
    return responses.success(svc.present(product), "Product retrieved successfully")


@router.api_route("/{product_id}", methods=["PUT", "PATCH"], summary="Update a product")
async def update_product(
    product_id: int,
    request: Request,
    svc: ProductService = Depends(get_service),
    _: AccessContext = Depends(require_auth),
):
    payload = await parse_payload(request, ProductUpdate, FILE_FIELDS)
    product = svc.update_product(product_id, payload)
    return responses.success(svc.present(product), "Product updated successfully")


@router.post("/{product_id}", summary="Update a product (method override)")
async def update_product_override(
    product_id: int,
    request: Request,
    svc: ProductService = Depends(get_service),
    ctx: AccessContext = Depends(require_auth),
):
    if await override_method(request) not in ("PUT", "PATCH"):
        return responses.error("Method not allowed", 405)
    return await update_product(product_id, request, svc, ctx)


@router.delete("/{product_id}", summary="Delete a product")
def delete_product(
    product_id: int,
    svc: ProductService = Depends(get_service),
    _: AccessContext = Depends(require_auth),
):
    svc.delete_product(product_id)
    return responses.success(None, "Product deleted successfully")
