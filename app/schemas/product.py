# app/schemas/product.py
from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel

from app.schemas.category import CategoryOut
from app.schemas.file import UploadedFile


class ProductCreate(BaseModel):
    name: Optional[str] = None
    category_id: Optional[Union[int, str]] = None
    description: Optional[str] = None
    image: Optional[Union[UploadedFile, str]] = None
    catalog_pdf: Optional[Union[UploadedFile, str]] = None


class ProductUpdate(ProductCreate):
    pass


class ProductOut(BaseModel):
    id: int
    name: str
    category_id: int
    description: Optional[str] = None
    image: Optional[str] = None
    catalog_pdf: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    category: Optional[CategoryOut] = None

    class Config:
        from_attributes = True
