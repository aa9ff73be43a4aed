# app/schemas/category.py
from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel

from app.schemas.file import UploadedFile


class CategoryCreate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    image: Optional[Union[UploadedFile, str]] = None


class CategoryUpdate(BaseModel):
    # only keys in model_fields_set were sent by the client
    name: Optional[str] = None
    description: Optional[str] = None
    image: Optional[Union[UploadedFile, str]] = None


class CategoryOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    image: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
