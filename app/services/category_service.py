# app/services/category_service.py
import logging
from typing import List

from sqlalchemy.orm import Session

from app.core.errors import NotFound
from app.db.base import is_row_id
from app.models.category import Category
from app.schemas.category import CategoryCreate, CategoryOut, CategoryUpdate
from app.services.file_service import FileService, image_rule
from app.services.storage import ObjectStore
from app.services.validation import Validator

logger = logging.getLogger(__name__)

IMAGE = image_rule("image", "categories")


class CategoryService:
    def __init__(self, db: Session, store: ObjectStore):
        self.db = db
        self.files = FileService(store)

    def list_categories(self) -> List[Category]:
        return self.db.query(Category).order_by(Category.id.asc()).all()

    def get_category(self, category_id: int) -> Category:
        category = self.db.get(Category, category_id) if is_row_id(category_id) else None
        if not category:
            raise NotFound("Category not found")
        return category

    def _name_taken(self, name: str, exclude_id: int | None = None) -> bool:
        query = self.db.query(Category.id).filter(Category.name == name)
        if exclude_id is not None:
            query = query.filter(Category.id != exclude_id)
        return query.first() is not None

    def _validate_name(self, v: Validator, value, exclude_id: int | None = None):
        name = v.required_string("name", value)
        if name is not None and self._name_taken(name, exclude_id):
            v.add("name", "The name has already been taken.")
        return name

    def create_category(self, payload: CategoryCreate) -> Category:
        v = Validator()
        values = {
            "name": self._validate_name(v, payload.name),
            "description": v.nullable_string("description", payload.description),
        }
        uploads = []
        if payload.image is not None:
            messages, extension = self.files.validate(IMAGE, payload.image)
            v.extend(IMAGE.field, messages)
            uploads.append((IMAGE, payload.image, extension))
        v.raise_if_failed()

        values.update(self.files.store_all(uploads))

        category = Category(**values)
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        logger.info("Created category %s (%s)", category.id, category.name)
        return category

    def update_category(self, category_id: int, payload: CategoryUpdate) -> Category:
        category = self.get_category(category_id)
        sent = payload.model_fields_set

        v = Validator()
        values = {}
        if "name" in sent:
            values["name"] = self._validate_name(v, payload.name, exclude_id=category.id)
        if "description" in sent:
            values["description"] = v.nullable_string("description", payload.description)
        uploads = []
        if "image" in sent and payload.image is not None:
            messages, extension = self.files.validate(IMAGE, payload.image)
            v.extend(IMAGE.field, messages)
            uploads.append((IMAGE, payload.image, extension))
        v.raise_if_failed()

        # the old file goes first; if the new upload then fails the record
        # keeps its old path
        values.update(
            self.files.store_all(
                uploads,
                before_put=lambda rule: self.files.discard(getattr(category, rule.field)),
            )
        )

        for field, value in values.items():
            setattr(category, field, value)
        self.db.commit()
        self.db.refresh(category)
        return category

    def delete_category(self, category_id: int) -> None:
        category = self.get_category(category_id)
        paths = [category.image]
        for product in category.products:
            paths.extend([product.image, product.catalog_pdf])

        self.db.delete(category)
        self.db.commit()
        logger.info("Deleted category %s", category_id)

        for path in paths:
            self.files.discard(path)

    def present(self, category: Category) -> dict:
        data = CategoryOut.model_validate(category).model_dump(mode="json")
        if category.image:
            data["image_url"] = self.files.public_url(category.image)
        return data
