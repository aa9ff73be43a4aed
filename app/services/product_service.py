# app/services/product_service.py
import logging
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from app.core.errors import NotFound
from app.db.base import is_row_id
from app.models.category import Category
from app.models.product import Product
from app.schemas.product import ProductCreate, ProductOut, ProductUpdate
from app.services.file_service import FileService, image_rule, pdf_rule
from app.services.storage import ObjectStore
from app.services.validation import Validator

logger = logging.getLogger(__name__)

IMAGE = image_rule("image", "products/images")
CATALOG = pdf_rule("catalog_pdf", "products/catalogs")
ATTACHMENTS = (IMAGE, CATALOG)


class ProductService:
    def __init__(self, db: Session, store: ObjectStore):
        self.db = db
        self.files = FileService(store)

    def list_products(self, category_id: Optional[int] = None) -> List[Product]:
        query = self.db.query(Product).options(selectinload(Product.category))
        if category_id is not None:
            if not is_row_id(category_id):
                return []
            query = query.filter(Product.category_id == category_id)
        return query.order_by(Product.id.asc()).all()

    def get_product(self, product_id: int) -> Product:
        product = self.db.get(Product, product_id) if is_row_id(product_id) else None
        if not product:
            raise NotFound("Product not found")
        return product

    def _validate_category(self, v: Validator, value) -> Optional[int]:
        category_id = v.integer_id("category_id", value)
        if category_id is not None and self.db.get(Category, category_id) is None:
            v.add("category_id", "The selected category id is invalid.")
            return None
        return category_id

    def _validate_uploads(self, v: Validator, payload, fields) -> list:
        uploads = []
        for rule in ATTACHMENTS:
            value = getattr(payload, rule.field)
            if rule.field not in fields or value is None:
                continue
            messages, extension = self.files.validate(rule, value)
            v.extend(rule.field, messages)
            uploads.append((rule, value, extension))
        return uploads

    def create_product(self, payload: ProductCreate) -> Product:
        v = Validator()
        values = {
            "name": v.required_string("name", payload.name),
            "category_id": self._validate_category(v, payload.category_id),
            "description": v.nullable_string("description", payload.description),
        }
        uploads = self._validate_uploads(v, payload, {r.field for r in ATTACHMENTS})
        v.raise_if_failed()

        values.update(self.files.store_all(uploads))

        product = Product(**values)
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        logger.info("Created product %s in category %s", product.id, product.category_id)
        return product

    def update_product(self, product_id: int, payload: ProductUpdate) -> Product:
        product = self.get_product(product_id)
        sent = payload.model_fields_set

        v = Validator()
        values = {}
        if "name" in sent:
            values["name"] = v.required_string("name", payload.name)
        if "category_id" in sent:
            values["category_id"] = self._validate_category(v, payload.category_id)
        if "description" in sent:
            values["description"] = v.nullable_string("description", payload.description)
        uploads = self._validate_uploads(v, payload, sent)
        v.raise_if_failed()

        values.update(
            self.files.store_all(
                uploads,
                before_put=lambda rule: self.files.discard(getattr(product, rule.field)),
            )
        )

        for field, value in values.items():
            setattr(product, field, value)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product_id: int) -> None:
        product = self.get_product(product_id)
        paths = [product.image, product.catalog_pdf]

        self.db.delete(product)
        self.db.commit()
        logger.info("Deleted product %s", product_id)

        for path in paths:
            self.files.discard(path)

    def present(self, product: Product) -> dict:
        data = ProductOut.model_validate(product).model_dump(mode="json")
        if product.image:
            data["image_url"] = self.files.public_url(product.image)
        if product.catalog_pdf:
            data["catalog_pdf_url"] = self.files.public_url(product.catalog_pdf)
        return data
