from app.models.user import User
from app.models.token import PersonalAccessToken
from app.models.staff import Staff
from app.models.category import Category
from app.models.product import Product

__all__ = ["User", "PersonalAccessToken", "Staff", "Category", "Product"]
