# app/services/validation.py
from typing import Dict, List, Optional

from app.core.errors import ValidationFailed
from app.db.base import is_row_id, parse_row_id


def field_label(field: str) -> str:
    return field.replace("_", " ")


class Validator:
    """Collects field -> [messages] and raises them together."""

    def __init__(self):
        self.errors: Dict[str, List[str]] = {}

    def add(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)

    def extend(self, field: str, messages: List[str]) -> None:
        for message in messages:
            self.add(field, message)

    def required_string(self, field: str, value, max_length: int = 255) -> Optional[str]:
        label = field_label(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            self.add(field, f"The {label} field is required.")
            return None
        if not isinstance(value, str):
            self.add(field, f"The {label} field must be a string.")
            return None
        value = value.strip()
        if len(value) > max_length:
            self.add(field, f"The {label} field must not be greater than {max_length} characters.")
            return None
        return value

    def nullable_string(self, field: str, value) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, str):
            self.add(field, f"The {field_label(field)} field must be a string.")
            return None
        return value.strip() or None

    def integer_id(self, field: str, value) -> Optional[int]:
        """Coerce a reference id; anything not an integer is an invalid selection."""
        if value is None or (isinstance(value, str) and not value.strip()):
            self.add(field, f"The {field_label(field)} field is required.")
            return None
        if isinstance(value, bool):
            value = None
        elif isinstance(value, str):
            value = parse_row_id(value.strip())
        if not isinstance(value, int) or not is_row_id(value):
            self.add(field, f"The selected {field_label(field)} is invalid.")
            return None
        return value

    def raise_if_failed(self) -> None:
        if self.errors:
            raise ValidationFailed(self.errors)
