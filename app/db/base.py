# app/db/base.py
from typing import Optional

from sqlalchemy.orm import declarative_base

Base = declarative_base()

# largest value an INTEGER primary key can hold (signed 64-bit)
MAX_ROW_ID = 2**63 - 1


def is_row_id(value: int) -> bool:
    """True when value could be a primary key; larger ints overflow the driver."""
    return 0 <= value <= MAX_ROW_ID


def parse_row_id(text: str) -> Optional[int]:
    """Parse an ASCII decimal id, or None when it is not one that can exist."""
    if not (text.isascii() and text.isdigit()):
        return None
    value = int(text)
    return value if is_row_id(value) else None
