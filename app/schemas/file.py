# app/schemas/file.py
from pydantic import BaseModel
from typing import Optional


class UploadedFile(BaseModel):
    """An uploaded file read fully into memory."""

    filename: str
    content_type: Optional[str] = None
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        _, dot, ext = self.filename.rpartition(".")
        return ext.lower() if dot else ""
