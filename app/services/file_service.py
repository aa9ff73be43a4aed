# app/services/file_service.py
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from app.core.config import settings
from app.core.errors import StorageError
from app.schemas.file import UploadedFile
from app.services.storage import ObjectStore
from app.utils.image_probe import detect_image_extension
from app.utils.pdf_parser import is_pdf

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ("jpeg", "jpg", "png", "gif", "webp")


@dataclass(frozen=True)
class AttachmentRule:
    field: str
    prefix: str
    kind: str  # "image" or "pdf"
    limit_setting: str

    @property
    def max_kb(self) -> int:
        return getattr(settings, self.limit_setting)

    @property
    def label(self) -> str:
        return self.field.replace("_", " ")

    @property
    def failure_message(self) -> str:
        return "Failed to upload image" if self.kind == "image" else "Failed to upload catalog PDF"


def image_rule(field: str, prefix: str) -> AttachmentRule:
    return AttachmentRule(field, prefix, "image", "MAX_IMAGE_SIZE_KB")


def pdf_rule(field: str, prefix: str) -> AttachmentRule:
    return AttachmentRule(field, prefix, "pdf", "MAX_CATALOG_SIZE_KB")


class FileService:
    """
    Validation and storage lifecycle of files attached to catalog entities.

    Uploads are checked without touching the store. Old files are removed
    best-effort: a failed cleanup is logged and never fails the request.
    """

    def __init__(self, store: ObjectStore):
        self.store = store

    # -------------------
    # Validation
    # -------------------
    def validate(self, rule: AttachmentRule, value) -> Tuple[List[str], Optional[str]]:
        """
        Check an upload against its rule.

        Returns (messages, extension). The extension comes from the file
        content and is used to name the stored object.
        """
        label = rule.label
        if not isinstance(value, UploadedFile):
            noun = "an image" if rule.kind == "image" else "a file"
            return [f"The {label} field must be {noun}."], None

        messages = []
        extension = None
        if rule.kind == "image":
            detected = detect_image_extension(value.content)
            if detected is None:
                messages.append(f"The {label} field must be an image.")
            if detected not in IMAGE_EXTENSIONS:
                messages.append(
                    f"The {label} field must be a file of type: {', '.join(IMAGE_EXTENSIONS)}."
                )
            else:
                extension = detected
        else:
            if not is_pdf(value.content):
                messages.append(f"The {label} field must be a file of type: pdf.")
            else:
                extension = "pdf"

        if value.size > rule.max_kb * 1024:
            messages.append(f"The {label} field must not be greater than {rule.max_kb} kilobytes.")

        return messages, extension if not messages else None

    # -------------------
    # Storage
    # -------------------
    def store_all(
        self,
        uploads: List[Tuple[AttachmentRule, UploadedFile, str]],
        before_put=None,
    ) -> Dict[str, str]:
        """
        Store every upload and return {field: path}.

        before_put(rule) runs right before each upload. If one upload fails,
        the ones already stored for this call are discarded and StorageError
        is raised with the rule's message.
        """
        stored: Dict[str, str] = {}
        for rule, upload, extension in uploads:
            if before_put is not None:
                before_put(rule)
            try:
                stored[rule.field] = self.store.put(rule.prefix, upload, extension)
            except StorageError as e:
                logger.error("%s: %s", rule.failure_message, e)
                for path in stored.values():
                    self.discard(path)
                raise StorageError(rule.failure_message) from e
        return stored

    def discard(self, path: Optional[str]) -> bool:
        """Delete path if it exists. Returns False when cleanup failed."""
        if not path:
            return True
        try:
            if self.store.exists(path):
                self.store.delete(path)
            return True
        except StorageError as e:
            logger.error("Failed to delete file %s: %s", path, e)
            return False

    def public_url(self, path: Optional[str]) -> Optional[str]:
        return self.store.url(path) if path else None
