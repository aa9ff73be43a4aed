# app/core/errors.py
"""
Error kinds raised by services and the access chain.

Nothing here knows about HTTP; app/api/errors.py maps each kind to a status
code and a response envelope.
"""

from typing import Dict, List, Optional


class ServiceError(Exception):
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(ServiceError):
    default_message = "Unauthenticated"


class Forbidden(ServiceError):
    default_message = "Forbidden"


class StaffOnly(Forbidden):
    default_message = "Forbidden - staff only"


class MissingRole(Forbidden):
    default_message = "Forbidden - missing role"

    def __init__(self, role: str, message: Optional[str] = None):
        self.role = role
        super().__init__(message)


class ValidationFailed(ServiceError):
    default_message = "Validation failed"

    def __init__(self, errors: Dict[str, List[str]], message: Optional[str] = None):
        self.errors = errors
        super().__init__(message)


class NotFound(ServiceError):
    default_message = "Not found"


class StorageError(ServiceError):
    default_message = "Storage operation failed"


class ServerError(ServiceError):
    pass
