# app/api/forms.py
"""
Turn a multipart or JSON request body into a payload struct.

Only keys the client actually sent are passed to the struct, so its
model_fields_set tells "not sent" apart from "sent empty".
"""

import json
from typing import Any, Dict, Iterable, Type, TypeVar

from fastapi import Request
from starlette.datastructures import UploadFile
from pydantic import BaseModel, ValidationError

from app.core.errors import ValidationFailed
from app.schemas.file import UploadedFile

Payload = TypeVar("Payload", bound=BaseModel)

# form keys that steer routing, never entity data
RESERVED_FIELDS = {"_method"}


async def read_fields(request: Request, file_fields: Iterable[str]) -> Dict[str, Any]:
    file_fields = set(file_fields)
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise ValidationFailed({"body": ["The request body must be valid JSON."]})
        if not isinstance(body, dict):
            raise ValidationFailed({"body": ["The request body must be a JSON object."]})
        fields = {k: v for k, v in body.items() if k not in RESERVED_FIELDS}
        # JSON cannot carry files; anything sent there is checked as a bad upload
        for key in file_fields & fields.keys():
            if fields[key] in (None, ""):
                del fields[key]
            elif not isinstance(fields[key], str):
                fields[key] = json.dumps(fields[key])
        return fields

    if not (
        content_type.startswith("multipart/form-data")
        or content_type.startswith("application/x-www-form-urlencoded")
    ):
        return {}

    form = await request.form()
    fields: Dict[str, Any] = {}
    for key, value in form.multi_items():
        if key in RESERVED_FIELDS:
            continue
        if isinstance(value, UploadFile):
            # an empty file input is sent as a part without a filename
            if not value.filename:
                continue
            fields[key] = UploadedFile(
                filename=value.filename,
                content_type=value.content_type,
                content=await value.read(),
            )
        elif key in file_fields and value == "":
            continue
        else:
            fields[key] = value
    return fields


async def parse_payload(request: Request, model: Type[Payload], file_fields: Iterable[str] = ()) -> Payload:
    fields = await read_fields(request, file_fields)
    known = {k: v for k, v in fields.items() if k in model.model_fields}
    try:
        return model(**known)
    except ValidationError as e:
        errors: Dict[str, list] = {}
        for err in e.errors():
            field = str(err["loc"][0]) if err.get("loc") else "body"
            message = f"The {field.replace('_', ' ')} field is invalid."
            if message not in errors.get(field, []):
                errors.setdefault(field, []).append(message)
        raise ValidationFailed(errors)


async def override_method(request: Request) -> str:
    """The HTTP method a POST asks to be treated as, via a _method field."""
    method = request.query_params.get("_method")
    if method is None:
        content_type = request.headers.get("content-type", "")
        if content_type.startswith("application/json"):
            try:
                body = await request.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                method = body.get("_method")
        elif content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
            form = await request.form()
            method = form.get("_method")
    return str(method or "").upper()
