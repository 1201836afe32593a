from __future__ import annotations

import uuid
from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from form_admin.services.errors import ValidationError


def _not_blank(value: str) -> str:
    if not value.strip():
        raise PydanticCustomError("string_too_short", "must not be blank")
    return value


# Blank values are rejected but stored exactly as submitted.
NonEmptyStr = Annotated[str, AfterValidator(_not_blank)]

KNOWN_FIELD_TYPES = (
    "text",
    "email",
    "password",
    "textarea",
    "select",
    "checkbox",
    "radio",
    "number",
    "date",
    "tel",
    "url",
    "hidden",
)
CHOICE_FIELD_TYPES = ("select", "checkbox", "radio")

FIELDS_REQUIRED_MESSAGE = "At least one field is required for the form."
FIELDS_ARRAY_MESSAGE = "The form fields must be provided as an array."


class FieldOption(BaseModel):
    model_config = ConfigDict(extra="allow")

    label: NonEmptyStr
    value: NonEmptyStr


class FieldDescriptor(BaseModel):
    """One input element of a form.

    Only ``type``, ``name`` and ``label`` are mandatory. Keys the builder does
    not know about are kept as extra attributes and written back unchanged.
    """

    model_config = ConfigDict(extra="allow")

    type: NonEmptyStr
    name: NonEmptyStr
    label: NonEmptyStr
    placeholder: Optional[str] = None
    required: bool = False
    options: Optional[list[FieldOption]] = None

    @field_validator("required", mode="before")
    @classmethod
    def _required_defaults_to_false(cls, value: Any) -> Any:
        if value is None:
            return False
        return value

    def to_stored(self) -> dict[str, Any]:
        data = self.model_dump()
        if data.get("placeholder") is None:
            data.pop("placeholder", None)
        if data.get("options") is None:
            data.pop("options", None)
        return data


class FormDefinition(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: uuid.UUID
    title: str
    method: str
    action: str
    fields: list[dict[str, Any]]
    configuration: Any = None
    is_active: bool = True
    created_at: datetime
    updated_at: datetime

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


def _error_path(loc: tuple) -> str:
    return ".".join(str(part) for part in loc)


def _descriptor_error_message(position: int, error: dict) -> str:
    path = _error_path(error.get("loc") or ())
    kind = error.get("type")
    prefix = f"Field #{position}"
    if not path:
        return f"{prefix}: each field must be an object."
    if kind == "missing":
        return f"{prefix}: the {path} is required."
    if kind == "string_too_short":
        return f"{prefix}: the {path} must not be empty."
    if kind == "string_type":
        return f"{prefix}: the {path} must be a string."
    if kind == "bool_parsing" or kind == "bool_type":
        return f"{prefix}: the {path} flag must be true or false."
    if kind == "list_type":
        return f"{prefix}: the {path} must be a list."
    if kind in {"model_type", "model_attributes_type", "dict_type"}:
        return f"{prefix}: the {path} must be an object with a label and a value."
    return f"{prefix}: the {path} is invalid ({error.get('msg')})."


def validate_field_list(raw: Any) -> list[dict[str, Any]]:
    """Validate and normalize the ``fields`` attribute of a form.

    Returns the descriptors as plain dictionaries in their original order.
    Raises ``ValidationError`` keyed by ``fields``.
    """
    if raw is None:
        raise ValidationError.single("fields", FIELDS_REQUIRED_MESSAGE)
    if not isinstance(raw, list):
        raise ValidationError.single("fields", FIELDS_ARRAY_MESSAGE)
    if not raw:
        raise ValidationError.single("fields", FIELDS_REQUIRED_MESSAGE)

    normalized: list[dict[str, Any]] = []
    messages: list[str] = []
    for position, item in enumerate(raw, start=1):
        try:
            descriptor = FieldDescriptor.model_validate(item)
        except PydanticValidationError as exc:
            messages.extend(_descriptor_error_message(position, err) for err in exc.errors())
            continue
        normalized.append(descriptor.to_stored())

    if messages:
        raise ValidationError({"fields": messages})
    return normalized
