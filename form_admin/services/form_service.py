from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy.orm import Session

from form_admin.schemas.forms import FormDefinition, validate_field_list
from form_admin.services.access_policy import Actor, require_admin
from form_admin.services.errors import ValidationError
from form_admin.services.form_repository import FormRepository

logger = logging.getLogger(__name__)

MAX_ATTRIBUTE_LENGTH = 255

# attribute -> human name used in validation messages
TEXT_ATTRIBUTES = {
    "title": "form title",
    "method": "form method",
    "action": "form action URL",
}


def _reject_constant(token: str) -> Any:
    raise ValueError(f"non-standard JSON constant {token}")


def _text_attribute_errors(payload: dict[str, Any], key: str) -> list[str]:
    name = TEXT_ATTRIBUTES[key]
    value = payload.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        return [f"The {name} is required."]
    if not isinstance(value, str):
        return [f"The {name} must be a string."]
    if len(value.strip()) > MAX_ATTRIBUTE_LENGTH:
        return [f"The {name} cannot exceed {MAX_ATTRIBUTE_LENGTH} characters."]
    return []


def validate_form_payload(payload: Any) -> dict[str, Any]:
    """Validate a create/update body and return the attributes to persist.

    Errors for every attribute are collected before raising, so the caller
    sees all of them at once.
    """
    if not isinstance(payload, dict):
        payload = {}

    errors: dict[str, list[str]] = {}
    cleaned: dict[str, Any] = {}
    for key in TEXT_ATTRIBUTES:
        messages = _text_attribute_errors(payload, key)
        if messages:
            errors[key] = messages
        else:
            cleaned[key] = payload[key].strip()

    try:
        cleaned["fields"] = validate_field_list(payload.get("fields"))
    except ValidationError as exc:
        errors.update(exc.errors)

    if errors:
        raise ValidationError(errors)
    return cleaned


class FormService:
    def __init__(self, db: Session, repository: FormRepository | None = None):
        self.repository = repository if repository is not None else FormRepository(db)

    def list_forms(self, actor: Actor) -> list[FormDefinition]:
        require_admin(actor, action="list")
        return self.repository.list_all()

    def show(self, form_id: Any, actor: Actor) -> FormDefinition:
        require_admin(actor, action="show")
        return self.repository.find_by_id(form_id)

    def create(self, payload: Any, actor: Actor) -> FormDefinition:
        require_admin(actor, action="create")
        attrs = validate_form_payload(payload)
        form = self.repository.create(attrs)
        logger.info("form created id=%s fields=%s actor=%s", form.id, len(form.fields), actor.subject)
        return form

    def update(self, form_id: Any, payload: Any, actor: Actor) -> FormDefinition:
        require_admin(actor, action="update")
        self.repository.find_by_id(form_id)
        attrs = validate_form_payload(payload)
        form = self.repository.update(form_id, attrs)
        logger.info("form updated id=%s fields=%s actor=%s", form.id, len(form.fields), actor.subject)
        return form

    def update_structure(self, form_id: Any, configuration: Any, actor: Actor) -> FormDefinition:
        require_admin(actor, action="update_structure")
        self.repository.find_by_id(form_id)
        if configuration is None or (isinstance(configuration, (dict, list)) and not configuration):
            raise ValidationError.single("configuration", "The configuration field is required.")
        if not isinstance(configuration, (dict, list)):
            raise ValidationError.single("configuration", "The configuration must be an array.")
        form = self.repository.update(form_id, {"configuration": configuration})
        logger.info("form structure updated id=%s actor=%s", form.id, actor.subject)
        return form

    def import_json(self, raw: Any, actor: Actor) -> Any:
        require_admin(actor, action="import_json")
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            raise ValidationError.single("json_data", "The json data field is required.")
        if not isinstance(raw, str):
            raise ValidationError.single("json_data", "The json data must be a valid JSON string.")
        try:
            return json.loads(raw, parse_constant=_reject_constant)
        except ValueError:
            raise ValidationError.single("json_data", "The json data must be a valid JSON string.")

    def delete(self, form_id: Any, actor: Actor) -> None:
        require_admin(actor, action="delete")
        self.repository.delete(form_id)
        logger.info("form deleted id=%s actor=%s", form_id, actor.subject)
