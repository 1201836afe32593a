from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy.orm import Session

from form_admin.core.deps import get_current_actor
from form_admin.db.session import get_db
from form_admin.schemas.forms import CHOICE_FIELD_TYPES, KNOWN_FIELD_TYPES
from form_admin.services.access_policy import Actor, require_admin
from form_admin.services.form_service import FormService

router = APIRouter()


def _form_service(db: Session = Depends(get_db)) -> FormService:
    return FormService(db)


def _body_dict(payload: Any) -> dict[str, Any]:
    return payload if isinstance(payload, dict) else {}


def _decode_encoded_fields(payload: dict[str, Any]) -> dict[str, Any]:
    # Older builder clients post `fields` as a JSON-encoded string.
    raw = payload.get("fields")
    if not isinstance(raw, str):
        return payload
    try:
        decoded = json.loads(raw)
    except ValueError:
        return payload
    return {**payload, "fields": decoded}


def _index_path(request: Request) -> str:
    return request.app.url_path_for("list_forms")


@router.get("/meta/field-types")
def list_field_types(actor: Actor = Depends(get_current_actor)):
    require_admin(actor, action="field_types")
    return {"types": list(KNOWN_FIELD_TYPES), "choice_types": list(CHOICE_FIELD_TYPES)}


@router.get("", name="list_forms")
def list_forms(service: FormService = Depends(_form_service), actor: Actor = Depends(get_current_actor)):
    forms = service.list_forms(actor)
    return {"rows": [form.to_payload() for form in forms], "total": len(forms)}


@router.post("", status_code=201)
def create_form(
    request: Request,
    payload: Any = Body(default=None),
    service: FormService = Depends(_form_service),
    actor: Actor = Depends(get_current_actor),
):
    form = service.create(_decode_encoded_fields(_body_dict(payload)), actor)
    return {"form": form.to_payload(), "message": "Form created successfully", "redirect": _index_path(request)}


@router.post("/import-json")
def import_form_json(
    payload: Any = Body(default=None),
    service: FormService = Depends(_form_service),
    actor: Actor = Depends(get_current_actor),
):
    config = service.import_json(_body_dict(payload).get("json_data"), actor)
    return {"config": config, "message": "JSON configuration parsed successfully"}


@router.get("/{form_id}")
def show_form(form_id: str, service: FormService = Depends(_form_service), actor: Actor = Depends(get_current_actor)):
    return service.show(form_id, actor).to_payload()


@router.put("/{form_id}")
@router.patch("/{form_id}")
def update_form(
    form_id: str,
    request: Request,
    payload: Any = Body(default=None),
    service: FormService = Depends(_form_service),
    actor: Actor = Depends(get_current_actor),
):
    form = service.update(form_id, _decode_encoded_fields(_body_dict(payload)), actor)
    return {"form": form.to_payload(), "message": "Form updated successfully", "redirect": _index_path(request)}


@router.post("/{form_id}/update-structure")
def update_form_structure(
    form_id: str,
    payload: Any = Body(default=None),
    service: FormService = Depends(_form_service),
    actor: Actor = Depends(get_current_actor),
):
    service.update_structure(form_id, _body_dict(payload).get("configuration"), actor)
    return {"message": "Form structure updated successfully"}


@router.delete("/{form_id}")
def delete_form(
    form_id: str,
    request: Request,
    service: FormService = Depends(_form_service),
    actor: Actor = Depends(get_current_actor),
):
    service.delete(form_id, actor)
    return {"message": "Form deleted successfully", "redirect": _index_path(request)}
