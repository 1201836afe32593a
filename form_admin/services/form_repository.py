from __future__ import annotations

import copy
import logging
import uuid
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from form_admin.models.common import utcnow
from form_admin.models.form import Form, next_form_seq
from form_admin.schemas.forms import FormDefinition
from form_admin.services.errors import NotFoundError, StorageError

logger = logging.getLogger(__name__)

MUTABLE_ATTRIBUTES = {"title", "method", "action", "fields", "configuration", "is_active"}


def _parse_form_id(form_id: Any) -> uuid.UUID | None:
    if isinstance(form_id, uuid.UUID):
        return form_id
    try:
        return uuid.UUID(str(form_id or "").strip())
    except ValueError:
        return None


def _to_definition(row: Form) -> FormDefinition:
    return FormDefinition(
        id=row.id,
        title=row.title,
        method=row.method,
        action=row.action,
        fields=copy.deepcopy(list(row.fields or [])),
        configuration=copy.deepcopy(row.configuration),
        is_active=bool(row.is_active),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class FormRepository:
    def __init__(self, db: Session):
        self.db = db

    def _commit_or_storage_error(self, operation: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("form storage failure operation=%s", operation)
            raise StorageError() from exc

    def _load_row_or_404(self, form_id: Any) -> Form:
        parsed = _parse_form_id(form_id)
        if parsed is None:
            raise NotFoundError()
        try:
            row = self.db.get(Form, parsed)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("form storage failure operation=read id=%s", parsed)
            raise StorageError() from exc
        if row is None:
            raise NotFoundError()
        return row

    def create(self, attrs: dict[str, Any]) -> FormDefinition:
        data = {k: v for k, v in attrs.items() if k in MUTABLE_ATTRIBUTES}
        try:
            row = Form(seq=next_form_seq(self.db), **data)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("form storage failure operation=create")
            raise StorageError() from exc
        self.db.add(row)
        self._commit_or_storage_error("create")
        self.db.refresh(row)
        return _to_definition(row)

    def find_by_id(self, form_id: Any) -> FormDefinition:
        return _to_definition(self._load_row_or_404(form_id))

    def list_all(self) -> list[FormDefinition]:
        try:
            rows = self.db.query(Form).order_by(Form.seq.asc(), Form.created_at.asc()).all()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("form storage failure operation=list")
            raise StorageError() from exc
        return [_to_definition(row) for row in rows]

    def update(self, form_id: Any, attrs: dict[str, Any]) -> FormDefinition:
        row = self._load_row_or_404(form_id)
        for key, value in attrs.items():
            if key in MUTABLE_ATTRIBUTES:
                setattr(row, key, copy.deepcopy(value))
        row.updated_at = utcnow()
        self.db.add(row)
        self._commit_or_storage_error("update")
        self.db.refresh(row)
        return _to_definition(row)

    def delete(self, form_id: Any) -> None:
        row = self._load_row_or_404(form_id)
        self.db.delete(row)
        self._commit_or_storage_error("delete")
