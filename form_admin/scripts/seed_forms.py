from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.orm import Session

from form_admin.data.demo_forms import DEMO_FORMS
from form_admin.db.session import SessionLocal
from form_admin.models.form import Form, next_form_seq
from form_admin.schemas.forms import validate_field_list


def upsert_forms(db: Session, forms: list[dict]) -> tuple[int, int]:
    created = 0
    updated = 0
    seq = next_form_seq(db)

    for item in forms:
        title = str(item["title"]).strip()
        method = str(item["method"]).strip().upper()
        action = str(item["action"]).strip()
        fields = validate_field_list(item.get("fields"))
        is_active = bool(item.get("is_active", True))

        row = db.query(Form).filter(Form.title == title).first()
        if row is None:
            db.add(Form(seq=seq, title=title, method=method, action=action, fields=fields, is_active=is_active))
            seq += 1
            created += 1
            continue

        changed = False
        if row.method != method:
            row.method = method
            changed = True
        if row.action != action:
            row.action = action
            changed = True
        if row.fields != fields:
            row.fields = fields
            changed = True
        if row.is_active != is_active:
            row.is_active = is_active
            changed = True

        if changed:
            row.updated_at = datetime.now(timezone.utc)
            db.add(row)
            updated += 1

    db.commit()
    return created, updated


def main() -> None:
    db = SessionLocal()
    try:
        created, updated = upsert_forms(db, DEMO_FORMS)
        total = db.query(Form).count()
    finally:
        db.close()
    print(f"forms upsert done: created={created}, updated={updated}, total={total}")


if __name__ == "__main__":
    main()
