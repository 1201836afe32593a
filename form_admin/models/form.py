from sqlalchemy import JSON, Boolean, Integer, String, func, select
from sqlalchemy.orm import Mapped, Session, mapped_column
from form_admin.db.session import Base
from form_admin.models.common import UUIDMixin, TimestampMixin

class Form(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "forms"
    seq: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    method: Mapped[str] = mapped_column(String(255), nullable=False)
    action: Mapped[str] = mapped_column(String(255), nullable=False)
    fields: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    # Written only by the structure-update endpoint; independent of `fields`.
    configuration: Mapped[dict | list | None] = mapped_column(JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


def next_form_seq(db: Session) -> int:
    return int(db.scalar(select(func.coalesce(func.max(Form.seq), 0)))) + 1
