from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from form_admin.core.config import settings
from form_admin.core.security import hash_password, verify_password
from form_admin.models.user import User
from form_admin.services.access_policy import ROLE_ADMIN

logger = logging.getLogger(__name__)


def normalize_email(raw: str | None) -> str:
    return str(raw or "").strip().lower()


def find_user(db: Session, email: str, *, include_inactive: bool = False) -> User | None:
    normalized = normalize_email(email)
    if not normalized:
        return None
    stmt = select(User).where(func.lower(User.email) == normalized)
    if not include_inactive:
        stmt = stmt.where(User.is_active.is_(True))
    return db.scalars(stmt).first()


def _is_bootstrap_login(email: str, password: str) -> bool:
    if not settings.ADMIN_BOOTSTRAP_ENABLED:
        return False
    expected_password = str(settings.ADMIN_BOOTSTRAP_PASSWORD or "")
    return (
        normalize_email(email) == normalize_email(settings.ADMIN_BOOTSTRAP_EMAIL)
        and bool(expected_password)
        and password == expected_password
    )


def authenticate(db: Session, email: str, password: str) -> User | None:
    """Resolve login credentials to an active user.

    The configured bootstrap credentials always yield an active form
    administrator, creating or promoting the account on the way.
    """
    password = str(password or "")
    if _is_bootstrap_login(email, password):
        return _provision_form_admin(db, email, password)
    user = find_user(db, email)
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user


def _provision_form_admin(db: Session, email: str, password: str) -> User | None:
    user = find_user(db, email, include_inactive=True)
    if user is None:
        user = User(email=normalize_email(email), name=str(settings.ADMIN_BOOTSTRAP_NAME or "Admin User"))
        db.add(user)
        logger.info("form administrator provisioned email=%s", user.email)
    if user.password_hash is None or not verify_password(password, user.password_hash):
        user.password_hash = hash_password(password)
    user.role = ROLE_ADMIN
    user.is_active = True
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return find_user(db, email)
    db.refresh(user)
    return user
