from __future__ import annotations

import logging
from dataclasses import dataclass

from form_admin.services.errors import AuthorizationError

logger = logging.getLogger(__name__)

ROLE_ADMIN = "ADMIN"
ROLE_USER = "USER"


@dataclass(frozen=True)
class Actor:
    subject: str
    email: str = ""
    role: str = ROLE_USER

    @property
    def is_admin(self) -> bool:
        return str(self.role or "").strip().upper() == ROLE_ADMIN

    @classmethod
    def from_claims(cls, claims: dict) -> "Actor":
        return cls(
            subject=str(claims.get("sub") or "").strip(),
            email=str(claims.get("email") or "").strip(),
            role=str(claims.get("role") or ROLE_USER).strip().upper(),
        )


def authorize(actor: Actor | None) -> bool:
    return actor is not None and actor.is_admin


def require_admin(actor: Actor | None, *, action: str) -> Actor:
    if not authorize(actor):
        logger.warning(
            "form access denied action=%s subject=%s role=%s",
            action,
            getattr(actor, "subject", "") or "-",
            getattr(actor, "role", "") or "-",
        )
        raise AuthorizationError()
    return actor
