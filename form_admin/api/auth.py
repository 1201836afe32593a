from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from form_admin.core.deps import get_current_actor
from form_admin.core.security import create_user_token
from form_admin.db.session import get_db
from form_admin.schemas.auth import ActorOut, LoginIn, TokenOut
from form_admin.services.access_policy import Actor
from form_admin.services.accounts import authenticate

router = APIRouter()


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    user = authenticate(db, payload.email, payload.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = create_user_token(user_id=str(user.id), email=user.email, role=user.role)
    return TokenOut(access_token=token)


@router.get("/me", response_model=ActorOut)
def me(actor: Actor = Depends(get_current_actor)):
    return ActorOut(subject=actor.subject, email=actor.email, role=actor.role, is_admin=actor.is_admin)
