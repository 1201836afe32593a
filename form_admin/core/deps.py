from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from form_admin.core.config import settings
from form_admin.core.security import decode_jwt
from form_admin.services.access_policy import Actor

bearer = HTTPBearer(auto_error=False)

def get_current_claims(creds: HTTPAuthorizationCredentials = Depends(bearer)) -> dict:
    if not creds:
        raise HTTPException(status_code=401, detail="Missing authorization token")
    try:
        return decode_jwt(creds.credentials, settings.ADMIN_JWT_SECRET)
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid token")

def get_current_actor(claims: dict = Depends(get_current_claims)) -> Actor:
    actor = Actor.from_claims(claims)
    if not actor.subject:
        raise HTTPException(status_code=401, detail="Invalid token")
    return actor
