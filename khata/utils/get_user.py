# khata/utils/get_user.py
from uuid import UUID
from fastapi import Request, HTTPException, Header

from khata.core.security import decode_token
from khata.schemas.auth_schemas import CurrentUser


async def get_current_user(
    request: Request,
    token: str | None = Header(default=None),
    authorization: str | None = Header(default=None),
) -> CurrentUser:
    # Support either header
    raw_token = token
    if not raw_token and authorization and authorization.startswith("Bearer "):
        raw_token = authorization.split("Bearer ")[1]

    if not raw_token:
        raise HTTPException(status_code=401, detail="Missing access token")

    try:
        payload = decode_token(raw_token)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    sub = payload.get("sub")
    try:
        user_id = UUID(str(sub))
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token payload")

    app_metadata = payload.get("app_metadata") or {}
    user = CurrentUser(
        id=user_id,
        email=payload.get("email"),
        role=str(app_metadata.get("role") or "user"),
    )

    request.state.user = user
    return user
