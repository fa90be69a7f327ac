# khata/utils/check_roles.py
from fastapi import HTTPException
from typing import Callable, Iterable
from functools import wraps


def require_role(roles: Iterable[str]):
    """
    Route decorator restricting access to the given app roles
    (Supabase ``app_metadata.role``). The route must take ``_user``.
    """
    allowed = {r.lower() for r in roles}

    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, _user, **kwargs):
            if _user is None:
                raise HTTPException(status_code=401, detail="User not authenticated")
            if (getattr(_user, "role", None) or "user").lower() not in allowed:
                raise HTTPException(status_code=403, detail="Permission denied")
            return await func(*args, _user=_user, **kwargs)
        return wrapper
    return decorator
