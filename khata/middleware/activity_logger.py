# khata/middleware/activity_logger.py
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from khata.utils.activity_helpers import log_user_activity
from khata.core.db import get_db

logger = logging.getLogger(__name__)

AUDITED_METHODS = {"POST", "PUT", "PATCH", "DELETE"}


class ActivityLoggerMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        # request.state.user is set by get_current_user while the endpoint runs
        user = getattr(request.state, "user", None)
        if not user or request.method not in AUDITED_METHODS or response.status_code >= 400:
            return response

        message = f"Performed {request.method} on {request.url.path}"

        # Honour get_db overrides so the audit row lands in the same database as the request
        db_provider = request.app.dependency_overrides.get(get_db, get_db)
        try:
            async for db in db_provider():
                await log_user_activity(db, user_id=user.id, username=user.username, message=message, commit=True)
        except Exception:
            logger.exception("Failed to log activity for %s %s", request.method, request.url.path)

        return response
