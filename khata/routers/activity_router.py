# khata/routers/activity_router.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from uuid import UUID

from khata.core.db import get_db
from khata.services.activity_service import get_user_activities
from khata.schemas.activity_schemas import ActivityOut, ActivityListResponse
from khata.utils.get_user import get_current_user
from khata.utils.check_roles import require_role

router = APIRouter(prefix="/activities", tags=["User Activities"])


@router.get("/", response_model=ActivityListResponse)
@require_role(["admin"])
async def list_user_activities(
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
    user_id: Optional[UUID] = Query(None),
    username: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    sort_by: str = Query("created_at"),
    order: str = Query("desc")
):
    """
    Fetch the audit trail with pagination, filtering, and sorting.
    """
    total, activities = await get_user_activities(
        db=db,
        user_id=user_id,
        username=username,
        page=page,
        page_size=page_size,
        sort_by=sort_by,
        order=order
    )

    return ActivityListResponse(
        message="User activities fetched successfully",
        total=total,
        data=[ActivityOut.model_validate(a) for a in activities]
    )
