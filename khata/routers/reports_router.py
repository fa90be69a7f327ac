# khata/routers/reports_router.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from khata.core.db import get_db
from khata.schemas.report_schema import ReportSummaryResponse
from khata.services.report_service import get_summary
from khata.utils.get_user import get_current_user

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/summary", response_model=ReportSummaryResponse)
async def report_summary_route(
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await get_summary(db, _user.id)
