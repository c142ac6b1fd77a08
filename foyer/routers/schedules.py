# =====================================================================
# ENDPOINTS DE HORARIOS DEL PERSONAL
# =====================================================================

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from foyer.deps import get_db, get_current_user
from foyer.schemas import (
    ApiResponse, ScheduleDayIn, ScheduleWeekIn, ScheduleEntryOut, StaffScheduleOut, ScheduleSummary, envelope,
)
from foyer.services.schedule_service import ScheduleService

router = APIRouter(prefix="/schedules", tags=["schedules"])

@router.get("", response_model=ApiResponse[List[ScheduleEntryOut]])
async def list_schedule(
    weekday: Optional[str] = Query(None),
    department: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current=Depends(get_current_user),
):
    return envelope(await ScheduleService.list_entries(db, weekday=weekday, department=department))

@router.get("/summary", response_model=ApiResponse[ScheduleSummary])
async def schedule_summary(db: AsyncSession = Depends(get_db), current=Depends(get_current_user)):
    return envelope(await ScheduleService.summary(db))

@router.get("/staff/{staff_id}", response_model=ApiResponse[StaffScheduleOut])
async def staff_week(staff_id: str, db: AsyncSession = Depends(get_db), current=Depends(get_current_user)):
    return envelope(await ScheduleService.staff_week(db, staff_id))

@router.put("/staff/{staff_id}", response_model=ApiResponse[StaffScheduleOut])
async def replace_staff_week(
    staff_id: str,
    data: ScheduleWeekIn,
    db: AsyncSession = Depends(get_db),
    current=Depends(get_current_user),
):
    """Guarda la semana completa; los días que no se envían quedan sin planificar."""
    return envelope(await ScheduleService.replace_week(db, staff_id, data, user_id=current["id"]))

@router.put("/staff/{staff_id}/{weekday}", response_model=ApiResponse[ScheduleEntryOut])
async def upsert_day(
    staff_id: str,
    weekday: str,
    data: ScheduleDayIn,
    db: AsyncSession = Depends(get_db),
    current=Depends(get_current_user),
):
    return envelope(await ScheduleService.upsert_day(db, staff_id, weekday, data, user_id=current["id"]))

@router.delete("/staff/{staff_id}/{weekday}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_day(
    staff_id: str,
    weekday: str,
    db: AsyncSession = Depends(get_db),
    current=Depends(get_current_user),
):
    await ScheduleService.delete_day(db, staff_id, weekday)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
