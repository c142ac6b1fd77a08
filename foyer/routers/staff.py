# =====================================================================
# ENDPOINTS DE PERSONAL
# =====================================================================

from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from foyer.deps import get_db, get_current_user
from foyer.schemas import ApiResponse, StaffCreate, StaffUpdate, StaffOut, StaffStats, envelope
from foyer.services.staff_service import StaffService

router = APIRouter(prefix="/personnel", tags=["personnel"])

@router.get("", response_model=ApiResponse[List[StaffOut]])
async def list_staff(
    status_filter: Optional[str] = Query(None, alias="status"),
    department: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db),
    current=Depends(get_current_user),
):
    staff = await StaffService.list_staff(
        db, status=status_filter, department=department, search=search,
        start_date=start_date, end_date=end_date,
    )
    return envelope(staff)

@router.post("", response_model=ApiResponse[StaffOut], status_code=status.HTTP_201_CREATED)
async def create_staff(data: StaffCreate, db: AsyncSession = Depends(get_db), current=Depends(get_current_user)):
    return envelope(await StaffService.create(db, data))

@router.get("/stats", response_model=ApiResponse[StaffStats])
async def staff_stats(db: AsyncSession = Depends(get_db), current=Depends(get_current_user)):
    return envelope(await StaffService.stats(db))

@router.get("/{staff_id}", response_model=ApiResponse[StaffOut])
async def get_staff(staff_id: str, db: AsyncSession = Depends(get_db), current=Depends(get_current_user)):
    staff = await StaffService.get_staff_or_404(db, staff_id)
    return envelope(StaffOut.model_validate(staff))

@router.put("/{staff_id}", response_model=ApiResponse[StaffOut])
async def update_staff(
    staff_id: str,
    data: StaffUpdate,
    db: AsyncSession = Depends(get_db),
    current=Depends(get_current_user),
):
    return envelope(await StaffService.update(db, staff_id, data))

@router.delete("/{staff_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_staff(staff_id: str, db: AsyncSession = Depends(get_db), current=Depends(get_current_user)):
    await StaffService.delete(db, staff_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
