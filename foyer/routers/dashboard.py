from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from foyer.deps import get_db, get_current_user
from foyer.schemas import ApiResponse, DashboardStats, QuickStats, envelope
from foyer.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

@router.get("/stats", response_model=ApiResponse[DashboardStats])
async def dashboard_stats(db: AsyncSession = Depends(get_db), current=Depends(get_current_user)):
    """Ocupación, capacidad, stagiaires, personal y alertas, recalculados en cada llamada."""
    return envelope(await DashboardService.stats(db))

@router.get("/quick-stats", response_model=ApiResponse[QuickStats])
async def quick_stats(db: AsyncSession = Depends(get_db), current=Depends(get_current_user)):
    return envelope(await DashboardService.quick_stats(db))
