# =====================================================================
# ENDPOINTS DE STAGIAIRES
# =====================================================================

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from foyer.deps import get_db, get_current_user
from foyer.schemas import (
    ApiResponse, ResidentCreate, ResidentUpdate, ResidentOut, ResidentList, ResidentSummary,
    ResidentFilters, envelope,
)
from foyer.services.resident_service import ResidentService

router = APIRouter(prefix="/stagiaires", tags=["stagiaires"])

# -------------------- Listados --------------------

@router.get("", response_model=ApiResponse[ResidentList])
async def list_residents(
    request: Request,
    db: AsyncSession = Depends(get_db),
    current=Depends(get_current_user),
):
    """
    Listado filtrado. Query params reconocidos: search, status, room, specificRoom,
    gender, type, session, year, startDate, endDate, lodgingStatus, lodgingTerms,
    registrationStatus, sortBy, sortOrder.
    """
    filters = ResidentFilters.from_query(request.query_params)
    residents = await ResidentService.list_residents(db, filters)
    return envelope({"stagiaires": residents}, results=len(residents))

@router.get("/available", response_model=ApiResponse[List[ResidentSummary]])
async def available_residents(
    search: Optional[str] = Query(None),
    chambre_status: Optional[str] = Query(None, alias="chambreStatus"),
    db: AsyncSession = Depends(get_db),
    current=Depends(get_current_user),
):
    """Stagiaires internos; con chambreStatus=disponible solo los que no tienen chambre."""
    residents = await ResidentService.available(db, search=search, without_room=chambre_status == "disponible")
    return envelope(residents)

@router.get("/search/{query}", response_model=ApiResponse[ResidentList])
async def search_residents(query: str, db: AsyncSession = Depends(get_db), current=Depends(get_current_user)):
    residents = await ResidentService.search(db, query)
    return envelope({"stagiaires": residents}, results=len(residents))

# -------------------- Alta --------------------

@router.post("", response_model=ApiResponse[ResidentOut], status_code=status.HTTP_201_CREATED)
async def create_resident(data: ResidentCreate, db: AsyncSession = Depends(get_db), current=Depends(get_current_user)):
    return envelope(await ResidentService.create(db, data))

@router.post("/intern", response_model=ApiResponse[ResidentOut], status_code=status.HTTP_201_CREATED)
async def create_intern(data: ResidentCreate, db: AsyncSession = Depends(get_db), current=Depends(get_current_user)):
    return envelope(await ResidentService.create(db, data, force_type="internal"))

@router.post("/extern", response_model=ApiResponse[ResidentOut], status_code=status.HTTP_201_CREATED)
async def create_extern(data: ResidentCreate, db: AsyncSession = Depends(get_db), current=Depends(get_current_user)):
    return envelope(await ResidentService.create(db, data, force_type="external"))

# -------------------- Detalle, edición y borrado --------------------

@router.get("/{resident_id}", response_model=ApiResponse[ResidentOut])
async def get_resident(resident_id: str, db: AsyncSession = Depends(get_db), current=Depends(get_current_user)):
    return envelope(await ResidentService.get(db, resident_id))

@router.put("/{resident_id}", response_model=ApiResponse[ResidentOut])
async def update_resident(
    resident_id: str,
    data: ResidentUpdate,
    db: AsyncSession = Depends(get_db),
    current=Depends(get_current_user),
):
    return envelope(await ResidentService.update(db, resident_id, data))

@router.delete("/{resident_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_resident(resident_id: str, db: AsyncSession = Depends(get_db), current=Depends(get_current_user)):
    await ResidentService.delete(db, resident_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
