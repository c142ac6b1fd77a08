# =====================================================================
# ENDPOINTS DE CHAMBRES Y OCUPACIÓN
# =====================================================================

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from foyer.deps import get_db, get_current_user
from foyer.schemas import (
    ApiResponse, RoomCreate, RoomUpdate, RoomOut, RoomStatistics, AssignOccupantsRequest,
    AssignmentResult, ConflictReport, AvailableResidentsOut, ResidentSummary, envelope,
)
from foyer.services.occupancy_service import OccupancyService, build_room_out
from foyer.services.room_service import RoomService

router = APIRouter(prefix="/chambres", tags=["chambres"])

# -------------------- CRUD --------------------

@router.get("", response_model=ApiResponse[List[RoomOut]])
async def list_rooms(
    status_filter: Optional[str] = Query(None, alias="status"),
    gender: Optional[str] = Query(None),
    floor: Optional[int] = Query(None, ge=1, le=10),
    search: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: str = Query("asc", alias="sortOrder", pattern="^(asc|desc)$"),
    db: AsyncSession = Depends(get_db),
    current=Depends(get_current_user),
):
    """El estado se deriva de la ocupación: available/libre/disponible u occupied/occupée."""
    rooms = await RoomService.list_rooms(
        db, status=status_filter, gender=gender, floor=floor, search=search,
        sort_by=sort_by, sort_order=sort_order,
    )
    return envelope(rooms)

@router.post("", response_model=ApiResponse[RoomOut], status_code=status.HTTP_201_CREATED)
async def create_room(data: RoomCreate, db: AsyncSession = Depends(get_db), current=Depends(get_current_user)):
    return envelope(await RoomService.create_room(db, data))

@router.get("/statistics", response_model=ApiResponse[RoomStatistics])
async def room_statistics(db: AsyncSession = Depends(get_db), current=Depends(get_current_user)):
    return envelope(await RoomService.statistics(db))

@router.get("/{room_id}", response_model=ApiResponse[RoomOut])
async def get_room(room_id: str, db: AsyncSession = Depends(get_db), current=Depends(get_current_user)):
    return envelope(await RoomService.get_room(db, room_id))

@router.put("/{room_id}", response_model=ApiResponse[RoomOut])
async def update_room(
    room_id: str,
    data: RoomUpdate,
    db: AsyncSession = Depends(get_db),
    current=Depends(get_current_user),
):
    return envelope(await RoomService.update_room(db, room_id, data))

@router.delete("/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_room(room_id: str, db: AsyncSession = Depends(get_db), current=Depends(get_current_user)):
    await RoomService.delete_room(db, room_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# -------------------- Ocupantes --------------------

@router.get("/{room_id}/occupants", response_model=ApiResponse[List[ResidentSummary]])
async def list_occupants(room_id: str, db: AsyncSession = Depends(get_db), current=Depends(get_current_user)):
    room = await OccupancyService.get_room_or_404(db, room_id)
    occupants = await OccupancyService.list_occupants(db, room.id)
    return envelope([ResidentSummary.model_validate(r) for r in occupants])

async def _assign(room_id: str, data: AssignOccupantsRequest, db: AsyncSession) -> dict:
    outcome = await OccupancyService.assign(db, room_id, data.resident_ids)
    result = AssignmentResult(
        room=build_room_out(outcome.room, outcome.occupants),
        added_count=outcome.added_count,
        removed_count=outcome.removed_count,
        warnings=outcome.warnings,
        message=f"{len(outcome.occupants)} occupant(s) dans la chambre {outcome.room.number}",
    )
    return envelope(result)

@router.post("/{room_id}/occupants", response_model=ApiResponse[AssignmentResult])
async def assign_occupants(
    room_id: str,
    data: AssignOccupantsRequest,
    db: AsyncSession = Depends(get_db),
    current=Depends(get_current_user),
):
    """Reemplaza la lista completa de ocupantes de la chambre."""
    return await _assign(room_id, data, db)

@router.post("/{room_id}/assign", response_model=ApiResponse[AssignmentResult])
async def assign(
    room_id: str,
    data: AssignOccupantsRequest,
    db: AsyncSession = Depends(get_db),
    current=Depends(get_current_user),
):
    return await _assign(room_id, data, db)

@router.post("/{room_id}/check-occupants", response_model=ApiResponse[ConflictReport])
async def check_occupants(
    room_id: str,
    data: AssignOccupantsRequest,
    db: AsyncSession = Depends(get_db),
    current=Depends(get_current_user),
):
    """Informa de los stagiaires de la lista que ya ocupan otra chambre."""
    return envelope(await OccupancyService.check_conflicts(db, room_id, data.resident_ids))

@router.get("/{room_id}/available-stagiaires", response_model=ApiResponse[AvailableResidentsOut])
async def available_for_room(room_id: str, db: AsyncSession = Depends(get_db), current=Depends(get_current_user)):
    return envelope(await OccupancyService.available_residents(db, room_id))
