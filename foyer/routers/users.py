# =====================================================================
# ENDPOINTS DE CUENTAS DE ADMINISTRACIÓN (solo superadmin)
# =====================================================================

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from foyer.deps import get_db, require_roles
from foyer.schemas import ApiResponse, UserCreate, UserOut, UserUpdate, envelope
from foyer.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])

superadmin_only = require_roles("superadmin")

@router.get("/admins", response_model=ApiResponse[List[UserOut]])
async def list_admins(db: AsyncSession = Depends(get_db), current=Depends(superadmin_only)):
    admins = await UserService.list_admins(db)
    return envelope([UserOut.model_validate(u) for u in admins])

@router.post("/admin", response_model=ApiResponse[UserOut], status_code=status.HTTP_201_CREATED)
async def create_admin(data: UserCreate, db: AsyncSession = Depends(get_db), current=Depends(superadmin_only)):
    """El rol se fuerza siempre a 'admin'."""
    user = await UserService.create(db, data.model_copy(update={"role": "admin"}), creator_role=current["role"])
    return envelope(UserOut.model_validate(user))

@router.put("/{user_id}", response_model=ApiResponse[UserOut])
async def update_user(
    user_id: str,
    data: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current=Depends(superadmin_only),
):
    user = await UserService.update(db, user_id, data)
    return envelope(UserOut.model_validate(user))

@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: str, db: AsyncSession = Depends(get_db), current=Depends(superadmin_only)):
    await UserService.delete(db, user_id, current_user_id=current["id"])
    return Response(status_code=status.HTTP_204_NO_CONTENT)
