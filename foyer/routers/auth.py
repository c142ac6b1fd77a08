# foyer/routers/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from foyer.deps import get_db, get_current_user, require_roles
from foyer.schemas import ApiResponse, LoginRequest, TokenResponse, UserCreate, UserOut, envelope
from foyer.security import create_access_token
from foyer.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/login", response_model=ApiResponse[TokenResponse])
async def login(data: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await UserService.authenticate(db, data.email, data.password)
    token = create_access_token(sub=user.id, role=user.role)
    return envelope(TokenResponse(access_token=token, user=UserOut.model_validate(user)))

@router.post("/register", response_model=ApiResponse[UserOut], status_code=status.HTTP_201_CREATED)
async def register(
    data: UserCreate,
    db: AsyncSession = Depends(get_db),
    current=Depends(require_roles("superadmin", "admin")),
):
    """Alta de una cuenta del back office (solo administradores)."""
    user = await UserService.create(db, data, creator_role=current["role"])
    return envelope(UserOut.model_validate(user))

@router.get("/me", response_model=ApiResponse[UserOut])
async def me(db: AsyncSession = Depends(get_db), current=Depends(get_current_user)):
    user = await UserService.get_user_or_404(db, current["id"])
    return envelope(UserOut.model_validate(user))
