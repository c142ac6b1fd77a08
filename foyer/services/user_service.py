"""
Cuentas del back office: alta, autenticación y administración.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from foyer.exceptions import AuthError, NotFoundError, PermissionDenied, UniquenessConflict, ValidationError
from foyer.models import User
from foyer.schemas import UserCreate, UserUpdate
from foyer.security import new_uuid, hash_password, verify_password, normalize_email, is_valid_uuid

logger = logging.getLogger(__name__)

ADMIN_ROLES = ("superadmin", "admin")


class UserService:
    """Gestión de cuentas"""

    @staticmethod
    async def get_user_or_404(db: AsyncSession, user_id: str) -> User:
        if not is_valid_uuid(user_id):
            raise NotFoundError("Utilisateur non trouvé")
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError("Utilisateur non trouvé")
        return user

    @staticmethod
    async def _ensure_email_available(db: AsyncSession, email: str, exclude_id: Optional[str] = None) -> None:
        query = select(User.id).where(User.email == email)
        if exclude_id:
            query = query.where(User.id != exclude_id)
        if await db.scalar(query) is not None:
            raise UniquenessConflict("email", "Un utilisateur avec cet email existe déjà")

    @staticmethod
    async def authenticate(db: AsyncSession, email: str, password: str) -> User:
        user = await db.scalar(select(User).where(User.email == normalize_email(email)))
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Échec de connexion", extra={"email": normalize_email(email)})
            raise AuthError("Email ou mot de passe incorrect")
        user.last_login_at = datetime.now(timezone.utc)
        await db.commit()
        await db.refresh(user)
        return user

    @staticmethod
    async def create(db: AsyncSession, payload: UserCreate, creator_role: Optional[str] = None) -> User:
        """Un admin no puede crear superadmins; sin ``creator_role`` (scripts) no hay límite."""
        if creator_role is not None and creator_role != "superadmin" and payload.role == "superadmin":
            raise PermissionDenied("Seul un superadmin peut créer un autre superadmin")
        await UserService._ensure_email_available(db, payload.email)
        user = User(
            id=new_uuid(),
            name=payload.name.strip(),
            email=payload.email,
            password_hash=hash_password(payload.password),
            role=payload.role,
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        logger.info("Compte créé", extra={"user_id": user.id, "role": user.role})
        return user

    @staticmethod
    async def list_admins(db: AsyncSession) -> List[User]:
        result = await db.execute(
            select(User).where(User.role.in_(ADMIN_ROLES)).order_by(User.created_at.desc(), User.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def update(db: AsyncSession, user_id: str, payload: UserUpdate) -> User:
        user = await UserService.get_user_or_404(db, user_id)
        data = payload.model_dump(exclude_unset=True)
        if data.get("email"):
            await UserService._ensure_email_available(db, data["email"], exclude_id=user.id)
            user.email = data["email"]
        if data.get("name"):
            user.name = data["name"].strip()
        if data.get("password"):
            user.password_hash = hash_password(data["password"])
        if data.get("role"):
            if data["role"] != user.role:
                logger.info("Changement de rôle", extra={"user_id": user.id, "from": user.role, "to": data["role"]})
            user.role = data["role"]
        await db.commit()
        await db.refresh(user)
        return user

    @staticmethod
    async def delete(db: AsyncSession, user_id: str, current_user_id: str) -> None:
        if user_id == current_user_id:
            raise ValidationError("Vous ne pouvez pas supprimer votre propre compte")
        user = await UserService.get_user_or_404(db, user_id)
        await db.delete(user)
        await db.commit()
