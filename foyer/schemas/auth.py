# =====================================================================
# ESQUEMAS DE AUTENTICACIÓN Y USUARIOS
# =====================================================================

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

from .enums import UserRole
from .validators import Email

# =========================================================
# ESQUEMAS DE AUTENTICACIÓN
# =========================================================

class LoginRequest(BaseModel):
    """
    Esquema para la solicitud de inicio de sesión.

    Attributes:
        email (str): Email de la cuenta
        password (str): Contraseña (en texto plano)
    """
    email: Email
    password: str = Field(..., min_length=1)


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    role: UserRole
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class TokenResponse(BaseModel):
    """
    Esquema para la respuesta del token de acceso.

    Attributes:
        access_token (str): Token JWT de acceso
        token_type (Literal["bearer"]): Tipo de token (siempre 'bearer')
        user (UserOut): Cuenta autenticada
    """
    access_token: str
    token_type: Literal["bearer"] = "bearer"
    user: UserOut


# =========================================================
# ESQUEMAS DE GESTIÓN DE CUENTAS
# =========================================================

class UserCreate(BaseModel):
    """Payload para crear cuentas del back office."""

    name: str = Field(..., min_length=1)
    email: Email
    password: str = Field(..., min_length=6)
    role: UserRole = "staff"


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[Email] = None
    password: Optional[str] = Field(None, min_length=6)
    role: Optional[UserRole] = None
