from __future__ import annotations

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
import jwt

from foyer.db import AsyncSessionLocal
from foyer.security import decode_token

bearer = HTTPBearer(auto_error=False)

async def get_current_user(creds: HTTPAuthorizationCredentials = Depends(bearer)):
    if not creds:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Non authentifié")
    try:
        payload = decode_token(creds.credentials)
        return {"id": payload["sub"], "role": payload["role"]}
    except (jwt.PyJWTError, KeyError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token invalide ou expiré")

async def get_db() -> AsyncSession:
    """
    Una sesión por petición. Los servicios hacen commit; lo no confirmado
    se descarta al cerrar la sesión.
    """
    async with AsyncSessionLocal() as session:
        yield session

def require_roles(*roles: str):
    """
    Dependencia que exige uno de los roles indicados.
    Uso: ``current = Depends(require_roles("superadmin", "admin"))``
    """
    async def checker(current=Depends(get_current_user)):
        if current["role"] not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Accès refusé")
        return current
    return checker
