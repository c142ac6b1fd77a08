# =====================================================================
# ESQUEMAS COMUNES: SOBRE DE RESPUESTA
# =====================================================================

from __future__ import annotations

from typing import Generic, Literal, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """
    Sobre estándar de todas las respuestas correctas.

    Attributes:
        status (Literal['success']): Siempre 'success'
        results (Optional[int]): Número de elementos cuando ``data`` es una lista
        data (T): Contenido de la respuesta
    """
    status: Literal["success"] = "success"
    results: Optional[int] = None
    data: T


def envelope(data, results: int | None = None) -> dict:
    """Construye el sobre de respuesta; ``results`` se calcula solo para listas."""
    if results is None and isinstance(data, list):
        results = len(data)
    return {"status": "success", "results": results, "data": data}
