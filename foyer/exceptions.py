from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import IntegrityError, DBAPIError
import logging
import re

from foyer.config import settings

logger = logging.getLogger(__name__)


# =========================================================
# EXCEPCIONES DE DOMINIO
# =========================================================

class AppError(Exception):
    """Error base de la aplicación: lleva su código HTTP y un mensaje para el cliente."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Entrada mal formada o invariante violado."""
    status_code = 400


class CapacityError(ValidationError):
    """Se intenta superar la capacidad de una chambre."""


class NotFoundError(AppError):
    status_code = 404


class UniquenessConflict(AppError):
    """Valor duplicado en un campo único (email, teléfono, CIN, clave compuesta...)."""

    status_code = 400

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class AuthError(AppError):
    status_code = 401


class PermissionDenied(AppError):
    status_code = 403


# Mensajes por constraint para los IntegrityError que escapan a las pre-validaciones
CONSTRAINT_MESSAGES = {
    "uq_resident_email": ("email", "Un stagiaire avec cet email existe déjà"),
    "uq_resident_identifier": ("identifier", "Un stagiaire avec cet identifiant existe déjà"),
    "uq_resident_telephone": ("telephone", "Ce numéro de téléphone est déjà utilisé"),
    "uq_resident_phone_number": ("phone_number", "Ce numéro de téléphone est déjà utilisé"),
    "uq_resident_cin_number": ("cin_number", "Ce numéro de CIN est déjà utilisé"),
    "uq_room_number": ("number", "Une chambre avec ce numéro existe déjà"),
    "uq_room_number_floor": ("number", "Une chambre avec ce numéro existe déjà à cet étage"),
    "uq_staff_identifier": ("identifier", "Un employé avec cet identifiant existe déjà"),
    "uq_staff_email": ("email", "Un employé avec cet email existe déjà"),
    "uq_staff_phone": ("phone", "Un employé avec ce téléphone existe déjà"),
    "uq_staff_name_hire_date": ("first_name", "Un employé avec ce nom et cette date d'embauche existe déjà"),
    "uq_schedule_staff_weekday": ("weekday", "Ce jour est déjà planifié pour cet employé"),
    "uq_user_email": ("email", "Un utilisateur avec cet email existe déjà"),
}

# En SQLite el mensaje no trae el nombre de la constraint, sino las columnas
COLUMN_MESSAGES = {
    "resident.email": "uq_resident_email",
    "resident.identifier": "uq_resident_identifier",
    "resident.telephone": "uq_resident_telephone",
    "resident.phone_number": "uq_resident_phone_number",
    "resident.cin_number": "uq_resident_cin_number",
    "room.number": "uq_room_number",
    "staff.identifier": "uq_staff_identifier",
    "staff.email": "uq_staff_email",
    "staff.phone": "uq_staff_phone",
    "staff.first_name": "uq_staff_name_hire_date",
    "schedule_entry.staff_id": "uq_schedule_staff_weekday",
    "user.email": "uq_user_email",
}


def translate_integrity_error(exc: IntegrityError) -> AppError:
    """Convierte un IntegrityError de la BD en el error de dominio correspondiente."""
    error_message = str(exc.orig).lower() if getattr(exc, "orig", None) is not None else str(exc).lower()

    if "unique" in error_message or "duplicate key" in error_message:
        constraint_name = ""
        match = re.search(r'constraint ["\']?([a-z0-9_]+)["\']?', error_message)
        if match:
            constraint_name = match.group(1)
        else:
            match = re.search(r'unique constraint failed: ([a-z0-9_.]+)', error_message)
            if match:
                constraint_name = COLUMN_MESSAGES.get(match.group(1), "")

        if constraint_name in CONSTRAINT_MESSAGES:
            field, message = CONSTRAINT_MESSAGES[constraint_name]
            return UniquenessConflict(field, message)
        return UniquenessConflict("", "Un enregistrement avec ces données existe déjà")

    if "foreign key" in error_message:
        return ValidationError("Référence invalide vers un autre enregistrement")

    if "not-null" in error_message or "not null" in error_message:
        return ValidationError("Champs obligatoires manquants")

    return ValidationError("Erreur d'intégrité dans la base de données")


def _envelope(status_code: int, message: str, detail: str | None = None) -> JSONResponse:
    content = {
        "status": "fail" if status_code < 500 else "error",
        "message": message,
    }
    if detail and settings.is_development:
        content["error"] = detail
    return JSONResponse(status_code=status_code, content=content)


def setup_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        logger.warning(f"{exc.__class__.__name__}: {exc.message}", extra={"path": request.url.path})
        return _envelope(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Solo loguear como ERROR si es un error del servidor (5xx)
        if exc.status_code >= 500:
            logger.error(f"HTTP Exception: {exc.status_code} - {exc.detail}")
        elif exc.status_code >= 400:
            logger.warning(f"HTTP Exception: {exc.status_code} - {exc.detail}")

        return _envelope(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # Errores de validación son errores del cliente, no del servidor
        logger.warning(f"Validation Error: {exc.errors()}")
        errors = exc.errors()
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{location}: {first.get('msg')}" if location else first.get("msg")
        else:
            message = "Données invalides"
        return _envelope(400, message)

    @app.exception_handler(IntegrityError)
    async def integrity_exception_handler(request: Request, exc: IntegrityError):
        translated = translate_integrity_error(exc)
        logger.error(f"Database Integrity Error: {exc.orig}")
        return _envelope(translated.status_code, translated.message)

    @app.exception_handler(DBAPIError)
    async def db_exception_handler(request: Request, exc: DBAPIError):
        logger.error(f"Database Error: {str(exc)}")
        return _envelope(500, "Erreur de base de données", str(exc))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unexpected Error: {str(exc)}", exc_info=True)
        return _envelope(500, "Une erreur interne est survenue", str(exc))
