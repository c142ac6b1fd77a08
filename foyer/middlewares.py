from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from foyer.config import settings
import time
import logging
from collections import defaultdict
from datetime import datetime, timedelta

LOGIN_PATH = "/api/v1/auth/login"
LOGIN_ATTEMPTS_PER_MINUTE = 5
LOGIN_WINDOW = timedelta(minutes=1)


class LoginRateLimiter:
    """
    Rate limiting simple en memoria por IP. Las IPs sin intentos dentro de la
    ventana se eliminan para que el diccionario no crezca sin límite.
    """

    def __init__(self, limit: int = LOGIN_ATTEMPTS_PER_MINUTE, window: timedelta = LOGIN_WINDOW):
        self.limit = limit
        self.window = window
        self.attempts = defaultdict(list)

    def _prune(self, now: datetime) -> None:
        for ip in list(self.attempts):
            recent = [attempt for attempt in self.attempts[ip] if now - attempt < self.window]
            if recent:
                self.attempts[ip] = recent
            else:
                del self.attempts[ip]

    def allow(self, ip: str, now: datetime | None = None) -> bool:
        """Registra el intento y devuelve False si la IP superó el límite."""
        now = now or datetime.now()
        self._prune(now)
        if len(self.attempts.get(ip, ())) >= self.limit:
            return False
        self.attempts[ip].append(now)
        return True


def setup_middlewares(app: FastAPI):
    # GZIP Compression - comprime respuestas > 1KB
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    origins = settings.cors_origin_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # El navegador rechaza credenciales con origen comodín
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    logger = logging.getLogger("uvicorn.error")
    login_limiter = LoginRateLimiter()

    @app.middleware("http")
    async def rate_limit_and_timing(request: Request, call_next):
        # Rate limiting solo para el login
        if request.url.path == LOGIN_PATH and request.method == "POST":
            client_ip = request.client.host if request.client else "unknown"
            if not login_limiter.allow(client_ip):
                return JSONResponse(
                    status_code=429,
                    content={"status": "fail", "message": "Trop de tentatives de connexion. Réessayez dans une minute."}
                )

        # Timing middleware
        start = time.time()
        resp = await call_next(request)
        dur = (time.time() - start) * 1000
        logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, resp.status_code, dur)
        return resp
