import uvicorn
from fastapi import FastAPI
from foyer.middlewares import setup_middlewares
from foyer.exceptions import setup_exception_handlers
from foyer.routers import auth, users, residents, rooms, staff, schedules, dashboard
from foyer.logging_config import logger

API_PREFIX = "/api/v1"

app = FastAPI(title="Foyer API", version="1.0.0")

setup_middlewares(app)
setup_exception_handlers(app)

@app.on_event("startup")
async def startup_event():
    logger.info("Application starting", extra={"version": "1.0.0"})

app.include_router(auth.router, prefix=API_PREFIX)
app.include_router(users.router, prefix=API_PREFIX)
app.include_router(residents.router, prefix=API_PREFIX)
app.include_router(rooms.router, prefix=API_PREFIX)
app.include_router(staff.router, prefix=API_PREFIX)
app.include_router(schedules.router, prefix=API_PREFIX)
app.include_router(dashboard.router, prefix=API_PREFIX)


@app.get("/")
def root():
    return {"ok": True, "docs": "/docs"}



if __name__ == "__main__":
    uvicorn.run("main:app", reload=True, port=8001)
