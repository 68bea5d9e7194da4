import logging

from fastapi import FastAPI, Request
import uvicorn
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from core.config import settings
from core.errors import NotFound, StoreFailure, ValidationRefusal
from db.database import create_db_and_tables, dispose_engine
from routers.auth import router as auth_router
from routers.bundles import router as bundles_router
from routers.drafts import router as drafts_router
from routers.events import router as events_router
from routers.inventory import router as inventory_router
from routers.live import router as live_router
from routers.users import router as users_router

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_db_and_tables()
    logger.info("[main] %s ready", settings.app_id)
    yield
    await dispose_engine()


app = FastAPI(
    title="Lightwave Rental API",
    description=f"Events, inventory, bundles and crew for {settings.app_id}",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StoreFailure)
async def store_failure_handler(request: Request, exc: StoreFailure):
    return JSONResponse(status_code=503, content={"detail": exc.message})


@app.exception_handler(ValidationRefusal)
async def refusal_handler(request: Request, exc: ValidationRefusal):
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"detail": exc.message})


app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(users_router, prefix="/users", tags=["users"])

app.include_router(events_router, prefix="/events", tags=["events"])
app.include_router(drafts_router, prefix="/drafts", tags=["drafts"])
app.include_router(inventory_router, prefix="/inventory", tags=["inventory"])
app.include_router(bundles_router, prefix="/bundles", tags=["bundles"])

app.include_router(live_router, tags=["live"])

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
