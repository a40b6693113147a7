import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from safebox.api.v1.endpoints.activity import router as activity_router
from safebox.api.v1.endpoints.file import router as file_router
from safebox.api.v1.endpoints.stats import router as stats_router
from safebox.api.v1.endpoints.user import router as user_router
from safebox.core.config import settings
from safebox.core.errors import register_exception_handlers
from safebox.core.storage import UPLOAD_DIR
from safebox.db.models import activity, file, user  # noqa: F401 - register tables
from safebox.db.session import Base, engine

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.PROJECT_NAME)
api_prefix = settings.API_STR

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["Content-Type", "x-user-id"],
)
register_exception_handlers(app)

# Register routers
app.include_router(user_router, prefix=f"{api_prefix}/users", tags=["users"])
app.include_router(file_router, prefix=f"{api_prefix}/files", tags=["files"])
app.include_router(activity_router, prefix=api_prefix, tags=["activity"])
app.include_router(stats_router, prefix=api_prefix, tags=["stats"])

UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=UPLOAD_DIR), name="uploads")


@app.on_event("startup")
async def startup():
    # Without a database there is nothing to serve
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except (SQLAlchemyError, OSError):
        logger.critical("Could not connect to the database at startup", exc_info=True)
        raise SystemExit(1)
    logger.info("Startup completed. Database tables ready, uploads in %s", UPLOAD_DIR.resolve())


@app.on_event("shutdown")
async def shutdown():
    await engine.dispose()


@app.get("/health")
async def health():
    return {"success": True, "status": "ok"}
