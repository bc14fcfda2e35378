"""Application entry point for the Health Calculation API.

Defines the FastAPI app, middleware and exception handlers and includes the
routers from the `api` package. The `lifespan` handler creates the snapshot
tables on startup.
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from api.health import router as health_router
from api.snapshots import router as snapshots_router
from core.error_handlers import register_exception_handlers
from core.exceptions import DatabaseError
from core.logger import get_logger
from data.regions import REGION_TABLE_VERSION
from database import init_db
from database.deps import get_db_read

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create database tables before serving requests."""
    init_db()
    logger.info("Health Calculation API started (region tables %s)", REGION_TABLE_VERSION)
    yield


app = FastAPI(title="Health Calculation API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log incoming requests and their responses."""
    logger.info("%s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("Request error: %s %s", request.method, request.url.path)
        raise
    logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
    return response


@app.get("/health")
def health(db: Session = Depends(get_db_read)):
    """Return service status and database connectivity.

    Raises:
        DatabaseError: If the database cannot be reached.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.exception("Health check failed")
        raise DatabaseError("Database health check failed", operation="health_check") from exc
    return {"status": "healthy", "database": "connected", "region_tables": REGION_TABLE_VERSION}


app.include_router(health_router)
app.include_router(snapshots_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
