# app/main.py
import logging
import psutil # For system metrics in health check
import time   # For uptime calculation
from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from typing import Dict, Any
from datetime import datetime, timedelta, timezone

from app.core.config import settings, PROJECT_NAME, API_V1_PREFIX, VERSION, DEBUG
from app.core.exceptions import StudentValidationError, DuplicateStudentFieldError
from app.db.database import connect_to_mongo, close_mongo_connection, check_database_health
from app.db.crud import ensure_student_indexes

from app.api.v1.endpoints.students import router as students_router
from app.api.v1.endpoints.districts import router as districts_router

logger = logging.getLogger(__name__)

# Track application start time for uptime calculation
APP_START_TIME = time.time()

app = FastAPI(
    title=PROJECT_NAME,
    version=VERSION,
    description="API for managing student records",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Event Handlers for DB Connection ---
@app.on_event("startup")
async def startup_event():
    """Connect to MongoDB and ensure the student indexes on application startup."""
    logger.info("Executing startup event: Connecting to database...")
    connected = await connect_to_mongo()
    if not connected:
        logger.critical("FATAL: Database connection failed on startup. Application might not function correctly.")
        return
    logger.info("Startup event: Database connection successful. Ensuring database indexes...")
    try:
        await ensure_student_indexes()
        logger.info("Database indexes ensured.")
    except Exception as e:
        # Without the unique indexes, code/email uniqueness is only checked by the service
        logger.error(f"Error ensuring database indexes: {e}", exc_info=True)

@app.on_event("shutdown")
async def shutdown_event():
    """Disconnect from MongoDB on application shutdown."""
    logger.info("Executing shutdown event: Disconnecting from database...")
    await close_mongo_connection()

# --- Exception Handlers ---
@app.exception_handler(StudentValidationError)
async def student_validation_error_handler(request: Request, exc: StudentValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": "Validation failed",
            "errors": {field: {"message": message} for field, message in exc.errors.items()},
        },
    )

@app.exception_handler(DuplicateStudentFieldError)
async def duplicate_student_field_handler(request: Request, exc: DuplicateStudentFieldError):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "message": exc.summary,
            "errors": {exc.field: {"message": exc.field_message}},
        },
    )

@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    content: Dict[str, Any] = {"message": "Internal server error"}
    if DEBUG:
        content["error"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)

# --- API Endpoints ---
@app.get("/", tags=["Root"], include_in_schema=False)
async def read_root():
    """Root endpoint welcome message."""
    return {"message": f"Welcome to {PROJECT_NAME}"}

@app.get("/health", status_code=200, tags=["Health Check"])
async def health_check() -> Dict[str, Any]:
    """
    Health check endpoint that reports:
    - Application status and metrics (uptime, memory)
    - Database connectivity and collections
    """
    db_health = await check_database_health()

    process = psutil.Process()
    memory_info = process.memory_info()

    uptime_seconds = time.time() - APP_START_TIME
    uptime = str(timedelta(seconds=int(uptime_seconds)))

    health_info = {
        "status": "OK",
        "application": {
            "name": PROJECT_NAME,
            "version": VERSION,
            "status": "OK",
            "uptime": uptime,
            "memory_usage": {
                "rss_bytes": memory_info.rss,
                "vms_bytes": memory_info.vms,
                "percent": f"{process.memory_percent():.2f}%"
            }
        },
        "database": db_health,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }

    # Overall status follows the database
    if db_health.get("status") in ("ERROR", "WARNING"):
        health_info["status"] = db_health["status"]

    return health_info

# --- Liveness and Readiness Probes ---
@app.get("/healthz", tags=["Probes"], status_code=status.HTTP_200_OK)
async def liveness_probe():
    """Liveness probe: Checks if the application process is running and responsive."""
    return {"status": "live"}

@app.get("/readyz", tags=["Probes"])
async def readiness_probe(response: Response):
    """Readiness probe: Checks if the application is ready to serve traffic (DB connected)."""
    db_health = await check_database_health()
    if db_health.get("status") == "OK":
        response.status_code = status.HTTP_200_OK
        return {"status": "ready", "database": db_health}
    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {"status": "not_ready", "database": db_health}

# --- Include API Routers ---
app.include_router(students_router, prefix=API_V1_PREFIX)
app.include_router(districts_router, prefix=API_V1_PREFIX)
