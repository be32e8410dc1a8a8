# app/db/database.py
import motor.motor_asyncio
import logging
from typing import Optional, Dict, Any
from datetime import datetime, timezone

from app.core.config import settings, MONGODB_URL, DB_NAME, PROJECT_NAME

logger = logging.getLogger(f"{PROJECT_NAME}.db")

_client: Optional[motor.motor_asyncio.AsyncIOMotorClient] = None
_db: Optional[motor.motor_asyncio.AsyncIOMotorDatabase] = None

def _new_client() -> motor.motor_asyncio.AsyncIOMotorClient:
    return motor.motor_asyncio.AsyncIOMotorClient(
        MONGODB_URL,
        tls=settings.MONGODB_TLS,
        retryWrites=False, # Cosmos DB rejects retryable writes
        serverSelectionTimeoutMS=settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
        maxPoolSize=settings.MONGODB_MAX_POOL_SIZE,
        uuidRepresentation="standard", # Student ids are stored as BSON UUIDs
        appname=PROJECT_NAME,
    )

def _reset() -> None:
    global _client, _db
    _client = None
    _db = None

async def connect_to_mongo() -> bool:
    """Opens the student store. Returns False instead of raising when it is unreachable."""
    global _client, _db
    if _db is not None:
        return True
    if not MONGODB_URL:
        logger.error("MONGODB_URL is empty; student store unavailable.")
        return False

    logger.info(f"Connecting to student store '{DB_NAME}'")
    try:
        _client = _new_client()
        await _client.admin.command("ping")
    except Exception as e:
        logger.error(f"Student store unreachable: {e}", exc_info=True)
        _reset()
        return False
    _db = _client[DB_NAME]
    logger.info(f"Student store '{DB_NAME}' ready.")
    return True

async def close_mongo_connection():
    if _client is None:
        logger.info("Student store was never opened; nothing to close.")
        return
    _client.close()
    _reset()
    logger.info("Student store connection closed.")

def get_database() -> Optional[motor.motor_asyncio.AsyncIOMotorDatabase]:
    if _db is None:
        logger.warning("Student store requested before a successful connect.")
    return _db

async def check_database_health() -> Dict[str, Any]:
    """
    Ping the store and list its collections for /health and /readyz.

    status is OK, WARNING (reachable but the students collection does not
    exist yet; it appears on first insert) or ERROR.
    """
    from app.db.crud import STUDENT_COLLECTION
    expected = [STUDENT_COLLECTION]
    report: Dict[str, Any] = {
        "status": "OK",
        "connected": False,
        "collections": [],
        "expected_collections": expected,
        "missing_collections": [],
        "error": None,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    db_instance = get_database()
    if db_instance is None:
        report["status"] = "ERROR"
        report["error"] = "Student store not connected"
        return report

    try:
        await db_instance.client.admin.command("ping")
        report["connected"] = True
        report["collections"] = await db_instance.list_collection_names()
    except Exception as e:
        logger.error(f"Student store health check failed: {e}", exc_info=True)
        report.update({"status": "ERROR", "connected": False, "error": str(e)})
        return report

    report["missing_collections"] = [name for name in expected if name not in report["collections"]]
    if report["missing_collections"]:
        report["status"] = "WARNING"
        logger.warning(f"Student store reachable but missing collections: {report['missing_collections']}")
    return report
