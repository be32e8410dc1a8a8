# app/core/config.py
import os
import logging
from dotenv import load_dotenv
from pathlib import Path
from typing import List
from pydantic_settings import BaseSettings

# --- Path Setup & .env Loading ---
# .env lives in the backend project root, two levels up from core
BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_PATH = BASE_DIR / '.env'

if ENV_PATH.is_file():
    load_dotenv(dotenv_path=ENV_PATH)
else:
    # Use print for early config warnings as logger might not be set up yet
    print(f"Warning: .env file not found at {ENV_PATH}. Relying on system environment variables.")

# --- Pydantic Settings Class ---
class Settings(BaseSettings):
    PROJECT_NAME: str = "Student Records API"
    DEBUG: bool = False
    VERSION: str = "0.1.0"
    API_V1_PREFIX: str = "/api/v1"

    # Database Settings
    MONGODB_URL: str = "mongodb://localhost:27017"
    DB_NAME: str = "studentdb"
    MONGODB_TLS: bool = False # Set true for Cosmos DB
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = 10000
    MONGODB_MAX_POOL_SIZE: int = 10

    # Number of times a create regenerates the student code after a collision
    STUDENT_CODE_MAX_ATTEMPTS: int = 5

    # Frontend origins allowed by CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",  # Vite frontend
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ]

# Create an instance of the Settings class
settings = Settings()

# --- Logging Setup ---
LOG_LEVEL_NAME: str = os.getenv("LOG_LEVEL", "WARNING").upper()
if settings.DEBUG:
    LOG_LEVEL_NAME = "DEBUG"

ACTUAL_LOG_LEVEL = getattr(logging, LOG_LEVEL_NAME, logging.WARNING)

logging.basicConfig(
    level=ACTUAL_LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logging.getLogger('uvicorn').setLevel(logging.WARNING)
logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
logging.getLogger('fastapi').setLevel(logging.INFO if settings.DEBUG else logging.WARNING)
logging.getLogger('motor').setLevel(logging.WARNING)
logging.getLogger('pymongo').setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

if settings.STUDENT_CODE_MAX_ATTEMPTS < 1:
    logger.warning(
        f"STUDENT_CODE_MAX_ATTEMPTS={settings.STUDENT_CODE_MAX_ATTEMPTS} is below 1; student creation will always fail."
    )

if settings.DEBUG:
    logger.debug(f"PROJECT_NAME: {settings.PROJECT_NAME}")
    logger.debug(f"API_V1_PREFIX: {settings.API_V1_PREFIX}")
    logger.debug(f"DB_NAME: {settings.DB_NAME}")
    logger.debug(f"MONGODB_TLS: {settings.MONGODB_TLS}")
    logger.debug(f"STUDENT_CODE_MAX_ATTEMPTS: {settings.STUDENT_CODE_MAX_ATTEMPTS}")
    logger.debug(f"CORS_ORIGINS: {settings.CORS_ORIGINS}")

# Aliases for modules that import constants directly
PROJECT_NAME = settings.PROJECT_NAME
DEBUG = settings.DEBUG
VERSION = settings.VERSION
API_V1_PREFIX = settings.API_V1_PREFIX
MONGODB_URL = settings.MONGODB_URL
DB_NAME = settings.DB_NAME
