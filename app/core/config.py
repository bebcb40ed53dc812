from pydantic_settings import BaseSettings
from typing import List
import os
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    # App Settings
    APP_NAME: str = os.getenv("APP_NAME", "CrownSide")
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:5173")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # MongoDB Settings
    MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    DB_NAME: str = os.getenv("DB_NAME", "crownside_db")

    # JWT Auth
    SECRET_KEY: str = os.getenv("SECRET_KEY", "your_secret_key_here")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "10080"))

    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",
    ]

    # Calendar grid (6 AM to 11 PM, 80px per hour)
    GRID_START_HOUR: int = int(os.getenv("GRID_START_HOUR", "6"))
    GRID_END_HOUR: int = int(os.getenv("GRID_END_HOUR", "23"))
    HOUR_HEIGHT_PX: int = int(os.getenv("HOUR_HEIGHT_PX", "80"))

    # Bookings
    DEFAULT_BOOKING_DURATION: int = int(os.getenv("DEFAULT_BOOKING_DURATION", "60"))

    # Forum comments
    COMMENT_MAX_DEPTH: int = int(os.getenv("COMMENT_MAX_DEPTH", "3"))
    COMMENT_PAGE_LIMIT: int = int(os.getenv("COMMENT_PAGE_LIMIT", "50"))

    # Python client
    API_BASE_URL: str = os.getenv("API_BASE_URL", "http://localhost:8000/api/v1")
    SESSION_FILE: str = os.getenv("SESSION_FILE", os.path.expanduser("~/.crownside/session.json"))

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
