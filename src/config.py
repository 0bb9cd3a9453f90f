from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./tigertix.sqlite"
    SQLITE_BUSY_TIMEOUT: float = 30.0

    # Security
    JWT_ACCESS_SECRET: str = "tigertix-access-secret-change-in-production"
    JWT_REFRESH_SECRET: str = "tigertix-refresh-secret-change-in-production"
    ALGORITHM: str = "HS256"
    JWT_ISSUER: str = "tigertix-auth"
    JWT_AUDIENCE: str = "tigertix-api"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    BCRYPT_ROUNDS: int = 12

    # Application
    PROJECT_NAME: str = "TigerTix"
    API_PREFIX: str = "/api"
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
