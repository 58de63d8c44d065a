from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    PROJECT_NAME: str = "LinkTrend VOD"
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"
    BACKEND_CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:5000"]

    # Database
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "linktrend"
    DATABASE_URL: Optional[str] = None

    @property
    def async_database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # Sessions
    SESSION_COOKIE_NAME: str = "linktrend_sid"
    SESSION_TTL_DAYS: int = 7
    SESSION_COOKIE_SECURE: bool = False

    # Administrative identity
    ADMIN_EMAIL: str = "admin@system.local"
    ADMIN_NAME: str = "System Administrator"
    ADMIN_USERNAME: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    # Google sign-in
    GOOGLE_CLIENT_ID: Optional[str] = None

    # Bunny storage zone
    BUNNY_STORAGE_ZONE: str = ""
    BUNNY_API_KEY: str = ""
    BUNNY_CDN_HOSTNAME: str = ""
    BUNNY_STORAGE_ENDPOINT: str = "https://storage.bunnycdn.com"
    STORAGE_TIMEOUT_SECONDS: float = 300.0

    # Uploads
    MAX_UPLOAD_BYTES: int = 500 * 1024 * 1024
    FFPROBE_PATH: str = "ffprobe"
    PROBE_TIMEOUT_SECONDS: float = 30.0

    # Rate limiting
    RATE_LIMIT_PER_MINUTE: int = 100
    LOGIN_RATE_LIMIT_PER_MINUTE: int = 30

settings = Settings()
