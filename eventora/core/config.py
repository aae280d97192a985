from pydantic_settings import BaseSettings
from typing import Optional, List


class Settings(BaseSettings):
    """Application settings with type-safe configuration management."""

    # Database Configuration
    DATABASE_URL: str = "postgresql+asyncpg://postgres:postgres@db:5432/eventora"

    # Identity provider (Supabase) Configuration
    SUPABASE_URL: str = ""
    SUPABASE_JWT_SECRET: str
    SUPABASE_JWT_AUDIENCE: str = "authenticated"
    JWT_ALGORITHM: str = "HS256"

    # AI Provider Configuration
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.5-flash"
    HUGGINGFACE_API_KEY: Optional[str] = None
    HUGGINGFACE_API_URL: str = "https://router.huggingface.co/hf-inference/models"
    HUGGINGFACE_MODEL: str = "stabilityai/stable-diffusion-xl-base-1.0"
    UNSPLASH_ACCESS_KEY: Optional[str] = None
    UNSPLASH_API_URL: str = "https://api.unsplash.com"
    AI_CACHE_TTL: int = 3600

    # Cache Configuration
    CACHE_BACKEND: str = "memory"
    REDIS_URL: str = "redis://redis:6379/0"
    EVENTS_CACHE_TTL: int = 60

    # Uploads
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_SIZE: int = 5 * 1024 * 1024

    DEFAULT_TIMEZONE: str = "Asia/Kolkata"

    # CORS Configuration
    ALLOWED_ORIGINS: str = "http://localhost:3000"

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    AI_RATE_LIMIT: str = "10/minute"

    # Environment
    ENVIRONMENT: str = "development"

    # Logging
    LOG_LEVEL: Optional[str] = None
    LOG_FILE: str = "logs/app.log"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def allowed_origins_list(self) -> List[str]:
        """Convert comma-separated ALLOWED_ORIGINS string to list."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]


# Create a single instance to be imported throughout the app
settings = Settings()
