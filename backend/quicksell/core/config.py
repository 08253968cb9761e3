"""
Centralized application configuration

Values come from environment variables or a .env file next to the backend.

Author: QuickSell
Date: 2025-10-17
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


STORAGE_BACKENDS = ("auto", "remote", "local")


class Settings(BaseSettings):
    """Application configuration"""

    # API Settings
    API_TITLE: str = "QuickSell API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Point of sale, inventory and sales analytics API"
    API_DEBUG: bool = False

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:3000,https://yourdomain.com" or '["http://localhost:3000"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000,http://localhost:5173"

    # Storage
    # auto: remote API when SERVER_URL is set and reachable, local files otherwise
    STORAGE_BACKEND: str = "auto"
    SERVER_URL: Optional[str] = None
    REMOTE_TIMEOUT_SECONDS: float = 5.0
    DATA_DIR: str = "./data"
    SEED_DEMO_SALES: bool = False

    # Dashboard
    LOW_STOCK_ALERT_LIMIT: int = 5

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:3000"]

        # Try JSON parse first (for array format)
        import json
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    def get_storage_backend(self) -> str:
        """Normalized STORAGE_BACKEND, validated against the known backends"""
        backend = (self.STORAGE_BACKEND or "auto").strip().lower()
        if backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"Unknown STORAGE_BACKEND '{self.STORAGE_BACKEND}'. Use one of: {', '.join(STORAGE_BACKENDS)}"
            )
        return backend


settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency returning the process-wide settings"""
    return settings
