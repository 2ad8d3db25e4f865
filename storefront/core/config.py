from typing import Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # DB
    DATABASE_URL: str = "sqlite:///./storefront.db"

    # Security / JWT
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # Password reset
    RESET_TOKEN_EXPIRE_MINUTES: int = 15
    MIN_PASSWORD_LENGTH: int = 6
    FRONTEND_URL: str = "http://localhost:3000"

    # Email
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    EMAIL_FROM: str = "no-reply@storefront.local"
    SUPPORT_EMAIL: str = "support@storefront.local"
    CUSTOM_REQUEST_EMAIL: Optional[str] = None
    INQUIRY_EMAIL: Optional[str] = None

    # Geo
    GEO_FALLBACK_IP: str = "122.160.0.1"
    GEOIP_DATABASE_PATH: Optional[str] = None

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
