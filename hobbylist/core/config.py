# hobbylist/core/config.py
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,  # .env keys may be upper or lower case
        extra="forbid",        # unknown variables are rejected
    )

    # ------------------------------------------------------------
    # General
    # ------------------------------------------------------------
    APP_NAME: str = "HobbyList"
    APP_ENV: str = "development"
    SECRET_KEY: str = Field(..., min_length=16)
    LOG_LEVEL: str = "INFO"

    # Base URL of the web frontend, verification/reset links point here
    FRONTEND_URL: str = "http://localhost:3000/"

    # Token lifetimes
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # "argon2" | "bcrypt"
    PASSWORD_SCHEME: str = "argon2"

    # ------------------------------------------------------------
    # Database
    # ------------------------------------------------------------
    DB_URL: str = "sqlite:///./hobbylist.db"

    # ------------------------------------------------------------
    # Mail (Resend)
    # ------------------------------------------------------------
    RESEND_API_KEY: str = ""
    MAIL_FROM: str = "HobbyList <onboarding@resend.dev>"
    # Sandbox accounts can only deliver to the owner's inbox
    MAIL_OVERRIDE_TO: Optional[str] = None


# ------------------------------------------------------------
# Global settings instance
# ------------------------------------------------------------
settings = Settings()
