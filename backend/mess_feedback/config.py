from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings."""

    # Database
    database_url: str = Field(default="sqlite+aiosqlite:///./mess_feedback.db")
    database_echo: bool = Field(default=False)

    # Session tokens
    jwt_secret_key: str = Field(default="default_secret_key")
    jwt_algorithm: str = Field(default="HS256")
    token_expire_seconds: int = Field(default=86400)  # 24 hours

    # Password hashing (werkzeug method string, cost fixed per deployment)
    password_hash_method: str = Field(default="scrypt:32768:8:1")

    # CORS
    client_origins: list[str] = Field(default_factory=lambda: ["http://localhost:5173"])

    # Optional admin account created at startup
    admin_email: str = Field(default="")
    admin_password: str = Field(default="")
    admin_name: str = Field(default="Mess Admin")

    log_level: str = Field(default="INFO")

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
