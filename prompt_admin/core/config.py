from functools import lru_cache
from pydantic_settings import BaseSettings
from pydantic import Field, AliasChoices


class Settings(BaseSettings):
    # Application
    app_name: str = Field(default="Prompt SDR Admin", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    environment: str = Field(default="development", description="Environment (development/staging/production)")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8005, description="Server port")

    # Database - accept both uppercase and lowercase
    database_url: str = Field(
        ...,
        validation_alias=AliasChoices('database_url', 'DATABASE_URL'),
        description="PostgreSQL connection URL"
    )
    db_pool_size: int = Field(default=5, description="Database connection pool size")
    db_max_overflow: int = Field(default=10, description="Max overflow connections")
    db_auto_create: bool = Field(default=True, description="Create the prompt table on startup if missing")
    prompt_table: str = Field(default="g2d_systemprompt", description="Table holding the SDR prompt record")

    # Auth provider (Supabase / GoTrue)
    supabase_url: str = Field(
        default="",
        validation_alias=AliasChoices('supabase_url', 'SUPABASE_URL'),
        description="Supabase project URL"
    )
    supabase_anon_key: str = Field(
        default="",
        validation_alias=AliasChoices('supabase_anon_key', 'SUPABASE_ANON_KEY'),
        description="Supabase anon (public) API key"
    )
    session_cookie_name: str = Field(default="sb-access-token", description="Cookie carrying the access token")
    session_cookie_secure: bool = Field(default=False, description="Send the session cookie over HTTPS only")
    login_path: str = Field(default="/login", description="Route unauthenticated callers are sent to")

    # Security
    cors_origins: str = Field(default="*", description="Comma-separated list of allowed CORS origins")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",")]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()


# Convenience access
settings = get_settings()
