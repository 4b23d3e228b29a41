"""
config/settings.py

- Reads environment variables (and .env) into one application-wide settings object.
- pydantic v2 / pydantic-settings v2.
- The same value can arrive under several names depending on where the app is
  deployed (Supabase dashboard, Vercel integration, Vite/Next front-end builds).
  AliasChoices lists them in priority order; the first one present wins.
"""

from typing import List, Optional, Literal
from pydantic import AliasChoices, Field, field_validator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Placeholder values some hosting dashboards write when a variable is "unset"
_EMPTY_MARKERS = {"", "undefined", "null", "none"}


def _clean(value):
    if value is None:
        return None
    value = str(value).strip()
    if value.lower() in _EMPTY_MARKERS:
        return None
    return value


class Settings(BaseSettings):
    # =========================
    # App / runtime
    # =========================
    ENV: Literal["dev", "stage", "prod"] = "dev"
    APP_TITLE: str = "e-CP MJA API"
    APP_DESCRIPTION: str = "Classe progressive des clubs junior de la MJA"
    APP_VERSION: str = "1.0.0"

    # =========================
    # CORS
    # =========================
    # comma separated string -> List[str]
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, v):
        if isinstance(v, str):
            # "a,b , c" -> ["a","b","c"]
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    # =========================
    # Database (Supabase / PostgreSQL)
    # =========================
    SUPABASE_DB_URL: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "SUPABASE_DB_URL",
            "NEXT_PUBLIC_SUPABASE_DB_URL",
            "VITE_SUPABASE_DB_URL",
            "DATABASE_URL",
            "POSTGRES_URL",
        ),
    )
    SUPABASE_URL: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL", "VITE_SUPABASE_URL"),
    )
    SUPABASE_ANON_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "SUPABASE_ANON_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY", "VITE_SUPABASE_ANON_KEY"
        ),
    )
    DB_CONNECT_TIMEOUT: int = 5

    # JSON file written by PUT /v1/config/connection; wins over the environment
    LOCAL_OVERRIDE_PATH: str = ".ecp_connection.json"
    SEED_LOCAL_DATA: bool = True

    @field_validator("SUPABASE_DB_URL", "SUPABASE_URL", "SUPABASE_ANON_KEY", mode="before")
    @classmethod
    def _strip_placeholders(cls, v):
        return _clean(v)

    @computed_field  # type: ignore[misc]
    @property
    def DATABASE_URL(self) -> Optional[str]:
        """
        SQLAlchemy-ready URL. Supabase and Heroku-style strings start with
        postgres:// which SQLAlchemy no longer accepts.
        """
        return normalize_db_url(self.SUPABASE_DB_URL)

    @computed_field  # type: ignore[misc]
    @property
    def SUPABASE_CONFIGURED(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_ANON_KEY and self.SUPABASE_URL.startswith("http"))

    # =========================
    # LLM (Gemini only)
    # =========================
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_API_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY"),
    )
    LLM_TIMEOUT: int = 25
    LLM_TEMPERATURE: float = 0.7
    LLM_MAX_TOKENS: int = 4096

    @field_validator("GEMINI_API_KEY", mode="before")
    @classmethod
    def _clean_api_key(cls, v):
        return _clean(v)

    # =========================
    # Club rules
    # =========================
    QUIZ_PASS_SCORE: int = 70
    ANNUAL_SESSION_TARGET: int = 20
    LINEAR_PROGRESSION: bool = True
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin"
    TOKEN_TTL_HOURS: int = 12

    # =========================
    # Logging / Misc
    # =========================
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # =========================
    # BaseSettings Config
    # =========================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def normalize_db_url(url: Optional[str]) -> Optional[str]:
    url = _clean(url)
    if not url:
        return None
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


# ✅ shared settings object
settings = Settings()
