# 📦 settings.py

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# ─────────────────────────────
# Settings
class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "NightMatch Match Probability"
    version: str = "1.0.0"
    host: str = "0.0.0.0"
    port: int = Field(8000, validation_alias="PORT")
    prometheus_port: int = Field(0, validation_alias="PROMETHEUS_PORT")

    supabase_url: str | None = Field(None, validation_alias=AliasChoices("SUPABASE_URL", "VITE_SUPABASE_URL"))
    supabase_anon_key: str | None = Field(
        None, validation_alias=AliasChoices("SUPABASE_ANON_KEY", "VITE_SUPABASE_ANON_KEY")
    )
    supabase_service_role_key: str | None = Field(None, validation_alias="SUPABASE_SERVICE_ROLE_KEY")

    weights_profile: str = Field("default", validation_alias="NIGHTMATCH_WEIGHTS_PROFILE")
    fetch_retries: int = Field(3, validation_alias="FETCH_RETRIES")
    fetch_retry_delay: float = Field(0.5, validation_alias="FETCH_RETRY_DELAY")


@lru_cache
def get_settings() -> Settings:
    return Settings()
