from pydantic_settings import BaseSettings
from pydantic import model_validator
from functools import lru_cache


PRODUCTION_ENVIRONMENTS = ("production", "staging")


class Settings(BaseSettings):
    """Deployment settings loaded from environment variables."""

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # Server-Timing
    # None means "follow the environment": enabled outside production.
    SERVER_TIMING_ENABLED: bool | None = None
    SERVER_TIMING_TOTAL: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True

    @model_validator(mode="after")
    def force_debug_off_in_production(self) -> "Settings":
        """Never run with DEBUG on in a production-like environment."""
        if self.is_production:
            self.DEBUG = False
        return self

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() in PRODUCTION_ENVIRONMENTS

    @property
    def server_timing_enabled(self) -> bool:
        """Whether timing entries may be sent for this deployment."""
        if self.SERVER_TIMING_ENABLED is not None:
            return self.SERVER_TIMING_ENABLED
        return not self.is_production


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
