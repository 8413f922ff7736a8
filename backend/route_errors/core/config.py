from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # FastAPI
    APP_NAME: str = "Route Errors Demo"
    API_V1_STR: str = "/api/v1"

    # DB; the in-memory default is shared across threads via StaticPool
    DATABASE_URL: str = "sqlite://"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Mount the internal router, which exposes failure detail under "internal_error".
    # Only enable for trusted deployments.
    INTERNAL_ROUTES_ENABLED: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
    )


settings = Settings()
