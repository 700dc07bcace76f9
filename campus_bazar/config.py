from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="CAMPUS_BAZAR_"
    )

    log_level: str = "INFO"

    # Listing wizard
    max_images: int = Field(default=5, ge=1, le=5)
    submission_timeout_seconds: float = 10.0

    # Mock listing backend
    simulated_latency_seconds: float = 1.5
    listing_id_prefix: str = "item-"

    # Persisted sign-in (the browser kept this under localStorage["campusBazarUser"])
    auth_store_path: str = ".campus_bazar_user.json"

    # Preview URIs handed to the front-end
    preview_uri_scheme: str = "blob"
    preview_uri_origin: str = "campus-bazar"


settings = Settings()
