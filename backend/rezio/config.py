from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Rezio Zoning Engine"
    debug: bool = True
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]
    rules_path: str | None = None  # JSON file with extra jurisdiction rule sets
    tasks_path: str | None = None  # JSON file backing the requirement task registry
    street_proximity_ft: float = 50.0  # edges this close to the street point count as street-facing

    model_config = SettingsConfigDict(env_prefix="REZIO_", env_file=".env", env_file_encoding="utf-8")


settings = Settings()
