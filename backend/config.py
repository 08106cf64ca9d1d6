"""Application settings loaded from .env file."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Catalog database (DATABASE_URL wins over the individual parts)
    DATABASE_URL: str = ""
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = ""
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    CATALOG_SCHEMA: str = "public"

    # Generated resources
    OUTPUT_DIR: str = "lib/my_app/resources"
    RESOURCE_NAMESPACE: str = "GMiner.Resources"
    REPO_MODULE: str = "GMiner.Repo"
    DATA_LAYER: str = "AshPostgres.DataLayer"
    TIMESTAMP_COLUMNS: str = "inserted_at,updated_at"

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def timestamp_column_pair(self) -> tuple[str, str]:
        cols = [c.strip() for c in self.TIMESTAMP_COLUMNS.split(",") if c.strip()]
        if len(cols) != 2:
            raise ValueError(f"TIMESTAMP_COLUMNS must name exactly two columns, got {cols!r}")
        return cols[0], cols[1]


settings = Settings()
