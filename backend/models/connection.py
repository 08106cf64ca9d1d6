"""Pydantic schemas for the catalog database connection."""
from typing import Optional, Literal
from pydantic import BaseModel, Field


class ConnectionRequest(BaseModel):
    db_type: Literal["postgresql"] = Field("postgresql", description="Catalog engine type")

    # A full SQLAlchemy URL takes precedence over the individual parts
    url: Optional[str] = Field(None, description="SQLAlchemy database URL")

    host: Optional[str] = Field("localhost", description="Database host")
    port: Optional[int] = Field(5432, description="Database port")
    database: Optional[str] = Field(None, description="Database name")
    username: Optional[str] = Field(None, description="Username")
    password: Optional[str] = Field(None, description="Password")

    def get_sqlalchemy_url(self) -> str:
        if self.url:
            return self.url
        return (
            f"postgresql+psycopg2://{self.username or 'postgres'}:{self.password or ''}"
            f"@{self.host}:{self.port or 5432}/{self.database}"
        )

    @classmethod
    def from_settings(cls, settings) -> "ConnectionRequest":
        return cls(
            url=settings.DATABASE_URL or None,
            host=settings.DB_HOST,
            port=settings.DB_PORT,
            database=settings.DB_NAME or None,
            username=settings.DB_USER,
            password=settings.DB_PASSWORD,
        )
