"""Configuration management."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    # API
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", pattern="^(json|console)$",
                            description="Logging format: json or console")

    # Input limits
    max_vertices: int = Field(default=100, ge=3, description="Maximum polygon vertex count")
    coordinate_limit: int = Field(default=1_000_000, gt=0, description="Maximum absolute coordinate value")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
