"""Configuration models for the API."""

from pydantic import BaseModel, Field
import os

from ...utils.config import Config


class APIConfig(BaseModel):
    """API configuration settings."""

    # Server settings
    host: str = Field(default="0.0.0.0", description="Host to bind to")
    port: int = Field(default=3000, description="Port to bind to")
    log_level: str = Field(default="INFO", description="Logging level")

    # Template endpoints
    template_path: str = Field(default="template.html", description="Template served by GET / and /download")
    download_filename: str = Field(default="newsletter.html", description="Default attachment filename")

    # Request limits
    max_body_size_mb: int = Field(default=50, description="Maximum request body size in MB")

    # Transform settings
    id_prefix: str = Field(default=Config.ID_PREFIX, min_length=1, description="Prefix of auto-generated ids to remap")
    new_id_prefix: str = Field(default=Config.NEW_ID_PREFIX, description="Prefix of generated replacement ids")

    # Security
    cors_origins: list = Field(default=["*"], description="CORS allowed origins")

    @property
    def max_body_size_bytes(self) -> int:
        return self.max_body_size_mb * 1024 * 1024

    @classmethod
    def from_env(cls) -> "APIConfig":
        """Create config from environment variables."""
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            template_path=os.getenv("TEMPLATE_PATH", "template.html"),
            download_filename=os.getenv("DOWNLOAD_FILENAME", "newsletter.html"),
            max_body_size_mb=int(os.getenv("MAX_BODY_SIZE_MB", "50")),
            id_prefix=os.getenv("ID_PREFIX", Config.ID_PREFIX),
            new_id_prefix=os.getenv("NEW_ID_PREFIX", Config.NEW_ID_PREFIX),
            cors_origins=os.getenv("CORS_ORIGINS", "*").split(","),
        )
