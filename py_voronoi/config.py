"""Configuration management."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # API
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    # Canvas
    default_width: int = Field(default=800, description="Default canvas width")
    default_height: int = Field(default=600, description="Default canvas height")
    max_canvas_size: int = Field(
        default=4096, description="Largest rendered width or height in pixels"
    )

    # Sites
    default_site_count: int = Field(default=30, description="Sites placed by a random layout")
    random_site_margin: float = Field(
        default=20.0, description="Distance kept between random sites and the canvas edge"
    )
    pick_radius: float = Field(default=10.0, description="Max distance for picking a site")
    max_sites: int = Field(default=500, description="Maximum sites accepted per request")

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
