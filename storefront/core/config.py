"""
Core configuration and settings for the Storefront Service
Following FastAPI best practices for configuration management
"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Service information
    service_name: str = Field(default="storefront-service")
    service_version: str = Field(default="1.0.0")
    api_version: str = Field(default="1.0.0")
    environment: str = Field(default="development")

    # Server configuration
    port: int = Field(default=4000)
    host: str = Field(default="0.0.0.0")

    # Database configuration
    mongodb_host: str = Field(default="localhost")
    mongodb_port: int = Field(default=27017)
    mongodb_username: Optional[str] = Field(default=None)
    mongodb_password: Optional[str] = Field(default=None)
    mongodb_database: str = Field(default="storefront")

    @property
    def mongodb_url(self) -> str:
        """Construct MongoDB connection URL"""
        if self.mongodb_username and self.mongodb_password:
            return (
                f"mongodb://{self.mongodb_username}:{self.mongodb_password}"
                f"@{self.mongodb_host}:{self.mongodb_port}/{self.mongodb_database}?authSource=admin"
            )
        return f"mongodb://{self.mongodb_host}:{self.mongodb_port}/{self.mongodb_database}"

    # Logging configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")
    log_to_file: bool = Field(default=False)
    log_to_console: bool = Field(default=True)
    log_file_path: str = Field(default="logs/storefront-service.log")

    # JWT Authentication configuration
    jwt_secret: str = Field(default="your_jwt_secret_key")
    jwt_algorithm: str = Field(default="HS256")

    # Catalog behaviour
    default_page_size: int = Field(default=8, ge=1)
    max_page_size: int = Field(default=100, ge=1)
    review_update_max_retries: int = Field(default=3, ge=1)


# Global config instance
config = Config()
