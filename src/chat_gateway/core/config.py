"""
Configuration settings for the Chat Gateway.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Chat Gateway configuration loaded from environment variables.

    For local development, values can also be placed in a .env file.
    The CLI overrides host, port, upstream URL and debug at startup.
    """
    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Service settings
    service_name: str = "chat-gateway"
    host: str = "0.0.0.0"
    service_port: int = 8081
    debug: bool = False

    # Upstream pub/sub service
    pubsub_url: str = "http://localhost:8080"
    publish_timeout: float = 5.0  # seconds
    connect_timeout: float = 5.0  # seconds

    # Static frontend (relative to the working directory)
    index_file: str = "../chatapp-ui-frontend/index.html"

    # Stream settings
    disconnect_poll_interval: float = 0.5  # seconds
    stream_ping_interval: int = 15  # seconds


# Global settings instance
settings = Settings()
