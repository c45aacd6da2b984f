"""Configuration settings for the LHLS faker."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # App
    app_name: str = "LHLS Faker"
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"

    # Window
    future_horizon_sec: float = 5.0  # How much time to project into the future
    window_margin_segments: int = 3  # Trailing margin, in target durations

    # Segment delivery
    min_transfer_sec: float = 1.0
    chunk_size: int = 16384

    class Config:
        env_file = ".env"
        env_prefix = "LHLS_"


settings = Settings()
