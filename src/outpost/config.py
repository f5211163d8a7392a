"""Configuration management using Pydantic settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Simulation settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="OUTPOST_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # World geometry
    world_width: float = 4000.0
    world_height: float = 4000.0
    grid_size: float = 50.0

    # Fixed-timestep cadences (milliseconds of game time)
    frame_ms: float = 16.0
    structure_interval_ms: float = 100.0
    clock_interval_ms: float = 1000.0

    # Day/night cycle length in clock ticks
    cycle_duration: int = 30

    # Camera viewport, used for "on-screen" checks
    viewport_width: float = 1200.0
    viewport_height: float = 800.0

    # Real-time runner: upper bound on frames simulated per advance() call
    max_frames_per_advance: int = 10


settings = Settings()
