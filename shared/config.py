"""
Shared Configuration Module

Centralized configuration management for the school simulation using Pydantic Settings.
Supports environment variables, .env files, and runtime overrides.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application-wide configuration settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = Field(default=True, description="Enable debug mode")

    # School
    school_name: str = Field(default="Default", description="Name used when a catalog names no school")
    course_start_offset_days: int = Field(
        default=2, ge=1, description="Days between course creation and course start"
    )
    course_capacity: int = Field(default=3, ge=1, description="Maximum participants per course")

    # Randomness
    random_seed: int | None = Field(
        default=None, description="Seed for the simulation random source (None = unseeded)"
    )

    # Arrivals
    max_participants_arriving: int = Field(
        default=3, ge=1, description="Exclusive upper bound of participants joining per day"
    )
    teacher_join_probability: float = Field(default=0.2, ge=0.0, le=1.0)
    demonstrator_join_probability: float = Field(default=0.1, ge=0.0, le=1.0)
    oo_trainer_join_probability: float = Field(default=0.05, ge=0.0, le=1.0)
    gui_trainer_join_probability: float = Field(default=0.05, ge=0.0, le=1.0)

    # Attrition (percent, compared against randrange(100))
    instructor_leave_percent: int = Field(default=20, ge=-1, le=100)
    participant_leave_percent: int = Field(default=5, ge=-1, le=100)

    # Verification
    verify_invariants: bool = Field(
        default=True, description="Check school invariants after every simulated day"
    )

    # Events
    event_history_limit: int = Field(
        default=1000, ge=1, description="Events kept in the school journal history"
    )

    # Persistence
    snapshot_dir: str = "./snapshots"

    # API Configuration
    api_v1_prefix: str = "/api/v1"
    simulation_service_host: str = "0.0.0.0"
    simulation_service_port: int = 8002

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "text"] = "json"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings singleton
    """
    return Settings()


# Convenience exports
settings = get_settings()
