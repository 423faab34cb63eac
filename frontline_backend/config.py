"""
Configuration management for Frontline Backend.
Uses pydantic-settings for environment variable parsing.
"""

from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class UnitType(BaseModel):
    """Stat table entry for a recruitable unit type."""

    name: str
    hp: float
    attack: float
    defense: float
    speed: float
    cost: int


def _default_unit_types() -> dict[str, UnitType]:
    return {
        "inf": UnitType(name="Infantry", hp=100, attack=12, defense=20, speed=0.2, cost=100),
        "tank": UnitType(name="Tank", hp=150, attack=30, defense=15, speed=0.4, cost=300),
    }


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database (win statistics)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./frontline.db",
        description="SQLAlchemy async connection URL for the stats store"
    )
    db_pool_size: int = Field(
        default=5,
        description="Database connection pool size"
    )
    db_max_overflow: int = Field(
        default=10,
        description="Maximum database connections above pool size"
    )

    # Debug
    debug_mode: bool = Field(
        default=False,
        description="Enable debug endpoints"
    )

    # Tick Engine
    tick_rate_ms: int = Field(
        default=200,
        description="Tick interval in milliseconds"
    )

    # Map
    grid_width: int = Field(default=20, gt=1)
    grid_height: int = Field(default=12, gt=0)

    # Units
    unit_types: dict[str, UnitType] = Field(default_factory=_default_unit_types)
    initial_unit_type: str = Field(default="inf")
    initial_units_per_faction: int = Field(
        default=6,
        description="Units seeded for each faction when a match starts"
    )
    initial_column_offset: int = Field(
        default=2,
        ge=0,
        description="Distance from a faction's own map edge to its seeded column"
    )
    initial_row_start: int = Field(default=2)
    recruit_column_offset: int = Field(
        default=1,
        ge=0,
        description="Distance from a faction's own map edge to its recruit column"
    )
    max_path_length: int = Field(
        default=16,
        description="Longest route (in steps) the pathfinder will search"
    )

    # Economy
    starting_political_points: float = Field(default=50.0)
    starting_manpower: float = Field(default=5000.0)
    starting_equipment: float = Field(default=2000.0)
    political_points_per_tick: float = Field(default=0.1)
    manpower_per_tick: float = Field(default=0.0)
    equipment_per_tick: float = Field(default=1.0)
    recruit_manpower_cost: float = Field(default=100.0)

    # AI fallback
    ai_move_chance: float = Field(
        default=0.05,
        ge=0.0,
        le=1.0,
        description="Per-tick chance that an unattended idle unit advances"
    )

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    static_dir: str = Field(
        default="public",
        description="Directory of static client files served at /"
    )
    send_timeout_seconds: float = Field(default=5.0)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Use dependency injection in FastAPI routes.
    """
    return Settings()
