"""Configuration management."""

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Library settings pulled from VORONOI3D_* environment variables."""

    # Geometry
    epsilon: float = Field(default=1e-6, gt=0, description="Tolerance for every side/coincidence test")
    out_of_bounds_policy: Literal["reject", "skip"] = Field(
        default="reject", description="Reject sites outside the box, or skip them with a warning"
    )

    # Construction
    max_workers: int = Field(default=1, ge=1, description="Threads used to build cells")

    # Site generation
    default_seed: str = Field(default="default", description="Seed of the default PRNG")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "console"] = Field(default="json", description="Logging format")

    class Config:
        env_prefix = "VORONOI3D_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Instantiate singleton settings object
settings = Settings()


def resolve(value: Optional[object], name: str):
    """Return `value`, or the settings field `name` when value is None."""
    return getattr(settings, name) if value is None else value
