from pathlib import Path
from typing import Optional

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

import os

from ..core.options import PackingOptions, PartitionOptions

# Explicitly load .env for local/dev environments only if values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from ASSETWHEEL_* environment variables."""

    model_config = SettingsConfigDict(env_prefix="ASSETWHEEL_", env_file_encoding="utf-8", extra="ignore")

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (console or json)")

    # Layout Configuration
    disk_radius: float = Field(default=200.0, gt=0, description="Radius of the layout disk")
    circle_segments: int = Field(default=160, ge=3, description="Vertices of the disk polygon")
    max_seed_search: int = Field(default=80, ge=1, description="Group seed search trials")
    coverage_threshold: float = Field(default=0.995, ge=0, le=1, description="Coverage early-exit threshold")
    partition_seed: int = Field(default=0, description="Seed of the Voronoi layout")
    packing_seed: Optional[int] = Field(default=None, description="Seed of the packing layout (derived if unset)")
    min_circle_radius: float = Field(default=27.0, gt=0, description="Smallest packed circle radius")
    max_circle_radius: float = Field(default=78.0, gt=0, description="Largest packed circle radius")

    def partition_options(self, **overrides) -> PartitionOptions:
        """Partition options seeded from these settings."""
        values = dict(
            disk_radius=self.disk_radius,
            circle_segments=self.circle_segments,
            max_seed_search=self.max_seed_search,
            coverage_threshold=self.coverage_threshold,
            seed=self.partition_seed,
        )
        values.update(overrides)
        return PartitionOptions(**values)

    def packing_options(self, **overrides) -> PackingOptions:
        """Packing options seeded from these settings."""
        values = dict(
            disk_radius=self.disk_radius,
            seed=self.packing_seed,
            min_radius=self.min_circle_radius,
            max_radius=self.max_circle_radius,
        )
        values.update(overrides)
        return PackingOptions(**values)


# Instantiate singleton settings object
settings = Settings()
