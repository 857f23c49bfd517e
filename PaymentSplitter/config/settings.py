"""
Settings Module

Environment-driven configuration for the payment splitter.

Environment variables:
    PAYMENT_SPLITTER_TOLERANCE: Allowed post-settlement residual per
        participant (decimal string, default "0.00").
    PAYMENT_SPLITTER_LOG_LEVEL: Logging level name for the CLI
        (default "WARNING").
    PAYMENT_SPLITTER_DATASET: Path of the trip data file used when the CLI
        is run without one.

Functions:
    get_settings: Build a Settings object from the environment.
"""

import logging
import os
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator


ENV_PREFIX = "PAYMENT_SPLITTER_"

# Bundled trip used when nothing else is configured
DEFAULT_DATASET = Path(__file__).resolve().parent.parent / "data" / "savannah_2022.json"


class Settings(BaseModel):
    """Runtime settings for the splitter."""
    tolerance: Decimal = Field(Decimal("0.00"), ge=0, description="Max residual balance after settlement")
    log_level: str = Field("WARNING", description="Logging level name")
    dataset_path: Optional[Path] = Field(None, description="Default trip data file")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level

    def resolved_dataset(self) -> Path:
        """Return the configured dataset path, or the bundled one."""
        return self.dataset_path if self.dataset_path is not None else DEFAULT_DATASET


def get_settings(environ: Optional[dict] = None) -> Settings:
    """
    Build settings from environment variables.

    Args:
        environ: Mapping to read from (default: os.environ).

    Returns:
        Settings: Validated settings.

    Raises:
        ValueError: If a variable holds an invalid value.
    """
    env = os.environ if environ is None else environ
    values = {}

    tolerance = env.get(ENV_PREFIX + "TOLERANCE")
    if tolerance:
        try:
            values["tolerance"] = Decimal(tolerance)
        except InvalidOperation:
            raise ValueError(f"{ENV_PREFIX}TOLERANCE must be a decimal number, got: {tolerance}")

    log_level = env.get(ENV_PREFIX + "LOG_LEVEL")
    if log_level:
        values["log_level"] = log_level

    dataset = env.get(ENV_PREFIX + "DATASET")
    if dataset:
        values["dataset_path"] = Path(dataset)

    try:
        return Settings(**values)
    except ValidationError as e:
        raise ValueError(str(e))
