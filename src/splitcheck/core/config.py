#!/usr/bin/env python3
"""
Configuration Management for SplitCheck

Handles environment-based configuration with validation. Calculation settings
(precision, rounding method, currency) live in EngineSettings, an explicit value
handed to the engine and analytics objects at construction; nothing in the
calculation path reads global state.
"""

import logging
import os
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .currency import DEFAULT_CURRENCY
from .rounding import DEFAULT_PRECISION, MAX_PRECISION, MIN_PRECISION, Rounder, RoundingMethod

# Load environment variables from .env file
load_dotenv()


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


@dataclass(frozen=True)
class EngineSettings:
    """Calculation settings shared by the settlement engine and analytics."""

    precision: int = DEFAULT_PRECISION
    rounding_method: RoundingMethod = RoundingMethod.ROUND
    currency: str = DEFAULT_CURRENCY

    @property
    def rounder(self) -> Rounder:
        """Rounding policy for these settings."""
        return Rounder(precision=self.precision, method=self.rounding_method)

    def with_currency(self, currency: str | None) -> "EngineSettings":
        """Copy with a different display currency (no-op for empty values)."""
        if not currency:
            return self
        return EngineSettings(self.precision, self.rounding_method, currency.upper())


@dataclass
class Config:
    """
    Main configuration class for the splitcheck application.

    Loads configuration from environment variables with defaults suitable for
    each environment type.
    """

    environment: Environment

    # Core directories
    data_dir: Path
    output_dir: Path

    # Calculation settings
    engine: EngineSettings = field(default_factory=EngineSettings)

    # Application settings
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "Config":
        """Create configuration from environment variables."""
        env = Environment(os.getenv("SPLITCHECK_ENV", "development"))

        if env == Environment.TEST:
            default_test_dir = Path(tempfile.gettempdir()) / "test_splitcheck"
            data_dir = Path(os.getenv("SPLITCHECK_DATA_DIR", str(default_test_dir)))
        else:
            data_dir = Path(os.getenv("SPLITCHECK_DATA_DIR", "./data")).expanduser().resolve()

        engine = EngineSettings(
            precision=int(os.getenv("SPLITCHECK_PRECISION", str(DEFAULT_PRECISION))),
            rounding_method=RoundingMethod.parse(os.getenv("SPLITCHECK_ROUNDING", "round")),
            currency=os.getenv("SPLITCHECK_CURRENCY", DEFAULT_CURRENCY).upper(),
        )

        return cls(
            environment=env,
            data_dir=data_dir,
            output_dir=data_dir / "exports",
            engine=engine,
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not MIN_PRECISION <= self.engine.precision <= MAX_PRECISION:
            errors.append(f"SPLITCHECK_PRECISION must be between {MIN_PRECISION} and {MAX_PRECISION}")

        if not self.engine.currency.isalpha() or len(self.engine.currency) != 3:
            errors.append(f"SPLITCHECK_CURRENCY must be a 3-letter code, got {self.engine.currency!r}")

        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"Unknown LOG_LEVEL: {self.log_level}")

        return errors

    def setup_logging(self) -> None:
        """Configure logging based on configuration."""
        level = getattr(logging, self.log_level, logging.INFO)

        if self.environment == Environment.DEVELOPMENT:
            format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_str = "%(asctime)s - %(levelname)s - %(message)s"

        logging.basicConfig(level=level, format=format_str, datefmt="%Y-%m-%d %H:%M:%S")

        if self.debug:
            logging.getLogger("splitcheck").setLevel(logging.DEBUG)

        # Font discovery chatter from the dashboard renderer
        logging.getLogger("matplotlib").setLevel(logging.WARNING)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a JSON-friendly dictionary."""
        return {
            "environment": self.environment.value,
            "data_dir": str(self.data_dir),
            "output_dir": str(self.output_dir),
            "engine": {
                "precision": self.engine.precision,
                "rounding_method": self.engine.rounding_method.value,
                "currency": self.engine.currency,
            },
            "debug": self.debug,
            "log_level": self.log_level,
        }


# Cached configuration for the CLI; library code takes EngineSettings explicitly
_config: Config | None = None


def get_config() -> Config:
    """Get the validated configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = Config.from_environment()

        errors = _config.validate()
        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        _config.setup_logging()

    return _config


def reload_config() -> Config:
    """Reload configuration from environment (useful for testing)."""
    global _config
    _config = None
    return get_config()
