"""
Configuration management with typed Pydantic models.

Provides parser policy settings and YAML configuration loading.
"""

from gv100ad.config.loader import load_config
from gv100ad.config.settings import (
    DataPathsConfig,
    DuplicatePolicy,
    Gv100adConfig,
    LoggingConfig,
    ParserConfig,
)

__all__ = [
    "DataPathsConfig",
    "DuplicatePolicy",
    "Gv100adConfig",
    "LoggingConfig",
    "ParserConfig",
    "load_config",
]
