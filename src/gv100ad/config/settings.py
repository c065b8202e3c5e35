"""
Typed configuration models using Pydantic.

Parsing policy (encoding, leniency, duplicate handling) is configured here
rather than hardcoded in the parser.
"""

import re
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DuplicatePolicy(str, Enum):
    """What to do when a key appears twice for one kind."""

    ERROR = "error"  # abort construction
    REPLACE = "replace"  # last record wins


class ParserConfig(BaseModel):
    """Line parser and construction policy."""

    model_config = ConfigDict(frozen=True)

    encoding: str = Field(
        default="utf-8",
        description="Character encoding of the GV100AD text file",
    )
    lenient: bool = Field(
        default=False,
        description="Skip malformed lines and unknown record types instead of failing",
    )
    ignore_pattern: str | None = Field(
        default=None,
        description="Regex; matching lines are skipped without error",
    )
    on_duplicate: DuplicatePolicy = Field(
        default=DuplicatePolicy.ERROR,
        description="Handling of duplicate keys within one kind",
    )
    collect_all_errors: bool = Field(
        default=False,
        description="Keep parsing after the first error and report all of them",
    )

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Ensure the encoding is known to the codecs registry."""
        import codecs

        try:
            codecs.lookup(v)
        except LookupError as e:
            msg = f"Unknown encoding: {v!r}"
            raise ValueError(msg) from e
        return v

    @field_validator("ignore_pattern")
    @classmethod
    def validate_ignore_pattern(cls, v: str | None) -> str | None:
        """Ensure the ignore pattern compiles."""
        if v is None:
            return v
        try:
            re.compile(v)
        except re.error as e:
            msg = f"Invalid ignore_pattern {v!r}: {e}"
            raise ValueError(msg) from e
        return v

    @property
    def ignore_regex(self) -> re.Pattern[str] | None:
        """Compiled ignore pattern."""
        return re.compile(self.ignore_pattern) if self.ignore_pattern else None


class DataPathsConfig(BaseModel):
    """Data file paths configuration.

    `dataset` is relative to `data_root`, e.g. the `GV100AD_300421.txt`
    extracted from the quarterly Destatis archive.
    """

    model_config = ConfigDict(frozen=True)

    data_root: Path = Field(
        default=Path("./data"), description="Root directory for data files"
    )
    dataset: Path | None = Field(
        default=None, description="Path to the GV100AD text file"
    )

    def resolve(self, path_attr: str = "dataset") -> Path:
        """Resolve a relative path against data_root."""
        rel_path = getattr(self, path_attr)
        if rel_path is None:
            msg = f"Path '{path_attr}' is not configured"
            raise ValueError(msg)
        return self.data_root / rel_path


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO", description="Log level")
    json_output: bool = Field(default=False, description="Render logs as JSON")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            msg = f"Invalid log level: {v!r}"
            raise ValueError(msg)
        return level


class Gv100adConfig(BaseModel):
    """Complete configuration."""

    model_config = ConfigDict(frozen=True)

    parser: ParserConfig = Field(default_factory=ParserConfig)
    data_paths: DataPathsConfig = Field(default_factory=DataPathsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def dataset_path(self) -> Path:
        """Absolute path of the configured dataset."""
        return self.data_paths.resolve("dataset")
