"""
Read gv100ad settings from YAML.

String values may reference the environment as `${NAME}` or `${NAME:fallback}`.
A `base.yaml` next to the config file is read first and the config file is
layered on top of it. Sections left out fall back to the defaults in
settings.py, so a minimal file only sets `data.dataset`.
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from gv100ad.config.settings import (
    DataPathsConfig,
    DuplicatePolicy,
    Gv100adConfig,
    LoggingConfig,
    ParserConfig,
)

_ENV_REFERENCE = re.compile(r"\$\{([^}:]+)(?::([^}]*))?\}")


def _expand_env(text: str) -> str:
    """Replace `${NAME}` references; unset names without a fallback become ''."""

    def lookup(match: re.Match[str]) -> str:
        name, fallback = match.group(1), match.group(2)
        return os.environ.get(name, "" if fallback is None else fallback)

    return _ENV_REFERENCE.sub(lookup, text)


def _expand_tree(node: Any) -> Any:
    """Apply _expand_env to every string inside parsed YAML."""
    if isinstance(node, str):
        return _expand_env(node)
    if isinstance(node, dict):
        return {key: _expand_tree(value) for key, value in node.items()}
    if isinstance(node, list):
        return [_expand_tree(item) for item in node]
    return node


def _merge_sections(base: dict[str, Any], layer: dict[str, Any]) -> dict[str, Any]:
    """Layer one mapping over another; nested mappings merge key by key."""
    merged = dict(base)
    for key, value in layer.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _merge_sections(current, value)
        else:
            merged[key] = value
    return merged


def _parse_bool(value: Any) -> bool:
    """Parse booleans, including strings produced by env var interpolation."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"1", "true", "yes", "on"}:
        return True
    if isinstance(value, str) and value.strip().lower() in {"0", "false", "no", "off", ""}:
        return False
    msg = f"Cannot parse boolean from {value!r}"
    raise ValueError(msg)


def load_yaml(path: Path) -> dict[str, Any]:
    """Parsed mapping of one YAML file with `${...}` references expanded."""
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return _expand_tree(data) if data else {}


def load_config(
    config_path: Path,
    base_path: Path | None = None,
) -> Gv100adConfig:
    """
    Build a Gv100adConfig from a YAML file.

    Example file:

        data:
          root: ./data
          dataset: GV100AD3004/GV100AD_300421.txt
        parser:
          encoding: utf-8
          lenient: false
          ignore_pattern: "^#"
          on_duplicate: error
          collect_all_errors: false
        logging:
          level: INFO
          json: false

    Args:
        config_path: YAML file to read.
        base_path: File layered underneath config_path. Defaults to a
            base.yaml in the same directory, if there is one.

    Raises:
        yaml.YAMLError: If a file is not valid YAML.
        ValueError: If a value fails validation.
    """
    if base_path is not None:
        base_data = load_yaml(base_path)
    else:
        sibling = config_path.parent / "base.yaml"
        has_base = sibling.exists() and sibling != config_path
        base_data = load_yaml(sibling) if has_base else {}

    merged = _merge_sections(base_data, load_yaml(config_path))

    data_data = merged.get("data") or {}
    data_paths = DataPathsConfig(
        data_root=Path(data_data.get("root", "./data")),
        dataset=Path(data_data["dataset"]) if data_data.get("dataset") else None,
    )

    parser_data = merged.get("parser") or {}
    parser = ParserConfig(
        encoding=parser_data.get("encoding", "utf-8"),
        lenient=_parse_bool(parser_data.get("lenient", False)),
        ignore_pattern=parser_data.get("ignore_pattern") or None,
        on_duplicate=DuplicatePolicy(parser_data.get("on_duplicate", "error")),
        collect_all_errors=_parse_bool(parser_data.get("collect_all_errors", False)),
    )

    logging_data = merged.get("logging") or {}
    logging_config = LoggingConfig(
        level=logging_data.get("level", "INFO"),
        json_output=_parse_bool(logging_data.get("json", False)),
    )

    return Gv100adConfig(
        parser=parser,
        data_paths=data_paths,
        logging=logging_config,
    )
