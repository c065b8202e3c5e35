"""Tests for configuration system."""

import tempfile
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from gv100ad.config import (
    DataPathsConfig,
    DuplicatePolicy,
    Gv100adConfig,
    LoggingConfig,
    ParserConfig,
    load_config,
)


class TestParserConfig:
    """Tests for ParserConfig."""

    def test_defaults(self) -> None:
        """Test strict defaults."""
        config = ParserConfig()
        assert config.encoding == "utf-8"
        assert config.lenient is False
        assert config.ignore_pattern is None
        assert config.ignore_regex is None
        assert config.on_duplicate is DuplicatePolicy.ERROR
        assert config.collect_all_errors is False

    def test_unknown_encoding(self) -> None:
        """Test that unknown encodings are rejected."""
        with pytest.raises(ValidationError, match="Unknown encoding"):
            ParserConfig(encoding="utf-99")

    def test_invalid_ignore_pattern(self) -> None:
        """Test that an ignore pattern must compile."""
        with pytest.raises(ValidationError, match="Invalid ignore_pattern"):
            ParserConfig(ignore_pattern="([")

    def test_ignore_regex(self) -> None:
        """Test the compiled ignore pattern."""
        config = ParserConfig(ignore_pattern=r"^#")
        assert config.ignore_regex is not None
        assert config.ignore_regex.search("# header")

    def test_frozen(self) -> None:
        """Test that configs are immutable."""
        config = ParserConfig()
        with pytest.raises(ValidationError):
            config.lenient = True  # type: ignore[misc]


class TestDataPathsConfig:
    """Tests for DataPathsConfig."""

    def test_resolve_dataset(self) -> None:
        """Test resolving the dataset against data_root."""
        config = DataPathsConfig(
            data_root=Path("/data"), dataset=Path("GV100AD3004/GV100AD_300421.txt")
        )
        assert config.resolve() == Path("/data/GV100AD3004/GV100AD_300421.txt")

    def test_resolve_unset(self) -> None:
        """Test that an unset dataset cannot be resolved."""
        with pytest.raises(ValueError, match="not configured"):
            DataPathsConfig().resolve()


class TestLoggingConfig:
    """Tests for LoggingConfig."""

    def test_level_normalized(self) -> None:
        """Test that log levels are upper-cased."""
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_invalid_level(self) -> None:
        """Test that unknown levels are rejected."""
        with pytest.raises(ValidationError, match="Invalid log level"):
            LoggingConfig(level="chatty")


class TestLoadConfig:
    """Tests for loading YAML configuration."""

    def test_load_minimal_config(self) -> None:
        """Test loading a config with only a dataset."""
        config_content = """
data:
  dataset: "GV100AD3004/GV100AD_300421.txt"
"""
        with tempfile.NamedTemporaryFile(
            mode="w", suffix=".yaml", delete=False, encoding="utf-8"
        ) as f:
            f.write(config_content)
            temp_path = Path(f.name)

        try:
            config = load_config(temp_path)
            assert isinstance(config, Gv100adConfig)
            assert config.dataset_path == Path("data/GV100AD3004/GV100AD_300421.txt")
            assert config.parser.encoding == "utf-8"
            assert config.parser == ParserConfig()
            assert config.logging.level == "INFO"
        finally:
            temp_path.unlink()

    def test_load_full_config(self, tmp_path: Path) -> None:
        """Test loading every section."""
        config_path = tmp_path / "gv100ad.yaml"
        config_path.write_text(
            """
data:
  root: /srv/destatis
  dataset: GV100AD_300421.txt
parser:
  encoding: latin-1
  lenient: true
  ignore_pattern: "^#"
  on_duplicate: replace
  collect_all_errors: "yes"
logging:
  level: debug
  json: true
""",
            encoding="utf-8",
        )
        config = load_config(config_path)
        assert config.dataset_path == Path("/srv/destatis/GV100AD_300421.txt")
        assert config.parser.encoding == "latin-1"
        assert config.parser.lenient is True
        assert config.parser.ignore_pattern == "^#"
        assert config.parser.on_duplicate is DuplicatePolicy.REPLACE
        assert config.parser.collect_all_errors is True
        assert config.logging.level == "DEBUG"
        assert config.logging.json_output is True

    def test_env_var_interpolation(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test ${VAR} and ${VAR:default} substitution."""
        config_path = tmp_path / "gv100ad.yaml"
        config_path.write_text(
            """
data:
  root: ${GV100AD_TEST_ROOT}
  dataset: ${GV100AD_TEST_DATASET:GV100AD_311222.txt}
parser:
  lenient: ${GV100AD_TEST_LENIENT:false}
""",
            encoding="utf-8",
        )
        monkeypatch.setenv("GV100AD_TEST_ROOT", "/tmp/gv")
        monkeypatch.delenv("GV100AD_TEST_DATASET", raising=False)
        config = load_config(config_path)
        assert config.dataset_path == Path("/tmp/gv/GV100AD_311222.txt")
        assert config.parser.lenient is False

    def test_base_config_merge(self, tmp_path: Path) -> None:
        """Test that base.yaml in the same directory is merged."""
        (tmp_path / "base.yaml").write_text(
            """
data:
  root: /srv/destatis
parser:
  encoding: latin-1
  lenient: true
""",
            encoding="utf-8",
        )
        config_path = tmp_path / "q2.yaml"
        config_path.write_text(
            """
data:
  dataset: GV100AD_300621.txt
parser:
  lenient: false
""",
            encoding="utf-8",
        )
        config = load_config(config_path)
        assert config.dataset_path == Path("/srv/destatis/GV100AD_300621.txt")
        assert config.parser.encoding == "latin-1"
        assert config.parser.lenient is False

    def test_load_base_config_itself(self, tmp_path: Path) -> None:
        """Test that base.yaml can be loaded on its own."""
        config_path = tmp_path / "base.yaml"
        config_path.write_text("parser:\n  lenient: true\n", encoding="utf-8")
        assert load_config(config_path).parser.lenient is True

    def test_empty_config(self, tmp_path: Path) -> None:
        """Test that an empty file yields defaults."""
        config_path = tmp_path / "empty.yaml"
        config_path.write_text("", encoding="utf-8")
        config = load_config(config_path)
        assert config.parser == ParserConfig()
        assert config.data_paths.dataset is None

    def test_invalid_bool(self, tmp_path: Path) -> None:
        """Test that unparsable booleans are rejected."""
        config_path = tmp_path / "bad.yaml"
        config_path.write_text("parser:\n  lenient: sometimes\n", encoding="utf-8")
        with pytest.raises(ValueError, match="Cannot parse boolean"):
            load_config(config_path)

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        """Test that YAML syntax errors propagate from the parser."""
        config_path = tmp_path / "broken.yaml"
        config_path.write_text("parser: [unclosed\n", encoding="utf-8")
        with pytest.raises(yaml.YAMLError):
            load_config(config_path)
