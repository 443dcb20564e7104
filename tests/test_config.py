"""Tests for config module."""

from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from agentdump.config import DumpConfig, SearchConfig, load_dump_config, load_search_config


class TestSearchConfig:
    """Tests for SearchConfig dataclass."""

    def test_default_values(self):
        """Test that SearchConfig has correct default values."""
        config = SearchConfig()
        assert config.term_frequency_saturation == 1.5
        assert config.length_normalization == 0.75
        assert config.max_results == 10

    def test_custom_values(self):
        """Test creating SearchConfig with custom values."""
        config = SearchConfig(
            term_frequency_saturation=1.8,
            length_normalization=0.6,
            max_results=20
        )
        assert config.term_frequency_saturation == 1.8
        assert config.length_normalization == 0.6
        assert config.max_results == 20

    def test_k1_property(self):
        """Test k1 property returns term_frequency_saturation."""
        config = SearchConfig(term_frequency_saturation=1.8)
        assert config.k1 == 1.8

    def test_b_property(self):
        """Test b property returns length_normalization."""
        config = SearchConfig(length_normalization=0.6)
        assert config.b == 0.6

    def test_k_property(self):
        """Test k property returns max_results."""
        config = SearchConfig(max_results=20)
        assert config.k == 20


class TestLoadSearchConfig:
    """Tests for load_search_config function."""

    def test_no_config_file_returns_defaults(self):
        """Test that missing .agentdump file returns default config."""
        with TemporaryDirectory() as tmpdir:
            config = load_search_config(Path(tmpdir))
            assert config.term_frequency_saturation == 1.5
            assert config.length_normalization == 0.75
            assert config.max_results == 10

    def test_load_valid_config(self):
        """Test loading valid .agentdump configuration file."""
        with TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / ".agentdump"
            config_path.write_text("""
search:
  term_frequency_saturation: 1.8
  length_normalization: 0.6
  max_results: 20
""")
            config = load_search_config(Path(tmpdir))
            assert config.term_frequency_saturation == 1.8
            assert config.length_normalization == 0.6
            assert config.max_results == 20

    def test_load_partial_config(self):
        """Test loading config with only some values specified."""
        with TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / ".agentdump"
            config_path.write_text("""
search:
  term_frequency_saturation: 1.8
""")
            config = load_search_config(Path(tmpdir))
            assert config.term_frequency_saturation == 1.8
            assert config.length_normalization == 0.75  # default
            assert config.max_results == 10  # default

    def test_empty_config_file_returns_defaults(self):
        """Test that empty .agentdump file returns default config."""
        with TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / ".agentdump"
            config_path.write_text("")
            config = load_search_config(Path(tmpdir))
            assert config.term_frequency_saturation == 1.5
            assert config.length_normalization == 0.75
            assert config.max_results == 10

    def test_missing_search_section_returns_defaults(self):
        """Test that .agentdump file without search section returns defaults."""
        with TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / ".agentdump"
            config_path.write_text("""
other_section:
  some_key: some_value
""")
            config = load_search_config(Path(tmpdir))
            assert config.term_frequency_saturation == 1.5
            assert config.length_normalization == 0.75
            assert config.max_results == 10

    def test_invalid_yaml_returns_defaults(self):
        """Test that invalid YAML returns default config."""
        with TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / ".agentdump"
            config_path.write_text("invalid: yaml: content: [")
            config = load_search_config(Path(tmpdir))
            assert config.term_frequency_saturation == 1.5
            assert config.length_normalization == 0.75
            assert config.max_results == 10

    def test_wrong_type_search_section_returns_defaults(self):
        """Test that non-dict search section returns defaults."""
        with TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / ".agentdump"
            config_path.write_text("search: not_a_dict")
            config = load_search_config(Path(tmpdir))
            assert config.term_frequency_saturation == 1.5
            assert config.length_normalization == 0.75
            assert config.max_results == 10

    def test_wrong_type_root_returns_defaults(self):
        """Test that non-dict root returns defaults."""
        with TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / ".agentdump"
            config_path.write_text("- list\n- not\n- dict")
            config = load_search_config(Path(tmpdir))
            assert config.term_frequency_saturation == 1.5
            assert config.length_normalization == 0.75
            assert config.max_results == 10

    def test_none_repo_root_uses_cwd(self):
        """Test that None repo_root uses current working directory."""
        # This test just verifies the function doesn't crash with None
        config = load_search_config(None)
        assert isinstance(config, SearchConfig)

    def test_config_with_extra_fields(self):
        """Test that extra fields in config are ignored."""
        with TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / ".agentdump"
            config_path.write_text("""
search:
  term_frequency_saturation: 1.8
  extra_field: ignored
  max_results: 20
""")
            config = load_search_config(Path(tmpdir))
            assert config.term_frequency_saturation == 1.8
            assert config.max_results == 20
            assert not hasattr(config, 'extra_field')

    def test_non_numeric_value_returns_defaults(self):
        """Test that a value of the wrong type falls back to defaults."""
        with TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / ".agentdump"
            config_path.write_text("search:\n  max_results: many\n")
            config = load_search_config(Path(tmpdir))
            assert config.max_results == 10


class TestLoadDumpConfig:
    """Tests for load_dump_config function."""

    def test_default_values(self):
        """Test that DumpConfig has correct default values."""
        config = DumpConfig()
        assert config.path == "game_il2cpp_dump"
        assert config.limit == 50
        assert config.output == "text"

    def test_no_config_file_returns_defaults(self):
        """Test that missing .agentdump file returns default config."""
        with TemporaryDirectory() as tmpdir:
            assert load_dump_config(Path(tmpdir)) == DumpConfig()

    def test_load_valid_config(self):
        """Test loading the dump section."""
        with TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / ".agentdump"
            config_path.write_text("""
dump:
  path: dumps/game
  limit: 5
  output: json
""")
            config = load_dump_config(Path(tmpdir))
            assert config.path == "dumps/game"
            assert config.limit == 5
            assert config.output == "json"

    def test_sections_are_independent(self):
        """Test that both sections can live in one file."""
        with TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / ".agentdump"
            config_path.write_text("""
dump:
  limit: 5
search:
  max_results: 3
""")
            assert load_dump_config(Path(tmpdir)).limit == 5
            assert load_dump_config(Path(tmpdir)).path == "game_il2cpp_dump"
            assert load_search_config(Path(tmpdir)).max_results == 3

    def test_unknown_output_format_falls_back_to_text(self):
        """Test that an unsupported output format is replaced by text."""
        with TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / ".agentdump"
            config_path.write_text("dump:\n  output: xml\n")
            assert load_dump_config(Path(tmpdir)).output == "text"

    def test_invalid_limit_returns_defaults(self):
        """Test that a non-integer limit returns default config."""
        with TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / ".agentdump"
            config_path.write_text("dump:\n  limit: lots\n")
            assert load_dump_config(Path(tmpdir)) == DumpConfig()

    @pytest.mark.parametrize("limit", [0, -1])
    def test_limit_below_one_falls_back_to_default(self, limit):
        """Test that a zero or negative limit is replaced by the default."""
        with TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / ".agentdump"
            config_path.write_text(f"dump:\n  limit: {limit}\n  output: json\n")
            config = load_dump_config(Path(tmpdir))
            assert config.limit == 50
            assert config.output == "json"

    def test_invalid_yaml_returns_defaults(self):
        """Test that invalid YAML returns default config."""
        with TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / ".agentdump"
            config_path.write_text("dump: [unclosed")
            assert load_dump_config(Path(tmpdir)) == DumpConfig()
