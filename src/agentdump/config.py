"""Configuration management for agentdump."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".agentdump"
OUTPUT_FORMATS = ("text", "json", "ts")


@dataclass
class SearchConfig:
    """Configuration for BM25 ranked search.

    Attributes:
        term_frequency_saturation: Controls how quickly term frequency
            influence saturates (k1 parameter in BM25). Range: [1.2, 2.0].
        length_normalization: Controls document length normalization
            (b parameter in BM25). Range: [0.5, 0.75].
        max_results: Maximum number of ranked results to return.
    """
    term_frequency_saturation: float = 1.5
    length_normalization: float = 0.75
    max_results: int = 10

    @property
    def k1(self) -> float:
        """BM25 k1 parameter (term frequency saturation)."""
        return self.term_frequency_saturation

    @property
    def b(self) -> float:
        """BM25 b parameter (length normalization)."""
        return self.length_normalization

    @property
    def k(self) -> int:
        """Number of results to return."""
        return self.max_results


@dataclass
class DumpConfig:
    """Where to find the dump and how to present results.

    Attributes:
        path: Dump folder (containing dump.cs) or the dump file itself.
        limit: Maximum number of results rendered per query.
        output: Default output format: "text", "json" or "ts".
    """
    path: str = "game_il2cpp_dump"
    limit: int = 50
    output: str = "text"


def _load_section(repo_root: Path | None, section: str) -> dict[str, Any] | None:
    """Read one top-level mapping from the YAML config file.

    Returns None if the file is missing, unreadable or malformed.
    """
    if repo_root is None:
        repo_root = Path.cwd()

    config_path = repo_root / CONFIG_FILE_NAME

    if not config_path.exists():
        return None

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
    except (yaml.YAMLError, OSError) as e:
        logger.warning(f"Ignoring unreadable config file {config_path}: {e}")
        return None

    if not isinstance(data, dict):
        return None

    values = data.get(section, {})
    if not isinstance(values, dict):
        logger.warning(f"Ignoring '{section}' in {config_path}: expected a mapping")
        return None

    return values


def load_search_config(repo_root: Path | None = None) -> SearchConfig:
    """Load ranked search configuration from the .agentdump file.

    Args:
        repo_root: Directory holding the config file. If None, uses current directory.

    Returns:
        SearchConfig object with loaded or default values.

    Notes:
        Expected YAML structure:

        ```yaml
        search:
          term_frequency_saturation: 1.5
          length_normalization: 0.75
          max_results: 10
        ```
    """
    values = _load_section(repo_root, "search")
    if values is None:
        return SearchConfig()

    try:
        return SearchConfig(
            term_frequency_saturation=float(values.get(
                "term_frequency_saturation",
                SearchConfig.term_frequency_saturation
            )),
            length_normalization=float(values.get(
                "length_normalization",
                SearchConfig.length_normalization
            )),
            max_results=int(values.get(
                "max_results",
                SearchConfig.max_results
            )),
        )
    except (TypeError, ValueError) as e:
        logger.warning(f"Invalid search configuration, using defaults: {e}")
        return SearchConfig()


def load_dump_config(repo_root: Path | None = None) -> DumpConfig:
    """Load dump location and output settings from the .agentdump file.

    Args:
        repo_root: Directory holding the config file. If None, uses current directory.

    Returns:
        DumpConfig object with loaded or default values.

    Notes:
        Expected YAML structure:

        ```yaml
        dump:
          path: game_il2cpp_dump
          limit: 50
          output: text
        ```
    """
    values = _load_section(repo_root, "dump")
    if values is None:
        return DumpConfig()

    try:
        config = DumpConfig(
            path=str(values.get("path", DumpConfig.path)),
            limit=int(values.get("limit", DumpConfig.limit)),
            output=str(values.get("output", DumpConfig.output)),
        )
    except (TypeError, ValueError) as e:
        logger.warning(f"Invalid dump configuration, using defaults: {e}")
        return DumpConfig()

    if config.limit < 1:
        logger.warning(f"Limit must be at least 1, got {config.limit}; using {DumpConfig.limit}")
        config.limit = DumpConfig.limit

    if config.output not in OUTPUT_FORMATS:
        logger.warning(f"Unknown output format '{config.output}', using text")
        config.output = "text"

    return config
