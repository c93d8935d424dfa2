"""Configuration management for tap-query matching dialects."""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_FUZZY_THRESHOLD = 0.8
DEFAULT_TEXT_ENCODINGS = ["utf-8", "utf-16-le"]
CONFIG_FILENAME = ".tap-query-config.json"
CONFIG_ENV_VAR = "TAP_QUERY_CONFIG"

@dataclass
class MatchConfig:
    """Tunable behavior of the match dispatcher."""
    fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD
    wildcard_case_sensitive: bool = True
    data_regex_ignore_case: bool = True
    data_regex_dotall: bool = True
    text_encodings: list[str] = field(default_factory=lambda: list(DEFAULT_TEXT_ENCODINGS))
    config_path: str = ""

    def __post_init__(self) -> None:
        if not 0.0 <= self.fuzzy_threshold <= 1.0:
            raise ValueError(
                f"fuzzy threshold must be between 0 and 1, got {self.fuzzy_threshold}"
            )
        if not self.text_encodings:
            raise ValueError("at least one text encoding is required")

def find_config_file() -> Path | None:
    """Search for config file in standard locations.

    Searches in order:
    1. Path named by the TAP_QUERY_CONFIG environment variable
    2. Current working directory
    3. User config directory (XDG_CONFIG_HOME)
    4. ~/.config
    5. /etc/

    Returns:
        Path to config file if found, None otherwise
    """
    search_paths = []
    if os.getenv(CONFIG_ENV_VAR):
        search_paths.append(Path(os.environ[CONFIG_ENV_VAR]))
    search_paths += [
        Path.cwd() / CONFIG_FILENAME,
        Path(os.getenv('XDG_CONFIG_HOME', '')) / CONFIG_FILENAME,
        Path(os.getenv('HOME', '')) / '.config' / CONFIG_FILENAME,
        Path("/etc") / CONFIG_FILENAME,
    ]

    for path in search_paths:
        if path.is_file():
            return path

    return None

def load_config(config_file: str | None = None) -> MatchConfig:
    """Load configuration from config file.

    Args:
        config_file: Optional explicit config file path. If provided,
                     uses this path directly instead of searching.

    Returns:
        Loaded MatchConfig object, defaults when no file is found
    """
    if config_file is not None:
        config_path = Path(config_file)
    else:
        config_path = find_config_file()

    data = {}
    if config_path is not None and config_path.is_file():
        with open(config_path) as f:
            data = json.load(f)

    return MatchConfig(
        fuzzy_threshold=float(data.get("fuzzy-threshold", DEFAULT_FUZZY_THRESHOLD)),
        wildcard_case_sensitive=data.get("wildcard-case-sensitive", True),
        data_regex_ignore_case=data.get("data-regex-ignore-case", True),
        data_regex_dotall=data.get("data-regex-dotall", True),
        text_encodings=list(data.get("text-encodings", DEFAULT_TEXT_ENCODINGS)),
        config_path=str(config_path) if config_path is not None else "",
    )

def write_config(
    file_path: str | None = None,
    config: MatchConfig | None = None,
) -> str:
    """Write configuration to file.

    Args:
        file_path: Path to save config file. If None, uses default
                   location (./CONFIG_FILENAME)
        config: Configuration to store, defaults when None

    Returns:
        Path to the written config file
    """
    if file_path is not None:
        output_path = Path(file_path)
    else:
        output_path = Path(".") / CONFIG_FILENAME
    if config is None:
        config = MatchConfig()

    config_data: dict[str, float | bool | list[str]] = {}

    # Only write non-default values
    if config.fuzzy_threshold != DEFAULT_FUZZY_THRESHOLD:
        config_data["fuzzy-threshold"] = config.fuzzy_threshold

    if not config.wildcard_case_sensitive:
        config_data["wildcard-case-sensitive"] = False

    if not config.data_regex_ignore_case:
        config_data["data-regex-ignore-case"] = False

    if not config.data_regex_dotall:
        config_data["data-regex-dotall"] = False

    if config.text_encodings != DEFAULT_TEXT_ENCODINGS:
        config_data["text-encodings"] = config.text_encodings

    with open(output_path, "w") as f:
        json.dump(config_data, f, indent=4)

    return str(output_path)
