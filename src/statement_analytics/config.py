"""Configuration management for statement-analytics."""

import json
import os
import re
from pathlib import Path
from typing import Any

from statement_analytics.rules import DEFAULT_RULES, CategoryRule, ParserRules

# Default config filename
CONFIG_FILENAME = "config.json"
APP_DIR_NAME = "statement-analytics"


def get_config_dir() -> Path:
    """Get the config directory path (XDG compliant)."""
    xdg_config_home = os.getenv("XDG_CONFIG_HOME", str(Path.home() / ".config"))
    return Path(xdg_config_home) / APP_DIR_NAME


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_config_dir() / CONFIG_FILENAME


def find_config_file() -> Path | None:
    """Find the config file in standard locations.

    Searches for config in the following order:
    1. config.json in current directory
    2. XDG config: ~/.config/statement-analytics/config.json
    """
    config_paths = [
        Path(CONFIG_FILENAME),
        get_config_path(),
    ]

    for path in config_paths:
        if path.exists():
            return path

    return None


def load_json_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from a JSON file.

    Raises:
        ValueError: If the file is not valid JSON or not an object
    """
    try:
        with open(config_path) as f:
            loaded = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {config_path}: {e}") from e

    if not isinstance(loaded, dict):
        raise ValueError(f"Config file {config_path} must contain an object at root")
    return loaded


def save_json_config(config: dict[str, Any], config_path: Path | None = None) -> Path:
    """Save configuration to a JSON file.

    Args:
        config: Configuration dictionary to save
        config_path: Path to save to (defaults to XDG config location)

    Returns:
        Path where config was saved
    """
    if config_path is None:
        config_path = get_config_path()

    # Ensure directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        json.dump(config, f, indent=2)
        f.write("\n")

    return config_path


def load_config(config_path: Path | None = None) -> dict[str, Any] | None:
    """Load configuration from config file.

    Args:
        config_path: Explicit path to config.json file

    Returns:
        Loaded config dict or None if not found
    """
    if config_path:
        return load_json_config(config_path)

    config_file = find_config_file()
    if config_file:
        return load_json_config(config_file)

    return None


def config_exists() -> bool:
    """Check if any config file exists."""
    return find_config_file() is not None


def _keyword_list(value: Any, key: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"rules.{key} must be a list of strings")
    return value


def get_category_rules(config: dict[str, Any] | None = None) -> list[CategoryRule]:
    """Get user-defined category rules from config.

    Args:
        config: Loaded JSON config

    Returns:
        List of CategoryRule objects, in config order

    Raises:
        ValueError: If an entry is malformed or its pattern does not compile
    """
    if not config:
        return []

    entries = config.get("rules", {}).get("categories", [])
    rules = []
    for index, entry in enumerate(entries):
        try:
            pattern = entry["pattern"]
            category = entry["category"]
        except (KeyError, TypeError) as e:
            raise ValueError(
                f"rules.categories[{index}] needs 'pattern' and 'category'"
            ) from e
        try:
            rules.append(CategoryRule.compile(pattern, category))
        except re.error as e:
            raise ValueError(
                f"rules.categories[{index}]: invalid pattern {pattern!r}: {e}"
            ) from e
    return rules


def get_parser_rules(
    config: dict[str, Any] | None = None,
    base: ParserRules = DEFAULT_RULES,
) -> ParserRules:
    """Build the parser rule set from config.

    Args:
        config: Loaded JSON config
        base: Rule set to extend (defaults to the built-in rules)

    Returns:
        ParserRules with config categories ahead of the built-in ones
    """
    if not config or "rules" not in config:
        return base

    rules_config = config["rules"]
    credit = rules_config.get("credit_keywords")
    debit = rules_config.get("debit_keywords")

    return base.with_overrides(
        categories=get_category_rules(config) or None,
        credit_keywords=_keyword_list(credit, "credit_keywords") if credit is not None else None,
        debit_keywords=_keyword_list(debit, "debit_keywords") if debit is not None else None,
    )


def get_output_delimiter(
    config: dict[str, Any] | None = None,
    override: str | None = None,
) -> str:
    """Get the CSV delimiter, preferring an explicit override."""
    if override:
        return override

    if config:
        output = config.get("output", {})
        if delimiter := output.get("delimiter"):
            return delimiter  # type: ignore[no-any-return]

    return ","


def create_default_config() -> dict[str, Any]:
    """Create a default empty configuration."""
    return {
        "rules": {
            "categories": [],
        },
        "output": {
            "delimiter": ",",
        },
    }
