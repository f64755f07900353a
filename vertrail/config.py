"""Settings loader for vertrail.

Handles discovery, loading, parsing, and validation of settings files.
Three formats are supported:

- ``vertrail.toml``: settings under a ``[vertrail]`` table
- ``.vertrail.yaml`` / ``.vertrail.yml``: settings as top-level keys
- ``pyproject.toml``: settings under a ``[tool.vertrail]`` table

Discovery order (relative to the repository directory):

1. Explicit path from ``--config`` or ``VERTRAIL_CONFIG``
2. ``vertrail.toml``
3. ``.vertrail.yaml`` then ``.vertrail.yml``
4. ``pyproject.toml`` with a ``[tool.vertrail]`` table

Configuration precedence: defaults < settings file < CLI flags.

Example (``.vertrail.yaml``)::

    major-version-bump-message: '\\+semver:\\s?(breaking|major)'
    minor-version-bump-message: '\\+semver:\\s?(feature|minor)'
    patch-version-bump-message: '\\+semver:\\s?(fix|patch)'
    trim-branch-prefix: true
"""

from __future__ import annotations

import tomli as tomllib
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field

from vertrail.constants import (
    CONFIG_TOML_NAME,
    CONFIG_YAML_NAMES,
    DEFAULT_FORBID_BEHIND_MASTER,
    DEFAULT_IGNORE_ENV_VARS,
    DEFAULT_MAJOR_PATTERN,
    DEFAULT_MINOR_PATTERN,
    DEFAULT_PATCH_PATTERN,
    DEFAULT_TRIM_BRANCH_PREFIX,
)
from vertrail.core.classifier import ClassificationPatterns
from vertrail.core.resolver import BranchSettings
from vertrail.exceptions import ConfigError
from vertrail.utils.logger import get_logger

logger = get_logger("config")

#: Settings key → (attribute, expected type).
_OPTIONS: Dict[str, tuple] = {
    "major-version-bump-message": ("major_pattern", str),
    "minor-version-bump-message": ("minor_pattern", str),
    "patch-version-bump-message": ("patch_pattern", str),
    "forbid-behind-master": ("forbid_behind_master", bool),
    "trim-branch-prefix": ("trim_branch_prefix", bool),
    "ignore-env-vars": ("ignore_env_vars", bool),
}


@dataclass
class VertrailConfig:
    """Parsed and validated vertrail settings.

    All fields have defaults, so an empty settings file is valid.

    Attributes:
        major_pattern: Regex marking a commit as a major bump.
        minor_pattern: Regex marking a commit as a minor bump.
        patch_pattern: Regex marking a commit as a patch bump.
        forbid_behind_master: Fail when a branch version is below master.
        trim_branch_prefix: Remove ``feature-`` / ``hotfix-`` from labels.
        ignore_env_vars: Ignore CI environment variables.
        source_path: Path to the loaded file, or ``None`` for defaults.
    """

    major_pattern: str = DEFAULT_MAJOR_PATTERN
    minor_pattern: str = DEFAULT_MINOR_PATTERN
    patch_pattern: str = DEFAULT_PATCH_PATTERN
    forbid_behind_master: bool = DEFAULT_FORBID_BEHIND_MASTER
    trim_branch_prefix: bool = DEFAULT_TRIM_BRANCH_PREFIX
    ignore_env_vars: bool = DEFAULT_IGNORE_ENV_VARS

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def patterns(self) -> ClassificationPatterns:
        """Compile the three patterns.

        Raises:
            ConfigError: A pattern is not a valid regular expression.
        """
        return ClassificationPatterns(
            major=self.major_pattern,
            minor=self.minor_pattern,
            patch=self.patch_pattern,
        )

    def branch_settings(
        self,
        *,
        forbid_behind_master: bool = False,
        trim_branch_prefix: bool = False,
        ignore_env_vars: bool = False,
    ) -> BranchSettings:
        """Build :class:`BranchSettings`; a ``True`` CLI flag overrides the file."""
        return BranchSettings(
            forbid_behind_master=forbid_behind_master or self.forbid_behind_master,
            trim_branch_prefix=trim_branch_prefix or self.trim_branch_prefix,
            ignore_env_vars=ignore_env_vars or self.ignore_env_vars,
        )

    def to_log_dict(self) -> Dict[str, Any]:
        """Return settings keyed by their file names, for debug logging."""
        return {key: getattr(self, attr) for key, (attr, _) in _OPTIONS.items()}


def discover_config_file(
    explicit_path: Optional[Path] = None,
    search_dir: Optional[Path] = None,
) -> Optional[Path]:
    """Find the settings file to load.

    Args:
        explicit_path: Explicit settings path. If provided, must exist.
        search_dir: Directory searched for the well-known names; the
            current directory when omitted.

    Returns:
        Resolved path, or ``None`` when no settings file exists.

    Raises:
        ConfigError: ``explicit_path`` does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    base = search_dir if search_dir is not None else Path.cwd()

    toml_file = base / CONFIG_TOML_NAME
    if toml_file.is_file():
        logger.debug("Found %s: %s", CONFIG_TOML_NAME, toml_file)
        return toml_file

    for name in CONFIG_YAML_NAMES:
        yaml_file = base / name
        if yaml_file.is_file():
            logger.debug("Found %s: %s", name, yaml_file)
            return yaml_file

    pyproject_toml = base / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_vertrail_section(pyproject_toml):
        logger.debug("Found [tool.vertrail] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found in %s", base)
    return None


def _pyproject_has_vertrail_section(path: Path) -> bool:
    """Return True if ``path`` parses and has a ``[tool.vertrail]`` table.

    A broken ``pyproject.toml`` belongs to someone else; it is not an error
    here, it just does not configure vertrail.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    tool = raw.get("tool")
    return isinstance(tool, dict) and "vertrail" in tool


def load_config(
    config_path: Optional[Path] = None,
    search_dir: Optional[Path] = None,
) -> VertrailConfig:
    """Load and validate vertrail settings.

    Args:
        config_path: Explicit settings file; auto-discovery when ``None``.
        search_dir: Directory for auto-discovery.

    Returns:
        Validated :class:`VertrailConfig`, defaults when no file is found.

    Raises:
        ConfigError: The file cannot be read or parsed, has unknown keys,
            values of the wrong type, or invalid regular expressions.
    """
    resolved = discover_config_file(config_path, search_dir)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return VertrailConfig()

    logger.info("Loading configuration from %s", resolved)

    if resolved.suffix in (".yaml", ".yml"):
        section = _read_yaml(resolved)
    elif resolved.name == "pyproject.toml":
        tool = _read_toml(resolved).get("tool", {})
        _require_table(tool, "[tool]", resolved)
        section = tool.get("vertrail", {})
    else:
        raw = _read_toml(resolved)
        # A dedicated file may use a [vertrail] table or top-level keys.
        section = raw.get("vertrail", raw)

    _require_table(section, "The vertrail settings", resolved)

    if not section:
        logger.debug("Config file found but empty; using defaults")
        return VertrailConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: The file cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _read_yaml(path: Path) -> Dict[str, Any]:
    """Read and parse a YAML settings file.

    Raises:
        ConfigError: The file cannot be read, is not valid YAML, or its
            top level is not a mapping.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ConfigError(
            f"Invalid YAML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Expected a mapping at the top of {path.name}, got {type(data).__name__}",
            config_path=str(path),
        )
    return data


def _require_table(value: Any, what: str, path: Path) -> None:
    if not isinstance(value, dict):
        raise ConfigError(
            f"{what} in {path.name} must be a table, got {type(value).__name__}",
            config_path=str(path),
        )


def _normalize_key(key: Any) -> str:
    return str(key).replace("_", "-")


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> VertrailConfig:
    """Validate a raw settings mapping.

    Keys may be spelled with hyphens or underscores.

    Raises:
        ConfigError: Unknown keys, wrong value types or invalid patterns.
    """
    normalized = {_normalize_key(key): value for key, value in section.items()}

    unknown = set(normalized) - set(_OPTIONS)
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    config = VertrailConfig()
    for key, value in normalized.items():
        attr, expected = _OPTIONS[key]
        if not isinstance(value, expected):
            raise ConfigError(
                f"{key} must be a {'boolean' if expected is bool else 'string'}, "
                f"got {type(value).__name__}",
                config_path=config_path,
                option=key,
            )
        setattr(config, attr, value)

    try:
        config.patterns()
    except ConfigError as exc:
        raise ConfigError(
            exc.message,
            config_path=config_path,
            option=exc.option,
        ) from exc

    return config
