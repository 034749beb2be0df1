"""User configuration for confbk.

Defaults for the backup command are read from ~/.config/confbk/config.toml.
Command-line options always take precedence; exclusion patterns from the
config file are appended to those given on the command line.

Example::

    output_dir = "~/backups/configs"
    manifest = "~/.config/confbk/files.txt"
    exclude = [".cache", "secret"]
    compress = true
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from confbk.core.paths import get_config_path

logger = logging.getLogger(__name__)


class BackupConfig(BaseModel):
    """Defaults applied to the backup command.

    Attributes:
        output_dir: Backup destination. If None, the XDG state location is used.
        manifest: Manifest file used when --file is not given.
        exclude: Exclusion substrings appended to the command-line ones.
        compress: Compress the output directory when --tar is not given.
    """

    model_config = ConfigDict(extra="forbid")

    output_dir: Annotated[
        Path | None,
        Field(description="Backup destination directory"),
    ] = None
    manifest: Annotated[
        Path | None,
        Field(description="Default manifest file"),
    ] = None
    exclude: Annotated[
        list[str],
        Field(default_factory=list, description="Additional exclusion substrings"),
    ]
    compress: Annotated[
        bool,
        Field(description="Compress the backup into a .tar.xz archive"),
    ] = False

    @field_validator("output_dir", "manifest", mode="after")
    @classmethod
    def expand_user(cls, v: Path | None) -> Path | None:
        """Expand a leading ~ in configured paths."""
        return v.expanduser() if v is not None else None

    @field_validator("exclude", mode="after")
    @classmethod
    def validate_exclude(cls, v: list[str]) -> list[str]:
        """Reject empty patterns, which would exclude every path."""
        if any(not pattern for pattern in v):
            msg = "exclude patterns cannot be empty strings"
            raise ValueError(msg)
        return v


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> BackupConfig:
    """Load configuration from a TOML file.

    A missing file is not an error; defaults are returned instead.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated BackupConfig object.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or the content is invalid.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        logger.debug("No config file at %s, using defaults", config_path)
        return BackupConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        config = BackupConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content in {config_path}: {e}") from e

    logger.debug("Loaded config from %s", config_path)
    return config


def save_config(config: BackupConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    in the same directory and then using os.replace() for atomic rename.

    Args:
        config: The BackupConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    data = config_to_dict(config)

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def config_to_dict(config: BackupConfig) -> dict[str, object]:
    """Convert BackupConfig to a dictionary for TOML serialization.

    TOML has no null value, so unset paths are omitted.

    Args:
        config: The BackupConfig to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    result: dict[str, object] = {}

    if config.output_dir is not None:
        result["output_dir"] = str(config.output_dir)

    if config.manifest is not None:
        result["manifest"] = str(config.manifest)

    result["exclude"] = list(config.exclude)
    result["compress"] = config.compress

    return result
