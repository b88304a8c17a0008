"""
Backup Settings

Loads the service configuration once at startup from a JSON-with-comments
file into immutable pydantic models. Components receive the settings through
their constructors and never re-read the file.
"""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, ValidationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MCP_PROFILE_BACKUP_CONFIG"
ENABLED_ENV_VAR = "MCP_PROFILE_BACKUP_ENABLED"
DEFAULT_CONFIG_FILE = "config.jsonc"

# Strings are matched first so comment markers inside them are kept
_COMMENT_RE = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*|/\*.*?\*/', re.DOTALL)


class ConfigError(ValueError):
    """Raised when the configuration file cannot be parsed."""


class AutoBackupEvent(BaseModel):
    """Binds an event route to the label used in backup file names.

    Attributes:
        name: Label written into backup file names.
        route: Route of the lifecycle event that triggers the backup.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(
        ...,
        alias="Name",
        strict=True,
        min_length=1,
        pattern=r"^[^/\\]+$",
        description="Label written into backup file names.",
    )
    route: str = Field(
        ...,
        alias="Route",
        strict=True,
        min_length=1,
        description="Route of the lifecycle event that triggers the backup.",
    )


class BackupSettings(BaseModel):
    """Immutable service configuration, keyed by the PascalCase config names."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    enabled: StrictBool = Field(True, alias="Enabled")
    backup_saved_log: StrictBool = Field(True, alias="BackupSavedLog")
    maximum_backup_delete_log: StrictBool = Field(False, alias="MaximumBackupDeleteLog")
    maximum_backup_per_profile: StrictInt = Field(20, alias="MaximumBackupPerProfile")
    maximum_restored_delete_log: StrictBool = Field(False, alias="MaximumRestoredDeleteLog")
    maximum_restored_files: StrictInt = Field(10, alias="MaximumRestoredFiles")
    directory: str = Field(
        "./user/profiles/AutoProfileBackups", alias="Directory", strict=True
    )
    compress_profile: StrictBool = Field(
        False, alias="CompressProfile", description="Write compact JSON instead of indented."
    )
    auto_backup_events: tuple[AutoBackupEvent, ...] = Field((), alias="AutoBackupEvents")


def strip_json_comments(text: str) -> str:
    """Remove // and /* */ comments outside of string literals."""
    return _COMMENT_RE.sub(lambda m: m.group(1) or "", text)


def settings_from_dict(data: Any) -> BackupSettings:
    """Validate the parsed config object; unknown keys are ignored."""
    try:
        return BackupSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def _env_flag(name: str) -> bool | None:
    raw = os.environ.get(name)
    if raw is None:
        return None
    return raw.lower() in {"1", "true", "yes"}


def load_settings(path: str | os.PathLike[str] | None = None) -> BackupSettings:
    """Load settings from a JSONC file.

    The path defaults to $MCP_PROFILE_BACKUP_CONFIG, then ./config.jsonc.
    A missing file yields the defaults. $MCP_PROFILE_BACKUP_ENABLED, when set,
    overrides the Enabled option.

    Raises:
        ConfigError: If the file is not valid JSON or has wrongly typed values
    """
    config_path = Path(path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_FILE)

    try:
        text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.warning(f"Config file {config_path} not found, using defaults")
        settings = BackupSettings()
    else:
        try:
            data = json.loads(strip_json_comments(text))
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid config file {config_path}: {e}") from e
        settings = settings_from_dict(data)

    enabled = _env_flag(ENABLED_ENV_VAR)
    if enabled is not None and enabled != settings.enabled:
        settings = settings.model_copy(update={"enabled": enabled})

    logger.debug(f"Loaded settings from {config_path}: {settings}")
    return settings
