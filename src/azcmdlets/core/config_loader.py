"""
App settings loading utilities.

Scenario tests against Azure Stack read tenant, user and endpoint values
from a JSON app settings file. The file location comes from the
AZCMDLETS_APP_SETTINGS setting, relative paths resolving against the
current directory.

Example appsettings.json:
    {
        "AadTenantId": "contoso.onmicrosoft.com",
        "AadApplicationId": "1950a258-227b-4e31-a9cf-717495945fc2",
        "TenantUser1": "user1@contoso.onmicrosoft.com"
    }

Usage:
    from azcmdlets.core.config_loader import read_app_settings

    tenant = read_app_settings("AadTenantId")
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from .exceptions import ConfigurationError


def _load_json_file(file_path: Path, required: bool = True) -> Dict[str, Any]:
    """
    Load a JSON file and return its contents as a dictionary.

    Args:
        file_path: Path to the JSON file
        required: If True, raise error when file is missing. If False, return empty dict.

    Returns:
        Parsed JSON content as dictionary

    Raises:
        ConfigurationError: If file is missing (when required), has invalid
            JSON, or does not hold a JSON object
    """
    if not file_path.exists():
        if required:
            raise ConfigurationError(
                f"Required settings file not found: {file_path.name}",
                config_file=str(file_path)
            )
        return {}

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            content = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid JSON in settings file: {e}",
            config_file=str(file_path)
        )

    if not isinstance(content, dict):
        raise ConfigurationError(
            "Settings file must contain a JSON object",
            config_file=str(file_path)
        )
    return content


def app_settings_path(settings_path: Optional[Path] = None) -> Path:
    if settings_path is not None:
        return Path(settings_path)
    from ..config import get_settings
    return Path(get_settings().AZCMDLETS_APP_SETTINGS)


def load_app_settings(settings_path: Optional[Path] = None, required: bool = False) -> Dict[str, Any]:
    """Load the app settings file (empty dict when it does not exist and is not required)."""
    return _load_json_file(app_settings_path(settings_path), required=required)


def read_app_settings(key: str, mandatory: bool = True, settings_path: Optional[Path] = None) -> Optional[str]:
    """
    Read one app settings value. Keys are compared case-insensitively.

    Args:
        key: Settings key (e.g., "TenantUser1")
        mandatory: Raise when the key is missing or empty
        settings_path: Settings file; defaults to AZCMDLETS_APP_SETTINGS

    Returns:
        The value as a string, or None for a missing optional key

    Raises:
        ConfigurationError: If a mandatory key is missing
    """
    settings = load_app_settings(settings_path)
    lookup = {k.lower(): v for k, v in settings.items()}
    value = lookup.get(key.lower())

    if value is None or value == "":
        if mandatory:
            raise ConfigurationError(f"The app settings key {key} is missing in the settings file")
        return None

    return str(value)
