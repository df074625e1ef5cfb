"""
Application Settings Module
Manages persistent application settings using QSettings.
"""

from dataclasses import dataclass, field
from typing import List

from PyQt6.QtCore import QSettings

# --- Settings Constants ---

# Settings organization and application name
SETTINGS_ORGANIZATION = "PhotoMeta"
SETTINGS_APPLICATION = "PhotoMeta"

# Settings keys
TAGGING_SHORTCUTS_KEY = "Tagging/Shortcuts"  # Quick-add tag buttons
ORGANIZATION_EXPANDED_KEY = "UI/OrganizationExpanded"  # Organization section open

# Default values
DEFAULT_TAGGING_SHORTCUTS: List[str] = []
DEFAULT_ORGANIZATION_EXPANDED = False
MAX_TAGGING_SHORTCUTS = 20

# --- UI Constants ---
METADATA_PANEL_MIN_WIDTH = 280
METADATA_PANEL_MAX_WIDTH = 400
MAP_LINK_ZOOM = 15
MAX_RATING = 5


@dataclass(frozen=True)
class AppSettings:
    """Snapshot of the settings the metadata panel reads."""

    tagging_shortcuts: List[str] = field(default_factory=list)
    organization_expanded: bool = DEFAULT_ORGANIZATION_EXPANDED


def _get_settings() -> QSettings:
    """Get a QSettings instance with the application's organization and name."""
    return QSettings(SETTINGS_ORGANIZATION, SETTINGS_APPLICATION)


# --- Tagging Shortcuts ---
def get_tagging_shortcuts() -> List[str]:
    """Gets the list of quick-add tag shortcuts from settings."""
    settings = _get_settings()
    shortcuts = settings.value(
        TAGGING_SHORTCUTS_KEY, DEFAULT_TAGGING_SHORTCUTS, type=list
    )
    return [s for s in shortcuts if isinstance(s, str) and s.strip()]


def set_tagging_shortcuts(shortcuts: List[str]):
    """Sets the quick-add tag shortcuts, dropping blanks and duplicates."""
    cleaned: List[str] = []
    for shortcut in shortcuts:
        value = shortcut.strip()
        if value and value not in cleaned:
            cleaned.append(value)
    settings = _get_settings()
    settings.setValue(TAGGING_SHORTCUTS_KEY, cleaned[:MAX_TAGGING_SHORTCUTS])


# --- Organization Section ---
def get_organization_expanded() -> bool:
    """Gets whether the organization section starts expanded."""
    settings = _get_settings()
    return settings.value(
        ORGANIZATION_EXPANDED_KEY, DEFAULT_ORGANIZATION_EXPANDED, type=bool
    )


def set_organization_expanded(expanded: bool):
    settings = _get_settings()
    settings.setValue(ORGANIZATION_EXPANDED_KEY, expanded)


def load_app_settings() -> AppSettings:
    return AppSettings(
        tagging_shortcuts=get_tagging_shortcuts(),
        organization_expanded=get_organization_expanded(),
    )
