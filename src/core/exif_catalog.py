"""
Full EXIF catalog formatting: readable labels and a stable, sorted listing.
"""

import re
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, Dict, List

from PyQt6.QtCore import QCollator, QLocale, Qt

_LOWER_UPPER = re.compile(r"([a-z])([A-Z])")
_ACRONYM_WORD = re.compile(r"([A-Z])([A-Z][a-z])")


def _create_collator() -> QCollator:
    locale = QLocale()
    # The C locale collates by code point; fall back to a real language
    if locale.language() == QLocale.Language.C:
        locale = QLocale(QLocale.Language.English)
    collator = QCollator(locale)
    collator.setCaseSensitivity(Qt.CaseSensitivity.CaseSensitive)
    return collator


_COLLATOR = _create_collator()
_COLLATION_KEY = cmp_to_key(_COLLATOR.compare)


@dataclass(frozen=True)
class ExifCatalogEntry:
    key: str
    label: str
    value: Any

    @property
    def display_value(self) -> str:
        return format_display_value(self.value)


def locale_sort_key(text: str):
    """Collation key for locale-aware ordering: accents are secondary, lowercase first on ties."""
    return _COLLATION_KEY(text)


def format_exif_tag(key: str) -> str:
    """Split a CamelCase attribute key into words, e.g. GPSLatitude -> GPS Latitude."""
    if not key:
        return ""
    return _ACRONYM_WORD.sub(r"\1 \2", _LOWER_UPPER.sub(r"\1 \2", key))


def format_display_value(value: Any) -> str:
    if value is None:
        return "N/A"
    if isinstance(value, bytes):
        return f"({len(value)} bytes)"
    if isinstance(value, (list, tuple)):
        return ", ".join(format_display_value(v) for v in value)
    return str(value)


def build_exif_catalog(raw_attributes: Dict[str, Any]) -> List[ExifCatalogEntry]:
    """All raw attributes, sorted by key, each paired with a readable label."""
    return [
        ExifCatalogEntry(key, format_exif_tag(key), value)
        for key, value in sorted(
            raw_attributes.items(), key=lambda item: locale_sort_key(item[0])
        )
    ]
