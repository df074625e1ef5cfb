"""
Key camera settings normalization.

Projects a raw attribute map onto a fixed, priority-ordered list of camera
settings with per-field formatting.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence


@dataclass(frozen=True)
class CameraSettingField:
    key: str
    label: str
    formatter: Optional[Callable[[Any], Any]] = None


@dataclass(frozen=True)
class CameraSettingEntry:
    key: str
    label: str
    formatted_value: Any


def _as_text(value: Any) -> str:
    return f"{value}"


def _format_focal_length(value: Any) -> Any:
    return value if str(value).endswith("mm") else f"{value} mm"


def _strip_quotes(value: Any) -> str:
    return str(value).replace('"', "")


# Display priority, not alphabetical.
KEY_CAMERA_SETTINGS: List[CameraSettingField] = [
    CameraSettingField("FNumber", "Aperture", _as_text),
    CameraSettingField("ExposureTime", "Shutter Speed", _as_text),
    CameraSettingField("PhotographicSensitivity", "ISO"),
    CameraSettingField("FocalLengthIn35mmFilm", "Focal Length", _format_focal_length),
    CameraSettingField("LensModel", "Lens", _strip_quotes),
]


def normalize_camera_settings(
    raw_attributes: Dict[str, Any],
    fields: Sequence[CameraSettingField] = KEY_CAMERA_SETTINGS,
) -> List[CameraSettingEntry]:
    """Return the configured settings present in ``raw_attributes``, in field order."""
    entries = []
    for field in fields:
        value = raw_attributes.get(field.key)
        if value is None:
            continue
        formatted = field.formatter(value) if field.formatter else value
        entries.append(CameraSettingEntry(field.key, field.label, formatted))
    return entries
