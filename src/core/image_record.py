"""
Image Record loading.

Builds the per-selection input of the metadata panel: path, dimensions, a flat
raw attribute map keyed by short EXIF names, the rating and the raw tag list.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from core.xmp_tag_store import (
    RATING_KEY,
    SUBJECT_KEY,
    as_subject_list,
    open_image,
)

logger = logging.getLogger(__name__)


class MetadataReadError(Exception):
    """Raised when an image's metadata could not be read."""

    pass

# exiv2 still uses the EXIF 2.2 names for a few tags
_KEY_ALIASES = {
    "ISOSpeedRatings": "PhotographicSensitivity",
}

_RATIONAL_NUMBER_KEYS = {
    "FNumber",
    "ApertureValue",
    "FocalLength",
    "GPSAltitude",
    "ExposureBiasValue",
}

_DMS_KEYS = {"GPSLatitude", "GPSLongitude"}


@dataclass
class ImageRecord:
    path: str
    width: int = 0
    height: int = 0
    raw_attributes: Dict[str, Any] = field(default_factory=dict)
    rating: int = 0
    raw_tags: List[str] = field(default_factory=list)

    @property
    def filename(self) -> str:
        return os.path.basename(self.path)


def _rational_to_float(text: str) -> Optional[float]:
    try:
        if "/" in text:
            num, den = text.split("/", 1)
            if float(den) == 0:
                return None
            return float(num) / float(den)
        return float(text)
    except (ValueError, TypeError):
        return None


def _number(value: float):
    return int(value) if value.is_integer() else round(value, 4)


def rationals_to_dms(text: str) -> Optional[str]:
    """Convert exiv2's ``"40/1 26/1 468/10"`` into ``"40 deg 26 min 46.8 sec"``."""
    parts = str(text).split()
    if len(parts) != 3:
        return None
    values = [_rational_to_float(p) for p in parts]
    if any(v is None for v in values):
        return None
    degrees, minutes, seconds = (_number(v) for v in values)
    return f"{degrees} deg {minutes} min {seconds} sec"


def flatten_exif(exif_data: Dict[str, Any]) -> Dict[str, Any]:
    """Map ``Exif.Group.Name`` keys onto ``Name`` and decode the few values we display."""
    flat: Dict[str, Any] = {}
    for full_key, value in exif_data.items():
        short_key = full_key.rsplit(".", 1)[-1]
        short_key = _KEY_ALIASES.get(short_key, short_key)
        if short_key in flat:
            continue

        if short_key in _DMS_KEYS:
            value = rationals_to_dms(value) or value
        elif short_key in _RATIONAL_NUMBER_KEYS and isinstance(value, str):
            number = _rational_to_float(value)
            value = _number(number) if number is not None else value
        flat[short_key] = value
    return flat


def load_image_record(image_path: str) -> ImageRecord:
    """Read dimensions, EXIF and XMP organization data for one image."""
    try:
        with open_image(image_path) as img:
            width = img.get_pixel_width()
            height = img.get_pixel_height()
            exif_data = img.read_exif() or {}
            xmp_data = img.read_xmp() or {}
    except Exception as e:
        logger.error(
            f"Failed to read metadata from {os.path.basename(image_path)}: {e}"
        )
        raise MetadataReadError(f"Metadata extraction failed: {e}") from e

    try:
        rating = int(xmp_data.get(RATING_KEY) or 0)
    except (ValueError, TypeError):
        rating = 0

    record = ImageRecord(
        path=image_path,
        width=width,
        height=height,
        raw_attributes=flatten_exif(exif_data),
        rating=max(0, min(5, rating)),
        raw_tags=as_subject_list(xmp_data.get(SUBJECT_KEY)),
    )
    logger.debug(
        f"Loaded {len(record.raw_attributes)} attributes and {len(record.raw_tags)} tags "
        f"for {record.filename}"
    )
    return record
