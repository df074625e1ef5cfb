# Core logic package

from .gps_resolver import GPSCoordinate, parse_dms, resolve_gps, resolve_from_attributes
from .metadata_normalizer import (
    KEY_CAMERA_SETTINGS,
    CameraSettingEntry,
    CameraSettingField,
    normalize_camera_settings,
)
from .exif_catalog import ExifCatalogEntry, build_exif_catalog, format_exif_tag
from .tag_state import (
    COLOR_TAG_PREFIX,
    USER_TAG_PREFIX,
    DerivedTagView,
    TagItem,
    derive_tag_view,
)

__all__ = [
    # gps_resolver
    "GPSCoordinate",
    "parse_dms",
    "resolve_gps",
    "resolve_from_attributes",
    # metadata_normalizer
    "KEY_CAMERA_SETTINGS",
    "CameraSettingEntry",
    "CameraSettingField",
    "normalize_camera_settings",
    # exif_catalog
    "ExifCatalogEntry",
    "build_exif_catalog",
    "format_exif_tag",
    # tag_state
    "COLOR_TAG_PREFIX",
    "USER_TAG_PREFIX",
    "DerivedTagView",
    "TagItem",
    "derive_tag_view",
]
