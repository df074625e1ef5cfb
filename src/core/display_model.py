"""
Read-only display model for the metadata panel.

Recomputed from scratch for every selection; nothing here is cached or stored.
"""

from dataclasses import dataclass
from typing import List, Optional

from core.exif_catalog import ExifCatalogEntry, build_exif_catalog
from core.gps_resolver import GPSCoordinate, resolve_from_attributes
from core.image_record import ImageRecord
from core.metadata_normalizer import CameraSettingEntry, normalize_camera_settings


@dataclass(frozen=True)
class ImageDisplayModel:
    filename: str
    dimensions: str
    capture_date: str
    camera_settings: List[CameraSettingEntry]
    gps: GPSCoordinate
    exif_catalog: List[ExifCatalogEntry]

    @property
    def has_exif(self) -> bool:
        return bool(self.exif_catalog)

    @property
    def has_gps(self) -> bool:
        return self.gps.is_resolved

    def format_latitude(self) -> Optional[str]:
        return f"{self.gps.lat:.6f}" if self.gps.lat is not None else None

    def format_longitude(self) -> Optional[str]:
        return f"{self.gps.lon:.6f}" if self.gps.lon is not None else None


def build_display_model(record: ImageRecord) -> ImageDisplayModel:
    raw = record.raw_attributes or {}
    return ImageDisplayModel(
        filename=record.filename,
        dimensions=f"{record.width} x {record.height}",
        capture_date=str(raw.get("DateTimeOriginal") or "-"),
        camera_settings=normalize_camera_settings(raw),
        gps=resolve_from_attributes(raw),
        exif_catalog=build_exif_catalog(raw),
    )
