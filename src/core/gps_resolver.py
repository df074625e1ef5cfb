"""
GPS Coordinate Resolver
Turns textual degrees-minutes-seconds strings into signed decimal coordinates.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# e.g. "40 deg 26 min 46.8 sec"
_DMS_PATTERN = re.compile(
    r"(\d+\.?\d*)\s+deg\s+(\d+\.?\d*)\s+min\s+(\d+\.?\d*)\s+sec"
)

OSM_BASE_URL = "https://www.openstreetmap.org"


@dataclass(frozen=True)
class GPSCoordinate:
    lat: Optional[float] = None
    lon: Optional[float] = None
    altitude: Optional[Any] = None

    @property
    def is_resolved(self) -> bool:
        return self.lat is not None and self.lon is not None

    def openstreetmap_url(self, zoom: int = 15) -> Optional[str]:
        """Link that opens the location in a browser, or None when unresolved."""
        if not self.is_resolved:
            return None
        return (
            f"{OSM_BASE_URL}/?mlat={self.lat}&mlon={self.lon}"
            f"#map={zoom}/{self.lat}/{self.lon}"
        )

    def openstreetmap_embed_url(self, delta: float = 0.01) -> Optional[str]:
        """Embeddable map URL with a small bounding box around the marker."""
        if not self.is_resolved:
            return None
        bbox = ",".join(
            str(v)
            for v in (
                self.lon - delta,
                self.lat - delta,
                self.lon + delta,
                self.lat + delta,
            )
        ).replace(",", "%2C")
        return (
            f"{OSM_BASE_URL}/export/embed.html?bbox={bbox}"
            f"&layer=mapnik&marker={self.lat}%2C{self.lon}"
        )


UNRESOLVED = GPSCoordinate()


def parse_dms(dms_string: Optional[str]) -> Optional[float]:
    """Parse a DMS string into decimal degrees.

    Returns None when the text is empty, does not match the expected
    ``<deg> deg <min> min <sec> sec`` layout, or holds an unparsable number.
    """
    if not dms_string:
        return None
    match = _DMS_PATTERN.search(str(dms_string))
    if not match:
        return None
    try:
        degrees, minutes, seconds = (float(part) for part in match.groups())
    except ValueError:
        return None
    return degrees + minutes / 60 + seconds / 3600


def resolve_gps(
    lat_text: Optional[str],
    lat_ref: Optional[str],
    lon_text: Optional[str],
    lon_ref: Optional[str],
    altitude: Optional[Any] = None,
) -> GPSCoordinate:
    """
    Resolve a latitude/longitude pair from DMS text and hemisphere references.

    Latitude and longitude are resolved together or not at all; a coordinate
    where only one axis parses is discarded. Altitude is passed through as-is.
    """
    altitude = altitude or None
    if not (lat_text and lat_ref and lon_text and lon_ref):
        return GPSCoordinate(altitude=altitude)

    parsed_lat = parse_dms(lat_text)
    parsed_lon = parse_dms(lon_text)
    if parsed_lat is None or parsed_lon is None:
        logger.debug(
            f"Discarding GPS position, could not parse DMS: lat='{lat_text}', lon='{lon_text}'"
        )
        return GPSCoordinate(altitude=altitude)

    lat = -parsed_lat if str(lat_ref).upper() == "S" else parsed_lat
    lon = -parsed_lon if str(lon_ref).upper() == "W" else parsed_lon
    return GPSCoordinate(lat=lat, lon=lon, altitude=altitude)


def resolve_from_attributes(raw_attributes: Dict[str, Any]) -> GPSCoordinate:
    """Resolve GPS data from the standard GPS* keys of a raw attribute map."""
    return resolve_gps(
        raw_attributes.get("GPSLatitude"),
        raw_attributes.get("GPSLatitudeRef"),
        raw_attributes.get("GPSLongitude"),
        raw_attributes.get("GPSLongitudeRef"),
        raw_attributes.get("GPSAltitude"),
    )
