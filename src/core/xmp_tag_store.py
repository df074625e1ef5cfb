"""
XMP Tag Store

Persists tags, color labels and ratings into the XMP packet of image files
using pyexiv2. Tags live in ``Xmp.dc.subject``; the color label is stored as
a ``color:`` prefixed subject entry; the rating in ``Xmp.xmp.Rating``.

All file access is serialized through a module-level lock since pyexiv2 is
not safe to use from several threads at once.
"""

import logging
import os
import threading
from contextlib import contextmanager
from typing import List, Optional, Protocol, Sequence

import pyexiv2

from core.tag_state import replace_color_label

logger = logging.getLogger(__name__)

SUBJECT_KEY = "Xmp.dc.subject"
RATING_KEY = "Xmp.xmp.Rating"

_PYEXIV2_LOCK = threading.Lock()


class TagPersistenceError(Exception):
    """Raised when a tag, label or rating could not be written."""

    pass


class TagPersistence(Protocol):
    """The two operations the tag panel needs from a persistence backend."""

    def add_tag(self, paths: Sequence[str], tag: str) -> None: ...
    def remove_tag(self, paths: Sequence[str], tag: str) -> None: ...


@contextmanager
def open_image(image_path: str, encoding: str = "utf-8"):
    """Open an image with pyexiv2 while holding the global lock."""
    with _PYEXIV2_LOCK:
        img = pyexiv2.Image(image_path, encoding=encoding)
        try:
            yield img
        finally:
            img.close()


def as_subject_list(value) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


class XmpTagStore:
    """pyexiv2 backed implementation of :class:`TagPersistence`."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def read_tags(self, image_path: str) -> List[str]:
        try:
            with open_image(image_path, self.encoding) as img:
                xmp_data = img.read_xmp() or {}
        except Exception as e:
            raise TagPersistenceError(
                f"Could not read tags from {os.path.basename(image_path)}: {e}"
            ) from e
        return as_subject_list(xmp_data.get(SUBJECT_KEY))

    def _update_tags(self, paths: Sequence[str], update, description: str) -> None:
        if not paths:
            raise TagPersistenceError(f"No paths given to {description}")
        for path in paths:
            try:
                # Read and write in one session so concurrent updates cannot interleave
                with open_image(path, self.encoding) as img:
                    xmp_data = img.read_xmp() or {}
                    current = as_subject_list(xmp_data.get(SUBJECT_KEY))
                    updated = update(current)
                    if updated != current:
                        # None removes the property entirely
                        img.modify_xmp({SUBJECT_KEY: updated or None})
            except Exception as e:
                raise TagPersistenceError(
                    f"Failed to {description} for {os.path.basename(path)}: {e}"
                ) from e
            logger.debug(f"{description} done for {os.path.basename(path)}")

    def add_tag(self, paths: Sequence[str], tag: str) -> None:
        self._update_tags(
            paths,
            lambda tags: tags if tag in tags else tags + [tag],
            f"add tag '{tag}'",
        )

    def remove_tag(self, paths: Sequence[str], tag: str) -> None:
        self._update_tags(
            paths,
            lambda tags: [t for t in tags if t != tag],
            f"remove tag '{tag}'",
        )

    def set_color_label(self, paths: Sequence[str], color: Optional[str]) -> None:
        self._update_tags(
            paths,
            lambda tags: replace_color_label(tags, color),
            f"set color label '{color}'",
        )

    def set_rating(self, paths: Sequence[str], rating: int) -> None:
        try:
            rating_int = int(rating)
        except (ValueError, TypeError) as e:
            raise TagPersistenceError(f"Invalid rating value '{rating}'") from e
        if not 0 <= rating_int <= 5:
            raise TagPersistenceError(f"Invalid rating value {rating_int}. Must be 0-5.")

        for path in paths:
            logger.info(f"Setting rating for {os.path.basename(path)} to {rating_int}.")
            try:
                with open_image(path, self.encoding) as img:
                    img.modify_xmp({RATING_KEY: str(rating_int)})
            except Exception as e:
                raise TagPersistenceError(
                    f"Failed to set rating for {os.path.basename(path)}: {e}"
                ) from e
