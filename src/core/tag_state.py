"""
Tag State Deriver
Splits the raw tag list of an image into its color label and a sorted,
de-namespaced tag view.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from core.exif_catalog import locale_sort_key

logger = logging.getLogger(__name__)

COLOR_TAG_PREFIX = "color:"
USER_TAG_PREFIX = "user:"


@dataclass(frozen=True)
class ColorLabel:
    name: str
    color: str  # hex swatch


COLOR_LABELS: Tuple[ColorLabel, ...] = (
    ColorLabel("red", "#ef4444"),
    ColorLabel("yellow", "#facc15"),
    ColorLabel("green", "#4ade80"),
    ColorLabel("blue", "#60a5fa"),
    ColorLabel("purple", "#a78bfa"),
)


@dataclass(frozen=True)
class TagItem:
    display_name: str
    is_user: bool

    def to_dict(self) -> Dict[str, object]:
        return {"tag": self.display_name, "isUser": self.is_user}


@dataclass(frozen=True)
class DerivedTagView:
    color_label: Optional[str]
    tags: Tuple[TagItem, ...]

    def has_tag(self, display_name: str) -> bool:
        return any(t.display_name == display_name for t in self.tags)


def sort_tag_items(items: Sequence[TagItem]) -> Tuple[TagItem, ...]:
    return tuple(sorted(items, key=lambda t: locale_sort_key(t.display_name)))


def derive_tag_view(raw_tags: Sequence[str]) -> DerivedTagView:
    """
    Derive the color label and the displayable tag list from raw tags.

    Only the first ``color:`` entry (in input order) is honored as the label,
    but every ``color:`` entry is excluded from the tag list. ``user:`` tags
    lose their prefix and are flagged as user tags.
    """
    color_tags = [t for t in raw_tags if t.startswith(COLOR_TAG_PREFIX)]
    color_label = color_tags[0][len(COLOR_TAG_PREFIX):] if color_tags else None
    if len(color_tags) > 1:
        logger.warning(
            f"Multiple color labels found {color_tags}; using '{color_label}'"
        )

    items = []
    for tag in raw_tags:
        if tag.startswith(COLOR_TAG_PREFIX):
            continue
        if tag.startswith(USER_TAG_PREFIX):
            items.append(TagItem(tag[len(USER_TAG_PREFIX):], True))
        else:
            items.append(TagItem(tag, False))

    return DerivedTagView(color_label or None, sort_tag_items(items))


def normalize_tag_input(raw_input: Optional[str]) -> str:
    return (raw_input or "").strip().lower()


def to_raw_tag(item: TagItem) -> str:
    """Rebuild the persisted form of a displayed tag."""
    return f"{USER_TAG_PREFIX}{item.display_name}" if item.is_user else item.display_name


def color_tag(color: str) -> str:
    return f"{COLOR_TAG_PREFIX}{color}"


def replace_color_label(raw_tags: Sequence[str], color: Optional[str]) -> List[str]:
    """Drop every color entry and append ``color`` (if any) as the single label."""
    result = [t for t in raw_tags if not t.startswith(COLOR_TAG_PREFIX)]
    if color:
        result.append(color_tag(color))
    return result
