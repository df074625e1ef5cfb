"""Commands sent to the tag persistence backend."""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from core.tag_state import TagItem


class TagCommandKind(Enum):
    ADD = "add"
    REMOVE = "remove"


@dataclass(frozen=True)
class TagCommand:
    kind: TagCommandKind
    paths: Tuple[str, ...]
    tag: str  # persisted form, e.g. "user:beach"
    item: TagItem

    def describe(self) -> str:
        return f"{self.kind.value} '{self.tag}' on {len(self.paths)} file(s)"
