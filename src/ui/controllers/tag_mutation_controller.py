from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, List, Optional, Sequence, Set

from PyQt6.QtCore import QObject, pyqtSignal

from core.tag_commands import TagCommand, TagCommandKind
from core.tag_state import (
    USER_TAG_PREFIX,
    DerivedTagView,
    TagItem,
    derive_tag_view,
    normalize_tag_input,
    to_raw_tag,
)

logger = logging.getLogger(__name__)


@dataclass
class TagPanelState:
    """Transient state of the organization section for the current image only."""

    path: Optional[str] = None
    raw_tags: List[str] = field(default_factory=list)
    view: DerivedTagView = field(default_factory=lambda: derive_tag_view([]))
    input_text: str = ""
    input_focused: bool = False
    organization_expanded: bool = False


class TagMutationController(QObject):
    """Issues add/remove tag commands and applies them once persistence confirms.

    Local state is never changed speculatively: a command is dispatched, and
    only a successful result updates the raw tag list, which is then
    re-derived. Failures are logged and leave the state untouched.

    Identical commands (same kind, paths and tag) already in flight are
    coalesced, including across selection changes; distinct commands are
    dispatched independently.
    """

    tags_changed = pyqtSignal(list, list)  # paths, [{"tag": str, "isUser": bool}]
    state_changed = pyqtSignal()
    command_failed = pyqtSignal(str, str)  # command description, error message

    def __init__(
        self,
        dispatch: Callable[[TagCommand], None],
        parent: Optional[QObject] = None,
        organization_expanded: bool = False,
    ):
        super().__init__(parent)
        self._dispatch = dispatch
        self.state = TagPanelState(organization_expanded=organization_expanded)
        self._in_flight: Set[TagCommand] = set()

    # --- Selection ---
    def load(self, path: Optional[str], raw_tags: Sequence[str]):
        """Bind to a newly selected image. In-flight commands keep running and stay tracked."""
        expanded = self.state.organization_expanded
        self.state = TagPanelState(
            path=path,
            raw_tags=list(raw_tags),
            view=derive_tag_view(raw_tags),
            organization_expanded=expanded,
        )
        self.state_changed.emit()

    def replace_raw_tags(self, raw_tags: Sequence[str]):
        """Adopt an externally updated raw tag list for the current image."""
        self.state.raw_tags = list(raw_tags)
        self.state.view = derive_tag_view(self.state.raw_tags)
        self.state_changed.emit()

    @property
    def view(self) -> DerivedTagView:
        return self.state.view

    def is_current_path(self, paths: Sequence[str]) -> bool:
        return self.state.path is not None and list(paths) == [self.state.path]

    @property
    def pending(self) -> FrozenSet[TagCommand]:
        """In-flight commands that target the current image."""
        return frozenset(c for c in self._in_flight if self.is_current_path(c.paths))

    def is_pending(self, kind: TagCommandKind, tag: Optional[str] = None) -> bool:
        return any(
            c.kind is kind and (tag is None or c.tag == tag) for c in self.pending
        )

    # --- UI state ---
    def set_input_text(self, text: str):
        self.state.input_text = text

    def set_input_focused(self, focused: bool):
        self.state.input_focused = focused

    def toggle_organization(self) -> bool:
        self.state.organization_expanded = not self.state.organization_expanded
        return self.state.organization_expanded

    # --- Commands ---
    def add_tag(self, raw_input: Optional[str] = None) -> Optional[TagCommand]:
        if raw_input is None:
            raw_input = self.state.input_text
        value = normalize_tag_input(raw_input)
        if not value or self.state.view.has_tag(value) or self.state.path is None:
            logger.debug(f"Ignoring tag input '{raw_input}'")
            return None
        command = TagCommand(
            TagCommandKind.ADD,
            (self.state.path,),
            f"{USER_TAG_PREFIX}{value}",
            TagItem(value, True),
        )
        return self._issue(command)

    def remove_tag(self, item: TagItem) -> Optional[TagCommand]:
        if self.state.path is None:
            return None
        command = TagCommand(
            TagCommandKind.REMOVE, (self.state.path,), to_raw_tag(item), item
        )
        return self._issue(command)

    def _issue(self, command: TagCommand) -> Optional[TagCommand]:
        if command in self._in_flight:
            logger.debug(f"Command already in flight, skipping: {command.describe()}")
            return None
        self._in_flight.add(command)
        self.state_changed.emit()
        self._dispatch(command)
        return command

    def forget(self, command: TagCommand):
        """Drop a command whose result no longer applies to this selection."""
        self._in_flight.discard(command)

    def handle_command_result(
        self, command: TagCommand, success: bool, error_message: str = ""
    ):
        self._in_flight.discard(command)

        if not success:
            logger.error(
                f"Failed to {command.kind.value} tag '{command.item.display_name}': {error_message}"
            )
            self.command_failed.emit(command.describe(), error_message)
            self.state_changed.emit()
            return

        if command.kind is TagCommandKind.ADD:
            if command.tag not in self.state.raw_tags:
                self.state.raw_tags.append(command.tag)
            self.state.input_text = ""
        else:
            self.state.raw_tags = [t for t in self.state.raw_tags if t != command.tag]

        self.state.view = derive_tag_view(self.state.raw_tags)
        self.tags_changed.emit(
            list(command.paths), [t.to_dict() for t in self.state.view.tags]
        )
        self.state_changed.emit()
