from __future__ import annotations
import logging
from typing import Callable, List, Optional, Protocol

from core.image_record import ImageRecord, MetadataReadError, load_image_record

logger = logging.getLogger(__name__)


class MetadataContext(Protocol):
    metadata_panel: object | None
    panel_visible: bool

    def get_selected_file_paths(self) -> List[str]: ...


class MetadataController:
    """Feeds the metadata panel with a freshly loaded record on selection change."""

    def __init__(
        self,
        ctx: MetadataContext,
        load_record: Callable[[str], ImageRecord] = load_image_record,
    ):
        self.ctx = ctx
        self._load_record = load_record
        self._cached_selection: List[str] = []

    def refresh_for_selection(self, force: bool = False):
        if not self.ctx.panel_visible or not self.ctx.metadata_panel:
            return
        paths = self.ctx.get_selected_file_paths()
        if paths == self._cached_selection and not force:
            return
        self._cached_selection = paths
        panel = self.ctx.metadata_panel

        # The panel edits one image at a time
        if len(paths) != 1:
            panel.show_image(None)
            return

        record: Optional[ImageRecord]
        try:
            record = self._load_record(paths[0])
        except MetadataReadError as e:
            logger.error(f"Could not load metadata for {paths[0]}: {e}")
            panel.show_error_message(str(e))
            return
        panel.show_image(record)
