"""
Tag Writer Worker
Background worker that applies tag commands to image metadata without
blocking the UI.
"""

import logging

from PyQt6.QtCore import QObject, pyqtSignal

from core.tag_commands import TagCommand, TagCommandKind
from core.xmp_tag_store import TagPersistence

logger = logging.getLogger(__name__)


class TagWriterWorker(QObject):
    """Runs a single add/remove tag command against a persistence backend."""

    # Signals
    command_finished = pyqtSignal(object, bool, str)  # command, success, error message
    finished = pyqtSignal()

    def __init__(self, store: TagPersistence):
        super().__init__()
        self.store = store

    def execute(self, command: TagCommand):
        paths = list(command.paths)
        logger.info(f"Running tag command: {command.describe()}")
        try:
            if command.kind is TagCommandKind.ADD:
                self.store.add_tag(paths, command.tag)
            else:
                self.store.remove_tag(paths, command.tag)
        except Exception as e:
            logger.error(f"Tag command failed ({command.describe()}): {e}", exc_info=True)
            self.command_finished.emit(command, False, str(e))
        else:
            logger.debug(f"Tag command succeeded: {command.describe()}")
            self.command_finished.emit(command, True, "")
        finally:
            self.finished.emit()
