import logging
from typing import List, Optional, Tuple

from PyQt6.QtCore import QObject, QThread, pyqtSignal

from core.tag_commands import TagCommand
from core.xmp_tag_store import TagPersistence
from workers.tag_writer_worker import TagWriterWorker

logger = logging.getLogger(__name__)


class TagCommandRunner(QObject):
    """
    Runs each tag command on its own QThread and relays the result back to the
    GUI thread. Commands are neither queued nor cancelled.
    """

    command_finished = pyqtSignal(object, bool, str)  # command, success, error message

    def __init__(self, store: TagPersistence, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.store = store
        self._active: List[Tuple[QThread, TagWriterWorker]] = []

    @property
    def active_count(self) -> int:
        return len(self._active)

    def dispatch(self, command: TagCommand):
        thread = QThread()
        worker = TagWriterWorker(self.store)
        worker.moveToThread(thread)

        worker.command_finished.connect(self.command_finished)
        worker.finished.connect(thread.quit)
        thread.started.connect(lambda: worker.execute(command))
        thread.finished.connect(lambda: self._cleanup(thread, worker))

        self._active.append((thread, worker))
        thread.start()
        logger.debug(f"Tag command thread started: {command.describe()}")

    def _cleanup(self, thread: QThread, worker: TagWriterWorker):
        try:
            self._active.remove((thread, worker))
        except ValueError:
            pass
        worker.deleteLater()
        thread.deleteLater()

    def stop_all(self, timeout_ms: int = 5000):
        """Wait for in-flight commands on shutdown."""
        for thread, _ in list(self._active):
            if thread.isRunning():
                thread.quit()
                if not thread.wait(timeout_ms):
                    logger.warning(f"Tag command thread {thread} did not finish in time.")
        self._active.clear()
