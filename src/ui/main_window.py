import logging
import os
from typing import List, Optional

from PyQt6.QtWidgets import QHBoxLayout, QListWidget, QListWidgetItem, QMainWindow, QWidget
from PyQt6.QtCore import Qt

from core.app_settings import AppSettings, load_app_settings, set_organization_expanded
from core.tag_state import replace_color_label
from core.xmp_tag_store import TagPersistenceError, XmpTagStore
from ui.controllers.metadata_controller import MetadataController
from ui.controllers.tag_mutation_controller import TagMutationController
from ui.metadata_panel import MetadataPanel
from ui.tag_command_runner import TagCommandRunner

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".jpg", ".jpeg", ".tif", ".tiff", ".png", ".webp", ".heic", ".dng")


class MainWindow(QMainWindow):
    """File list on the left, metadata panel on the right."""

    def __init__(
        self,
        image_paths: Optional[List[str]] = None,
        store: Optional[XmpTagStore] = None,
        app_settings: Optional[AppSettings] = None,
    ):
        super().__init__()
        self.setWindowTitle("PhotoMeta")
        self.store = store or XmpTagStore()
        self.panel_visible = True
        self.app_settings = app_settings or load_app_settings()

        self.command_runner = TagCommandRunner(self.store, self)
        self.tag_controller = TagMutationController(
            self.command_runner.dispatch,
            self,
            organization_expanded=self.app_settings.organization_expanded,
        )
        self.metadata_panel = MetadataPanel(self.tag_controller, self.app_settings)
        self.metadata_controller = MetadataController(self)

        self.file_list = QListWidget()
        self.file_list.itemSelectionChanged.connect(
            self.metadata_controller.refresh_for_selection
        )

        central = QWidget()
        layout = QHBoxLayout(central)
        layout.addWidget(self.file_list, 1)
        layout.addWidget(self.metadata_panel)
        self.setCentralWidget(central)

        self.command_runner.command_finished.connect(
            self.metadata_panel.handle_command_result
        )
        self.tag_controller.command_failed.connect(self._on_command_failed)
        self.metadata_panel.rate_requested.connect(self._on_rate_requested)
        self.metadata_panel.color_label_requested.connect(
            self._on_color_label_requested
        )

        self.set_image_paths(image_paths or [])

    def set_image_paths(self, image_paths: List[str]):
        self.file_list.clear()
        for path in image_paths:
            item = QListWidgetItem(os.path.basename(path))
            item.setData(Qt.ItemDataRole.UserRole, path)
            self.file_list.addItem(item)

    def get_selected_file_paths(self) -> List[str]:
        return [
            item.data(Qt.ItemDataRole.UserRole)
            for item in self.file_list.selectedItems()
        ]

    def _on_rate_requested(self, rating: int, paths: List[str]):
        try:
            self.store.set_rating(paths, rating)
        except TagPersistenceError as e:
            logger.error(f"Failed to set rating: {e}")
            self._on_command_failed(f"set rating to {rating}", str(e))
            return
        if self.metadata_panel.current_paths() == paths:
            self.metadata_panel.set_rating(rating)

    def _on_color_label_requested(self, color: Optional[str], paths: List[str]):
        try:
            self.store.set_color_label(paths, color)
        except TagPersistenceError as e:
            logger.error(f"Failed to set color label: {e}")
            self._on_command_failed(f"set color label '{color}'", str(e))
            return
        if self.metadata_panel.current_paths() == paths:
            raw_tags = replace_color_label(
                self.tag_controller.state.raw_tags, color
            )
            self.metadata_panel.update_raw_tags(raw_tags)

    def _on_command_failed(self, description: str, error: str):
        self.statusBar().showMessage(f"Could not {description}: {error}", 5000)

    def closeEvent(self, event):
        set_organization_expanded(self.tag_controller.state.organization_expanded)
        self.command_runner.stop_all()
        super().closeEvent(event)


def collect_image_paths(folder: str) -> List[str]:
    if not folder or not os.path.isdir(folder):
        return []
    return sorted(
        os.path.join(folder, name)
        for name in os.listdir(folder)
        if name.lower().endswith(SUPPORTED_EXTENSIONS)
    )
