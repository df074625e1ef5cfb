import pyexiv2  # noqa: F401  # Must be first to avoid Windows crash with pyexiv2
import pytest

pytest.importorskip("PyQt6.QtWidgets", reason="PyQt6 not available for GUI tests")
from PyQt6.QtWidgets import QApplication  # noqa: E402
from unittest.mock import Mock  # noqa: E402

from core.app_settings import AppSettings  # noqa: E402
from core.image_record import ImageRecord  # noqa: E402
from core.xmp_tag_store import TagPersistenceError  # noqa: E402
from ui.main_window import MainWindow  # noqa: E402

PATH = "/photos/a.jpg"


@pytest.fixture(scope="module")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def window(qapp):
    store = Mock()
    win = MainWindow(store=store, app_settings=AppSettings())
    win.metadata_panel.show_image(
        ImageRecord(path=PATH, rating=2, raw_tags=["color:red", "user:beach"])
    )
    yield win
    win.command_runner.stop_all()
    win.deleteLater()


def test_rating_failure_reported_in_status_bar(window):
    window.store.set_rating.side_effect = TagPersistenceError("read-only file")
    window.metadata_panel.rate_requested.emit(4, [PATH])
    assert "read-only file" in window.statusBar().currentMessage()
    assert window.metadata_panel.rating == 2


def test_color_label_failure_reported_in_status_bar(window):
    window.store.set_color_label.side_effect = TagPersistenceError("locked")
    window.metadata_panel.color_label_requested.emit("blue", [PATH])
    assert "locked" in window.statusBar().currentMessage()
    assert window.tag_controller.view.color_label == "red"


def test_rating_and_color_label_applied_after_write(window):
    window.metadata_panel.rate_requested.emit(5, [PATH])
    window.store.set_rating.assert_called_once_with([PATH], 5)
    assert window.metadata_panel.rating == 5

    window.metadata_panel.color_label_requested.emit(None, [PATH])
    window.store.set_color_label.assert_called_once_with([PATH], None)
    assert window.tag_controller.view.color_label is None
    assert window.statusBar().currentMessage() == ""
