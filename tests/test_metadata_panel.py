import pyexiv2  # noqa: F401  # Must be first to avoid Windows crash with pyexiv2
import pytest

# Ensure PyQt6 available; in core (non-GUI) CI job module import will skip cleanly.
pytest.importorskip("PyQt6.QtWidgets", reason="PyQt6 not available for GUI tests")
from PyQt6.QtWidgets import QApplication  # noqa: E402
from unittest.mock import Mock  # noqa: E402

from core.app_settings import AppSettings  # noqa: E402
from core.image_record import ImageRecord  # noqa: E402
from core.tag_commands import TagCommandKind  # noqa: E402
from ui.controllers.tag_mutation_controller import TagMutationController  # noqa: E402
from ui.metadata_panel import MetadataPanel  # noqa: E402

PATH = "/photos/a.jpg"


@pytest.fixture(scope="module")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def dispatched():
    return []


@pytest.fixture
def panel(qapp, dispatched):
    controller = TagMutationController(dispatched.append)
    widget = MetadataPanel(controller, AppSettings(tagging_shortcuts=["portrait"]))
    yield widget
    widget.deleteLater()


def _record(raw=None, tags=None, rating=2, path=PATH):
    return ImageRecord(
        path=path,
        width=100,
        height=50,
        raw_attributes=raw if raw is not None else {"FNumber": 2.8, "Make": "Canon"},
        rating=rating,
        raw_tags=tags if tags is not None else ["color:red", "user:beach", "flagged"],
    )


def test_placeholder_without_image(panel):
    panel.show_image(None)
    assert panel.cards == {}
    assert panel.current_paths() == []


def test_renders_sections(panel):
    panel.show_image(_record())
    assert set(panel.cards) == {"properties", "organization", "camera", "exif"}
    assert list(panel.tag_chips) == ["beach", "flagged"]
    assert panel.color_buttons["red"].isChecked()
    assert not panel.color_buttons[None].isChecked()
    assert [b.text() for b in panel.rating_buttons] == ["★", "★", "☆", "☆", "☆"]
    assert [b.text() for b in panel.shortcut_buttons] == ["portrait"]


def test_gps_section_only_when_resolved(panel):
    raw = {
        "GPSLatitude": "40 deg 26 min 46 sec",
        "GPSLatitudeRef": "N",
        "GPSLongitude": "79 deg 58 min 56 sec",
        "GPSLongitudeRef": "W",
    }
    panel.show_image(_record(raw=raw))
    assert "gps" in panel.cards
    assert "openstreetmap.org" in panel.gps_link_label.text()

    raw["GPSLongitude"] = "unknown"
    panel.show_image(_record(raw=raw))
    assert "gps" not in panel.cards


def test_no_exif(panel):
    panel.show_image(_record(raw={}))
    assert "exif" not in panel.cards
    assert "camera" not in panel.cards


def test_rating_and_color_requests(panel):
    rate_mock = Mock()
    color_mock = Mock()
    panel.rate_requested.connect(rate_mock)
    panel.color_label_requested.connect(color_mock)
    panel.show_image(_record())

    panel.rating_buttons[3].click()
    rate_mock.assert_called_once_with(4, [PATH])

    panel.color_buttons["blue"].click()
    color_mock.assert_called_once_with("blue", [PATH])
    # Selection only changes once the new label is persisted
    assert panel.color_buttons["red"].isChecked()
    assert not panel.color_buttons["blue"].isChecked()

    panel.update_raw_tags(["color:blue", "user:beach"])
    assert panel.color_buttons["blue"].isChecked()
    assert panel.record.raw_tags == ["color:blue", "user:beach"]

    panel.set_rating(5)
    assert [b.text() for b in panel.rating_buttons] == ["★"] * 5


def test_add_tag_round_trip(panel, dispatched):
    tags_changed = Mock()
    panel.tags_changed.connect(tags_changed)
    panel.show_image(_record())

    panel.tag_input.setText("  Sunset")
    panel.add_tag_button.click()
    assert len(dispatched) == 1
    command = dispatched[0]
    assert command.tag == "user:sunset"
    assert panel.add_tag_button.text() == "…"

    panel.handle_command_result(command, True, "")
    assert "sunset" in panel.tag_chips
    assert panel.tag_input.text() == ""
    assert panel.record.raw_tags[-1] == "user:sunset"
    tags_changed.assert_called_once()


def test_shortcut_adds_tag(panel, dispatched):
    panel.show_image(_record())
    panel.shortcut_buttons[0].click()
    assert dispatched[0].tag == "user:portrait"


def test_remove_chip_pending_then_applied(panel, dispatched):
    panel.show_image(_record())
    panel.tag_chips["beach"].click()
    command = dispatched[0]
    assert command.kind is TagCommandKind.REMOVE
    assert not panel.tag_chips["beach"].isEnabled()

    panel.handle_command_result(command, True, "")
    assert "beach" not in panel.tag_chips


def test_failed_command_keeps_tags(panel, dispatched):
    panel.show_image(_record())
    panel.tag_chips["flagged"].click()
    panel.handle_command_result(dispatched[0], False, "permission denied")
    assert "flagged" in panel.tag_chips
    assert panel.tag_chips["flagged"].isEnabled()


def test_result_for_previous_selection_ignored(panel, dispatched):
    panel.show_image(_record())
    panel.tag_input.setText("old")
    panel.add_tag_button.click()
    command = dispatched[0]

    panel.show_image(_record(path="/photos/b.jpg", tags=["user:other"]))
    panel.handle_command_result(command, True, "")

    assert list(panel.tag_chips) == ["other"]
    assert panel.record.raw_tags == ["user:other"]


def test_organization_expansion_survives_selection(panel):
    panel.show_image(_record())
    assert not panel.cards["organization"].is_expanded
    panel.cards["organization"].toggle_expanded()
    panel.show_image(_record(path="/photos/b.jpg"))
    assert panel.cards["organization"].is_expanded
