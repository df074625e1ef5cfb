"""
Metadata Panel Widget for PhotoMeta
Displays normalized image metadata and the organization controls
(rating, color label, tags) for the selected image.
"""

import logging
from typing import List, Optional

from PyQt6.QtCore import QEasingCurve, QPropertyAnimation, Qt, pyqtSignal
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QScrollArea,
    QSizePolicy,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from core.app_settings import (
    MAP_LINK_ZOOM,
    MAX_RATING,
    METADATA_PANEL_MAX_WIDTH,
    METADATA_PANEL_MIN_WIDTH,
    AppSettings,
)
from core.display_model import ImageDisplayModel, build_display_model
from core.image_record import ImageRecord
from core.tag_commands import TagCommand, TagCommandKind
from core.tag_state import COLOR_LABELS, TagItem, to_raw_tag
from ui.controllers.tag_mutation_controller import TagMutationController

logger = logging.getLogger(__name__)


class MetadataCard(QFrame):
    """A titled card; collapsible cards toggle their content on header click."""

    toggled = pyqtSignal(bool)

    def __init__(
        self,
        title: str,
        icon: str = "📷",
        collapsible: bool = False,
        expanded: bool = True,
        parent=None,
    ):
        super().__init__(parent)
        self.setObjectName("metadataCard")
        self.title = title
        self.icon = icon
        self.collapsible = collapsible
        self.is_expanded = expanded
        self.animation = None

        self.setup_ui()
        self.setup_animations()

    def setup_ui(self):
        self.setFrameStyle(QFrame.Shape.Box)
        self.setSizePolicy(QSizePolicy.Policy.Preferred, QSizePolicy.Policy.Maximum)

        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)

        self.header = QFrame()
        self.header.setObjectName("cardHeader")
        self.header.setFixedHeight(32)

        header_layout = QHBoxLayout(self.header)
        header_layout.setContentsMargins(10, 6, 10, 6)

        self.icon_label = QLabel(self.icon)
        self.icon_label.setFont(QFont("Segoe UI Emoji", 14))
        self.title_label = QLabel(self.title)
        self.title_label.setFont(QFont("Segoe UI", 9, QFont.Weight.Bold))

        header_layout.addWidget(self.icon_label)
        header_layout.addWidget(self.title_label)
        header_layout.addStretch()

        self.expand_indicator = QLabel("▼" if self.is_expanded else "▶")
        self.expand_indicator.setFont(QFont("Segoe UI", 8))
        self.expand_indicator.setVisible(self.collapsible)
        header_layout.addWidget(self.expand_indicator)

        self.content_widget = QWidget()
        self.content_widget.setObjectName("cardContent")
        self.content_widget.setSizePolicy(
            QSizePolicy.Policy.Preferred, QSizePolicy.Policy.Maximum
        )
        self.content_layout = QVBoxLayout(self.content_widget)
        self.content_layout.setContentsMargins(10, 6, 10, 8)
        self.content_layout.setSpacing(4)
        self.content_widget.setVisible(self.is_expanded)

        main_layout.addWidget(self.header)
        main_layout.addWidget(self.content_widget)

        if self.collapsible:
            self.header.setCursor(Qt.CursorShape.PointingHandCursor)
            self.header.mousePressEvent = self.toggle_expanded

    def setup_animations(self):
        self.animation = QPropertyAnimation(self.content_widget, b"maximumHeight")
        self.animation.setDuration(250)
        self.animation.setEasingCurve(QEasingCurve.Type.OutCubic)

    def toggle_expanded(self, event=None):
        self.is_expanded = not self.is_expanded
        self.expand_indicator.setText("▼" if self.is_expanded else "▶")
        if self.is_expanded:
            self.content_widget.setVisible(True)
            self.animation.setStartValue(0)
            self.animation.setEndValue(self.content_widget.sizeHint().height())
            self.animation.start()
        else:
            self.content_widget.setVisible(False)
        self.toggled.emit(self.is_expanded)

    def add_info_row(self, label: str, value) -> QLabel:
        row = QHBoxLayout()
        row.setContentsMargins(0, 1, 0, 1)

        label_widget = QLabel(label)
        label_widget.setObjectName("metadataLabel")
        label_widget.setFixedWidth(90)
        label_widget.setWordWrap(True)

        text = str(value) if value is not None else "N/A"
        value_widget = QLabel(text)
        value_widget.setObjectName("metadataValue")
        value_widget.setWordWrap(True)
        value_widget.setToolTip(text)

        row.addWidget(label_widget)
        row.addWidget(value_widget, 1)
        self.content_layout.addLayout(row)
        return value_widget

    def add_section_title(self, text: str):
        title = QLabel(text.upper())
        title.setObjectName("sectionTitle")
        title.setFont(QFont("Segoe UI", 8, QFont.Weight.Bold))
        self.content_layout.addWidget(title)


class TagLineEdit(QLineEdit):
    """Line edit that reports focus changes."""

    focus_changed = pyqtSignal(bool)

    def focusInEvent(self, event):
        super().focusInEvent(event)
        self.focus_changed.emit(True)

    def focusOutEvent(self, event):
        super().focusOutEvent(event)
        self.focus_changed.emit(False)


class MetadataPanel(QWidget):
    """Sidebar showing image properties, organization, camera settings, GPS and EXIF."""

    rate_requested = pyqtSignal(int, list)  # rating, paths
    color_label_requested = pyqtSignal(object, list)  # color name or None, paths
    tags_changed = pyqtSignal(list, list)  # paths, [{"tag": str, "isUser": bool}]

    def __init__(
        self,
        tag_controller: TagMutationController,
        app_settings: Optional[AppSettings] = None,
        parent=None,
    ):
        super().__init__(parent)
        self.setObjectName("metadataPanel")
        self.tag_controller = tag_controller
        self.app_settings = app_settings or AppSettings()
        self.record: Optional[ImageRecord] = None
        self.model: Optional[ImageDisplayModel] = None
        self.rating = 0

        self.rating_buttons: List[QToolButton] = []
        self.color_buttons = {}
        self.tag_chips = {}
        self.shortcut_buttons: List[QPushButton] = []
        self.tag_input: Optional[TagLineEdit] = None
        self.add_tag_button: Optional[QPushButton] = None
        self.gps_link_label: Optional[QLabel] = None
        self.cards = {}

        self.tag_controller.tags_changed.connect(self.tags_changed)
        self.tag_controller.state_changed.connect(self._refresh_organization)

        self.setup_ui()

    def setup_ui(self):
        self.setMinimumWidth(METADATA_PANEL_MIN_WIDTH)
        self.setMaximumWidth(METADATA_PANEL_MAX_WIDTH)
        self.setSizePolicy(QSizePolicy.Policy.Preferred, QSizePolicy.Policy.Expanding)

        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)

        header = QFrame()
        header.setObjectName("sidebarHeader")
        header.setFixedHeight(48)
        header_layout = QHBoxLayout(header)
        header_layout.setContentsMargins(16, 12, 16, 12)
        self.title_label = QLabel("Metadata")
        self.title_label.setFont(QFont("Segoe UI", 12, QFont.Weight.Bold))
        header_layout.addWidget(self.title_label)
        header_layout.addStretch()
        main_layout.addWidget(header)

        scroll_area = QScrollArea()
        scroll_area.setObjectName("metadataScrollArea")
        scroll_area.setWidgetResizable(True)

        self.content_widget = QWidget()
        self.content_layout = QVBoxLayout(self.content_widget)
        self.content_layout.setContentsMargins(6, 6, 6, 6)
        self.content_layout.setSpacing(6)

        scroll_area.setWidget(self.content_widget)
        main_layout.addWidget(scroll_area)

        self.show_placeholder()

    # --- Public API ---
    def show_image(self, record: Optional[ImageRecord]):
        """Render a freshly selected image, or the placeholder when None."""
        self.clear_content()
        if record is None:
            self.record = None
            self.model = None
            self.tag_controller.load(None, [])
            self.show_placeholder()
            return

        logger.debug(f"Updating metadata panel for: {record.filename}")
        self.record = record
        self.rating = record.rating
        self.tag_controller.load(record.path, record.raw_tags)
        self.refresh()

    def set_rating(self, rating: int):
        self.rating = max(0, min(MAX_RATING, int(rating)))
        if self.record is not None:
            self.record.rating = self.rating
        self._update_rating_buttons()

    def update_raw_tags(self, raw_tags: List[str]):
        """Adopt an updated raw tag list (e.g. after the color label was persisted)."""
        if self.record is not None:
            self.record.raw_tags = list(raw_tags)
        self.tag_controller.replace_raw_tags(raw_tags)

    def current_paths(self) -> List[str]:
        return [self.record.path] if self.record is not None else []

    def handle_command_result(self, command: TagCommand, success: bool, error: str):
        """Slot for persistence results; results for a previous selection are dropped."""
        if not self.tag_controller.is_current_path(command.paths):
            logger.debug(
                f"Ignoring result for previous selection: {command.describe()}"
            )
            self.tag_controller.forget(command)
            return
        self.tag_controller.handle_command_result(command, success, error)
        if success and self.record is not None:
            self.record.raw_tags = list(self.tag_controller.state.raw_tags)

    # --- Rendering ---
    def show_placeholder(self):
        self.clear_content()
        label = QLabel("No image selected.")
        label.setObjectName("placeholderText")
        label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.content_layout.addWidget(label)
        self.content_layout.addStretch()

    def clear_content(self):
        self.rating_buttons = []
        self.color_buttons = {}
        self.tag_chips = {}
        self.shortcut_buttons = []
        self.tag_input = None
        self.add_tag_button = None
        self.gps_link_label = None
        self.cards = {}
        while self.content_layout.count() > 0:
            child = self.content_layout.takeAt(0)
            if child.widget():
                child.widget().deleteLater()

    def refresh(self):
        if self.record is None:
            self.show_placeholder()
            return

        self.clear_content()
        try:
            self.model = build_display_model(self.record)
            self.add_image_properties_card()
            self.add_organization_card()
            self.add_camera_settings_card()
            self.add_gps_card()
            self.add_exif_catalog_card()
            self.content_layout.addStretch()
        except Exception as e:
            logger.error(f"Error updating metadata panel: {e}", exc_info=True)
            self.show_error_message(str(e))

    def add_image_properties_card(self):
        card = MetadataCard("Image Properties", "🖼️")
        card.add_info_row("Filename", self.model.filename)
        card.add_info_row("Dimensions", self.model.dimensions)
        card.add_info_row("Capture Date", self.model.capture_date)
        self._add_card("properties", card)

    def add_organization_card(self):
        state = self.tag_controller.state
        card = MetadataCard(
            "Organization", "🏷️", collapsible=True, expanded=state.organization_expanded
        )
        card.toggled.connect(lambda _: self.tag_controller.toggle_organization())

        card.add_section_title("Rating")
        rating_row = QHBoxLayout()
        for star in range(1, MAX_RATING + 1):
            button = QToolButton()
            button.setObjectName("ratingStar")
            button.setAutoRaise(True)
            button.clicked.connect(lambda _, s=star: self._on_star_clicked(s))
            rating_row.addWidget(button)
            self.rating_buttons.append(button)
        rating_row.addStretch()
        card.content_layout.addLayout(rating_row)
        self._update_rating_buttons()

        card.add_section_title("Color Label")
        color_row = QHBoxLayout()
        none_button = QToolButton()
        none_button.setText("✕")
        none_button.setToolTip("None")
        none_button.setCheckable(True)
        none_button.clicked.connect(lambda: self._on_color_clicked(None))
        color_row.addWidget(none_button)
        self.color_buttons[None] = none_button
        for color in COLOR_LABELS:
            button = QToolButton()
            button.setCheckable(True)
            button.setToolTip(color.name)
            button.setStyleSheet(
                f"QToolButton {{ background-color: {color.color}; border-radius: 9px; "
                f"min-width: 18px; min-height: 18px; }}"
            )
            button.clicked.connect(lambda _, c=color.name: self._on_color_clicked(c))
            color_row.addWidget(button)
            self.color_buttons[color.name] = button
        color_row.addStretch()
        card.content_layout.addLayout(color_row)

        card.add_section_title("Tags")
        self.tags_container = QWidget()
        self.tags_layout = QHBoxLayout(self.tags_container)
        self.tags_layout.setContentsMargins(0, 0, 0, 0)
        self.tags_layout.setSpacing(4)
        card.content_layout.addWidget(self.tags_container)

        input_row = QHBoxLayout()
        self.tag_input = TagLineEdit()
        self.tag_input.setObjectName("tagInput")
        self.tag_input.setPlaceholderText("Add tag...")
        self.tag_input.setText(state.input_text)
        self.tag_input.textChanged.connect(self._on_tag_text_changed)
        self.tag_input.returnPressed.connect(self._on_add_clicked)
        self.tag_input.focus_changed.connect(self.tag_controller.set_input_focused)
        self.add_tag_button = QPushButton("+")
        self.add_tag_button.setObjectName("addTagButton")
        self.add_tag_button.setFixedWidth(28)
        self.add_tag_button.clicked.connect(self._on_add_clicked)
        input_row.addWidget(self.tag_input, 1)
        input_row.addWidget(self.add_tag_button)
        card.content_layout.addLayout(input_row)

        shortcuts = self.app_settings.tagging_shortcuts
        if shortcuts:
            shortcut_row = QHBoxLayout()
            for shortcut in shortcuts:
                button = QPushButton(shortcut)
                button.setObjectName("tagShortcut")
                button.clicked.connect(
                    lambda _, s=shortcut: self.tag_controller.add_tag(s)
                )
                shortcut_row.addWidget(button)
                self.shortcut_buttons.append(button)
            shortcut_row.addStretch()
            card.content_layout.addLayout(shortcut_row)

        self._add_card("organization", card)
        self._refresh_organization()
        if state.input_focused:
            self.tag_input.setFocus()

    def add_camera_settings_card(self):
        if not self.model.camera_settings:
            return
        card = MetadataCard("Key Camera Settings", "📷")
        for entry in self.model.camera_settings:
            card.add_info_row(entry.label, entry.formatted_value)
        self._add_card("camera", card)

    def add_gps_card(self):
        if not self.model.has_gps:
            return
        gps = self.model.gps
        card = MetadataCard("GPS Location", "📍")
        card.add_info_row("Latitude", self.model.format_latitude())
        card.add_info_row("Longitude", self.model.format_longitude())
        if gps.altitude:
            card.add_info_row("Altitude", gps.altitude)

        self.gps_link_label = QLabel(
            f'<a href="{gps.openstreetmap_url(MAP_LINK_ZOOM)}">Open in OpenStreetMap</a>'
        )
        self.gps_link_label.setOpenExternalLinks(True)
        self.gps_link_label.setTextInteractionFlags(
            Qt.TextInteractionFlag.TextBrowserInteraction
        )
        card.content_layout.addWidget(self.gps_link_label)
        self._add_card("gps", card)

    def add_exif_catalog_card(self):
        if not self.model.has_exif:
            label = QLabel("No EXIF data found in this file.")
            label.setObjectName("noExifText")
            label.setAlignment(Qt.AlignmentFlag.AlignCenter)
            self.content_layout.addWidget(label)
            return
        card = MetadataCard("All EXIF Data", "⚙️", collapsible=True)
        for entry in self.model.exif_catalog:
            card.add_info_row(entry.label, entry.display_value)
        self._add_card("exif", card)

    def show_error_message(self, error: str):
        self.clear_content()
        error_label = QLabel(f"Error loading metadata:\n{error}")
        error_label.setObjectName("errorText")
        error_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        error_label.setWordWrap(True)
        self.content_layout.addWidget(error_label)

    def _add_card(self, name: str, card: MetadataCard):
        self.cards[name] = card
        self.content_layout.addWidget(card)

    # --- Organization updates ---
    def _refresh_organization(self):
        """Re-render tag chips, color selection and pending indicators."""
        if self.tag_input is None:
            return
        view = self.tag_controller.view
        state = self.tag_controller.state

        for color, button in self.color_buttons.items():
            button.setChecked(view.color_label == color)

        while self.tags_layout.count() > 0:
            child = self.tags_layout.takeAt(0)
            if child.widget():
                child.widget().deleteLater()
        self.tag_chips = {}

        if view.tags:
            for item in view.tags:
                chip = QPushButton(f"{item.display_name}  ✕")
                chip.setObjectName("userTagChip" if item.is_user else "tagChip")
                chip.setToolTip("Click to remove")
                chip.setEnabled(
                    not self.tag_controller.is_pending(
                        TagCommandKind.REMOVE, to_raw_tag(item)
                    )
                )
                chip.clicked.connect(lambda _, i=item: self._on_chip_clicked(i))
                self.tags_layout.addWidget(chip)
                self.tag_chips[item.display_name] = chip
        else:
            empty = QLabel("No tags")
            empty.setObjectName("noTagsText")
            self.tags_layout.addWidget(empty)
        self.tags_layout.addStretch()

        if self.tag_input.text() != state.input_text:
            self.tag_input.blockSignals(True)
            self.tag_input.setText(state.input_text)
            self.tag_input.blockSignals(False)
        self._update_add_button()

    def _update_add_button(self):
        if self.add_tag_button is None:
            return
        adding = self.tag_controller.is_pending(TagCommandKind.ADD)
        self.add_tag_button.setText("…" if adding else "+")
        self.add_tag_button.setEnabled(bool(self.tag_controller.state.input_text.strip()))

    def _update_rating_buttons(self):
        for star, button in enumerate(self.rating_buttons, start=1):
            button.setText("★" if star <= self.rating else "☆")

    # --- Slots ---
    def _on_star_clicked(self, star: int):
        self.rate_requested.emit(star, self.current_paths())

    def _on_color_clicked(self, color: Optional[str]):
        self.color_label_requested.emit(color, self.current_paths())
        # Selection reflects persisted state only
        self._refresh_organization()

    def _on_tag_text_changed(self, text: str):
        self.tag_controller.set_input_text(text)
        self._update_add_button()

    def _on_add_clicked(self):
        self.tag_controller.add_tag()

    def _on_chip_clicked(self, item: TagItem):
        self.tag_controller.remove_tag(item)
