"""MainWindow: marker list, info panel and the "no location" page.

The window only renders what `MapVM` exposes. User interaction is posted to
the view-model's event channel and applied on the next poll tick.
"""

from __future__ import annotations

from PySide6.QtCore import QEvent, Qt, QTimer, Signal
from PySide6.QtGui import QAction, QPixmap
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QLabel,
    QMainWindow,
    QMessageBox,
    QSplitter,
    QStackedWidget,
    QTreeWidget,
    QTreeWidgetItem,
    QVBoxLayout,
    QWidget,
)
from loguru import logger

from app.events import MapClicked, MarkerClicked
from app.viewmodels.main_vm import MainVM
from app.viewmodels.map_vm import MapVM
from app.views.constants import (
    COL_DATE,
    COL_LATITUDE,
    COL_LONGITUDE,
    COL_NAME,
    EVENT_POLL_INTERVAL_MS,
    HEADERS,
    IDENTIFIER_ROLE,
    IMAGE_FILE_FILTER,
    INFO_THUMB_MAX_WIDTH,
    PAGE_MARKERS,
    PAGE_NO_LOCATION,
    WINDOW_SIZE_RATIO,
)
from app.views.import_tasks import ImportTaskRunner
from core.services.interfaces import ImportResult, ImportStatus
from infrastructure.logging import open_latest_log, open_log_directory


class InfoPanel(QWidget):
    """Thumbnail and capture details of the selected photo."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        self.photo = QLabel(alignment=Qt.AlignCenter)
        self.position = QLabel()
        self.date = QLabel()
        self.time = QLabel()
        self.make = QLabel()
        self.model = QLabel()
        for widget in (self.photo, self.position, self.date, self.time, self.make, self.model):
            layout.addWidget(widget)
        layout.addStretch(1)
        self.show_photo(None)

    def show_photo(self, photo) -> None:
        """Fill the panel from a `PhotoVM`, or clear it when None."""
        if photo is None:
            self.photo.clear()
            for label in (self.position, self.date, self.time, self.make, self.model):
                label.clear()
            return
        pixmap = QPixmap()
        if photo.thumbnail and pixmap.loadFromData(photo.thumbnail):
            if pixmap.width() > INFO_THUMB_MAX_WIDTH:
                pixmap = pixmap.scaledToWidth(INFO_THUMB_MAX_WIDTH, Qt.SmoothTransformation)
            self.photo.setPixmap(pixmap)
        else:
            self.photo.setText("(no thumbnail)")
        self.position.setText(photo.position_text)
        self.date.setText(photo.date_text)
        self.time.setText(photo.time_text)
        self.make.setText(photo.make_text)
        self.model.setText(photo.model_text)


class MainWindow(QMainWindow):
    """Main application window."""

    importFinished = Signal(object)  # ImportResult

    def __init__(self, vm: MainVM, map_vm: MapVM) -> None:
        super().__init__()
        self._vm = vm
        self._map_vm = map_vm
        self._runner = ImportTaskRunner(vm=vm, receiver=self)

        self._setup_ui()
        self._setup_menus()

        self.importFinished.connect(self._on_import_finished)
        self._timer = QTimer(self)
        self._timer.setInterval(EVENT_POLL_INTERVAL_MS)
        self._timer.timeout.connect(self._poll_events)
        self._timer.start()

    def _setup_ui(self) -> None:
        self.setWindowTitle("Photo Mapper")

        self.tree = QTreeWidget()
        self.tree.setColumnCount(len(HEADERS))
        self.tree.setHeaderLabels(HEADERS)
        self.tree.setRootIsDecorated(False)
        self.tree.itemClicked.connect(self._on_item_clicked)
        self.tree.viewport().installEventFilter(self)

        self.info = InfoPanel()

        splitter = QSplitter(Qt.Horizontal)
        splitter.addWidget(self.tree)
        splitter.addWidget(self.info)
        splitter.setStretchFactor(0, 7)
        splitter.setStretchFactor(1, 3)

        self.no_location = QLabel(alignment=Qt.AlignCenter)
        self.no_location.setWordWrap(True)

        self.pages = QStackedWidget()
        self.pages.insertWidget(PAGE_MARKERS, splitter)
        self.pages.insertWidget(PAGE_NO_LOCATION, self.no_location)
        self.setCentralWidget(self.pages)

        screen = QApplication.primaryScreen()
        if screen is not None:
            geo = screen.availableGeometry()
            self.resize(
                int(geo.width() * WINDOW_SIZE_RATIO), int(geo.height() * WINDOW_SIZE_RATIO)
            )

    def _setup_menus(self) -> None:
        menubar = self.menuBar()

        file_menu = menubar.addMenu("File")
        self.action_import: QAction = file_menu.addAction("Import Photo…")
        self.action_clear: QAction = file_menu.addAction("Clear All")
        file_menu.addSeparator()
        self.action_exit: QAction = file_menu.addAction("Exit")

        log_menu = menubar.addMenu("Log")
        self.action_open_log: QAction = log_menu.addAction("Open Latest Log")
        self.action_open_log_dir: QAction = log_menu.addAction("Open Log Directory")

        self.action_import.triggered.connect(self.on_import_photo)
        self.action_clear.triggered.connect(self.on_clear_all)
        self.action_exit.triggered.connect(self.close)
        self.action_open_log.triggered.connect(open_latest_log)
        self.action_open_log_dir.triggered.connect(open_log_directory)

    # Rendering

    def refresh_markers(self) -> None:
        """Rebuild the marker list from the view-model."""
        self.tree.clear()
        selected_item: QTreeWidgetItem | None = None
        for marker in self._map_vm.markers:
            photo = self._map_vm.info_window(marker.identifier)
            item = QTreeWidgetItem()
            item.setText(COL_NAME, photo.file_name if photo else marker.identifier)
            item.setText(COL_LATITUDE, f"{marker.latitude:.6f}")
            item.setText(COL_LONGITUDE, f"{marker.longitude:.6f}")
            item.setText(COL_DATE, photo.record.date if photo else "")
            item.setData(COL_NAME, IDENTIFIER_ROLE, marker.identifier)
            self.tree.addTopLevelItem(item)
            if marker.identifier == self._map_vm.selected:
                selected_item = item
        if selected_item is not None:
            self.tree.setCurrentItem(selected_item)
        self.info.show_photo(self._map_vm.info_window())

    def centre_on_start(self, identifier: str | None = None) -> None:
        """Consume the pending start position and select its marker.

        `identifier` names the marker to select when it may not be loaded yet;
        otherwise the marker at the start position is looked up.
        """
        camera = self._map_vm.start_position()
        if camera is None:
            return
        logger.info(
            "Centring on {:.6f}, {:.6f} (zoom {})", camera.latitude, camera.longitude, camera.zoom
        )
        self.statusBar().showMessage(
            f"Centred on {camera.latitude:.6f}, {camera.longitude:.6f}", 5000
        )
        if identifier is None:
            for marker in self._map_vm.markers:
                if (marker.latitude, marker.longitude) == (camera.latitude, camera.longitude):
                    identifier = marker.identifier
                    break
        if identifier is not None:
            self._map_vm.channel.post(MarkerClicked(identifier))

    def show_no_location(self, result: ImportResult) -> None:
        """Show the error page for an image without usable location data."""
        self.no_location.setText(
            f"{result.path}\n\nThis photo has no GPS location data.\n{result.message}"
        )
        self.pages.setCurrentIndex(PAGE_NO_LOCATION)

    # Event plumbing

    def eventFilter(self, watched, event) -> bool:  # noqa: N802
        if watched is self.tree.viewport() and event.type() == QEvent.Type.MouseButtonPress:
            if self.tree.itemAt(event.position().toPoint()) is None:
                self._map_vm.channel.post(MapClicked())
        return super().eventFilter(watched, event)

    def _on_item_clicked(self, item: QTreeWidgetItem, _column: int) -> None:
        identifier = item.data(COL_NAME, IDENTIFIER_ROLE)
        if identifier:
            self._map_vm.channel.post(MarkerClicked(identifier))

    def _poll_events(self) -> None:
        if self._map_vm.process_events():
            self.refresh_markers()

    def _on_import_finished(self, result: ImportResult) -> None:
        if result.status is ImportStatus.STORED:
            self.pages.setCurrentIndex(PAGE_MARKERS)
            self.centre_on_start(result.record.identifier)
            self.statusBar().showMessage(f"Added {result.path}", 3000)
        elif result.status is ImportStatus.NO_GPS:
            self.show_no_location(result)
        else:
            QMessageBox.warning(self, "Import failed", f"{result.path}\n\n{result.message}")

    # Menu actions

    def on_import_photo(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Import Photo", "", IMAGE_FILE_FILTER)
        if path:
            self._runner.request_import(path)

    def on_clear_all(self) -> None:
        answer = QMessageBox.question(self, "Clear All", "Remove every photo from the map?")
        if answer == QMessageBox.Yes:
            count = self._vm.clear_all()
            self.pages.setCurrentIndex(PAGE_MARKERS)
            self.statusBar().showMessage(f"Removed {count} photos", 3000)
