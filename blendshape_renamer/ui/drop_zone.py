"""
Drag-and-drop mesh picker for the Blendshape Renamer.

Together with the "Open Mesh..." button this is the object picker: the
user drags a mesh asset (.asset or .glb) from the file manager onto the
zone and the panel binds it to a renderer.

It uses Qt's drag-and-drop event system:
    - dragEnterEvent: Accepts the drag only if it carries a supported file
    - dragLeaveEvent: Resets visual state when the drag leaves the zone
    - dropEvent: Emits the first supported file path

Only one mesh is edited at a time, so when several files are dropped the
first supported one wins and the rest are ignored.
"""

from pathlib import Path

from PySide6.QtWidgets import QWidget, QVBoxLayout, QLabel
from PySide6.QtCore import Qt, Signal

from blendshape_renamer.core.settings import SUPPORTED_MESH_EXTENSIONS


def first_mesh_file(paths: list[str]) -> str | None:
    """
    Return the first path that is an existing file with a mesh extension.

    Directories and unsupported files are skipped. Returns None when
    nothing in paths can be opened.
    """
    for raw_path in paths:
        p = Path(raw_path)
        if p.is_file() and p.suffix.lower() in SUPPORTED_MESH_EXTENSIONS:
            return str(p)
    return None


class DropZone(QWidget):
    # Emitted with the absolute path of the dropped mesh file.
    file_dropped = Signal(str)

    def __init__(self):
        super().__init__()
        # Object name enables QSS styling (dashed border, hover effects).
        self.setObjectName("drop_zone")
        self.setAcceptDrops(True)
        self.setMinimumHeight(90)

        layout = QVBoxLayout(self)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.setSpacing(4)

        title = QLabel("Drop a mesh asset here")
        title.setObjectName("drop_title")
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(title)

        subtitle = QLabel("Supports .asset and .glb")
        subtitle.setObjectName("drop_subtitle")
        subtitle.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(subtitle)

    def dragEnterEvent(self, event):
        """Accept the drag only if one of its URLs is a supported mesh file."""
        if event.mimeData().hasUrls():
            paths = [url.toLocalFile() for url in event.mimeData().urls()]
            if first_mesh_file(paths):
                event.acceptProposedAction()
                # Reset stylesheet to re-evaluate the QSS :hover state.
                self.setStyleSheet("")

    def dragLeaveEvent(self, event):
        self.setStyleSheet("")

    def dropEvent(self, event):
        paths = [url.toLocalFile() for url in event.mimeData().urls()]
        mesh_path = first_mesh_file(paths)
        if mesh_path:
            self.file_dropped.emit(mesh_path)
