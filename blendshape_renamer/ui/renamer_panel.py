"""
The renamer panel: every control the artist touches.

Layout, top to bottom:
    - Object picker: drop zone + "Open Mesh..." button
    - Info placeholder, shown while no mesh is bound
    - Editor (hidden until a mesh is bound):
        search field, blendshape count, scrollable "000  Name" list,
        current selection, new name, save folder, auto-assign checkbox,
        output format, rename button, inline error label

The panel owns only UI state: the cached name list, the selected index and
the search text. The mesh itself is always read from the bound
SkinnedMeshRenderer, and whenever the renderer's mesh changes (a new file,
auto-assign, undo) the names are reloaded and the selection is cleared.

Validation is shared with the core (is_valid_new_name), so the rename
button is enabled for exactly the requests rename_blend_shape() accepts.

Signal flow:
    1. User drops a file or picks one → open_requested(path)
    2. App loads it and calls set_renderer(renderer)
    3. User selects a row, edits the name, clicks Rename
       → rename_requested(index, new_name, save_folder, auto_assign, extension)
    4. App runs the rename; on auto-assign it calls restore_selection()
"""

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QListWidget,
    QListWidgetItem, QCheckBox, QComboBox, QPushButton, QFileDialog,
)
from PySide6.QtCore import Qt, Signal

from blendshape_renamer.core.asset_io import mesh_info
from blendshape_renamer.core.renamer import (
    filter_blend_shapes,
    format_blend_shape_label,
    is_valid_new_name,
)
from blendshape_renamer.core.scene import SkinnedMeshRenderer
from blendshape_renamer.core.settings import (
    DEFAULT_AUTO_ASSIGN,
    DEFAULT_SAVE_FOLDER,
    MESH_FILE_FILTER,
    OUTPUT_FORMATS,
)
from blendshape_renamer.ui.drop_zone import DropZone


class RenamerPanel(QWidget):
    # Emitted with a mesh file path chosen via the drop zone or file dialog.
    open_requested = Signal(str)

    # (index, stripped new name, save folder text, auto-assign flag,
    # output extension).
    rename_requested = Signal(int, str, str, bool, str)

    def __init__(self):
        super().__init__()
        layout = QVBoxLayout(self)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(12)

        header = QLabel("Blendshape Renamer")
        header.setObjectName("section_title")
        layout.addWidget(header)

        # --- Object picker ---
        self.drop_zone = DropZone()
        self.drop_zone.file_dropped.connect(self.open_requested.emit)
        layout.addWidget(self.drop_zone)

        picker_row = QHBoxLayout()
        picker_row.setSpacing(12)
        self.renderer_label = QLabel("No mesh selected")
        self.renderer_label.setObjectName("renderer_label")
        picker_row.addWidget(self.renderer_label, 1)

        self._open_btn = QPushButton("Open Mesh...")
        self._open_btn.setObjectName("browse_button")
        self._open_btn.clicked.connect(self.choose_mesh_file)
        picker_row.addWidget(self._open_btn)
        layout.addLayout(picker_row)

        # --- Placeholder while nothing is bound ---
        self._placeholder = QLabel("Open a skinned mesh with blendshapes to get started.")
        self._placeholder.setStyleSheet("color: #999999;")
        self._placeholder.setWordWrap(True)
        layout.addWidget(self._placeholder)

        # --- Editor ---
        self._editor = QWidget()
        editor_layout = QVBoxLayout(self._editor)
        editor_layout.setContentsMargins(0, 0, 0, 0)
        editor_layout.setSpacing(10)

        self.mesh_info_label = QLabel("")
        self.mesh_info_label.setObjectName("mesh_info")
        self.mesh_info_label.setWordWrap(True)
        editor_layout.addWidget(self.mesh_info_label)

        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("Search")
        self.search_edit.setClearButtonEnabled(True)
        self.search_edit.textChanged.connect(self._on_search_changed)
        editor_layout.addWidget(self.search_edit)

        self.count_label = QLabel("")
        editor_layout.addWidget(self.count_label)

        # Each row stores the real blendshape index in UserRole, since the
        # row number stops matching it as soon as a filter is applied.
        self.blend_shape_list = QListWidget()
        self.blend_shape_list.setObjectName("blend_shape_list")
        self.blend_shape_list.setMinimumHeight(160)
        self.blend_shape_list.setMaximumHeight(320)
        self.blend_shape_list.itemClicked.connect(self._on_item_clicked)
        editor_layout.addWidget(self.blend_shape_list)

        self.selection_label = QLabel("Current selection: -")
        editor_layout.addWidget(self.selection_label)

        self.new_name_edit = QLineEdit()
        self.new_name_edit.setPlaceholderText("New name")
        self.new_name_edit.textChanged.connect(self._refresh_state)
        editor_layout.addWidget(self.new_name_edit)

        folder_row = QHBoxLayout()
        folder_label = QLabel("Save folder:")
        folder_label.setFixedWidth(90)
        folder_row.addWidget(folder_label)
        self.save_folder_edit = QLineEdit(DEFAULT_SAVE_FOLDER)
        folder_row.addWidget(self.save_folder_edit, 1)
        editor_layout.addLayout(folder_row)

        self.auto_assign_check = QCheckBox("Auto-assign renamed mesh to the renderer")
        self.auto_assign_check.setChecked(DEFAULT_AUTO_ASSIGN)
        editor_layout.addWidget(self.auto_assign_check)

        format_row = QHBoxLayout()
        format_label = QLabel("Format:")
        format_label.setFixedWidth(90)
        format_row.addWidget(format_label)
        self.format_combo = QComboBox()
        self.format_combo.setObjectName("format_combo")
        for label in OUTPUT_FORMATS:
            self.format_combo.addItem(label)
        format_row.addWidget(self.format_combo, 1)
        editor_layout.addLayout(format_row)

        self.rename_button = QPushButton("Rename (create new mesh)")
        self.rename_button.setObjectName("rename_button")
        self.rename_button.setFixedHeight(36)
        self.rename_button.clicked.connect(self._on_rename_clicked)
        editor_layout.addWidget(self.rename_button)

        self.error_label = QLabel("The new name is empty or already used by another blendshape.")
        self.error_label.setObjectName("error_label")
        self.error_label.setWordWrap(True)
        editor_layout.addWidget(self.error_label)

        layout.addWidget(self._editor)
        layout.addStretch()

        self._renderer: SkinnedMeshRenderer | None = None
        self._names: list[str] = []
        self._selected_index = -1

        self._editor.hide()
        self._refresh_state()

    # --- Public API ---

    @property
    def selected_index(self) -> int:
        return self._selected_index

    @property
    def names(self) -> list[str]:
        return list(self._names)

    def set_renderer(self, renderer: SkinnedMeshRenderer | None):
        """Bind the panel to a renderer (or unbind with None)."""
        if self._renderer is not None:
            self._renderer.shared_mesh_changed.disconnect(self._on_mesh_changed)
        self._renderer = renderer
        if renderer is not None:
            renderer.shared_mesh_changed.connect(self._on_mesh_changed)
        self._on_mesh_changed()

    def select(self, index: int):
        """Select a blendshape and pre-fill the new name with its current name."""
        if not 0 <= index < len(self._names):
            return
        self._selected_index = index
        self.new_name_edit.setText(self._names[index])
        self._rebuild_list()
        self._refresh_state()

    def restore_selection(self, index: int, new_name: str):
        """Re-select index after the renamed mesh has been auto-assigned."""
        if 0 <= index < len(self._names):
            self._selected_index = index
            self.new_name_edit.setText(new_name)
            self._rebuild_list()
            self._refresh_state()

    def output_extension(self) -> str:
        """File extension of the output format currently chosen."""
        return OUTPUT_FORMATS[self.format_combo.currentText()]

    def visible_indices(self) -> list[int]:
        """Blendshape indices currently shown in the list, in row order."""
        return [
            self.blend_shape_list.item(row).data(Qt.ItemDataRole.UserRole)
            for row in range(self.blend_shape_list.count())
        ]

    # --- Slots ---

    def _on_mesh_changed(self):
        """Reload names from the renderer's mesh and clear the selection."""
        mesh = self._renderer.shared_mesh if self._renderer is not None else None
        self._names = mesh.blend_shape_names() if mesh is not None else []
        self._selected_index = -1
        self.new_name_edit.setText("")

        if mesh is None:
            self.renderer_label.setText("No mesh selected")
            self._editor.hide()
            self._placeholder.show()
        else:
            source = self._renderer.mesh_path
            self.renderer_label.setText(
                f"{self._renderer.name}  →  {mesh.name}"
                + (f"  ({source.name})" if source is not None else "")
            )
            on_disk = source if source is not None and source.is_file() else None
            info = mesh_info(mesh, on_disk)
            size_x, size_y, size_z = info["extents"]
            text = (
                f"Vertices: {info['vertices']:,}    "
                f"Triangles: {info['triangles']:,}    "
                f"Frames: {info['frames']:,}\n"
                f"Size: {size_x:.3g} × {size_y:.3g} × {size_z:.3g}"
            )
            if "file_size_mb" in info:
                text += f"    File: {info['file_size_mb']:.2f} MB"
            self.mesh_info_label.setText(text)
            self._placeholder.hide()
            self._editor.show()

        self.count_label.setText(f"BlendShapes: {len(self._names)}")
        self._rebuild_list()
        self._refresh_state()

    def _on_search_changed(self, _text: str):
        self._rebuild_list()

    def _on_item_clicked(self, item: QListWidgetItem):
        self.select(item.data(Qt.ItemDataRole.UserRole))

    def choose_mesh_file(self):
        path, _ = QFileDialog.getOpenFileName(self, "Open Mesh", "", MESH_FILE_FILTER)
        if path:
            self.open_requested.emit(path)

    def _on_rename_clicked(self):
        if not self._is_request_valid():
            return
        self.rename_requested.emit(
            self._selected_index,
            self.new_name_edit.text().strip(),
            self.save_folder_edit.text(),
            self.auto_assign_check.isChecked(),
            self.output_extension(),
        )

    # --- Internals ---

    def _rebuild_list(self):
        # Signals are blocked so programmatic selection does not re-enter select().
        self.blend_shape_list.blockSignals(True)
        self.blend_shape_list.clear()
        for index in filter_blend_shapes(self._names, self.search_edit.text()):
            item = QListWidgetItem(format_blend_shape_label(index, self._names[index]))
            item.setData(Qt.ItemDataRole.UserRole, index)
            self.blend_shape_list.addItem(item)
            if index == self._selected_index:
                self.blend_shape_list.setCurrentItem(item)
        self.blend_shape_list.blockSignals(False)

    def _is_request_valid(self) -> bool:
        return self._selected_index >= 0 and is_valid_new_name(
            self._names, self.new_name_edit.text(), self._selected_index
        )

    def _refresh_state(self):
        has_selection = self._selected_index >= 0
        if has_selection:
            self.selection_label.setText(
                "Current selection: "
                + format_blend_shape_label(self._selected_index, self._names[self._selected_index])
            )
        else:
            self.selection_label.setText("Current selection: -")
        self.new_name_edit.setEnabled(has_selection)

        valid = self._is_request_valid()
        self.rename_button.setEnabled(valid)
        self.error_label.setHidden(not has_selection or valid)
