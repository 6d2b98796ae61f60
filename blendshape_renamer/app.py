"""
Main application window for the Blendshape Renamer.

This module defines the top-level QMainWindow that hosts the renamer panel
and orchestrates everything the panel asks for:
    1. RenamerPanel emits open_requested(path) → the mesh is loaded and
       bound to a fresh SkinnedMeshRenderer
    2. RenamerPanel emits rename_requested(...) → the rename runs, the new
       asset is written, and (optionally) the renderer is reassigned
       through the undo stack
    3. The status bar and modal dialogs report the outcome

The undo stack backs Edit → Undo / Redo. Only the mesh reassignment is
undoable; the asset written to disk stays where it is.
"""

import logging
from pathlib import Path

from PySide6.QtWidgets import QMainWindow, QStatusBar, QMessageBox
from PySide6.QtGui import QAction, QKeySequence, QUndoStack

from blendshape_renamer.ui.renamer_panel import RenamerPanel
from blendshape_renamer.ui.styles import DARK_THEME
from blendshape_renamer.core.asset_io import load_mesh_asset
from blendshape_renamer.core.asset_store import create_asset, resolve_save_folder
from blendshape_renamer.core.mesh_asset import MeshAssetError
from blendshape_renamer.core.renamer import RenameError, rename_blend_shape
from blendshape_renamer.core.scene import AssignMeshCommand, SkinnedMeshRenderer
from blendshape_renamer.core.settings import ASSET_EXTENSION

logger = logging.getLogger(__name__)


class BlendshapeRenamerApp(QMainWindow):
    def __init__(self, project_root: Path | None = None):
        super().__init__()
        self.setWindowTitle("Blendshape Renamer")
        self.setMinimumSize(520, 640)
        self.resize(560, 760)
        self.setStyleSheet(DARK_THEME)

        # Relative save folders resolve against this; None means cwd.
        self._project_root = project_root

        self.undo_stack = QUndoStack(self)

        self.panel = RenamerPanel()
        self.setCentralWidget(self.panel)
        self.panel.open_requested.connect(self.open_mesh)
        self.panel.rename_requested.connect(self._run_rename)

        status_bar = QStatusBar()
        status_bar.showMessage("Ready")
        self.setStatusBar(status_bar)

        self._build_menus()

        # The renderer bound to the panel. Replaced on every open.
        self._renderer: SkinnedMeshRenderer | None = None

    @property
    def renderer(self) -> SkinnedMeshRenderer | None:
        return self._renderer

    def _build_menus(self):
        file_menu = self.menuBar().addMenu("&File")

        open_action = QAction("&Open Mesh...", self)
        open_action.setShortcut(QKeySequence.StandardKey.Open)
        open_action.triggered.connect(self.panel.choose_mesh_file)
        file_menu.addAction(open_action)

        file_menu.addSeparator()

        quit_action = QAction("&Quit", self)
        quit_action.setShortcut(QKeySequence.StandardKey.Quit)
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

        edit_menu = self.menuBar().addMenu("&Edit")
        undo_action = self.undo_stack.createUndoAction(self, "&Undo")
        undo_action.setShortcut(QKeySequence.StandardKey.Undo)
        edit_menu.addAction(undo_action)
        redo_action = self.undo_stack.createRedoAction(self, "&Redo")
        redo_action.setShortcut(QKeySequence.StandardKey.Redo)
        edit_menu.addAction(redo_action)

    def open_mesh(self, path: str):
        """
        Load a mesh file and bind it to a new renderer.

        Load failures are reported in the status bar and a critical dialog;
        the previously bound mesh, if any, stays in place.
        """
        mesh_path = Path(path)
        try:
            mesh = load_mesh_asset(mesh_path)
        except (MeshAssetError, OSError) as e:
            logger.error("Failed to open %s: %s", mesh_path, e)
            self.statusBar().showMessage(f"Open failed: {e}")
            QMessageBox.critical(self, "Open Failed", str(e))
            return

        # Commands on the stack refer to the old renderer; they cannot be
        # meaningfully undone once it is gone.
        self.undo_stack.clear()

        self._renderer = SkinnedMeshRenderer(mesh_path.stem, mesh, mesh_path)
        self.panel.set_renderer(self._renderer)
        self.statusBar().showMessage(
            f"Loaded {mesh.name}: {mesh.blend_shape_count} blendshapes"
        )

    def _run_rename(self, index: int, new_name: str, save_folder: str, auto_assign: bool,
                    extension: str = ASSET_EXTENSION):
        """
        Rename one blendshape, write the new asset, and optionally reassign.

        Args:
            index:       Blendshape index selected in the panel.
            new_name:    Stripped replacement name.
            save_folder: Destination folder text from the panel.
            auto_assign: Whether to point the renderer at the new mesh.
            extension:   Output format, ".asset" or ".glb".
        """
        if self._renderer is None or self._renderer.shared_mesh is None:
            return

        source = self._renderer.shared_mesh
        old_name = source.get_blend_shape_name(index)

        try:
            renamed = rename_blend_shape(source, index, new_name)
            folder = resolve_save_folder(save_folder, self._project_root)
            asset_path = create_asset(renamed, folder, extension)
        except (RenameError, MeshAssetError, OSError) as e:
            logger.error("Rename of %03d '%s' failed: %s", index, old_name, e)
            self.statusBar().showMessage(f"Rename failed: {e}")
            QMessageBox.critical(self, "Rename Failed", str(e))
            return

        if auto_assign:
            self.undo_stack.push(AssignMeshCommand(self._renderer, renamed, asset_path))
            self.panel.restore_selection(index, new_name)

        self.statusBar().showMessage(f"Created: {asset_path}")
        QMessageBox.information(
            self,
            "Done",
            f"Created:\n{asset_path}\nRenamed {index:03d}: {old_name} → {new_name}",
        )
