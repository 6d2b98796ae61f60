"""
Scene binding for the mesh being edited.

SkinnedMeshRenderer stands in for the scene object that owns a mesh: it
holds the shared mesh reference, the file it came from, and the current
per-blendshape weights. The panel never keeps its own copy of "the mesh";
it always reads renderer.shared_mesh and listens for shared_mesh_changed,
so undo/redo and auto-assign all flow through one place.

Reassigning the mesh after a rename goes through AssignMeshCommand on a
QUndoStack, which records the previous reference so Edit → Undo puts the
original mesh back on the renderer. The renamed asset file stays on disk
either way; undo only restores the reference.
"""

import logging
from pathlib import Path

from PySide6.QtCore import QObject, Signal
from PySide6.QtGui import QUndoCommand

from blendshape_renamer.core.mesh_asset import MeshAsset

logger = logging.getLogger(__name__)


class SkinnedMeshRenderer(QObject):
    """
    Scene object displaying a mesh with its current blendshape weights.

    Signals:
        shared_mesh_changed(): Emitted after the mesh reference changes.
    """

    shared_mesh_changed = Signal()

    def __init__(self, name: str, mesh: MeshAsset | None = None,
                 mesh_path: Path | None = None):
        super().__init__()
        self.name = name
        self._shared_mesh = mesh
        self._mesh_path = Path(mesh_path) if mesh_path is not None else None
        self._weights = [0.0] * (mesh.blend_shape_count if mesh else 0)

    @property
    def shared_mesh(self) -> MeshAsset | None:
        return self._shared_mesh

    @property
    def mesh_path(self) -> Path | None:
        return self._mesh_path

    def set_shared_mesh(self, mesh: MeshAsset | None, mesh_path: Path | None = None):
        """
        Point the renderer at a different mesh.

        Weights are kept index-for-index when the blendshape count matches
        (a rename never changes it); otherwise they reset to zero.
        """
        count = mesh.blend_shape_count if mesh else 0
        if count != len(self._weights):
            self._weights = [0.0] * count

        self._shared_mesh = mesh
        self._mesh_path = Path(mesh_path) if mesh_path is not None else None
        self.shared_mesh_changed.emit()

    def blend_shape_weights(self) -> list[float]:
        return list(self._weights)

    def set_blend_shape_weights(self, weights: list[float]):
        if len(weights) != len(self._weights):
            raise ValueError(
                f"Expected {len(self._weights)} weights, got {len(weights)}"
            )
        self._weights = [float(w) for w in weights]


class AssignMeshCommand(QUndoCommand):
    """
    Undoable reassignment of a renderer's shared mesh.

    The previous mesh, path and weights are captured at construction time.
    QUndoStack.push() calls redo() immediately, which applies the new mesh.
    """

    def __init__(self, renderer: SkinnedMeshRenderer, mesh: MeshAsset,
                 mesh_path: Path | None = None):
        super().__init__("Assign Renamed Mesh")
        self._renderer = renderer
        self._new = (mesh, mesh_path)
        self._old = (renderer.shared_mesh, renderer.mesh_path)
        self._old_weights = renderer.blend_shape_weights()

    def redo(self):
        mesh, path = self._new
        self._renderer.set_shared_mesh(mesh, path)
        logger.info("Assigned '%s' to renderer '%s'", mesh.name, self._renderer.name)

    def undo(self):
        mesh, path = self._old
        self._renderer.set_shared_mesh(mesh, path)
        self._renderer.set_blend_shape_weights(self._old_weights)
        logger.info("Restored previous mesh on renderer '%s'", self._renderer.name)
