from pathlib import Path

import pytest
from PySide6.QtGui import QUndoStack

from blendshape_renamer.core.renamer import rename_blend_shape
from blendshape_renamer.core.scene import AssignMeshCommand, SkinnedMeshRenderer

from conftest import build_mesh


def test_set_shared_mesh_emits_change(qtbot, mesh):
    renderer = SkinnedMeshRenderer("Body", mesh, Path("Body.asset"))
    other = build_mesh(name="Other")

    with qtbot.waitSignal(renderer.shared_mesh_changed, timeout=1000):
        renderer.set_shared_mesh(other, Path("Other.asset"))

    assert renderer.shared_mesh is other
    assert renderer.mesh_path == Path("Other.asset")


def test_weights_kept_when_blend_shape_count_matches(qtbot, mesh):
    renderer = SkinnedMeshRenderer("Body", mesh)
    renderer.set_blend_shape_weights([0.0, 75.0])

    renderer.set_shared_mesh(rename_blend_shape(mesh, 0, "Grin"))

    assert renderer.blend_shape_weights() == [0.0, 75.0]


def test_weights_reset_when_blend_shape_count_changes(qtbot, mesh):
    renderer = SkinnedMeshRenderer("Body", mesh)
    renderer.set_blend_shape_weights([50.0, 0.0])

    renderer.set_shared_mesh(build_mesh(names=("A", "B", "C")))

    assert renderer.blend_shape_weights() == [0.0, 0.0, 0.0]


def test_assign_command_undo_and_redo(qtbot, mesh):
    renderer = SkinnedMeshRenderer("Body", mesh, Path("Body.asset"))
    renderer.set_blend_shape_weights([30.0, 0.0])
    renamed = rename_blend_shape(mesh, 0, "Grin")
    stack = QUndoStack()

    stack.push(AssignMeshCommand(renderer, renamed, Path("Body_Renamed.asset")))
    assert renderer.shared_mesh is renamed
    assert renderer.mesh_path == Path("Body_Renamed.asset")
    assert stack.undoText() == "Assign Renamed Mesh"

    stack.undo()
    assert renderer.shared_mesh is mesh
    assert renderer.mesh_path == Path("Body.asset")
    assert renderer.blend_shape_weights() == [30.0, 0.0]

    stack.redo()
    assert renderer.shared_mesh is renamed


def test_set_weights_requires_one_per_blend_shape(qtbot, mesh):
    renderer = SkinnedMeshRenderer("Body", mesh)
    with pytest.raises(ValueError):
        renderer.set_blend_shape_weights([1.0])
    assert renderer.blend_shape_weights() == [0.0, 0.0]
