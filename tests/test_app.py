import pytest
from PySide6.QtWidgets import QMessageBox

from blendshape_renamer.app import BlendshapeRenamerApp
from blendshape_renamer.core.asset_io import load_mesh_asset, save_mesh_asset

from conftest import build_mesh


@pytest.fixture
def dialogs(monkeypatch):
    """Record modal dialogs instead of blocking on them."""
    shown = {"information": [], "critical": []}
    monkeypatch.setattr(
        QMessageBox, "information", lambda *args, **kwargs: shown["information"].append(args)
    )
    monkeypatch.setattr(
        QMessageBox, "critical", lambda *args, **kwargs: shown["critical"].append(args)
    )
    return shown


@pytest.fixture
def window(qtbot, tmp_path, dialogs):
    app_window = BlendshapeRenamerApp(project_root=tmp_path)
    qtbot.addWidget(app_window)
    source = save_mesh_asset(build_mesh(), tmp_path / "Body.asset")
    app_window.open_mesh(str(source))
    return app_window


def test_open_mesh_binds_renderer(window):
    assert window.renderer.name == "Body"
    assert window.panel.names == ["Smile", "Frown"]


def test_open_failure_keeps_previous_mesh(window, tmp_path, dialogs):
    broken = tmp_path / "Broken.glb"
    broken.write_bytes(b"nope")

    window.open_mesh(str(broken))

    assert len(dialogs["critical"]) == 1
    assert window.panel.names == ["Smile", "Frown"]


def test_rename_with_auto_assign(window, tmp_path, dialogs):
    window._run_rename(0, "Grin", "Assets/EditedMeshes", True)

    asset_path = tmp_path / "Assets" / "EditedMeshes" / "Body_Renamed.asset"
    assert asset_path.is_file()
    assert load_mesh_asset(asset_path).blend_shape_names() == ["Grin", "Frown"]

    assert window.renderer.shared_mesh.blend_shape_names() == ["Grin", "Frown"]
    assert window.renderer.mesh_path == asset_path
    assert window.panel.selected_index == 0
    assert window.panel.new_name_edit.text() == "Grin"

    (_parent, title, message), = dialogs["information"]
    assert title == "Done"
    assert "000: Smile → Grin" in message
    assert str(asset_path) in message


def test_undo_restores_original_mesh(window):
    window._run_rename(1, "Scowl", "Assets/EditedMeshes", True)
    window.undo_stack.undo()

    assert window.renderer.shared_mesh.blend_shape_names() == ["Smile", "Frown"]
    assert window.panel.names == ["Smile", "Frown"]


def test_rename_without_auto_assign_leaves_renderer(window, tmp_path):
    window._run_rename(0, "Grin", "Assets/EditedMeshes", False)

    assert window.renderer.shared_mesh.blend_shape_names() == ["Smile", "Frown"]
    assert window.undo_stack.count() == 0
    assert (tmp_path / "Assets" / "EditedMeshes" / "Body_Renamed.asset").is_file()


def test_repeated_rename_gets_unique_file_names(window, tmp_path):
    window._run_rename(0, "Grin", "Assets/EditedMeshes", False)
    window._run_rename(0, "Beam", "Assets/EditedMeshes", False)

    names = sorted(p.name for p in (tmp_path / "Assets" / "EditedMeshes").iterdir())
    assert names == ["Body_Renamed 1.asset", "Body_Renamed.asset"]


def test_folder_creation_failure_is_reported(window, tmp_path, dialogs):
    (tmp_path / "Assets").write_text("not a folder")

    window._run_rename(0, "Grin", "Assets/EditedMeshes", True)

    assert len(dialogs["critical"]) == 1
    assert window.undo_stack.count() == 0
    assert window.renderer.shared_mesh.blend_shape_names() == ["Smile", "Frown"]


def test_info_line_shows_source_file_size(window):
    assert "File: " in window.panel.mesh_info_label.text()


def test_truncated_file_is_reported_not_raised(window, tmp_path, dialogs):
    glb = save_mesh_asset(build_mesh(name="Face"), tmp_path / "Face.glb")
    glb.write_bytes(glb.read_bytes()[:-60])

    window.open_mesh(str(glb))

    assert len(dialogs["critical"]) == 1
    assert window.panel.names == ["Smile", "Frown"]


def test_rename_to_glb(window, tmp_path, dialogs):
    window._run_rename(0, "Grin", "Assets/EditedMeshes", True, ".glb")

    asset_path = tmp_path / "Assets" / "EditedMeshes" / "Body_Renamed.glb"
    assert load_mesh_asset(asset_path).blend_shape_names() == ["Grin", "Frown"]
    assert window.renderer.mesh_path == asset_path
    assert len(dialogs["information"]) == 1


def test_multi_frame_mesh_cannot_be_renamed_to_glb(qtbot, tmp_path, dialogs):
    app_window = BlendshapeRenamerApp(project_root=tmp_path)
    qtbot.addWidget(app_window)
    mesh = build_mesh(names=("Smile", "Blink"), frames_per_shape={"Blink": 2})
    app_window.open_mesh(str(save_mesh_asset(mesh, tmp_path / "Body.asset")))

    app_window._run_rename(0, "Grin", "Assets/EditedMeshes", True, ".glb")

    assert len(dialogs["critical"]) == 1
    assert app_window.undo_stack.count() == 0
    assert not (tmp_path / "Assets" / "EditedMeshes" / "Body_Renamed.glb").exists()
