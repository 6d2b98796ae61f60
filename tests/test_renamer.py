import numpy as np
import pytest

from blendshape_renamer.core.renamer import (
    RenameError,
    filter_blend_shapes,
    format_blend_shape_label,
    is_valid_new_name,
    rename_blend_shape,
)
from blendshape_renamer.core.mesh_asset import BlendShape, MeshAssetError

from conftest import assert_frames_equal, build_mesh


def test_smile_frown_scenario(mesh):
    renamed = rename_blend_shape(mesh, 0, "Grin")

    assert renamed.blend_shape_names() == ["Grin", "Frown"]
    for original, result in zip(mesh.blend_shapes, renamed.blend_shapes):
        assert_frames_equal(original, result)


def test_rename_leaves_source_untouched(mesh):
    before = mesh.duplicate()
    rename_blend_shape(mesh, 1, "Scowl")

    assert mesh.name == "Body"
    assert mesh.blend_shape_names() == ["Smile", "Frown"]
    for a, b in zip(mesh.blend_shapes, before.blend_shapes):
        assert_frames_equal(a, b)


def test_renamed_mesh_gets_suffix(mesh):
    assert rename_blend_shape(mesh, 0, "Grin").name == "Body_Renamed"


def test_geometry_is_bit_identical(mesh):
    renamed = rename_blend_shape(mesh, 0, "Grin")

    assert renamed.vertex_count == mesh.vertex_count
    np.testing.assert_array_equal(renamed.vertices, mesh.vertices)
    np.testing.assert_array_equal(renamed.triangles, mesh.triangles)
    np.testing.assert_array_equal(renamed.normals, mesh.normals)


def test_multi_frame_blend_shapes_preserved(multi_frame_mesh):
    renamed = rename_blend_shape(multi_frame_mesh, 1, "EyesClosed")

    assert renamed.blend_shape_names() == ["Smile", "EyesClosed", "Frown"]
    assert renamed.get_blend_shape_frame_count(1) == 3
    assert [renamed.get_blend_shape_frame_weight(1, f) for f in range(3)] == [
        multi_frame_mesh.get_blend_shape_frame_weight(1, f) for f in range(3)
    ]
    for original, result in zip(multi_frame_mesh.blend_shapes, renamed.blend_shapes):
        assert_frames_equal(original, result)


def test_rename_round_trip_restores_frame_data(multi_frame_mesh):
    there = rename_blend_shape(multi_frame_mesh, 1, "EyesClosed")
    back = rename_blend_shape(there, 1, "Blink")

    assert back.blend_shape_names() == multi_frame_mesh.blend_shape_names()
    for original, result in zip(multi_frame_mesh.blend_shapes, back.blend_shapes):
        assert_frames_equal(original, result)


def test_new_name_is_stripped(mesh):
    renamed = rename_blend_shape(mesh, 0, "  Grin\t")
    assert renamed.get_blend_shape_name(0) == "Grin"


def test_keeping_own_name_is_allowed(mesh):
    renamed = rename_blend_shape(mesh, 0, "Smile")
    assert renamed.blend_shape_names() == ["Smile", "Frown"]


@pytest.mark.parametrize("bad_name", ["", "   ", "\t\n", "Frown", " Frown "])
def test_invalid_names_raise_before_any_copy(mesh, bad_name):
    with pytest.raises(RenameError):
        rename_blend_shape(mesh, 0, bad_name)
    assert mesh.blend_shape_names() == ["Smile", "Frown"]


def test_index_out_of_range(mesh):
    with pytest.raises(IndexError):
        rename_blend_shape(mesh, 2, "Grin")


def test_is_valid_new_name():
    names = ["Smile", "Frown", "Blink"]

    assert is_valid_new_name(names, "Grin", 0)
    assert is_valid_new_name(names, "Smile", 0)
    # Case-sensitive: "frown" does not collide with "Frown".
    assert is_valid_new_name(names, "frown", 0)
    assert not is_valid_new_name(names, "Frown", 0)
    assert not is_valid_new_name(names, "", 0)
    assert not is_valid_new_name(names, "   ", 0)
    assert not is_valid_new_name(names, None, 0)


def test_filter_blend_shapes_is_case_insensitive():
    names = ["MouthSmile", "MouthFrown", "EyeBlink_L", "EyeBlink_R"]

    assert filter_blend_shapes(names, "") == [0, 1, 2, 3]
    assert filter_blend_shapes(names, "mouth") == [0, 1]
    assert filter_blend_shapes(names, "BLINK") == [2, 3]
    assert filter_blend_shapes(names, "jaw") == []


def test_format_blend_shape_label():
    assert format_blend_shape_label(0, "Smile") == "000  Smile"
    assert format_blend_shape_label(42, "Frown") == "042  Frown"


def test_mesh_without_blend_shapes_has_nothing_to_rename():
    empty = build_mesh(names=())
    with pytest.raises(IndexError):
        rename_blend_shape(empty, 0, "Grin")


def test_blend_shape_without_frames_is_not_silently_dropped(mesh):
    mesh.blend_shapes.insert(0, BlendShape("Empty"))
    with pytest.raises(MeshAssetError):
        rename_blend_shape(mesh, 1, "Grin")
