import os

# Widgets are created in tests; run Qt without a display.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import numpy as np
import pytest

from blendshape_renamer.core.mesh_asset import MeshAsset


def build_mesh(names=("Smile", "Frown"), frames_per_shape=None, name="Body", seed=0,
               with_normals=True):
    """
    A small quad mesh (4 vertices, 2 triangles) with random blendshape deltas.

    frames_per_shape maps a blendshape name to its number of frames; shapes
    not listed get a single frame. Frame weights are 100/n, 200/n, ... 100.
    """
    rng = np.random.default_rng(seed)
    vertices = np.array(
        [[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0]], dtype=np.float32
    )
    triangles = np.array([[0, 1, 2], [0, 2, 3]], dtype=np.int32)
    normals = np.tile(np.array([0, 0, 1], dtype=np.float32), (4, 1)) if with_normals else None
    mesh = MeshAsset(name=name, vertices=vertices, triangles=triangles, normals=normals)

    frames_per_shape = frames_per_shape or {}
    for shape_name in names:
        count = frames_per_shape.get(shape_name, 1)
        for f in range(count):
            mesh.add_blend_shape_frame(
                shape_name,
                100.0 * (f + 1) / count,
                rng.normal(size=(4, 3)).astype(np.float32),
                rng.normal(size=(4, 3)).astype(np.float32),
                rng.normal(size=(4, 3)).astype(np.float32),
            )
    return mesh


@pytest.fixture
def mesh():
    return build_mesh()


@pytest.fixture
def multi_frame_mesh():
    return build_mesh(names=("Smile", "Blink", "Frown"), frames_per_shape={"Blink": 3})


def assert_frames_equal(a, b):
    """Two blendshapes carry identical frames (weights and all delta arrays)."""
    assert len(a.frames) == len(b.frames)
    for fa, fb in zip(a.frames, b.frames):
        assert fa.weight == fb.weight
        np.testing.assert_array_equal(fa.delta_vertices, fb.delta_vertices)
        np.testing.assert_array_equal(fa.delta_normals, fb.delta_normals)
        np.testing.assert_array_equal(fa.delta_tangents, fb.delta_tangents)
