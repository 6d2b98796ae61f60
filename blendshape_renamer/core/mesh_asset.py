"""
In-memory mesh asset with named, multi-frame blendshapes.

The accessors here mirror a game engine's mesh API one-to-one
(GetBlendShapeName, GetBlendShapeFrameCount, AddBlendShapeFrame, ...), so
the rename algorithm in renamer.py reads the same as it would against the
engine itself. All per-vertex data is held as (vertex_count, 3) float32
numpy arrays.

Data layout:
    MeshAsset
        vertices      (N, 3) float32  rest positions
        triangles     (M, 3) int32    vertex indices
        normals       (N, 3) float32 or None
        blend_shapes  list[BlendShape], order is significant
    BlendShape
        name          unique within the mesh
        frames        list[BlendShapeFrame], weights strictly increasing
    BlendShapeFrame
        weight, delta_vertices, delta_normals, delta_tangents
"""

from dataclasses import dataclass, field

import numpy as np


class MeshAssetError(Exception):
    """
    Raised when a mesh operation would break the blendshape rules.

    Covers mismatched delta array sizes, a frame added to a blendshape that
    is not the last one, and non-increasing frame weights. The app layer
    catches this together with AssetFormatError and reports it to the user.
    """
    pass


def _as_delta_array(values, vertex_count: int, label: str) -> np.ndarray:
    """Copy values into a (vertex_count, 3) float32 array, or zeros if None."""
    if values is None:
        return np.zeros((vertex_count, 3), dtype=np.float32)
    array = np.array(values, dtype=np.float32, copy=True)
    if array.shape != (vertex_count, 3):
        raise MeshAssetError(
            f"{label} must have shape ({vertex_count}, 3), got {array.shape}"
        )
    return array


@dataclass
class BlendShapeFrame:
    """One weighted set of per-vertex deltas within a blendshape."""
    weight: float
    delta_vertices: np.ndarray
    delta_normals: np.ndarray
    delta_tangents: np.ndarray

    def __post_init__(self):
        # Stored in single precision, like the engine.
        self.weight = float(np.float32(self.weight))

    def copy(self) -> "BlendShapeFrame":
        return BlendShapeFrame(
            weight=self.weight,
            delta_vertices=self.delta_vertices.copy(),
            delta_normals=self.delta_normals.copy(),
            delta_tangents=self.delta_tangents.copy(),
        )


@dataclass
class BlendShape:
    name: str
    frames: list[BlendShapeFrame] = field(default_factory=list)

    def copy(self) -> "BlendShape":
        return BlendShape(self.name, [frame.copy() for frame in self.frames])


@dataclass
class MeshAsset:
    """
    A vertex buffer plus zero or more named blendshapes.

    Every blendshape follows the same rules a game engine enforces: a
    non-empty unique name, at least one frame, delta arrays sized to the
    vertex count, and strictly increasing frame weights.
    add_blend_shape_frame() checks them as frames are added; blendshapes
    passed to the constructor are checked in full, which also covers
    duplicate() of a mesh whose list was edited directly.
    """
    name: str
    vertices: np.ndarray
    triangles: np.ndarray
    normals: np.ndarray | None = None
    blend_shapes: list[BlendShape] = field(default_factory=list)

    def __post_init__(self):
        self.vertices = np.asarray(self.vertices, dtype=np.float32).reshape(-1, 3)
        self.triangles = np.asarray(self.triangles, dtype=np.int32).reshape(-1, 3)
        if self.normals is not None:
            self.normals = np.asarray(self.normals, dtype=np.float32).reshape(-1, 3)
            if len(self.normals) != len(self.vertices):
                raise MeshAssetError(
                    f"normals must have shape ({len(self.vertices)}, 3), "
                    f"got {self.normals.shape}"
                )
        self._validate_blend_shapes()

    def _validate_blend_shapes(self):
        seen = set()
        expected = (len(self.vertices), 3)
        for shape in self.blend_shapes:
            if not shape.name:
                raise MeshAssetError("Blendshape name must not be empty")
            if shape.name in seen:
                raise MeshAssetError(f"Duplicate blendshape name '{shape.name}'")
            seen.add(shape.name)
            if not shape.frames:
                raise MeshAssetError(f"Blendshape '{shape.name}' has no frames")

            previous = None
            for frame in shape.frames:
                if previous is not None and frame.weight <= previous:
                    raise MeshAssetError(
                        f"Frame weights for '{shape.name}' must increase "
                        f"({frame.weight} <= {previous})"
                    )
                previous = frame.weight
                for label in ("delta_vertices", "delta_normals", "delta_tangents"):
                    shape_of = np.shape(getattr(frame, label))
                    if shape_of != expected:
                        raise MeshAssetError(
                            f"{label} of '{shape.name}' must have shape "
                            f"{expected}, got {shape_of}"
                        )

    # --- Geometry ---

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def blend_shape_count(self) -> int:
        return len(self.blend_shapes)

    # --- Blendshape accessors ---

    def _shape(self, shape_index: int) -> BlendShape:
        # Negative indices are rejected explicitly; list indexing would
        # otherwise silently wrap around.
        if not 0 <= shape_index < len(self.blend_shapes):
            raise IndexError(
                f"Blendshape index {shape_index} out of range "
                f"(mesh has {len(self.blend_shapes)})"
            )
        return self.blend_shapes[shape_index]

    def _frame(self, shape_index: int, frame_index: int) -> BlendShapeFrame:
        frames = self._shape(shape_index).frames
        if not 0 <= frame_index < len(frames):
            raise IndexError(
                f"Frame index {frame_index} out of range "
                f"(blendshape {shape_index} has {len(frames)})"
            )
        return frames[frame_index]

    def get_blend_shape_name(self, shape_index: int) -> str:
        return self._shape(shape_index).name

    def get_blend_shape_index(self, name: str) -> int:
        """Return the index of the blendshape called name, or -1."""
        for i, shape in enumerate(self.blend_shapes):
            if shape.name == name:
                return i
        return -1

    def blend_shape_names(self) -> list[str]:
        return [shape.name for shape in self.blend_shapes]

    def get_blend_shape_frame_count(self, shape_index: int) -> int:
        return len(self._shape(shape_index).frames)

    def get_blend_shape_frame_weight(self, shape_index: int, frame_index: int) -> float:
        return self._frame(shape_index, frame_index).weight

    def get_blend_shape_frame_vertices(self, shape_index: int, frame_index: int):
        """
        Return (delta_vertices, delta_normals, delta_tangents) for one frame.

        The arrays are copies. Callers may buffer them and then clear the
        mesh's blendshapes without the buffered data changing underneath.
        """
        frame = self._frame(shape_index, frame_index)
        return (
            frame.delta_vertices.copy(),
            frame.delta_normals.copy(),
            frame.delta_tangents.copy(),
        )

    # --- Blendshape mutation ---

    def clear_blend_shapes(self):
        self.blend_shapes = []

    def add_blend_shape_frame(self, name: str, weight: float, delta_vertices,
                              delta_normals=None, delta_tangents=None):
        """
        Add a frame to the blendshape called name.

        If name is the last blendshape, the frame is appended to it and its
        weight must exceed that of the previous frame. If name belongs to an
        earlier blendshape the call fails, because frames of one shape must
        be contiguous. Otherwise a new blendshape is appended.

        Raises:
            MeshAssetError: On an empty name, wrong array sizes, a frame
                            added to a non-last blendshape, or a weight
                            that does not increase.
        """
        if not name:
            raise MeshAssetError("Blendshape name must not be empty")

        frame = BlendShapeFrame(
            weight=weight,
            delta_vertices=_as_delta_array(delta_vertices, self.vertex_count, "delta_vertices"),
            delta_normals=_as_delta_array(delta_normals, self.vertex_count, "delta_normals"),
            delta_tangents=_as_delta_array(delta_tangents, self.vertex_count, "delta_tangents"),
        )

        existing = self.get_blend_shape_index(name)
        if existing < 0:
            self.blend_shapes.append(BlendShape(name, [frame]))
            return

        if existing != len(self.blend_shapes) - 1:
            raise MeshAssetError(
                f"Cannot add frame to '{name}': only the last blendshape "
                f"can receive additional frames"
            )

        previous = self.blend_shapes[existing].frames[-1].weight
        if frame.weight <= previous:
            raise MeshAssetError(
                f"Frame weights for '{name}' must increase "
                f"({frame.weight} <= {previous})"
            )
        self.blend_shapes[existing].frames.append(frame)

    # --- Copying ---

    def duplicate(self) -> "MeshAsset":
        """Deep copy: the result shares no array with this mesh."""
        return MeshAsset(
            name=self.name,
            vertices=self.vertices.copy(),
            triangles=self.triangles.copy(),
            normals=None if self.normals is None else self.normals.copy(),
            blend_shapes=[shape.copy() for shape in self.blend_shapes],
        )
