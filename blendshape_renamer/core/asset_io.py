"""
Mesh asset reading and writing.

Two on-disk formats are supported, chosen by file extension:

    - Native asset (.asset): a numpy .npz archive holding the full mesh,
      including multi-frame blendshapes. This is what renamed meshes are
      saved as by default. Loaded with allow_pickle=False, so only plain
      numeric and string arrays are ever read back.
    - glTF Binary (.glb): morph targets map to single-frame blendshapes.
      Names come from mesh.extras.targetNames, the de-facto convention
      used by Blender and most engine importers.

The GLB codec reads and writes the container directly (12-byte header,
JSON chunk, BIN chunk) with json + struct + numpy. trimesh's glTF loader
drops morph targets, so it cannot be used for the blendshape data itself;
trimesh is still used for derived geometry (vertex normals when a GLB has
none, bounding box for the info line).

GLB format (glTF 2.0, section 5.1):
    Bytes 0–11:    header (magic "glTF", version=2, total_length)
    Bytes 12+:     JSON chunk (4-byte length, 4-byte type "JSON", data)
    After JSON:    BIN  chunk (4-byte length, 4-byte type "BIN\\0", data)
"""

import json
import logging
import struct
import zipfile
from pathlib import Path

import numpy as np
import trimesh

from blendshape_renamer.core.mesh_asset import MeshAsset, MeshAssetError
from blendshape_renamer.core.settings import (
    ASSET_EXTENSION,
    ASSET_FORMAT_VERSION,
    GLB_EXTENSION,
    IMPORTED_FRAME_WEIGHT,
)

logger = logging.getLogger(__name__)


class AssetFormatError(MeshAssetError):
    """
    Raised when a file cannot be read or written as a mesh asset.

    Wraps unsupported extensions, malformed GLB containers, glTF features
    this tool does not handle (external buffers, sparse accessors,
    non-triangle primitives) and meshes that cannot be represented in the
    target format (multi-frame blendshapes in GLB).
    """
    pass


# glTF accessor component types → little-endian numpy dtypes.
_COMPONENT_DTYPES = {
    5120: np.dtype("<i1"),
    5121: np.dtype("<u1"),
    5122: np.dtype("<i2"),
    5123: np.dtype("<u2"),
    5125: np.dtype("<u4"),
    5126: np.dtype("<f4"),
}

_TYPE_COMPONENTS = {"SCALAR": 1, "VEC2": 2, "VEC3": 3, "VEC4": 4}

GL_ARRAY_BUFFER = 34962          # vertex attribute data
GL_ELEMENT_ARRAY_BUFFER = 34963  # index data
GL_TRIANGLES = 4

_GLB_MAGIC = b"glTF"
_CHUNK_JSON = b"JSON"
_CHUNK_BIN = b"BIN\x00"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def load_mesh_asset(path: Path) -> MeshAsset:
    """
    Load a mesh from disk, dispatching on the file extension.

    Raises:
        AssetFormatError: If the extension is unsupported or the file is
                          not a valid asset of that type.
        MeshAssetError:   If the decoded blendshapes break the frame rules.
        OSError:          If the file cannot be read.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ASSET_EXTENSION:
        loader = _load_native
    elif suffix == GLB_EXTENSION:
        loader = _load_glb
    else:
        raise AssetFormatError(f"Unsupported mesh format: {path.name}")

    # Truncated or inconsistent files surface as lookup, shape, unpack or
    # zip errors deep inside numpy and struct.
    try:
        mesh = loader(path)
    except (KeyError, IndexError, TypeError, ValueError, EOFError,
            struct.error, zipfile.BadZipFile) as e:
        raise AssetFormatError(f"{path.name} is corrupt or truncated: {e!r}") from e

    logger.info(
        "Loaded '%s' from %s (%d vertices, %d blendshapes)",
        mesh.name, path, mesh.vertex_count, mesh.blend_shape_count,
    )
    return mesh


def save_mesh_asset(mesh: MeshAsset, path: Path) -> Path:
    """Write mesh to path in the format implied by its extension."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ASSET_EXTENSION:
        _save_native(mesh, path)
    elif suffix == GLB_EXTENSION:
        _save_glb(mesh, path)
    else:
        raise AssetFormatError(f"Unsupported mesh format: {path.name}")

    logger.info("Saved '%s' to %s", mesh.name, path)
    return path


def mesh_info(mesh: MeshAsset, path: Path | None = None) -> dict:
    """
    Summary information for the panel's info line.

    Returns a dict with:
        - vertices: int
        - triangles: int
        - blend_shapes: int
        - frames: int: total frames across all blendshapes
        - extents: (x, y, z) bounding box size
        - file_size_mb: float, only when path is given
    """
    if mesh.vertex_count:
        extents = tuple(float(v) for v in _to_trimesh(mesh).extents)
    else:
        extents = (0.0, 0.0, 0.0)

    info = {
        "vertices": mesh.vertex_count,
        "triangles": len(mesh.triangles),
        "blend_shapes": mesh.blend_shape_count,
        "frames": sum(len(shape.frames) for shape in mesh.blend_shapes),
        "extents": extents,
    }
    if path is not None:
        info["file_size_mb"] = round(Path(path).stat().st_size / (1024 * 1024), 2)
    return info


def _to_trimesh(mesh: MeshAsset) -> trimesh.Trimesh:
    # process=False keeps vertex order intact; merging would break the
    # one-to-one mapping with the blendshape delta arrays.
    return trimesh.Trimesh(vertices=mesh.vertices, faces=mesh.triangles, process=False)


# ---------------------------------------------------------------------------
# Native .asset (numpy archive)
# ---------------------------------------------------------------------------

def _save_native(mesh: MeshAsset, path: Path) -> None:
    # Frames of all blendshapes are stacked into three (F, N, 3) arrays.
    # frame_counts tells the loader how to split them back per blendshape.
    frames = [frame for shape in mesh.blend_shapes for frame in shape.frames]
    empty = np.zeros((0, mesh.vertex_count, 3), dtype=np.float32)

    arrays = {
        "format_version": np.array(ASSET_FORMAT_VERSION, dtype=np.int32),
        "name": np.array(mesh.name),
        "vertices": mesh.vertices,
        "triangles": mesh.triangles,
        "blend_shape_names": np.array(mesh.blend_shape_names(), dtype=np.str_),
        "frame_counts": np.array([len(s.frames) for s in mesh.blend_shapes], dtype=np.int32),
        "frame_weights": np.array([f.weight for f in frames], dtype=np.float32),
        "delta_vertices": np.stack([f.delta_vertices for f in frames]) if frames else empty,
        "delta_normals": np.stack([f.delta_normals for f in frames]) if frames else empty,
        "delta_tangents": np.stack([f.delta_tangents for f in frames]) if frames else empty,
    }
    if mesh.normals is not None:
        arrays["normals"] = mesh.normals

    # Writing through a file handle stops numpy from appending ".npz".
    with open(path, "wb") as f:
        np.savez_compressed(f, **arrays)


def _load_native(path: Path) -> MeshAsset:
    try:
        archive = np.load(path, allow_pickle=False)
    except (OSError, ValueError, EOFError, zipfile.BadZipFile) as e:
        raise AssetFormatError(f"{path.name} is not a mesh asset: {e}") from e
    if not isinstance(archive, np.lib.npyio.NpzFile):
        raise AssetFormatError(f"{path.name} is not a mesh asset archive")

    with archive as data:
        required = {
            "format_version", "name", "vertices", "triangles", "blend_shape_names",
            "frame_counts", "frame_weights", "delta_vertices", "delta_normals",
            "delta_tangents",
        }
        missing = required - set(data.files)
        if missing:
            raise AssetFormatError(f"{path.name} is missing fields: {sorted(missing)}")

        version = int(data["format_version"])
        if version > ASSET_FORMAT_VERSION:
            raise AssetFormatError(
                f"{path.name} uses asset format {version}, "
                f"newer than supported ({ASSET_FORMAT_VERSION})"
            )

        mesh = MeshAsset(
            name=str(data["name"]),
            vertices=data["vertices"],
            triangles=data["triangles"],
            normals=data["normals"] if "normals" in data.files else None,
        )

        names = [str(n) for n in data["blend_shape_names"]]
        counts = data["frame_counts"]
        weights = data["frame_weights"]
        dv, dn, dt = data["delta_vertices"], data["delta_normals"], data["delta_tangents"]

        if len(names) != len(counts) or int(counts.sum()) != len(weights):
            raise AssetFormatError(f"{path.name} has inconsistent blendshape tables")

        offset = 0
        for name, count in zip(names, counts):
            for f in range(offset, offset + int(count)):
                mesh.add_blend_shape_frame(name, float(weights[f]), dv[f], dn[f], dt[f])
            offset += int(count)

    return mesh


# ---------------------------------------------------------------------------
# glTF Binary (.glb)
# ---------------------------------------------------------------------------

def _read_glb_chunks(path: Path) -> tuple[dict, bytes]:
    """Split a GLB file into its parsed JSON document and BIN chunk bytes."""
    data = path.read_bytes()

    if len(data) < 20 or data[:4] != _GLB_MAGIC:
        raise AssetFormatError(f"{path.name} is not a GLB file")

    version = struct.unpack_from("<I", data, 4)[0]
    if version != 2:
        raise AssetFormatError(f"{path.name}: only glTF 2.0 is supported (got {version})")

    gltf = None
    bin_chunk = b""
    offset = 12
    while offset + 8 <= len(data):
        chunk_length, chunk_type = struct.unpack_from("<I4s", data, offset)
        chunk = data[offset + 8 : offset + 8 + chunk_length]
        if chunk_type == _CHUNK_JSON:
            try:
                gltf = json.loads(chunk.rstrip(b" ").rstrip(b"\x00").decode("utf-8"))
            except (UnicodeDecodeError, json.JSONDecodeError) as e:
                raise AssetFormatError(f"{path.name}: malformed JSON chunk: {e}") from e
        elif chunk_type == _CHUNK_BIN:
            bin_chunk = chunk
        # Unknown chunk types are skipped, as glTF 2.0 requires.
        offset += 8 + chunk_length

    if gltf is None:
        raise AssetFormatError(f"{path.name} has no JSON chunk")
    return gltf, bin_chunk


def _read_accessor(gltf: dict, bin_chunk: bytes, index: int) -> np.ndarray:
    """
    Decode one accessor into a (count, components) numpy array.

    Handles interleaved buffer views (byteStride) and accessors without a
    bufferView (all zeros). Sparse accessors and external buffers are
    rejected rather than half-supported.
    """
    accessor = gltf["accessors"][index]
    if "sparse" in accessor:
        raise AssetFormatError("Sparse accessors are not supported")

    dtype = _COMPONENT_DTYPES[accessor["componentType"]]
    components = _TYPE_COMPONENTS[accessor["type"]]
    count = accessor["count"]

    if "bufferView" not in accessor:
        return np.zeros((count, components), dtype=dtype)

    view = gltf["bufferViews"][accessor["bufferView"]]
    buffer = gltf["buffers"][view["buffer"]]
    if view["buffer"] != 0 or "uri" in buffer:
        raise AssetFormatError("Only the embedded GLB buffer is supported")

    element_size = dtype.itemsize * components
    stride = view.get("byteStride") or element_size
    start = view.get("byteOffset", 0) + accessor.get("byteOffset", 0)

    if count == 0:
        return np.zeros((0, components), dtype=dtype)

    end = start + stride * (count - 1) + element_size
    if end > len(bin_chunk):
        raise AssetFormatError(
            f"Accessor {index} reads past the end of the BIN chunk "
            f"({end} > {len(bin_chunk)} bytes)"
        )

    if stride == element_size:
        flat = np.frombuffer(bin_chunk, dtype=dtype, count=count * components, offset=start)
    else:
        # Interleaved: the last element may end before a full stride, so pad
        # to count * stride, slice each row down to its element, reinterpret.
        raw = bin_chunk[start:end]
        raw += b"\x00" * (stride - element_size)
        rows = np.frombuffer(raw, dtype=np.uint8).reshape(count, stride)[:, :element_size]
        flat = np.frombuffer(rows.tobytes(), dtype=dtype)

    return flat.reshape(count, components).copy()


def _pick_mesh(gltf: dict) -> dict:
    meshes = gltf.get("meshes", [])
    if not meshes:
        raise AssetFormatError("GLB file contains no meshes")
    # Prefer the first mesh that actually has morph targets.
    for mesh in meshes:
        if any(prim.get("targets") for prim in mesh.get("primitives", [])):
            return mesh
    return meshes[0]


def _load_glb(path: Path) -> MeshAsset:
    gltf, bin_chunk = _read_glb_chunks(path)
    gltf_mesh = _pick_mesh(gltf)
    primitives = gltf_mesh.get("primitives", [])
    if not primitives:
        raise AssetFormatError(f"{path.name}: mesh has no primitives")

    target_count = len(primitives[0].get("targets", []))
    if any(len(p.get("targets", [])) != target_count for p in primitives):
        raise AssetFormatError(f"{path.name}: primitives disagree on morph target count")

    positions, normals, triangles = [], [], []
    # target_deltas[t][attribute] collects per-primitive arrays for target t.
    target_deltas = [{"POSITION": [], "NORMAL": [], "TANGENT": []} for _ in range(target_count)]
    has_normals = True
    vertex_offset = 0

    for prim in primitives:
        if prim.get("mode", GL_TRIANGLES) != GL_TRIANGLES:
            raise AssetFormatError(f"{path.name}: only triangle primitives are supported")
        attributes = prim.get("attributes", {})
        if "POSITION" not in attributes:
            raise AssetFormatError(f"{path.name}: primitive has no POSITION attribute")

        prim_positions = _read_accessor(gltf, bin_chunk, attributes["POSITION"]).astype(np.float32)
        n = len(prim_positions)
        positions.append(prim_positions)

        if "NORMAL" in attributes:
            normals.append(_read_accessor(gltf, bin_chunk, attributes["NORMAL"]).astype(np.float32))
        else:
            has_normals = False

        if "indices" in prim:
            indices = _read_accessor(gltf, bin_chunk, prim["indices"]).reshape(-1)
        else:
            indices = np.arange(n)
        if indices.size % 3:
            raise AssetFormatError(
                f"{path.name}: index count {indices.size} is not a multiple of 3"
            )
        if indices.size and int(indices.max()) >= n:
            raise AssetFormatError(f"{path.name}: triangle index out of range")
        triangles.append(indices.astype(np.int64).reshape(-1, 3) + vertex_offset)

        for t, target in enumerate(prim.get("targets", [])):
            for attribute, bucket in target_deltas[t].items():
                if attribute in target:
                    delta = _read_accessor(gltf, bin_chunk, target[attribute])[:, :3]
                    bucket.append(delta.astype(np.float32))
                else:
                    bucket.append(np.zeros((n, 3), dtype=np.float32))

        vertex_offset += n

    mesh = MeshAsset(
        name=gltf_mesh.get("name") or path.stem,
        vertices=np.concatenate(positions),
        triangles=np.concatenate(triangles),
    )
    mesh.normals = (
        np.concatenate(normals) if has_normals
        else np.asarray(_to_trimesh(mesh).vertex_normals, dtype=np.float32)
    )

    names = gltf_mesh.get("extras", {}).get("targetNames") or []
    if len(names) != target_count:
        names = [f"blendShape{t}" for t in range(target_count)]
    if len(set(names)) != len(names):
        raise AssetFormatError(f"{path.name}: duplicate morph target names")

    for name, deltas in zip(names, target_deltas):
        mesh.add_blend_shape_frame(
            name,
            IMPORTED_FRAME_WEIGHT,
            np.concatenate(deltas["POSITION"]),
            np.concatenate(deltas["NORMAL"]),
            np.concatenate(deltas["TANGENT"]),
        )

    return mesh


class _GlbBuilder:
    """Accumulates binary data, bufferViews and accessors for one GLB."""

    def __init__(self):
        self.binary = bytearray()
        self.buffer_views = []
        self.accessors = []

    def add(self, array: np.ndarray, component_type: int, accessor_type: str,
            target: int, with_bounds: bool = False) -> int:
        dtype = _COMPONENT_DTYPES[component_type]
        data = np.ascontiguousarray(array, dtype=dtype).tobytes()

        # Every bufferView starts on a 4-byte boundary.
        self.binary += b"\x00" * ((-len(self.binary)) % 4)
        self.buffer_views.append({
            "buffer": 0,
            "byteOffset": len(self.binary),
            "byteLength": len(data),
            "target": target,
        })
        self.binary += data

        accessor = {
            "bufferView": len(self.buffer_views) - 1,
            "componentType": component_type,
            "count": len(array),
            "type": accessor_type,
        }
        # POSITION accessors (base and morph target) must carry min/max.
        if with_bounds and len(array):
            accessor["min"] = [float(v) for v in np.min(array, axis=0)]
            accessor["max"] = [float(v) for v in np.max(array, axis=0)]
        self.accessors.append(accessor)
        return len(self.accessors) - 1


def _save_glb(mesh: MeshAsset, path: Path) -> None:
    multi_frame = [s.name for s in mesh.blend_shapes if len(s.frames) != 1]
    if multi_frame:
        raise AssetFormatError(
            f"GLB morph targets hold a single frame; cannot export {multi_frame}"
        )

    builder = _GlbBuilder()
    attributes = {
        "POSITION": builder.add(mesh.vertices, 5126, "VEC3", GL_ARRAY_BUFFER, with_bounds=True),
    }
    if mesh.normals is not None:
        attributes["NORMAL"] = builder.add(mesh.normals, 5126, "VEC3", GL_ARRAY_BUFFER)

    primitive = {
        "attributes": attributes,
        "indices": builder.add(
            mesh.triangles.reshape(-1), 5125, "SCALAR", GL_ELEMENT_ARRAY_BUFFER
        ),
        "mode": GL_TRIANGLES,
    }

    gltf_mesh = {"name": mesh.name, "primitives": [primitive]}
    if mesh.blend_shapes:
        targets = []
        for shape in mesh.blend_shapes:
            frame = shape.frames[0]
            targets.append({
                "POSITION": builder.add(
                    frame.delta_vertices, 5126, "VEC3", GL_ARRAY_BUFFER, with_bounds=True
                ),
                "NORMAL": builder.add(frame.delta_normals, 5126, "VEC3", GL_ARRAY_BUFFER),
                "TANGENT": builder.add(frame.delta_tangents, 5126, "VEC3", GL_ARRAY_BUFFER),
            })
        primitive["targets"] = targets
        gltf_mesh["weights"] = [0.0] * len(targets)
        gltf_mesh["extras"] = {"targetNames": mesh.blend_shape_names()}

    gltf = {
        "asset": {"version": "2.0", "generator": "blendshape-renamer"},
        "scene": 0,
        "scenes": [{"nodes": [0]}],
        "nodes": [{"mesh": 0, "name": mesh.name}],
        "meshes": [gltf_mesh],
        "buffers": [{"byteLength": len(builder.binary)}],
        "bufferViews": builder.buffer_views,
        "accessors": builder.accessors,
    }

    # JSON is padded with spaces, BIN with zeros, both to 4-byte boundaries.
    json_bytes = json.dumps(gltf, separators=(",", ":")).encode("utf-8")
    json_bytes += b" " * ((-len(json_bytes)) % 4)
    bin_bytes = bytes(builder.binary) + b"\x00" * ((-len(builder.binary)) % 4)

    total = 12 + 8 + len(json_bytes) + 8 + len(bin_bytes)

    out = bytearray()
    out += _GLB_MAGIC
    out += struct.pack("<I", 2)
    out += struct.pack("<I", total)
    out += struct.pack("<I", len(json_bytes)) + _CHUNK_JSON + json_bytes
    out += struct.pack("<I", len(bin_bytes)) + _CHUNK_BIN + bin_bytes

    path.write_bytes(bytes(out))
