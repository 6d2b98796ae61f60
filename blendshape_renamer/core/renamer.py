"""
Blendshape rename operation.

A mesh's blendshape names cannot be edited in place: the only way to change
one is to rebuild the whole blendshape list. rename_blend_shape() therefore
works on a duplicate of the source mesh:

    1. Validate the new name against every other blendshape name
    2. Duplicate the mesh and give it the "_Renamed" suffix
    3. Read every frame of every blendshape (weight + three delta arrays)
       into an in-memory buffer, substituting the name at the target index
    4. Clear the duplicate's blendshapes
    5. Re-add each buffered frame in its original order

Validation runs before step 2, so an invalid request never produces a
partially rebuilt mesh, and the source mesh is never modified.

The helpers below (is_valid_new_name, filter_blend_shapes,
format_blend_shape_label) are shared with the panel so that what the UI
enables and what the core accepts can never drift apart.
"""

import logging

from blendshape_renamer.core.mesh_asset import MeshAsset
from blendshape_renamer.core.settings import RENAMED_SUFFIX

logger = logging.getLogger(__name__)


class RenameError(Exception):
    """
    Raised when a rename request fails validation.

    The panel disables its rename button for exactly the same conditions,
    so in the running app this only guards direct callers of the core.
    """
    pass


def is_valid_new_name(names: list[str], new_name: str, self_index: int) -> bool:
    """
    Check whether new_name may replace the blendshape at self_index.

    The name is stripped of surrounding whitespace first, since that is the
    form that ends up in the mesh. It is rejected when empty, or when it
    matches (case-sensitively) a name at any other index. Matching the
    blendshape's own current name is allowed.
    """
    candidate = (new_name or "").strip()
    if not candidate:
        return False
    for i, name in enumerate(names):
        if i != self_index and name == candidate:
            return False
    return True


def filter_blend_shapes(names: list[str], search: str) -> list[int]:
    """Indices of the names containing search, ignoring case. Empty keeps all."""
    if not search:
        return list(range(len(names)))
    needle = search.casefold()
    return [i for i, name in enumerate(names) if needle in name.casefold()]


def format_blend_shape_label(index: int, name: str) -> str:
    """List row text: zero-padded index, two spaces, then the name."""
    return f"{index:03d}  {name}"


def rename_blend_shape(source: MeshAsset, index: int, new_name: str) -> MeshAsset:
    """
    Return a copy of source whose blendshape at index is called new_name.

    Everything else is carried over unchanged: vertex data, blendshape
    order, per-blendshape frame counts, frame weights, and the delta
    vertex/normal/tangent arrays.

    Args:
        source:   Mesh to read from. Not modified.
        index:    Index of the blendshape to rename.
        new_name: Replacement name. Surrounding whitespace is stripped.

    Returns:
        A new MeshAsset named "<source.name>_Renamed".

    Raises:
        IndexError:  If index is out of range.
        RenameError: If the name is empty or collides with another blendshape.
        MeshAssetError: If source itself breaks the blendshape rules (for
                        example a blendshape without frames).
    """
    names = source.blend_shape_names()
    if not 0 <= index < len(names):
        raise IndexError(f"Blendshape index {index} out of range (mesh has {len(names)})")

    target_name = new_name.strip() if new_name else ""
    if not is_valid_new_name(names, target_name, index):
        raise RenameError(
            f"'{target_name}' is empty or already used by another blendshape"
        )

    dst = source.duplicate()
    dst.name = source.name + RENAMED_SUFFIX

    # Buffer every frame before clearing. The accessor returns copies, so
    # the buffered arrays survive clear_blend_shapes().
    cached = []
    for i in range(dst.blend_shape_count):
        name = target_name if i == index else dst.get_blend_shape_name(i)
        frames = []
        for f in range(dst.get_blend_shape_frame_count(i)):
            weight = dst.get_blend_shape_frame_weight(i, f)
            dv, dn, dt = dst.get_blend_shape_frame_vertices(i, f)
            frames.append((weight, dv, dn, dt))
        cached.append((name, frames))

    # Rebuild in the original order.
    dst.clear_blend_shapes()
    for name, frames in cached:
        for weight, dv, dn, dt in frames:
            dst.add_blend_shape_frame(name, weight, dv, dn, dt)

    logger.info(
        "Renamed blendshape %03d '%s' -> '%s' on '%s'",
        index, names[index], target_name, source.name,
    )
    return dst
