"""
Destination folder handling for renamed mesh assets.

A renamed mesh is always written as a new file; the source asset is never
overwritten. This module decides where that file goes:

    resolve_save_folder         turn the panel's free-text folder into a Path
    ensure_folder               create it (and any missing parents)
    generate_unique_asset_path  "<name>.asset", or "<name> 1.asset", ...
    create_asset                all of the above, then save

Relative folders resolve against a project root, the current working
directory unless one is given, so the default "Assets/EditedMeshes" reads
like a Unity project path.
"""

import logging
from pathlib import Path

from blendshape_renamer.core.asset_io import save_mesh_asset
from blendshape_renamer.core.mesh_asset import MeshAsset
from blendshape_renamer.core.settings import ASSET_EXTENSION

logger = logging.getLogger(__name__)


def resolve_save_folder(folder: str | Path, project_root: Path | None = None) -> Path:
    """
    Resolve the destination folder typed into the panel.

    Args:
        folder:       Absolute or project-relative folder path. Backslashes
                      are accepted and treated as separators.
        project_root: Base for relative folders. Defaults to Path.cwd().

    Returns:
        An absolute Path. Nothing is created on disk.
    """
    if project_root is None:
        project_root = Path.cwd()

    folder = Path(str(folder).strip().replace("\\", "/"))
    if folder.is_absolute():
        return folder
    return Path(project_root) / folder


def ensure_folder(folder: Path) -> Path:
    """
    Create folder and any missing parents.

    If the folder cannot be created (permissions, a file in the way), the
    OSError propagates unchanged; the caller decides how to report it.
    """
    folder = Path(folder)
    if not folder.is_dir():
        logger.info("Creating folder %s", folder)
        folder.mkdir(parents=True, exist_ok=True)
    return folder


def generate_unique_asset_path(folder: Path, base_name: str,
                               extension: str = ASSET_EXTENSION) -> Path:
    """
    Return a path in folder that does not exist yet.

    Tries "<base_name><extension>" first, then appends " 1", " 2", ... to
    the base name until a free path is found.
    """
    folder = Path(folder)
    # Mesh names imported from GLB may contain path separators.
    base_name = base_name.replace("/", "_").replace("\\", "_") or "Mesh"
    candidate = folder / f"{base_name}{extension}"
    counter = 1
    while candidate.exists():
        candidate = folder / f"{base_name} {counter}{extension}"
        counter += 1
    return candidate


def create_asset(mesh: MeshAsset, folder: Path,
                 extension: str = ASSET_EXTENSION) -> Path:
    """
    Save mesh as a new asset in folder and return the path written.

    The file name is derived from mesh.name and de-duplicated, so an
    existing asset is never overwritten.
    """
    folder = ensure_folder(folder)
    path = generate_unique_asset_path(folder, mesh.name, extension)
    return save_mesh_asset(mesh, path)
