"""
Tool-wide constants for the Blendshape Renamer.

Everything the window needs to know before the user touches a field lives
here: the default destination folder, how renamed assets are named, which
mesh formats can be opened, and the weight given to imported glTF morph
targets. Modules import these names directly rather than re-declaring
literals, so a change here propagates everywhere.

The GUI fields themselves (search text, selected index, new name, save
folder, auto-assign) are per-window state and are deliberately not
persisted between sessions.
"""

# Destination folder for renamed meshes. Relative paths are resolved against
# the project root (the working directory by default), so this reads like a
# Unity project path.
DEFAULT_SAVE_FOLDER = "Assets/EditedMeshes"

# Suffix appended to the source mesh name when building the new asset.
# Collisions on disk get a numeric suffix on top: "Body_Renamed 1.asset".
RENAMED_SUFFIX = "_Renamed"

# Native mesh asset extension. Saved as a numpy .npz archive.
ASSET_EXTENSION = ".asset"

# glTF Binary is supported for import and export of single-frame shapes.
GLB_EXTENSION = ".glb"

# Output formats offered for the renamed asset, display label → extension.
# The first entry is the default. GLB holds single-frame blendshapes only.
OUTPUT_FORMATS = {
    "Mesh Asset (.asset)": ASSET_EXTENSION,
    "glTF Binary (.glb)":  GLB_EXTENSION,
}

# Reattach the renamed mesh to the originating renderer after saving.
DEFAULT_AUTO_ASSIGN = True

# Formats the object picker and drop zone will accept.
SUPPORTED_MESH_EXTENSIONS = {
    ASSET_EXTENSION,
    GLB_EXTENSION,
}

# glTF morph targets carry no per-frame weight. Engines that import them as
# blendshapes give the single frame a full weight of 100.
IMPORTED_FRAME_WEIGHT = 100.0

# File dialog filter string for the "Open Mesh..." picker.
MESH_FILE_FILTER = "Mesh Assets (*.asset *.glb);;All Files (*)"

# Bumped whenever the .asset archive layout changes.
ASSET_FORMAT_VERSION = 1
