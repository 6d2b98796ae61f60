"""
Blendshape Renamer: rename one blendshape on a skinned mesh.

A single desktop window that lets an artist pick a mesh, choose one of its
blendshapes (morph targets), give it a new name, and write the result to a
new mesh asset. The source asset is never modified; the renderer can be
pointed at the new mesh automatically, with undo.

The version string below must be kept in step with the version field in
pyproject.toml, which declares it separately.
"""

__version__ = "0.1.0"
