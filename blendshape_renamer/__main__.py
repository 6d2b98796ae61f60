"""
Application entry point for the Blendshape Renamer.

This module is invoked when the package is run directly via:
    python -m blendshape_renamer [mesh_file]

It configures logging, creates the Qt application instance, opens the
window (loading mesh_file if one was given) and starts the event loop.
"""

import logging
import sys

from PySide6.QtWidgets import QApplication

from blendshape_renamer.app import BlendshapeRenamerApp


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # sys.argv is passed so Qt can process any command-line arguments it
    # recognizes (e.g., --style, --platform). app.arguments() returns what
    # is left once Qt has consumed its own options.
    app = QApplication(sys.argv)

    window = BlendshapeRenamerApp()
    window.show()

    mesh_files = app.arguments()[1:]
    if mesh_files:
        window.open_mesh(mesh_files[0])

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
