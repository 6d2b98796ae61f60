"""
Development runner with automatic restart on file changes.

Watches the blendshape_renamer/ source directory and restarts the window
whenever a file is saved. Uses the `watchfiles` library (a fast Rust-based
file watcher) instead of polling.

Usage:
    python scripts/dev.py [mesh_file]

To stop: Ctrl+C in the terminal.
"""

import sys
import subprocess
from pathlib import Path
from watchfiles import run_process


def run_app():
    """Launch the window in a fresh subprocess.

    QApplication can only be instantiated once per process, so restarting
    via subprocess is the cleanest way to hot-reload a Qt app.
    """
    subprocess.run(
        [sys.executable, "-m", "blendshape_renamer", *sys.argv[1:]],
        cwd=Path(__file__).resolve().parent.parent,
    )


if __name__ == "__main__":
    src_dir = Path(__file__).resolve().parent.parent / "blendshape_renamer"
    print(f"Watching {src_dir} for changes...")
    print("The window will restart when you save a file.\n")

    run_process(
        src_dir,
        target=run_app,
        callback=lambda changes: print(f"\nFiles changed: {[str(c[1]) for c in changes]}"),
    )
