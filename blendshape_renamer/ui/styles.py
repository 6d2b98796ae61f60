"""
Global QSS (Qt Style Sheets) theme for the Blendshape Renamer.

All visual styling is centralized here rather than scattered across
individual widgets, so the panel code stays focused on layout and
behavior.

Color palette:
    - Background:     #2d2d2d (charcoal gray, main canvas)
    - Surface:        #252525 (darker gray, inputs, list, drop zone)
    - Elevated:       #333333 (lighter gray, hover states)
    - Border:         #3a3a3a (subtle dividers and outlines)
    - Primary text:   #e0e0e0
    - Secondary text: #d4d4d4 (headings, titles)
    - Muted text:     #999999 (subtitles, placeholders)
    - Accent:         #dc3545 (crimson, selection, errors, highlights)
    - Deep surface:   #1e1e1e (near-black, status bar)
"""

DARK_THEME = """
/* ===== Base Styles ===== */
QMainWindow {
    background-color: #2d2d2d;
}

QWidget {
    color: #e0e0e0;
    font-family: "Helvetica Neue", "Segoe UI", "Arial", sans-serif;
    font-size: 13px;
}

QLabel#section_title {
    color: #d4d4d4;
    font-size: 16px;
    font-weight: 600;
}

QLabel#renderer_label {
    color: #d4d4d4;
}

/* ===== Drop Zone ===== */
/* Dashed border signals "drop here"; it lights up crimson while a
   supported file is dragged over it. */
QWidget#drop_zone {
    background-color: #252525;
    border: 2px dashed #3a3a3a;
    border-radius: 12px;
}

QWidget#drop_zone:hover {
    border-color: #dc3545;
    background-color: #333333;
}

QLabel#drop_title {
    color: #d4d4d4;
    font-size: 15px;
    font-weight: 600;
}

QLabel#drop_subtitle {
    color: #999999;
    font-size: 12px;
}

/* ===== Inputs ===== */
QLineEdit {
    background-color: #252525;
    color: #e0e0e0;
    border: 1px solid #3a3a3a;
    border-radius: 6px;
    padding: 6px 10px;
}

QLineEdit:focus {
    border-color: #999999;
}

QLineEdit:disabled {
    color: #666666;
}

QCheckBox {
    color: #d4d4d4;
}

/* ===== Blendshape List ===== */
/* Monospace keeps the zero-padded index column aligned. */
QListWidget#blend_shape_list {
    background-color: #252525;
    border: 1px solid #3a3a3a;
    border-radius: 6px;
    font-family: "Menlo", "Consolas", monospace;
}

QListWidget#blend_shape_list::item:selected {
    background-color: #3a3a3a;
    color: #dc3545;
}

QLabel#mesh_info {
    color: #d4d4d4;
    font-size: 13px;
    padding: 4px 0;
}

QLabel#error_label {
    color: #dc3545;
    font-size: 13px;
}

/* ===== Output Format Dropdown ===== */
QComboBox#format_combo {
    background-color: #252525;
    color: #e0e0e0;
    border: 1px solid #3a3a3a;
    border-radius: 6px;
    padding: 6px 12px;
    font-size: 13px;
}

QComboBox#format_combo:hover {
    border-color: #999999;
}

QComboBox#format_combo::drop-down {
    border: none;
    width: 28px;
}

QComboBox#format_combo QAbstractItemView {
    background-color: #252525;
    color: #e0e0e0;
    border: 1px solid #3a3a3a;
    selection-background-color: #3a3a3a;
    selection-color: #dc3545;
}

/* ===== Status Bar ===== */
QStatusBar {
    background-color: #1e1e1e;
    color: #dc3545;
    font-size: 12px;
    padding: 4px 12px;
}

/* ===== Scrollbar ===== */
QScrollBar:vertical {
    background-color: #2d2d2d;
    width: 8px;
    border-radius: 4px;
}

QScrollBar::handle:vertical {
    background-color: #3a3a3a;
    border-radius: 4px;
    min-height: 30px;
}

QScrollBar::handle:vertical:hover {
    background-color: #dc3545;
}

QScrollBar::add-line:vertical, QScrollBar::sub-line:vertical {
    height: 0;
}

/* ===== Rename Button ===== */
/* Disabled while no row is selected or the new name is invalid. */
QPushButton#rename_button {
    background-color: transparent;
    color: #d4d4d4;
    border: 1px solid #555555;
    border-radius: 8px;
    font-size: 13px;
    padding: 8px 20px;
}

QPushButton#rename_button:hover {
    background-color: #3a3a3a;
    border-color: #dc3545;
    color: #ffffff;
}

QPushButton#rename_button:pressed {
    background-color: #2d2d2d;
}

QPushButton#rename_button:disabled {
    background-color: transparent;
    color: #666666;
    border-color: #3a3a3a;
}

/* ===== Open Mesh Button ===== */
QPushButton#browse_button {
    background-color: transparent;
    color: #d4d4d4;
    border: 1px solid #555555;
    border-radius: 8px;
    font-size: 13px;
    padding: 8px 20px;
}

QPushButton#browse_button:hover {
    background-color: #3a3a3a;
    border-color: #dc3545;
    color: #ffffff;
}

QPushButton#browse_button:pressed {
    background-color: #2d2d2d;
}
"""
