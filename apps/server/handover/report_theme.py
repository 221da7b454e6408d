from __future__ import annotations

# Print-friendly monochrome palette with green/red/amber status accents.
REPORT_COLORS = {
    "black": "#000000",
    "ink": "#1a1a1a",
    "text_muted": "#666666",
    "text_faint": "#999999",
    "border": "#d4d4d4",
    "surface": "#f5f5f5",
    "row_separator": "#e5e7eb",
    "white": "#ffffff",
    "header_muted": "#cccccc",
    "success": "#16a34a",
    "danger": "#dc2626",
    # Checkbox fill when unchecked
    "danger_bg": "#fef2f2",
    # Status pills
    "pill_completed_bg": "#dcfce7",
    "pill_completed_text": "#16a34a",
    "pill_draft_bg": "#fef3c7",
    "pill_draft_text": "#d97706",
    # Photo placeholder
    "placeholder_text": "#999999",
}

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
