"""handover.report – renderer-only PDF modules.

This package only lays out and draws.  Loading handovers and naming the
output file live in ``handover.reports``.
"""

from .pdf_builder import assemble_report, build_handover_pdf
from .report_data import ReportBranding, ReportLayout

__all__ = [
    "ReportBranding",
    "ReportLayout",
    "assemble_report",
    "build_handover_pdf",
]
