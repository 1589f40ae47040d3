from .template_renderer import replace_variables, build_fields, substitute, apply_sections, find_placeholders
from .pdf_generator import generate_pdf, PdfRenderError
from .report_service import (
    persist, render_report_html, ensure_media_dir, TEMPLATE_MAP,
    ReportError, UnknownReportTypeError, TemplateNotFoundError, UploadError,
)

__all__ = [
    "replace_variables", "build_fields", "substitute", "apply_sections", "find_placeholders",
    "generate_pdf", "PdfRenderError",
    "persist", "render_report_html", "ensure_media_dir", "TEMPLATE_MAP",
    "ReportError", "UnknownReportTypeError", "TemplateNotFoundError", "UploadError",
]
