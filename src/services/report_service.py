"""
Render-and-persist pipeline for ordered reports.

raw API response → template substitution → PDF → S3 → user_reports row.
"""

import asyncio
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from src.clients import S3Client
from src.config import settings
from src.services.pdf_generator import generate_pdf
from src.services.template_renderer import replace_variables
from src.storage import UserReportRepository, get_db

logger = logging.getLogger(__name__)
history_logger = logging.getLogger("reports.render")


class ReportError(Exception):
    """Base error for report rendering"""
    pass


class UnknownReportTypeError(ReportError):
    """No template registered for the report type"""
    pass


class TemplateNotFoundError(ReportError):
    """Template file missing from the media folder"""
    pass


class UploadError(ReportError):
    """Generated PDF could not be stored"""
    pass


# Report tag → HTML template in the media folder
TEMPLATE_MAP: Dict[str, str] = {
    "asic-current": "asic-current-report.html",
    "asic-historical": "asic-current-historical-report.html",
    "asic-company": "asic-company-report.html",
    "court": "court-report.html",
    "ato": "ato-report.html",
    "ppsr": "abn-acn-ppsr-report.html",
    "director-ppsr": "director-ppsr-report.html",
    "director-bankruptcy": "director-bankruptcy-report.html",
    "director-related": "director-related-entities-report.html",
    "director-court": "director-court-report.html",
    "director-court-civil": "director-court-report.html",
    "director-court-criminal": "director-court-report.html",
    "property": "property-report.html",
    "director-property": "director-property-report.html",
    "land-title-organisation": "landtitle-report.html",
    "land-title-individual": "landtitle-individual-report.html",
    "land-title-reference": "landtitle-titleref.html",
    "land-title-address": "landtitle-titleadd.html",
    "sole-trader-check": "sole-trader-check-report.html",
    "revs": "revs-report.html",
    "vehicle": "revs-report.html",
    "trademark": "trademark-report.html",
    "unclaimed-money": "unclaimed-money-report.html",
}


def media_dir() -> Path:
    return Path(settings.MEDIA_DIR)


def ensure_media_dir() -> Path:
    path = media_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def template_path(report_type: str) -> Path:
    """Resolve the template file for *report_type* or raise."""
    template_name = TEMPLATE_MAP.get(report_type)
    if template_name is None:
        logger.error(f"Unknown report type: {report_type}")
        raise UnknownReportTypeError(f"Unknown report type: {report_type}")

    path = media_dir() / template_name
    if not path.exists():
        logger.error(f"Template missing for {report_type}: {path}")
        raise TemplateNotFoundError(f"HTML template file '{template_name}' not found in media folder")
    return path


async def render_report_html(
    report_type: str,
    data: Dict[str, Any],
    business: Optional[Dict[str, Any]] = None,
    now: Optional[datetime] = None,
) -> str:
    """Template lookup and substitution, without producing a PDF."""
    path = template_path(report_type)
    template = await asyncio.to_thread(path.read_text, encoding="utf-8")
    return replace_variables(template, data, report_type, business=business, now=now)


def split_response(raw_response: Any, business: Optional[Dict[str, Any]] = None):
    """``(data, business)`` from a stored API response."""
    if not isinstance(raw_response, dict):
        return {}, business
    data = raw_response.get("data") if raw_response.get("data") is not None else raw_response
    if business is None and isinstance(raw_response.get("business"), dict):
        business = raw_response["business"]
    return data, business


async def persist(
    raw_response: Any,
    user_id: Optional[int] = None,
    matter_id: Optional[int] = None,
    report_id: Optional[int] = None,
    report_name: Optional[str] = None,
    report_type: str = "asic-current",
    business: Optional[Dict[str, Any]] = None,
    s3_client: Optional[S3Client] = None,
) -> str:
    """
    Render a report, upload it and record it for the user.

    Returns:
        The PDF filename (also the S3 key).
    """
    ensure_media_dir()
    data, business = split_response(raw_response, business)
    html = await render_report_html(report_type, data, business=business)

    filename = f"{report_name or int(time.time() * 1000)}.pdf"
    output_path = media_dir() / filename
    pdf_bytes, page_count = await generate_pdf(html, output_path)

    upload = await (s3_client or S3Client()).upload_pdf(pdf_bytes, filename)
    if not upload.get("success"):
        logger.error(f"Upload failed for {filename}: {upload.get('error')}")
        raise UploadError(f"S3 upload failed: {upload.get('error')}")

    async with get_db() as session:
        repo = UserReportRepository(session)
        await repo.create(
            report_name=filename,
            user_id=user_id,
            matter_id=matter_id,
            report_id=report_id,
            is_paid=True,
        )

    history_logger.info(
        f"type={report_type} file={filename} pages={page_count} bytes={len(pdf_bytes)} "
        f"user={user_id} matter={matter_id} report={report_id}"
    )
    return filename
