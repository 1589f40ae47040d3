"""PDF renderer for report HTML.

Renders a fully substituted report template with headless Chromium
(Playwright) into an A4 PDF. Every report page carries the company logo
in the header and ``Page X of Y`` in the footer.

Installation:
    pip install playwright
    playwright install chromium
"""

from __future__ import annotations

import asyncio
import base64
import logging
from pathlib import Path
from typing import Optional, Tuple

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from src.config import settings

logger = logging.getLogger(__name__)


class PdfRenderError(Exception):
    """Headless browser failed to produce a PDF."""
    pass


# ── Page layout ───────────────────────────────────────────────────────────────

PAGE_FORMAT = "A4"
PAGE_MARGIN = {"top": "32mm", "right": "10mm", "bottom": "15mm", "left": "10mm"}
PAGE_SELECTOR = ".page"

FOOTER_TEMPLATE = (
    '<div style="width:100%;font-size:9px;color:#6b7280;text-align:center;'
    'font-family:Helvetica,Arial,sans-serif;">'
    'Page <span class="pageNumber"></span> of <span class="totalPages"></span>'
    "</div>"
)

_MIME_TYPES = {
    ".svg": "image/svg+xml",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
}


# ── Assets ────────────────────────────────────────────────────────────────────


def logo_data_uri(path: Optional[Path] = None) -> str:
    """The header logo inlined as a base64 data URI ("" when the file is missing)."""
    path = Path(path or settings.header_logo_path)
    if not path.exists():
        logger.warning(f"Header logo not found: {path}")
        return ""
    mime = _MIME_TYPES.get(path.suffix.lower(), "application/octet-stream")
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime};base64,{encoded}"


def header_template(logo_uri: str) -> str:
    # Header/footer templates render in isolation, so the image must be inline
    logo = f'<img src="{logo_uri}" style="height:14mm;" />' if logo_uri else ""
    return (
        '<div style="width:100%;padding:0 10mm;display:flex;align-items:center;'
        'justify-content:flex-start;">'
        f"{logo}</div>"
    )


def _read_stylesheet() -> str:
    path = settings.stylesheet_path
    if not path.exists():
        return ""
    return path.read_text(encoding="utf-8")


# ── Rendering ─────────────────────────────────────────────────────────────────


async def _render(html: str, header: str, stylesheet: str) -> Tuple[bytes, int]:
    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(headless=True, args=settings.browser_args)
        try:
            page = await browser.new_page(
                viewport={"width": settings.PDF_VIEWPORT_WIDTH, "height": settings.PDF_VIEWPORT_HEIGHT}
            )
            await page.set_content(html, wait_until="networkidle", timeout=settings.PDF_CONTENT_TIMEOUT_MS)
            if stylesheet:
                await page.add_style_tag(content=stylesheet)
            await page.emulate_media(media="print")

            page_count = await page.locator(PAGE_SELECTOR).count()
            pdf_bytes = await page.pdf(
                format=PAGE_FORMAT,
                print_background=True,
                margin=PAGE_MARGIN,
                display_header_footer=True,
                header_template=header,
                footer_template=FOOTER_TEMPLATE,
                prefer_css_page_size=True,
            )
            return pdf_bytes, page_count
        finally:
            await browser.close()


async def generate_pdf(html: str, output_path: Optional[Path] = None) -> Tuple[bytes, int]:
    """
    Render *html* to PDF.

    Args:
        html: substituted report template.
        output_path: where to write the PDF; nothing is written when None.

    Returns:
        (pdf bytes, number of ``.page`` elements in the document)
    """
    header = header_template(await asyncio.to_thread(logo_data_uri))
    stylesheet = await asyncio.to_thread(_read_stylesheet)

    try:
        pdf_bytes, page_count = await _render(html, header, stylesheet)
    except PlaywrightError as e:
        logger.error(f"PDF rendering failed: {e}")
        raise PdfRenderError(str(e)) from e

    if output_path is not None:
        output_path = Path(output_path)
        await asyncio.to_thread(output_path.write_bytes, pdf_bytes)
        logger.info(f"PDF written: {output_path} ({page_count} pages, {len(pdf_bytes)} bytes)")

    return pdf_bytes, page_count
