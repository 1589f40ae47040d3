import argparse
import asyncio
import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from src.config import settings
from src.storage import init_db
from src.services import persist, render_report_html, ReportError, PdfRenderError
from src.services.report_service import split_response

# Configure logging
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format=LOG_FORMAT
)
logger = logging.getLogger(__name__)


def setup_render_logging():
    """Setup file logging for rendered report history"""
    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    render_logger = logging.getLogger('reports.render')
    render_logger.setLevel(logging.DEBUG)

    # File handler with rotation (10MB max, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_dir / 'reports_render.log',
        maxBytes=10*1024*1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    render_logger.addHandler(file_handler)

    logger.info(f"Render history logging configured: {log_dir / 'reports_render.log'}")


def load_json(path: str):
    with open(path, encoding='utf-8') as fh:
        return json.load(fh)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="report-renderer",
        description="Render an ordered report payload to PDF, upload it and record it.",
    )
    parser.add_argument("--type", dest="report_type", required=True, help="Report type tag, e.g. asic-current")
    parser.add_argument("--input", required=True, help="JSON file with the raw API response")
    parser.add_argument("--business", help="JSON file with the business / order context")
    parser.add_argument("--name", help="Output file name without .pdf")
    parser.add_argument("--user-id", type=int)
    parser.add_argument("--matter-id", type=int)
    parser.add_argument("--report-id", type=int)
    parser.add_argument(
        "--html-only",
        metavar="OUT",
        help="Write the substituted HTML to OUT and stop (no PDF, upload or database row)",
    )
    return parser


async def main(argv=None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)

    raw_response = load_json(args.input)
    business = load_json(args.business) if args.business else None

    try:
        if args.html_only:
            data, business = split_response(raw_response, business)
            html = await render_report_html(args.report_type, data, business=business)
            Path(args.html_only).write_text(html, encoding='utf-8')
            logger.info(f"HTML written to {args.html_only}")
            return 0

        setup_render_logging()
        await init_db()
        filename = await persist(
            raw_response,
            user_id=args.user_id,
            matter_id=args.matter_id,
            report_id=args.report_id,
            report_name=args.name,
            report_type=args.report_type,
            business=business,
        )
    except (ReportError, PdfRenderError) as e:
        logger.error(f"Report failed: {e}")
        return 1

    print(filename)
    return 0


def run():
    raise SystemExit(asyncio.run(main()))


if __name__ == "__main__":
    run()
