from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import configure_logging, load_config
from .handover_db import HandoverDB
from .reports import HandoverNotFoundError, ReportGenerationError, generate_report

LOGGER = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate the PDF report for a vehicle handover")
    parser.add_argument("handover_id", help="Id of the handover to render")
    parser.add_argument("--config", type=Path, default=None, help="Path to config YAML")
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Handover database path (default: storage.handover_db_path from config)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output PDF path (default: <registration>-handover.pdf in the current directory)",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    try:
        config = load_config(args.config)
    except ValueError as exc:
        print(f"Error: invalid config: {exc}", file=sys.stderr)
        return 1
    configure_logging(config.logging.level)

    db_path = args.db or config.storage.handover_db_path
    if not db_path.exists():
        print(f"Error: handover database not found: {db_path}", file=sys.stderr)
        return 1

    handover_db = HandoverDB(db_path)
    try:
        result = generate_report(
            args.handover_id,
            store=handover_db,
            settings=config.report,
        )
    except HandoverNotFoundError:
        print(f"Error: handover not found: {args.handover_id}", file=sys.stderr)
        return 1
    except ReportGenerationError as exc:
        print(f"Error: PDF generation failed: {exc.__cause__ or exc}", file=sys.stderr)
        return 1
    finally:
        handover_db.close()

    out_pdf = args.output or Path.cwd() / result.filename
    out_pdf.parent.mkdir(parents=True, exist_ok=True)
    out_pdf.write_bytes(result.content)
    LOGGER.debug("Report has %d page(s)", result.page_count)
    print(f"wrote report: {out_pdf}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
