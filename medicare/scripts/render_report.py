# FILE: medicare/scripts/render_report.py
"""
Render a report from a JSON snapshot without the API:

    python -m medicare.scripts.render_report patient.json --style form --out out/

The input is {"patient": {...}, "prescriptions": [...], "treatments": [...]}
with the same camelCase keys the API stores.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from medicare.core.config import settings
from medicare.schemas.report import ReportPayload
from medicare.services.pdfs.errors import ReportError
from medicare.services.pdfs.report import generate_report
from medicare.services.pdfs.styles import STYLES
from medicare.utils.timezone import report_tz

logger = logging.getLogger("medicare.scripts.render_report")


def _parse_date(s: str) -> datetime:
    dt = datetime.fromisoformat(s)
    return dt if dt.tzinfo else dt.replace(tzinfo=report_tz())


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="render_report",
        description="Render a patient report PDF from a JSON snapshot.")
    ap.add_argument("input", help="JSON file with patient/prescriptions/treatments")
    ap.add_argument("--style",
                    default="clinical",
                    choices=sorted(STYLES),
                    help="Report layout (default: clinical)")
    ap.add_argument("--out",
                    default=".",
                    help="Directory to write the PDF into (default: .)")
    ap.add_argument("--date",
                    dest="generated_at",
                    type=_parse_date,
                    default=None,
                    help="Generation date, ISO-8601 (default: now)")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def run(argv: Optional[List[str]] = None) -> Path:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    with open(args.input, "r", encoding="utf-8") as f:
        payload = ReportPayload.model_validate(json.load(f))

    report = generate_report(payload.patient,
                             payload.prescriptions,
                             payload.treatments,
                             args.style,
                             generated_at=args.generated_at)

    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / report.filename
    path.write_bytes(report.content)
    logger.info("Wrote %s (%d pages)", path, report.page_count)
    return path


def main(argv: Optional[List[str]] = None) -> int:
    try:
        path = run(argv)
    except (ReportError, ValidationError) as e:
        logger.error("Report not generated: %s", e)
        return 2
    except (OSError, ValueError) as e:
        logger.error("Cannot read report input: %s", e)
        return 2
    print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
