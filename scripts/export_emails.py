#!/usr/bin/env python3
"""
Export the collected-email audit log from the command line.

Run from project root with DATABASE_URL set:
  python scripts/export_emails.py                 # plain text to stdout
  python scripts/export_emails.py --format csv -o emails.csv
  python scripts/export_emails.py --stats
  python scripts/export_emails.py --source signup  # only signup records
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

# app.core.config loads .env and normalizes postgres:// URLs
from app.core.config import DATABASE_URL
from app.db.session import build_engine
from app.services.email_audit import EmailAuditLog
from app.utils.dates import isoformat_utc
from sqlalchemy.orm import sessionmaker


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Export collected signup/login emails")
    parser.add_argument("--format", choices=["text", "csv"], default="text")
    parser.add_argument("--source", choices=["signup", "login"], help="Only list records from this source")
    parser.add_argument("--stats", action="store_true", help="Print stats as JSON instead of an export")
    parser.add_argument("-o", "--output", help="Write to this file instead of stdout")
    parser.add_argument("--database-url", default=DATABASE_URL)
    return parser


def render(audit_log: EmailAuditLog, args: argparse.Namespace) -> str:
    if args.stats:
        return json.dumps(audit_log.get_stats(), indent=2)
    if args.source:
        return "\n".join(
            f"{r.email} ({r.source}) - {isoformat_utc(r.timestamp)}"
            for r in audit_log.get_emails_by_source(args.source)
        )
    if args.format == "csv":
        return audit_log.export_as_csv()
    return audit_log.export_as_text()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    engine = build_engine(args.database_url)
    audit_log = EmailAuditLog(sessionmaker(bind=engine, autocommit=False, autoflush=False))

    content = render(audit_log, args)
    if args.output:
        Path(args.output).write_text(content + "\n", encoding="utf-8")
        print(f"✅ Wrote {audit_log.get_email_count()} records to {args.output}", file=sys.stderr)
    else:
        print(content)
    return 0


if __name__ == "__main__":
    sys.exit(main())
