"""Upload a local backup file to the tracker service.

Usage: python -m tracker_client.migrate backup.json --email me@example.com
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from lifetracker.migration import load_snapshot
from tracker_client.api_client import ApiClient
from tracker_client.logging_config import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Migrate a local tracker backup to the service.")
    parser.add_argument("backup", type=Path, help="Path to the exported JSON backup")
    parser.add_argument("--email", required=True, help="Account email sent as X-User-Email")
    parser.add_argument("--source", choices=("local", "document"), default="local")
    parser.add_argument("--base-url", default=None, help="Defaults to $API_BASE_URL")
    parser.add_argument("--force", action="store_true", help="Import even if already migrated")
    parser.add_argument("--dry-run", action="store_true", help="Only parse the backup and print counts")
    parser.add_argument("--verbose", action="store_true", help="Log HTTP retries and debug output")
    return parser


def main(argv=None, client: ApiClient | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    try:
        data = json.loads(args.backup.read_text(encoding="utf-8"))
        snap = load_snapshot(data, args.source)
    except (OSError, ValueError) as exc:
        logger.error("Cannot read backup %s: %s", args.backup, exc)
        return 2

    counts = snap.counts()
    if args.dry_run:
        print(json.dumps(counts, indent=2))
        return 0

    client = client or ApiClient(args.email, base_url=args.base_url)
    try:
        result = client.import_backup(data, source=args.source, force=args.force)
    except RuntimeError as exc:
        logger.error("Migration failed: %s", exc)
        return 1

    verification = result.get("verification") or {}
    print(json.dumps(result, indent=2))
    if not verification.get("ok"):
        logger.warning("Imported counts differ from the backup: %s", verification.get("mismatches"))
        return 1
    logger.info("Migrated %s records", sum(counts.values()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
