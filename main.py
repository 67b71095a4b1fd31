#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Family Registry - headless entry point

نظام إدارة بيانات العائلات النازحة

Usage:
    python main.py upload --camp <camp_id>
    python main.py import families.xlsx --camp <camp_id>
    python main.py template template.xlsx
    python main.py backup backup.json
    python main.py restore backup.json --yes
    python main.py scan-duplicates
"""

import argparse
import sys
from pathlib import Path

from app.config import Config
from app.context import AppContext
from models.camp import Camp
from services.exceptions import (
    ConnectivityError, DuplicateError, RemoteOperationError, ValidationError
)
from services.memory_remote_store import InMemoryRemoteStore
from utils.logger import setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="family-registry", description=Config.APP_TITLE)
    parser.add_argument("--db", type=Path, default=None, help="local database file")
    parser.add_argument("--camp", default=None, help="camp id (defaults to the selected camp)")
    parser.add_argument("--memory", action="store_true",
                        help="use an in-process demo backend instead of REMOTE_URL")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("upload", help="upload the camp's queued drafts")

    p = sub.add_parser("import", help="bulk import families from an .xlsx sheet")
    p.add_argument("file", type=Path)

    p = sub.add_parser("template", help="write the import template")
    p.add_argument("file", type=Path)

    p = sub.add_parser("backup", help="write a full JSON backup")
    p.add_argument("file", type=Path)

    p = sub.add_parser("restore", help="replace all remote data with a backup")
    p.add_argument("file", type=Path)
    p.add_argument("--yes", action="store_true", help="confirm deleting the current data")

    sub.add_parser("scan-duplicates", help="alert about IDs shared across camps")
    return parser


def run(args, ctx: AppContext, logger) -> int:
    if args.camp:
        ctx.select_camp(Camp(camp_id=args.camp, name=args.camp))
    camp_id = ctx.camp_id

    if args.command == "upload":
        summary = ctx.sync_policy.upload_pending(camp_id)
        for result in summary.results:
            if not result.success:
                print(f"{result.family_number}: {result.error}")
        print(f"{summary.success_count} uploaded, {summary.fail_count} failed")
        return 0 if summary.fail_count == 0 else 1

    if args.command == "import":
        report = ctx.importer.run(ctx.importer.read_rows(args.file), camp_id, ctx.user_name)
        print(report.summary)
        return 1 if report.aborted or report.fail_count else 0

    if args.command == "template":
        ctx.importer.write_template(args.file)
        print(args.file)
        return 0

    if args.command == "backup":
        ctx.backup_service.save_backup(args.file)
        print(args.file)
        return 0

    if args.command == "restore":
        document = ctx.backup_service.load_backup(args.file)
        restored = ctx.backup_service.restore_backup(document, confirmed=args.yes)
        print(f"{sum(restored.values())} rows restored")
        return 0

    if args.command == "scan-duplicates":
        summary = ctx.family_service.scan_existing_duplicates(ctx.user_name)
        print(f"{summary.duplicate_nids} shared IDs, {summary.notifications_sent} notifications")
        return 0

    logger.error(f"Unknown command {args.command}")
    return 1


def main(argv=None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)

    # Initialize logging
    logger = setup_logger()
    logger.info("=" * 50)
    logger.info(f"Starting {Config.APP_NAME} v{Config.VERSION}")
    logger.info("=" * 50)

    remote = InMemoryRemoteStore() if args.memory else None
    ctx = AppContext(db_path=args.db, remote=remote)
    try:
        ctx.connectivity.check_now()
        ctx.init()
        return run(args, ctx, logger)
    except (ValidationError, DuplicateError, ConnectivityError, RemoteOperationError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(e.message, file=sys.stderr)
        return 1
    finally:
        ctx.close()


if __name__ == "__main__":
    sys.exit(main())
