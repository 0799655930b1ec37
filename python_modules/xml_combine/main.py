"""Main entry point for XML Combine

Combine XML files (also works with CSVs that have no header).

Usage:
    xml-combine "CFNC XML*" [WORK_DIR] [NEW_ROOT]
"""

import argparse
import sys
from datetime import datetime

from xml_combine import config
from xml_combine.logger import setup_logging, get_logger, rename_log_file_by_status
from xml_combine.merger import combine
from xml_combine.notification import TelegramNotifier
from xml_combine.utils.exceptions import CombineException

logger = get_logger("main")


def parse_args(argv=None):
    ap = argparse.ArgumentParser(
        prog="xml-combine",
        description="Combine XML (or headerless CSV) fragment files into a single file."
    )
    ap.add_argument("file_mask", help='File mask of files to be combined. Ex: "CFNC XML*"')
    ap.add_argument("work_dir", nargs="?", default=None, help="Working directory (defaults to the current one)")
    ap.add_argument("new_root", nargs="?", default=None, help="New root element name (XML only)")
    ap.add_argument("--splitter", choices=config.SPLITTERS, default=None,
                    help=f"XML splitter back-end (default: {config.SPLITTER})")
    ap.add_argument("--log-dir", default=None, help="Also write a log file to this directory")
    ap.add_argument("--notify", action="store_true", help="Send Telegram start/finish notifications")
    return ap.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_dir)

    start_time = datetime.now()
    mode = f"new root <{args.new_root}>" if args.new_root else "flat concatenation"
    logger.info(f"=== Combining {args.file_mask} ({mode}) ===")
    if args.notify:
        TelegramNotifier.notify(f"[XML Combine] Started: {args.file_mask}")

    try:
        result = combine(args.file_mask, args.work_dir, args.new_root, args.splitter)
    except CombineException as e:
        logger.error(f"Error: {e}")
        if args.notify:
            TelegramNotifier.notify(f"[XML Combine] Failed: <code>{e}</code>")
        rename_log_file_by_status("error")
        return 1

    duration = (datetime.now() - start_time).total_seconds()
    logger.info(f"Combined {len(result.sources)} files ({result.fragments} fragments) in {duration:.2f}s")
    if args.notify:
        TelegramNotifier.notify(f"[XML Combine] Completed: {result.new_file.name}, duration: {duration:.2f}s")
    rename_log_file_by_status("done")
    return 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
