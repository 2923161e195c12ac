import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .core import PhotoSyncApp
from .exceptions import PhotoSyncError


class _MaxLevelFilter(logging.Filter):
    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record):
        return record.levelno < self.level


class _UsageHelpAction(argparse.Action):
    """-h/--help: print help to stderr and stop with a usage-error status."""

    def __init__(self, option_strings, dest=argparse.SUPPRESS, default=argparse.SUPPRESS, help=None):
        super().__init__(option_strings=option_strings, dest=dest, default=default, nargs=0, help=help)

    def __call__(self, parser, namespace, values, option_string=None):
        parser.print_help(sys.stderr)
        parser.exit(2)


def setup_logging(verbose: bool = False, quiet: bool = False, log_file: Optional[Path] = None):
    """Progress to stdout, warnings and errors to stderr, optional log file."""
    if quiet:
        log_level = logging.WARNING
    elif verbose:
        log_level = logging.DEBUG
    else:
        log_level = logging.INFO

    out_handler = logging.StreamHandler(sys.stdout)
    out_handler.addFilter(_MaxLevelFilter(logging.WARNING))
    err_handler = logging.StreamHandler(sys.stderr)
    err_handler.setLevel(logging.WARNING)

    handlers = [out_handler, err_handler]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)
    logging.getLogger("pymediainfo").setLevel(logging.ERROR)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="photo-sync",
        description="Copy images and videos into DESTINATION/YYYY/MM/DD, named by "
                    "capture time. Files are hashed so only unique files are copied.",
        add_help=False,
    )

    p.add_argument("src", metavar="SOURCE", type=Path, help="Directory to search for images and videos")
    p.add_argument("dest", metavar="DESTINATION", type=Path, help="Directory to where files will be copied")

    p.add_argument("-h", "--help", action=_UsageHelpAction, help="Show this message and exit")
    p.add_argument("-q", "--quiet", action="store_true", help="Suppress progress messages")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("-d", "--dry-run", action="store_true", help="Don't actually copy")
    p.add_argument("--mv", action="store_true", help="Move files instead of copying")
    p.add_argument("-w", "--workers", type=int, default=1, help="Threads used for hashing (default: 1)")
    p.add_argument("--log-file", type=Path, default=None, help="Also write log messages to this file")

    return p


def parse_args(argv=None):
    p = build_parser()
    args = p.parse_args(argv)
    if args.workers < 1:
        p.error("--workers must be at least 1")
    return args


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.verbose, args.quiet, args.log_file)

    src_root = args.src.resolve()
    dest_root = args.dest.resolve()

    if not src_root.is_dir():
        logging.error(f"Source directory not found: {src_root}")
        sys.exit(1)

    logging.debug(f"Source: {src_root}")
    logging.debug(f"Dest:   {dest_root}")

    app = PhotoSyncApp()

    try:
        summary = app.sync(
            src_root=src_root,
            dest_root=dest_root,
            move=args.mv,
            dry_run=args.dry_run,
            max_workers=args.workers,
            show_progress=not args.quiet,
        )
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        sys.exit(1)
    except PhotoSyncError as e:
        logging.error(f"Fatal error during sync: {e}")
        sys.exit(1)

    if summary.failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
