#!/usr/bin/env python3
"""
Entry point for grsync: sync photos from a Ricoh GR camera over WiFi.
"""

import argparse
import logging
import re
import sys
from pathlib import Path

from grsync.config import (
    CONFIG_FILE,
    DIR_PATTERN,
    FILE_PATTERN,
    GR_HOST,
    ConfigStore,
    GRSyncError,
    ensure_dest_dir,
)
from grsync.reconcile import StartMarker
from grsync.retry import RetryPolicy
from grsync.syncer import PhotoSync

DESCRIPTION = """\
grsync is a script allows you to sync photos from Ricoh GR IIIx via Wifi.

It automatically checks if photos already exists in your local drive. Duplicated
photos will be skipped and only sync needed photos for you.
"""

EPILOG = """\
Simple usage - Download ALL photos from Ricoh GR III:

    grsync -a

Advanced usage - Download photos after specific directory and file:

    grsync -d 100RICOH -f R0000005.JPG

    All photos after 100RICOH/R0000005.JPG will be downloaded, including all
    following directories (eg. 101RICOH, 102RICOH)
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grsync",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('-a', '--all', action='store_true', help='Download all photos')
    parser.add_argument('-d', '--dir', metavar='DIRNAME',
                        help='Assign directory (eg. -d 100RICOH). MUST use with -f')
    parser.add_argument('-f', '--file', metavar='FILENAME',
                        help='Start to download photos from specific file (eg. -f R0000005.JPG). MUST use with -d')
    parser.add_argument('-c', '--config', type=Path, default=CONFIG_FILE, metavar='PATH',
                        help=f'Config file (default: {CONFIG_FILE})')
    parser.add_argument('--host', default=GR_HOST, help=f'Camera base URL (default: {GR_HOST})')
    parser.add_argument('--max-wait', type=float, metavar='SECONDS',
                        help='Give up waiting for the camera after SECONDS (default: wait forever)')
    parser.add_argument('-q', '--quiet', action='store_true', help='Quiet mode (errors only)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose mode')
    return parser


def setup_logging(quiet: bool = False, verbose: bool = False):
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def validate_start_marker(directory: str, filename: str) -> StartMarker:
    """
    Check -d/-f against the camera's naming scheme.
    """
    if not re.match(DIR_PATTERN, directory):
        raise ValueError("Incorrect directory name. It should be something like 100RICOH")
    if not re.match(FILE_PATTERN, filename):
        raise ValueError("Incorrect file name. It should be something like R0999999.JPG. (all in CAPITAL)")
    return StartMarker(directory, filename)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.quiet, args.verbose)

    has_marker = bool(args.dir or args.file)
    if not args.all and not has_marker:
        parser.print_help()
        return 0
    if args.all and has_marker:
        parser.print_help()
        return 1
    if has_marker and not (args.dir and args.file):
        print("-d/--dir and -f/--file must be used together.", file=sys.stderr)
        return 1

    marker = None
    if has_marker:
        try:
            marker = validate_start_marker(args.dir, args.file)
        except ValueError as e:
            print(e, file=sys.stderr)
            return 1

    try:
        store = ConfigStore(args.config).load()
        dest_dir = ensure_dest_dir(store)
        print(f"Photo destination directory: {dest_dir}")

        syncer = PhotoSync(store, dest_dir, host=args.host, show_progress=not args.quiet)
        print("Checking camera connection...")
        syncer.run(full=args.all, marker=marker, policy=RetryPolicy.with_timeout(args.max_wait))
    except GRSyncError as e:
        print(e, file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nCancelled.")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
