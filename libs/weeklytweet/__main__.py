"""
CLI entry point for the weekly tweet job.

Usage:
    python -m weeklytweet [--settings FILE] [--dry-run] [--verbose]
"""

import argparse
import logging
import sys

from .config import ConfigError, load_settings, SETTINGS_FILE_ENV, SECRET_ENV_VARS
from .oauth1 import OAuth1Error
from .pageview import AnalyticsError
from .transport import HttpTransport, TransportError
from . import job


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="weeklytweet",
        description="Tweet the most read blog articles of the past week.",
        epilog="Required environment variables: " + ", ".join(SECRET_ENV_VARS.values()))
    parser.add_argument(
        '--settings',
        default=None,
        help=f'YAML settings file (default: ${SETTINGS_FILE_ENV})')
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Fetch analytics and print the tweet, but do not post it')
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable debug logging, including signature base strings')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='[%(asctime)s] [%(name)s] %(message)s',
        datefmt='%H:%M:%S'
    )

    try:
        settings = load_settings(args.settings)
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    transport = HttpTransport(timeout=settings.timeout)
    try:
        text = job.run(settings, transport, dry_run=args.dry_run)
    except (TransportError, AnalyticsError, OAuth1Error) as e:
        print(f"Something went wrong making the request: {e}", file=sys.stderr)
        return 1

    if args.dry_run:
        print(text)
    return 0


if __name__ == '__main__':
    sys.exit(main())
