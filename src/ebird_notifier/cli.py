"""
Command-line interface for the notifier.

Typically run from cron::

    */30 * * * * cd /home/birds && ebird-notifier run birdNotifier.rc
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from ebird_notifier import __version__
from ebird_notifier.config import get_settings
from ebird_notifier.exceptions import NotifierError
from ebird_notifier.flows.notify import notify_new_observations


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="ebird-notifier",
        description="E-mail new notable eBird observations for a region",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'run' command - one notification pass
    run_parser = subparsers.add_parser("run", help="Check for new observations and notify")
    run_parser.add_argument("config", type=Path, help="Path to the KEY = value config file")

    # 'check-config' command - validate without touching eBird or SMTP
    check_parser = subparsers.add_parser("check-config", help="Validate a config file")
    check_parser.add_argument("config", type=Path, help="Path to the KEY = value config file")

    subparsers.add_parser("info", help="Show application info")

    return parser


def cmd_run(args: argparse.Namespace) -> int:
    """Handle the 'run' command."""
    try:
        settings = get_settings(args.config)
        if args.debug:
            print(f"Debug mode enabled. Settings: {settings}")
        result = notify_new_observations(settings)
    except NotifierError as e:
        print(f"{e.stage} failed: {e}", file=sys.stderr)
        return 1

    print(f"Done: {result.get('new', 0)} new of {result.get('fetched', 0)} observations")
    return 0


def cmd_check_config(args: argparse.Namespace) -> int:
    """Handle the 'check-config' command."""
    try:
        settings = get_settings(args.config)
    except NotifierError as e:
        print(f"{e.stage} failed: {e}", file=sys.stderr)
        return 1

    print(f"Region: {settings.region_code}")
    print(f"Days back: {settings.days_back}")
    print(f"Excluded species: {', '.join(settings.exclude_species) or '(none)'}")
    print(f"Ledger: {settings.ledger_path or '(disabled)'}")
    print(f"Sender: {settings.sender}")
    print(f"Recipients: {', '.join(settings.recipients)}")
    print(f"SMTP: {settings.smtp_host}:{settings.smtp_port}")
    print(f"Auth: {'password' if settings.smtp_password else 'oauth2'}")
    return 0


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    print("Application: ebird-notifier")
    print(f"Version: {__version__}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "run": cmd_run,
        "check-config": cmd_check_config,
        "info": cmd_info,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
