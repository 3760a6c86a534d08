"""
CLI -- Configuration commands for dumpwalk

dumpwalk is a library; the command line only manages the configuration that
TreeRenderer.from_config() reads.

Usage:
    dumpwalk config                         Show effective configuration
    dumpwalk config get display.indent      Show one value
    dumpwalk config set display.indent 2    Set a project value
    dumpwalk config set logging.level DEBUG --user
"""

import argparse
import os
import sys
from pathlib import Path

from .config import ConfigManager
from .logging import configure_logging
from .presentation.output import safe_print
from . import __version__


def register_parser(subparsers):
    """Add the 'config' command and its actions."""
    parser = subparsers.add_parser('config', help='Show or change configuration')
    actions = parser.add_subparsers(dest='action')

    get_parser = actions.add_parser('get', help='Show one configuration value')
    get_parser.add_argument('key', help="Dotted key, e.g. 'display.indent'")

    set_parser = actions.add_parser('set', help='Change one configuration value')
    set_parser.add_argument('key', help="Dotted key, e.g. 'display.timezone'")
    set_parser.add_argument('value', help='New value')
    set_parser.add_argument(
        '--user',
        action='store_true',
        help='Write to the user config (~/.dumpwalk) instead of the project'
    )


def handle_config(manager: ConfigManager, args) -> int:
    """Run a config action. Returns the process exit code."""
    if args.action == 'get':
        value = manager.get(args.key)
        if value is None:
            safe_print(f"Unknown key: {args.key}", file=sys.stderr)
            return 1
        safe_print(repr(value) if args.key == 'display.indent' else value)
        return 0

    if args.action == 'set':
        scope = 'user' if args.user else 'project'
        error = manager.set(args.key, args.value, scope=scope)
        if error:
            safe_print(f"Error: {error}", file=sys.stderr)
            return 1
        safe_print(f"Set {args.key} ({scope})")
        return 0

    safe_print(manager.display())
    return 0


def main(argv=None) -> int:
    """Main entry point for the dumpwalk CLI."""
    parser = argparse.ArgumentParser(
        description="dumpwalk -- readable tree dumps of Python values",
    )

    parser.add_argument(
        '--project', '-p',
        default=os.environ.get("DUMPWALK_PROJECT_PATH", "."),
        help='Project directory (default: DUMPWALK_PROJECT_PATH or current)'
    )

    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'dumpwalk {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')
    register_parser(subparsers)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    manager = ConfigManager(Path(args.project))
    configure_logging(manager.load().logging.numeric_level)

    return handle_config(manager, args)


if __name__ == '__main__':
    sys.exit(main())
