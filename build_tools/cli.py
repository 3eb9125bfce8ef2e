"""
Command-line interface for build-tools.

    build-tools <command> [--watch] [--<option>[=<value>]]...

Options the CLI does not know are forwarded verbatim to the task through
the run configuration.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from build_tools import log
from build_tools.config import ConfigManager
from build_tools.constants import EXIT_OK, EXIT_TASK_FAILURE
from build_tools.dispatcher import CommandDispatcher, resolve_command
from build_tools.errors import ConfigError
from build_tools.models import BuildRuntime
from build_tools.tasks import load_registry


def build_parser() -> argparse.ArgumentParser:
    # No positional here: the command is picked out of the leftovers so an
    # option value is never mistaken for it.
    parser = argparse.ArgumentParser(
        prog="build-tools",
        description="Run build tasks for a front-end component",
        add_help=False,
        allow_abbrev=False
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Re-run every time a file changes"
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print the build-tools version"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show diagnostic logging"
    )
    return parser


def parse_passthrough_options(args: List[str]) -> Tuple[Dict[str, Any], List[str]]:
    """
    Split leftover arguments into task options and positionals.

    Supports ``--key=value``, ``--key value``, ``--flag`` (True) and
    ``--no-flag`` (False). Single-dash bundles such as ``-abc`` set one
    flag per letter. Values are kept as strings.

    Returns:
        Tuple of (options, positionals)
    """
    options: Dict[str, Any] = {}
    positionals: List[str] = []

    i = 0
    while i < len(args):
        arg = args[i]
        i += 1

        if arg == "--":
            positionals.extend(args[i:])
            break

        if not arg.startswith("-") or arg == "-":
            positionals.append(arg)
            continue

        if arg.startswith("--"):
            name = arg.lstrip("-")
        else:
            # -abc is -a -b -c; only the last letter can take a value
            letters = arg[1:]
            flags = letters.split("=", 1)[0][:-1]
            for letter in flags:
                options[letter] = True
            name = letters[len(flags):]

        if name.startswith("="):
            positionals.append(arg)
        elif "=" in name:
            key, value = name.split("=", 1)
            options[key] = value
        elif name.startswith("no-"):
            options[name[3:]] = False
        elif i < len(args) and not args[i].startswith("-"):
            options[name] = args[i]
            i += 1
        else:
            options[name] = True

    return options, positionals


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point - called by setuptools entry point."""
    parser = build_parser()
    args, extras = parser.parse_known_args(argv)
    options, positionals = parse_passthrough_options(extras)

    log.setup_logging("DEBUG" if args.verbose else None)

    command = resolve_command(positionals[0] if positionals else None, args.version)

    if args.watch:
        options["watch"] = True

    try:
        config_manager = ConfigManager(args.config)
        config = config_manager.build_config(options)
    except ConfigError as e:
        log.primary_error(str(e))
        return EXIT_TASK_FAILURE

    registry = load_registry(config_manager.config)
    dispatcher = CommandDispatcher(registry, runtime=BuildRuntime(cwd=Path.cwd()))

    try:
        return asyncio.run(dispatcher.run(command, config))
    except KeyboardInterrupt:
        log.primary("\nInterrupted")
        return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
