#!/usr/bin/env python3
"""Command-line interface for tagtree.

This module provides the CLI for querying and maintaining tagged trees:
- Argument parsing and validation
- Configuration loading (YAML file, environment, arguments)
- Logging setup
- Error reporting and exit codes

Example:
    >>> from tagtree.cli import parse_arguments
    >>> args = parse_arguments(["-p", "/data", "query", "photos & !draft"])
"""

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from tagtree.core.constants import TAGTREE_VERSION, ConfigKey
from tagtree.core.errors import TagTreeError
from tagtree.infrastructure.config_manager import ConfigManager, ConfigSource
from tagtree.infrastructure.logger import Logger, set_global_logger

DESCRIPTION = "tagtree - Query files by the tags stored in per-directory sidecar files"

COMMANDS = ("query", "check", "untracked", "tags", "count", "whatis", "search", "clean")


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def parse_arguments(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: Argument list to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace

    Raises:
        SystemExit: On invalid arguments or --help/--version
        CLIError: If validation fails
    """
    parser = argparse.ArgumentParser(
        prog="tagtree",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Files tagged 'project' but not 'draft'
  tagtree query 'project & !draft'

  # Patterns that match nothing
  tagtree -p ~/archive check

  # Tags and description of one file
  tagtree whatis docs/report.pdf
        """,
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {TAGTREE_VERSION}",
    )

    parser.add_argument(
        "-p",
        "--path",
        metavar="DIR",
        type=str,
        default=os.curdir,
        help="Root directory (default: current directory)",
    )

    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        type=str,
        help="Configuration file path (YAML format)",
    )

    log_group = parser.add_argument_group("logging options")

    log_group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    log_group.add_argument(
        "--log-file",
        metavar="FILE",
        type=str,
        help="Also write log messages to this file",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    query = subparsers.add_parser("query", help="List files matching a filter")
    query.add_argument("filter", nargs="+", help="Filter expression, e.g. 'a & (b | !c)'")

    subparsers.add_parser("check", help="Report patterns that match no file")
    subparsers.add_parser("untracked", help="List files not matched by any pattern")
    subparsers.add_parser("tags", help="List all tags")
    subparsers.add_parser("count", help="Count tracked files and tags")

    whatis = subparsers.add_parser("whatis", help="Show tags and description of a path")
    whatis.add_argument("target", help="File or directory")

    search = subparsers.add_parser("search", help="Search tags and descriptions")
    search.add_argument("keywords", nargs="+", help="Keywords to search for")

    subparsers.add_parser(
        "clean",
        help="Drop patterns matching nothing and merge equal groups",
    )

    parsed = parser.parse_args(args)

    _validate_arguments(parsed)

    return parsed


def _validate_arguments(args: argparse.Namespace) -> None:
    """
    Validate parsed arguments.

    Args:
        args: Parsed arguments namespace

    Raises:
        CLIError: If validation fails
    """
    root = Path(args.path)

    if not root.exists():
        raise CLIError(f"Root directory does not exist: {args.path}")

    if not root.is_dir():
        raise CLIError(f"Root is not a directory: {args.path}")

    if args.config:
        config_path = Path(args.config)

        if not config_path.exists():
            raise CLIError(f"Configuration file does not exist: {args.config}")

        if not config_path.is_file():
            raise CLIError(f"Configuration path is not a file: {args.config}")

    if args.command == "whatis" and not os.path.exists(args.target):
        raise CLIError(f"Path does not exist: {args.target}")


def build_config(args: argparse.Namespace) -> ConfigManager:
    """
    Build the configuration from file, environment and arguments.

    Args:
        args: Parsed arguments namespace

    Returns:
        Validated ConfigManager

    Raises:
        ConfigError: If the file cannot be loaded or the result is invalid
    """
    config = ConfigManager(config_file=args.config)

    if args.debug:
        config.set(ConfigKey.LOGGING_LEVEL, "DEBUG", ConfigSource.CLI_ARGS)

    if args.log_file:
        config.set(ConfigKey.LOGGING_FILE, args.log_file, ConfigSource.CLI_ARGS)

    config.validate()
    return config


def setup_logging(args: argparse.Namespace, config: ConfigManager) -> Logger:
    """
    Setup logging based on arguments and configuration.

    Args:
        args: Parsed arguments namespace
        config: Configuration manager

    Returns:
        Configured logger instance, also installed as the global logger
    """
    log_level = "DEBUG" if args.debug else config.get(ConfigKey.LOGGING_LEVEL, "WARNING")
    log_file = config.get(ConfigKey.LOGGING_FILE)

    logger = Logger("tagtree", level=log_level)

    if log_file:
        logger.add_handler(logger.create_file_handler(log_file))

    set_global_logger(logger)
    return logger


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Parses arguments, loads configuration, sets up logging and passes
    control to ``tagtree.main.run_command``.

    Returns:
        Exit code
    """
    try:
        args = parse_arguments(argv)

        config = build_config(args)

        logger = setup_logging(args, config)
        logger.debug("Starting", command=args.command, root=os.path.abspath(args.path))

        from tagtree.main import run_command

        return run_command(args, config, logger)

    except CLIError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except TagTreeError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
