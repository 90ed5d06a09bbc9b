#!/usr/bin/env python3
"""Command dispatch for tagtree.

This module maps parsed CLI commands onto the index and query layers and
prints their results.

Example:
    >>> from tagtree.main import run_command
    >>> run_command(args, config, logger)
"""

import argparse
import sys
from typing import Callable, Dict, TextIO

from tagtree.index import audit
from tagtree.index.options import IndexOptions
from tagtree.infrastructure.config_manager import ConfigManager
from tagtree.infrastructure.logger import Logger
from tagtree.query.executor import run_query
from tagtree.report import ReportRenderer


class CommandRunner:
    """Runs one CLI command against a root directory."""

    def __init__(
        self,
        args: argparse.Namespace,
        options: IndexOptions,
        logger: Logger,
        out: TextIO = sys.stdout,
    ):
        self.args = args
        self.root = args.path
        self.options = options
        self.logger = logger
        self.out = out
        self.renderer = ReportRenderer()

        self._handlers: Dict[str, Callable[[], int]] = {
            "query": self.query,
            "check": self.check,
            "untracked": self.untracked,
            "tags": self.tags,
            "count": self.count,
            "whatis": self.whatis,
            "search": self.search,
            "clean": self.clean,
        }

    def _print(self, text: str) -> None:
        print(text, file=self.out)

    def run(self) -> int:
        """Run the command selected in args.

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        handler = self._handlers[self.args.command]
        with self.logger.add_context(command=self.args.command):
            return handler()

    def query(self) -> int:
        filter_text = " ".join(self.args.filter)
        for path in run_query(self.root, filter_text, self.options, self.logger):
            self._print(path)
        return 0

    def check(self) -> int:
        result = audit.check(self.root, self.options, self.logger)
        self._print(self.renderer.render("check", missing=result.missing, errors=result.errors))
        return 0 if result.ok else 1

    def untracked(self) -> int:
        for path in audit.untracked_files(self.root, self.options, self.logger):
            self._print(path)
        return 0

    def tags(self) -> int:
        for tag in audit.get_all_tags(self.root, self.options, self.logger):
            self._print(tag)
        return 0

    def count(self) -> int:
        files, tags = audit.count_files_tags(self.root, self.options, self.logger)
        self._print(self.renderer.render("count", files=files, tags=tags))
        return 0

    def whatis(self) -> int:
        info = audit.what_is(self.args.target, self.options)
        self._print(self.renderer.render("whatis", tags=info.tags, description=info.description))
        return 0

    def search(self) -> int:
        text = " ".join(self.args.keywords)
        for path in audit.search(self.root, text, self.options, self.logger):
            self._print(path)
        return 0

    def clean(self) -> int:
        count = audit.clean(self.root, self.options, self.logger)
        self._print(self.renderer.render("clean", count=count))
        return 0


def run_command(
    args: argparse.Namespace,
    config: ConfigManager,
    logger: Logger,
    out: TextIO = sys.stdout,
) -> int:
    """
    Main entry point for running a tagtree command.

    Args:
        args: Parsed command-line arguments
        config: Configuration manager
        logger: Logger instance
        out: Stream receiving command output

    Returns:
        Exit code (0 for success, non-zero for failure)

    Raises:
        TagTreeError: If the command fails (reported by the CLI)
    """
    options = IndexOptions.from_config(config)
    return CommandRunner(args, options, logger, out).run()


def main():
    """
    Entry point when run as standalone script.

    Typically called via cli.py, but can be run directly for testing.
    """
    from tagtree.cli import main as cli_main

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
