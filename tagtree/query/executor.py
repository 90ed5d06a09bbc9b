#!/usr/bin/env python3
"""Running filter queries against a directory tree."""

from typing import Iterator, List, Optional

from tagtree.index.options import IndexOptions
from tagtree.index.table import TagTable
from tagtree.infrastructure.logger import Logger, get_logger
from tagtree.query.filter import Filter, parse_filter


class QueryExecutor:
    """Answers filter queries from one tag table.

    The table is built once, so several filters can be evaluated without
    walking the tree again.

    Example:
        >>> executor = QueryExecutor.from_dir("/data/photos")
        >>> list(executor.query("travel & !2019"))
        ['2021_trip/beach.jpg']
    """

    def __init__(self, table: TagTable, logger: Optional[Logger] = None):
        self.table = table
        self.logger = logger or get_logger()

    @classmethod
    def from_dir(
        cls,
        root: str,
        options: IndexOptions = IndexOptions(),
        logger: Optional[Logger] = None,
    ) -> "QueryExecutor":
        return cls(TagTable.from_dir(root, options, logger), logger)

    def parse(self, filter_text: str) -> Filter:
        """Parse a filter, resolving tag names against the table."""
        return parse_filter(filter_text, self.table.tag_resolver())

    def query(self, filter_text: str) -> Iterator[str]:
        """Yield root-relative paths of files matching a filter.

        Raises:
            FilterParseError: If the filter is malformed (raised on the first
                ``next()``)
        """
        expr = self.parse(filter_text)
        self.logger.debug("Running query", filter=str(expr))
        for file in self.table.files:
            if self.table.matches(expr, file):
                yield file

    def query_all(self, filter_text: str) -> List[str]:
        return list(self.query(filter_text))


def run_query(
    root: str,
    filter_text: str,
    options: IndexOptions = IndexOptions(),
    logger: Optional[Logger] = None,
) -> Iterator[str]:
    """Build a table for root and yield the files matching a filter.

    Args:
        root: Directory to search
        filter_text: Filter expression
        options: Sidecar names and tag inference settings
        logger: Logger (defaults to the global logger)

    Yields:
        Root-relative paths in sorted order

    Raises:
        InvalidPathError: If root is not a directory
        FilterParseError: If the filter is malformed
    """
    executor = QueryExecutor.from_dir(root, options, logger)
    yield from executor.query(filter_text)
