#!/usr/bin/env python3
"""Tag index table for a directory tree.

The table maps every tag found under a root directory to a dense index and
every tracked file to an integer bitset of the tags it carries. A file's
tags are the tags of the sidecar groups matching it, the tags implied by its
name and the tags of all its ancestor directories.

Example:
    >>> table = TagTable.from_dir("/data/photos")
    >>> table.file_tags("2021_trip/beach.jpg")
    ['photos', 'travel', '2021']
"""

import os
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from tagtree.core.errors import TagTreeError
from tagtree.index.globs import GlobMatches
from tagtree.index.inheritance import InheritedTags
from tagtree.index.loader import LoaderOptions, infer_implicit_tags
from tagtree.index.options import IndexOptions
from tagtree.index.walker import DirTree, MetadataState
from tagtree.infrastructure.logger import Logger, get_logger
from tagtree.query.filter import FalseTag, Filter, Tag


class TagTable:
    """Registry of tags and per-file tag flags under one root.

    Attributes:
        path: Absolute root directory
        tags: Tag names ordered by index
        files: Root-relative paths of tracked files, sorted
        errors: Sidecar load failures met while building
    """

    def __init__(self, path: str):
        self.path = path
        self.tags: List[str] = []
        self.files: List[str] = []
        self.errors: List[TagTreeError] = []
        self._tag_index: Dict[str, int] = {}
        self._flags: Dict[str, int] = {}

    @classmethod
    def from_dir(
        cls,
        root: str,
        options: IndexOptions = IndexOptions(),
        logger: Optional[Logger] = None,
    ) -> "TagTable":
        """Build the table by walking a directory tree.

        Args:
            root: Directory to index
            options: Sidecar names and tag inference settings
            logger: Logger (defaults to the global logger)

        Returns:
            Populated TagTable

        Raises:
            InvalidPathError: If root is not a directory
            InheritanceError: If the traversal order is inconsistent
        """
        logger = logger or get_logger()
        walker = DirTree(root, LoaderOptions.tags_only(), options, logger)
        table = cls(walker.root)
        inherited = InheritedTags()
        matcher = GlobMatches()
        previous: Optional[str] = None

        for visited in walker:
            inherited.update(previous, visited.abs_path)
            previous = visited.abs_path

            if visited.state is MetadataState.NOT_FOUND:
                continue
            if visited.state is MetadataState.FAILED:
                logger.warning(
                    "Skipping sidecar file",
                    path=visited.sidecar_path,
                    error=visited.error.message if visited.error else None,
                )
                table.errors.append(visited.error)
                continue

            data = visited.metadata
            inherited.extend(table._register(tag) for tag in data.all_tags)

            matcher.find_matches(visited.files, [entry.path for entry in data.files])
            for fi, name in enumerate(visited.files):
                if not matcher.is_file_matched(fi):
                    continue
                flags = 0
                for gi in matcher.matched_globs(fi):
                    for tag in data.files[gi].tags:
                        flags |= 1 << table._register(tag)
                for tag in infer_implicit_tags(name, formats=options.infer_formats):
                    flags |= 1 << table._register(tag)
                for index in inherited.tag_indices:
                    flags |= 1 << index
                table._flags[visited.rel_file(name)] = flags

        table.files = sorted(table._flags)
        logger.info(
            "Tag table built",
            root=table.path,
            files=len(table.files),
            tags=len(table.tags),
            errors=len(table.errors),
        )
        return table

    def _register(self, tag: str) -> int:
        index = self._tag_index.get(tag)
        if index is None:
            index = len(self.tags)
            self._tag_index[tag] = index
            self.tags.append(tag)
        return index

    def tag_index(self, tag: str) -> Optional[int]:
        """Index of a tag, or None if no file or directory carries it."""
        return self._tag_index.get(tag)

    def flags(self, file: str) -> int:
        """Tag bitset of a tracked file (0 for unknown files)."""
        return self._flags.get(os.path.normpath(file), 0) if file else 0

    def flag_list(self, file: str) -> List[bool]:
        """Tag flags of a file as booleans, one per known tag."""
        bits = self.flags(file)
        return [bool(bits >> i & 1) for i in range(len(self.tags))]

    def file_tags(self, file: str) -> List[str]:
        """Names of the tags carried by a file, in index order."""
        bits = self.flags(file)
        return [tag for i, tag in enumerate(self.tags) if bits >> i & 1]

    def tag_resolver(self) -> Callable[[str], Filter]:
        """Tag factory for ``parse_filter`` that resolves names to indices.

        Tags unknown to this table become ``FalseTag`` so they match nothing.
        """

        def resolve(name: str) -> Filter:
            index = self._tag_index.get(name)
            return FalseTag() if index is None else Tag(index)

        return resolve

    def matches(self, expr: Filter, file: str) -> bool:
        """Evaluate a resolved filter against one file."""
        bits = self.flags(file)
        return expr.evaluate(lambda index: bool(bits >> index & 1))

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self) -> Iterator[Tuple[str, int]]:
        for file in self.files:
            yield file, self._flags[file]

    def __contains__(self, file: str) -> bool:
        return os.path.normpath(file) in self._flags
