#!/usr/bin/env python3
"""Depth-first directory traversal.

The walker visits every directory under a root exactly once, in pre-order,
using an explicit stack instead of recursion. For each directory it reports
the real files and subdirectories (sidecar files excluded) and the state of
the directory's sidecar file.

Example:
    >>> walker = DirTree("/data/photos")
    >>> for visited in walker:
    ...     print(visited.rel_path, len(visited.files))
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional

from tagtree.core.constants import EntryKind
from tagtree.core.errors import TagTreeError
from tagtree.core.validators import validate_root_path
from tagtree.index.loader import DirData, Loader, LoaderOptions, get_sidecar_path
from tagtree.index.options import IndexOptions
from tagtree.infrastructure.logger import Logger, get_logger


@dataclass
class DirEntry:
    """A child found during traversal. Depth 1 is the traversal root."""

    depth: int
    kind: EntryKind
    name: str


class MetadataState(Enum):
    """State of a directory's sidecar file."""

    OK = "ok"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass
class VisitedDir:
    """One directory reported by the walker.

    Attributes:
        depth: Traversal depth (root = 1)
        abs_path: Absolute directory path
        rel_path: Path relative to the root ("" for the root)
        files: Names of regular files, sorted
        dirs: Names of subdirectories, sorted
        state: Sidecar state
        metadata: Loaded sidecar data when state is OK
        error: Load failure when state is FAILED
        sidecar_path: Path of the sidecar file, if one exists
    """

    depth: int
    abs_path: str
    rel_path: str
    files: List[str] = field(default_factory=list)
    dirs: List[str] = field(default_factory=list)
    state: MetadataState = MetadataState.NOT_FOUND
    metadata: Optional[DirData] = None
    error: Optional[TagTreeError] = None
    sidecar_path: Optional[str] = None

    def rel_file(self, name: str) -> str:
        """Root-relative path of a file in this directory."""
        return os.path.join(self.rel_path, name) if self.rel_path else name


class DirTree:
    """Pull-based depth-first walker over a directory tree.

    Subdirectories are visited in ascending name order. A directory that
    cannot be listed is reported with no children.
    """

    def __init__(
        self,
        root: str,
        loader_options: LoaderOptions = LoaderOptions(),
        options: IndexOptions = IndexOptions(),
        logger: Optional[Logger] = None,
    ):
        """Initialize walker.

        Args:
            root: Directory to walk
            loader_options: Parts of each sidecar file to load
            options: Sidecar names and tag inference settings
            logger: Logger (defaults to the global logger)

        Raises:
            InvalidPathError: If root doesn't exist or is not a directory
        """
        self.root = validate_root_path(root)
        self.options = options
        self.loader = Loader(loader_options, formats=options.infer_formats)
        self.logger = logger or get_logger()

        self._reserved = frozenset(options.sidecar_names.reserved)
        self._stack: List[DirEntry] = [DirEntry(1, EntryKind.DIRECTORY, "")]
        self._components: List[str] = []

    def __iter__(self) -> Iterator[VisitedDir]:
        while True:
            visited = self.next_dir()
            if visited is None:
                return
            yield visited

    def next_dir(self) -> Optional[VisitedDir]:
        """Advance to the next directory.

        Returns:
            The next VisitedDir, or None when traversal is complete
        """
        while self._stack:
            entry = self._stack.pop()
            if entry.kind is EntryKind.FILE:
                continue

            del self._components[max(entry.depth - 2, 0):]
            if entry.depth > 1:
                self._components.append(entry.name)

            rel_path = os.path.join(*self._components) if self._components else ""
            abs_path = os.path.join(self.root, rel_path) if rel_path else self.root

            files, dirs = self._list_children(abs_path)

            # Files go on top so they are discarded before the next directory
            # is popped; directories pop in ascending order.
            for name in reversed(dirs):
                self._stack.append(DirEntry(entry.depth + 1, EntryKind.DIRECTORY, name))
            for name in files:
                self._stack.append(DirEntry(entry.depth + 1, EntryKind.FILE, name))

            visited = VisitedDir(
                depth=entry.depth,
                abs_path=abs_path,
                rel_path=rel_path,
                files=files,
                dirs=dirs,
            )
            self._load_metadata(visited)
            return visited

        return None

    def _list_children(self, abs_path: str):
        files: List[str] = []
        dirs: List[str] = []
        try:
            with os.scandir(abs_path) as entries:
                for child in entries:
                    if child.name in self._reserved:
                        continue
                    try:
                        if child.is_dir():
                            dirs.append(child.name)
                        elif child.is_file():
                            files.append(child.name)
                    except OSError:
                        continue
        except OSError as e:
            self.logger.debug("Cannot list directory", path=abs_path, error=str(e))
            return [], []

        files.sort()
        dirs.sort()
        return files, dirs

    def _load_metadata(self, visited: VisitedDir) -> None:
        sidecar = get_sidecar_path(visited.abs_path, self.options.sidecar_names)
        if sidecar is None:
            return

        visited.sidecar_path = sidecar
        try:
            visited.metadata = self.loader.load(sidecar)
            visited.state = MetadataState.OK
        except TagTreeError as e:
            visited.error = e
            visited.state = MetadataState.FAILED


def walk(
    root: str,
    loader_options: LoaderOptions = LoaderOptions(),
    options: IndexOptions = IndexOptions(),
    logger: Optional[Logger] = None,
) -> Iterator[VisitedDir]:
    """Iterate over every directory under root; see ``DirTree``."""
    return iter(DirTree(root, loader_options, options, logger))
