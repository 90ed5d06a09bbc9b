#!/usr/bin/env python3
"""Tag inheritance along a depth-first directory traversal.

Directory tags apply to everything beneath the directory. Instead of storing
tags per directory, a single flat buffer holds the tag indices of the
current directory and all of its open ancestors, and a list of markers
records where each directory's tags start. Moving between directories only
needs the previous and current paths.
"""

import os
from typing import Iterable, List, Optional

from tagtree.core.errors import InheritanceError


def _components(path: str) -> List[str]:
    parts = os.path.normpath(path).split(os.sep)
    return [p for p in parts if p]


class InheritedTags:
    """Tag indices inherited by the directory currently being visited.

    Example:
        >>> inherited = InheritedTags()
        >>> inherited.update(None, "/data")
        >>> inherited.extend([0])
        >>> inherited.update("/data", "/data/photos")
        >>> inherited.extend([1])
        >>> inherited.tag_indices
        [0, 1]
        >>> inherited.update("/data/photos", "/data/music")
        >>> inherited.tag_indices
        [0]
    """

    def __init__(self):
        self.tag_indices: List[int] = []
        self.offsets: List[int] = []

    def update(self, previous: Optional[str], current: str) -> None:
        """Move the inheritance scope from one directory to the next.

        Args:
            previous: Previously visited directory, or None on the first visit
            current: Directory being visited now

        Raises:
            InheritanceError: If current is neither a child of previous nor a
                child of one of previous's ancestors
        """
        if previous is None:
            self.offsets.append(len(self.tag_indices))
            return

        before_parts = _components(previous)
        after_parts = _components(current)
        before = len(before_parts)
        after = len(after_parts)

        common = 0
        for a, b in zip(before_parts, after_parts):
            if a != b:
                break
            common += 1

        if before == common and after == before + 1:
            self.offsets.append(len(self.tag_indices))
        elif before > common and after == common + 1:
            if len(self.offsets) < before - common:
                raise InheritanceError(previous, current)
            last = len(self.tag_indices)
            for _ in range(before - common):
                last = self.offsets.pop()
            del self.tag_indices[last:]
            self.offsets.append(last)
        else:
            raise InheritanceError(previous, current)

    def extend(self, indices: Iterable[int]) -> None:
        """Add the current directory's own tag indices."""
        self.tag_indices.extend(indices)
