#!/usr/bin/env python3
"""Matching declared patterns against the real files of one directory.

Patterns use shell-style wildcards (``*``, ``?``, ``[...]``) with
case-sensitive ``fnmatch`` semantics. Literal names are found by binary
search over the sorted file names before any wildcard scan.
"""

import bisect
import fnmatch
import os
from typing import List, Optional, Sequence, Set

from tagtree.core.constants import GLOB_MAGIC_CHARS


def is_glob(pattern: str) -> bool:
    """Check whether a pattern contains wildcard characters."""
    return any(c in GLOB_MAGIC_CHARS for c in pattern)


class GlobMatches:
    """Match table between files and patterns of one directory.

    Example:
        >>> matches = GlobMatches()
        >>> matches.find_matches(["a.txt", "b.png"], ["*.png", "c.txt"])
        >>> matches.matched_globs(1)
        [0]
        >>> matches.unmatched_globs()
        [1]
    """

    def __init__(self):
        self._file_globs: List[List[int]] = []
        self._glob_matched: List[bool] = []

    def find_matches(
        self,
        files: Sequence[str],
        patterns: Sequence[str],
        short_circuit: bool = False,
        dir_path: Optional[str] = None,
    ) -> None:
        """Compute which patterns match which files.

        Args:
            files: Real file names, sorted
            patterns: Declared patterns, in declaration order
            short_circuit: Stop at the first match of each pattern
            dir_path: When given, literal patterns are checked against the
                filesystem instead of the file list
        """
        self._file_globs = [[] for _ in files]
        self._glob_matched = [False] * len(patterns)

        for gi, pattern in enumerate(patterns):
            matched: Set[int] = set()
            wildcard = is_glob(pattern)

            if dir_path is not None and not wildcard:
                if os.path.isfile(os.path.join(dir_path, pattern)):
                    fi = bisect.bisect_left(files, pattern)
                    if fi < len(files) and files[fi] == pattern:
                        matched.add(fi)
                    else:
                        # The file exists but is not a listed child
                        self._glob_matched[gi] = True
                self._record(gi, matched)
                continue

            fi = bisect.bisect_left(files, pattern)
            if fi < len(files) and files[fi] == pattern:
                matched.add(fi)
                if short_circuit or not wildcard:
                    self._record(gi, matched)
                    continue

            for fi, name in enumerate(files):
                if fi in matched:
                    continue
                if fnmatch.fnmatchcase(name, pattern):
                    matched.add(fi)
                    if short_circuit:
                        break

            self._record(gi, matched)

    def _record(self, gi: int, matched: Set[int]) -> None:
        for fi in matched:
            self._file_globs[fi].append(gi)
            self._glob_matched[gi] = True

    def matched_globs(self, file_index: int) -> List[int]:
        """Indices of the patterns matching a file, in declaration order."""
        return self._file_globs[file_index]

    def is_file_matched(self, file_index: int) -> bool:
        return bool(self._file_globs[file_index])

    def is_glob_matched(self, glob_index: int) -> bool:
        return self._glob_matched[glob_index]

    def unmatched_globs(self) -> List[int]:
        """Indices of patterns that matched no file."""
        return [gi for gi, matched in enumerate(self._glob_matched) if not matched]

    def unmatched_files(self) -> List[int]:
        """Indices of files that no pattern matched."""
        return [fi for fi, globs in enumerate(self._file_globs) if not globs]
