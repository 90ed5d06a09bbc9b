#!/usr/bin/env python3
"""Maintenance and inspection operations over a tagged directory tree.

These operations walk the tree like the tag table does but answer questions
about the sidecar files themselves: patterns that match nothing, files that
no pattern covers, the tag vocabulary, descriptions, and cleanup.
"""

import os
import shutil
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from tagtree.core.errors import InvalidPathError, TagTreeError
from tagtree.index.globs import GlobMatches
from tagtree.index.loader import (
    DirData,
    FileEntry,
    LoaderOptions,
    get_backup_path,
    get_sidecar_path,
    infer_implicit_tags,
    read_sidecar,
    render_sidecar,
)
from tagtree.index.options import IndexOptions
from tagtree.index.table import TagTable
from tagtree.index.walker import DirTree, MetadataState, VisitedDir
from tagtree.infrastructure.logger import Logger, get_logger


@dataclass(frozen=True)
class MissingGlob:
    """A declared pattern that matches no file in its directory."""

    dir: str
    pattern: str

    def __str__(self) -> str:
        return f"No files matching '{self.pattern}' in {self.dir}"


@dataclass
class CheckResult:
    """Outcome of ``check``."""

    missing: List[MissingGlob] = field(default_factory=list)
    errors: List[TagTreeError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.missing and not self.errors


@dataclass
class WhatIs:
    """Tags and description of a file or directory."""

    tags: List[str]
    description: str


def _walk_loaded(
    root: str,
    loader_options: LoaderOptions,
    options: IndexOptions,
    logger: Logger,
    errors: Optional[List[TagTreeError]] = None,
):
    """Yield (visited, data) for every directory with a readable sidecar.

    Directories whose sidecar fails to load are logged and skipped; their
    errors are appended to ``errors`` when given.
    """
    for visited in DirTree(root, loader_options, options, logger):
        if visited.state is MetadataState.FAILED:
            logger.warning("Skipping sidecar file", path=visited.sidecar_path, error=visited.error.message)
            if errors is not None:
                errors.append(visited.error)
            continue
        yield visited, visited.metadata


def check(
    root: str,
    options: IndexOptions = IndexOptions(),
    logger: Optional[Logger] = None,
) -> CheckResult:
    """Find declared patterns that match no file.

    Args:
        root: Directory to check
        options: Sidecar names and tag inference settings
        logger: Logger (defaults to the global logger)

    Returns:
        CheckResult with unmatched patterns and sidecar errors
    """
    logger = logger or get_logger()
    result = CheckResult()
    matcher = GlobMatches()
    loader_options = LoaderOptions(dir_tags=False, dir_desc=False, file_tags=False, file_desc=False)

    for visited, data in _walk_loaded(root, loader_options, options, logger, result.errors):
        if data is None:
            continue
        patterns = [entry.path for entry in data.files]
        matcher.find_matches(visited.files, patterns, short_circuit=True, dir_path=visited.abs_path)
        for gi in matcher.unmatched_globs():
            result.missing.append(MissingGlob(visited.abs_path, patterns[gi]))

    logger.info("Check finished", missing=len(result.missing), errors=len(result.errors))
    return result


def untracked_files(
    root: str,
    options: IndexOptions = IndexOptions(),
    logger: Optional[Logger] = None,
) -> List[str]:
    """List files that no declared pattern matches.

    Every file of a directory without a sidecar is untracked. Directories
    whose sidecar cannot be loaded are skipped.

    Returns:
        Root-relative paths in traversal order
    """
    logger = logger or get_logger()
    untracked: List[str] = []
    matcher = GlobMatches()
    loader_options = LoaderOptions(dir_tags=False, dir_desc=False, file_tags=False, file_desc=False)

    for visited, data in _walk_loaded(root, loader_options, options, logger):
        if data is None:
            untracked.extend(visited.rel_file(name) for name in visited.files)
            continue
        matcher.find_matches(visited.files, [entry.path for entry in data.files])
        untracked.extend(visited.rel_file(visited.files[fi]) for fi in matcher.unmatched_files())

    return untracked


def _collect_tags(root: str, options: IndexOptions, logger: Logger) -> Tuple[int, Set[str]]:
    tags: Set[str] = set()
    tracked = 0
    matcher = GlobMatches()

    for visited, data in _walk_loaded(root, LoaderOptions.tags_only(), options, logger):
        if data is None:
            continue
        tags.update(data.all_tags)
        for entry in data.files:
            tags.update(entry.tags)
        matcher.find_matches(visited.files, [entry.path for entry in data.files])
        for fi, name in enumerate(visited.files):
            if matcher.is_file_matched(fi):
                tracked += 1
                tags.update(infer_implicit_tags(name, formats=options.infer_formats))

    return tracked, tags


def get_all_tags(
    root: str,
    options: IndexOptions = IndexOptions(),
    logger: Optional[Logger] = None,
) -> List[str]:
    """Every distinct tag, explicit or implicit, used under root, sorted."""
    _, tags = _collect_tags(root, options, logger or get_logger())
    return sorted(tags)


def count_files_tags(
    root: str,
    options: IndexOptions = IndexOptions(),
    logger: Optional[Logger] = None,
) -> Tuple[int, int]:
    """Count tracked files and distinct tags under root.

    Returns:
        Tuple of (tracked file count, distinct tag count)
    """
    tracked, tags = _collect_tags(root, options, logger or get_logger())
    return tracked, len(tags)


def search(
    root: str,
    text: str,
    options: IndexOptions = IndexOptions(),
    logger: Optional[Logger] = None,
) -> List[str]:
    """Find tracked files whose tags or description mention a keyword.

    Keywords are the whitespace-separated words of ``text`` and are compared
    case-insensitively as substrings. A file's tags include inherited and
    implicit tags; its description is that of the groups matching it.

    Returns:
        Sorted root-relative paths
    """
    logger = logger or get_logger()
    keywords = [word.lower() for word in text.split()]
    if not keywords:
        return []

    table = TagTable.from_dir(root, options, logger)

    descriptions: Dict[str, List[str]] = {}
    matcher = GlobMatches()
    loader_options = LoaderOptions(dir_tags=False, dir_desc=False, file_tags=False, file_desc=True)
    for visited, data in _walk_loaded(root, loader_options, options, logger):
        if data is None:
            continue
        matcher.find_matches(visited.files, [entry.path for entry in data.files])
        for fi, name in enumerate(visited.files):
            descs = [data.files[gi].desc for gi in matcher.matched_globs(fi) if data.files[gi].desc]
            if descs:
                descriptions[visited.rel_file(name)] = descs

    def mentions(haystack: str) -> bool:
        haystack = haystack.lower()
        return any(keyword in haystack for keyword in keywords)

    results = []
    for file in table.files:
        if any(mentions(tag) for tag in table.file_tags(file)) or any(
            mentions(desc) for desc in descriptions.get(file, [])
        ):
            results.append(file)
    return sorted(results)


def what_is(path: str, options: IndexOptions = IndexOptions()) -> WhatIs:
    """Describe a file or directory from its sidecar.

    For a file, the tags are the directory's tags plus those of every
    matching group, deduplicated and sorted; the description lists the
    matching groups' descriptions followed by the directory's.

    Raises:
        InvalidPathError: If path doesn't exist or has no sidecar
    """
    path = os.path.abspath(path)
    if not os.path.exists(path):
        raise InvalidPathError(path, "does not exist")

    sidecar = get_sidecar_path(path, options.sidecar_names)
    if sidecar is None:
        raise InvalidPathError(path, "no sidecar file")

    data = read_sidecar(sidecar, LoaderOptions.everything())

    if os.path.isdir(path):
        return WhatIs(tags=list(data.tags), description=data.desc or "")

    matches = GlobMatches()
    matches.find_matches([os.path.basename(path)], [entry.path for entry in data.files])
    tags = set(data.tags)
    descs: List[str] = []
    for gi in matches.matched_globs(0):
        entry = data.files[gi]
        tags.update(entry.tags)
        if entry.desc and entry.desc not in descs:
            descs.append(entry.desc)
    if data.desc:
        descs.append(data.desc)

    return WhatIs(tags=sorted(tags), description="\n".join(descs))


def _merge_groups(entries: List[FileEntry]) -> List[FileEntry]:
    """Renumber entry groups so groups with equal tags and desc become one."""
    keys: Dict[Tuple[Tuple[str, ...], Optional[str]], int] = {}
    merged: Dict[int, List[FileEntry]] = {}
    for entry in entries:
        key = (tuple(sorted(entry.tags)), entry.desc)
        group = keys.setdefault(key, len(keys))
        merged.setdefault(group, []).append(
            FileEntry(path=entry.path, tags=entry.tags, desc=entry.desc, group=group)
        )
    return [entry for group in sorted(merged) for entry in merged[group]]


def _clean_dir(visited: VisitedDir, data: DirData, matcher: GlobMatches) -> DirData:
    patterns = [entry.path for entry in data.files]
    matcher.find_matches(visited.files, patterns, dir_path=visited.abs_path)
    kept = [entry for gi, entry in enumerate(data.files) if matcher.is_glob_matched(gi)]
    return DirData(desc=data.desc, tags=data.tags, files=_merge_groups(kept))


def clean(
    root: str,
    options: IndexOptions = IndexOptions(),
    logger: Optional[Logger] = None,
) -> int:
    """Rewrite every sidecar under root.

    Patterns matching no file are dropped and groups sharing the same tags
    and description are merged. The previous content of each sidecar is
    kept in the backup file.

    Returns:
        Number of sidecar files rewritten
    """
    logger = logger or get_logger()
    names = options.sidecar_names
    matcher = GlobMatches()
    rewritten = 0

    for visited, data in _walk_loaded(root, LoaderOptions.everything(), options, logger):
        if data is None:
            continue
        cleaned = _clean_dir(visited, data, matcher)
        sidecar = visited.sidecar_path
        backup = get_backup_path(visited.abs_path, names)
        shutil.copyfile(sidecar, backup)
        with open(sidecar, "w", encoding="utf-8") as f:
            f.write(render_sidecar(cleaned))
        rewritten += 1
        logger.debug(
            "Rewrote sidecar file",
            path=sidecar,
            dropped=len(data.files) - len(cleaned.files),
        )

    logger.info("Clean finished", rewritten=rewritten)
    return rewritten
