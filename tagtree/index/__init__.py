"""Indexing layer: sidecar loading, traversal, glob matching and the tag table.

Components:
- loader: Sidecar file parsing and implicit tag inference
- walker: Depth-first directory traversal
- globs: Pattern matching against directory listings
- inheritance: Directory tag inheritance stack
- table: Tag index table
- audit: check, untracked, tags, count, search, whatis and clean
"""

from .audit import (
    CheckResult,
    MissingGlob,
    WhatIs,
    check,
    clean,
    count_files_tags,
    get_all_tags,
    search,
    untracked_files,
    what_is,
)
from .globs import GlobMatches
from .inheritance import InheritedTags
from .loader import (
    DirData,
    FileEntry,
    Loader,
    LoaderOptions,
    get_backup_path,
    get_sidecar_path,
    infer_implicit_tags,
    infer_year_range,
    parse_sidecar,
    read_sidecar,
    render_sidecar,
)
from .options import IndexOptions
from .table import TagTable
from .walker import DirEntry, DirTree, MetadataState, VisitedDir, walk

__all__ = [
    # Loader
    "DirData",
    "FileEntry",
    "Loader",
    "LoaderOptions",
    "get_backup_path",
    "get_sidecar_path",
    "infer_implicit_tags",
    "infer_year_range",
    "parse_sidecar",
    "read_sidecar",
    "render_sidecar",
    # Options
    "IndexOptions",
    # Traversal
    "DirEntry",
    "DirTree",
    "MetadataState",
    "VisitedDir",
    "walk",
    # Matching and inheritance
    "GlobMatches",
    "InheritedTags",
    # Table
    "TagTable",
    # Audit
    "CheckResult",
    "MissingGlob",
    "WhatIs",
    "check",
    "clean",
    "count_files_tags",
    "get_all_tags",
    "search",
    "untracked_files",
    "what_is",
]
