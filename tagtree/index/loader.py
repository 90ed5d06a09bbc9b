#!/usr/bin/env python3
"""Sidecar file loading and parsing.

A sidecar file is a flat sequence of bracketed headers, each followed by
free text up to the next header line:

    [tags]
    project archive

    [desc]
    Scanned letters.

    [path]
    1998_letter.pdf
    scan_*.png

    [tags]
    letter

Headers before the first ``[path]`` describe the directory. Each ``[path]``
starts a group of patterns (one per line) that share the ``[tags]`` and
``[desc]`` headers following it.

Example:
    >>> data = parse_sidecar("[tags]\\nx y\\n[path]\\na.txt", "/tmp/.ftag")
    >>> data.tags
    ['x', 'y']
    >>> data.files[0].path
    'a.txt'
"""

import os
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from tagtree.core.constants import DEFAULT_SIDECAR_NAMES, FORMAT_TAGS, HeaderType, SidecarNames
from tagtree.core.errors import SidecarParseError, SidecarReadError

_HEADERS = (
    ("path]", HeaderType.PATH),
    ("tags]", HeaderType.TAGS),
    ("desc]", HeaderType.DESC),
)


@dataclass
class FileEntry:
    """One declared pattern from a sidecar file.

    Attributes:
        path: File name or glob pattern
        tags: Explicit tags of the pattern's group
        desc: Description of the pattern's group
        implicit_tags: Tags inferred from the pattern text
        group: Index of the ``[path]`` header the pattern belongs to
    """

    path: str
    tags: List[str] = field(default_factory=list)
    desc: Optional[str] = None
    implicit_tags: List[str] = field(default_factory=list)
    group: int = 0

    @property
    def all_tags(self) -> List[str]:
        return self.tags + self.implicit_tags


@dataclass
class DirData:
    """Parsed content of one sidecar file."""

    desc: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    implicit_tags: List[str] = field(default_factory=list)
    files: List[FileEntry] = field(default_factory=list)

    @property
    def all_tags(self) -> List[str]:
        return self.tags + self.implicit_tags

    def groups(self) -> List[List[FileEntry]]:
        """File entries grouped by the ``[path]`` header they came from."""
        grouped: List[List[FileEntry]] = []
        last_group = None
        for entry in self.files:
            if entry.group != last_group:
                grouped.append([])
                last_group = entry.group
            grouped[-1].append(entry)
        return grouped


@dataclass(frozen=True)
class LoaderOptions:
    """Which parts of a sidecar file to keep.

    Structure is validated regardless; skipped parts are simply not stored.
    When ``file_entries`` is False, parsing stops at the first ``[path]``.
    """

    dir_tags: bool = True
    dir_desc: bool = True
    file_entries: bool = True
    file_tags: bool = True
    file_desc: bool = True

    @classmethod
    def everything(cls) -> "LoaderOptions":
        return cls()

    @classmethod
    def tags_only(cls) -> "LoaderOptions":
        """Options used when building a tag table."""
        return cls(dir_desc=False, file_desc=False)


def infer_year_range(name: str) -> Optional[range]:
    """Infer a range of years from the start of a file or directory name.

    Recognized prefixes are ``YYYY``, ``YYYY_YYYY`` and ``YYYY_to_YYYY``.

    Args:
        name: File or directory name

    Returns:
        Inclusive range of years as a ``range``, or None without a year prefix
    """

    def year_at(text: str) -> Optional[int]:
        word = text[:4]
        if len(word) == 4 and word.isascii() and word.isdigit():
            return int(word)
        return None

    first = year_at(name)
    if first is None:
        return None

    rest = name[4:]
    if rest.startswith("_"):
        rest = rest[1:]
        second = year_at(rest)
        if second is not None:
            return range(first, second + 1)
        if rest.startswith("to_"):
            second = year_at(rest[3:])
            if second is not None:
                return range(first, second + 1)

    return range(first, first + 1)


def infer_format_tags(name: str) -> List[str]:
    """Format tags (image, video, audio, document) implied by a file extension."""
    lowered = name.lower()
    return [tag for exts, tag in FORMAT_TAGS if lowered.endswith(exts)]


def infer_implicit_tags(name: str, formats: bool = False) -> List[str]:
    """All tags implied by a name.

    Args:
        name: File or directory name
        formats: Also infer format tags from the extension

    Returns:
        Year tags in ascending order, followed by format tags
    """
    years = infer_year_range(name)
    tags = [str(year) for year in years] if years is not None else []
    if formats:
        tags.extend(infer_format_tags(name))
    return tags


def _iter_headers(text: str, filepath: str) -> Iterator[Tuple[HeaderType, str]]:
    """Split sidecar text into (header type, trimmed content) pairs."""
    text = text.strip()
    if not text:
        return

    if text.startswith("["):
        remaining = text[1:]
    else:
        pos = text.find("\n[")
        if pos < 0:
            raise SidecarParseError(filepath, "Cannot find the first header in the file.")
        remaining = text[pos + 2:]
    remaining = remaining.strip()

    while remaining:
        for prefix, kind in _HEADERS:
            if remaining.startswith(prefix):
                remaining = remaining[len(prefix):]
                pos = remaining.find("\n[")
                if pos < 0:
                    content, remaining = remaining.strip(), ""
                else:
                    content, remaining = remaining[:pos].strip(), remaining[pos + 2:]
                yield kind, content
                break
        else:
            line = remaining.splitlines()[0] if remaining else ""
            raise SidecarParseError(filepath, f"Unrecognized header: [{line}")


class _Group:
    """Patterns of one ``[path]`` header while its tags/desc are being read."""

    def __init__(self, index: int, patterns: str):
        self.index = index
        self.patterns = patterns
        self.tags: Optional[List[str]] = None
        self.desc: Optional[str] = None
        self.seen_tags = False
        self.seen_desc = False

    def entries(self) -> List[FileEntry]:
        return [
            FileEntry(
                path=line.strip(),
                tags=list(self.tags or []),
                desc=self.desc,
                group=self.index,
            )
            for line in self.patterns.splitlines()
            if line.strip()
        ]


def parse_sidecar(
    text: str,
    filepath: str = "<sidecar>",
    options: LoaderOptions = LoaderOptions(),
) -> DirData:
    """Parse the text of a sidecar file.

    Args:
        text: Raw sidecar content
        filepath: Path used in error messages
        options: Parts of the file to keep

    Returns:
        Parsed DirData (without implicit tags)

    Raises:
        SidecarParseError: On a missing first header, an unknown header, or a
            duplicate [tags]/[desc] within the same scope
    """
    data = DirData()
    seen_dir_tags = False
    seen_dir_desc = False
    group: Optional[_Group] = None
    group_count = 0

    for kind, content in _iter_headers(text, filepath):
        if kind is HeaderType.PATH:
            if not options.file_entries:
                break
            if group is not None:
                data.files.extend(group.entries())
            group = _Group(group_count, content)
            group_count += 1

        elif kind is HeaderType.TAGS:
            if group is not None:
                if group.seen_tags:
                    raise SidecarParseError(
                        filepath,
                        f"The following globs have more than one 'tags' header:\n{group.patterns}",
                    )
                group.seen_tags = True
                if options.file_tags:
                    group.tags = content.split()
            else:
                if seen_dir_tags:
                    raise SidecarParseError(filepath, "The directory has more than one 'tags' header.")
                seen_dir_tags = True
                if options.dir_tags:
                    data.tags = content.split()

        elif kind is HeaderType.DESC:
            if group is not None:
                if group.seen_desc:
                    raise SidecarParseError(
                        filepath,
                        f"The following globs have more than one description:\n{group.patterns}",
                    )
                group.seen_desc = True
                if options.file_desc:
                    group.desc = content
            else:
                if seen_dir_desc:
                    raise SidecarParseError(filepath, "The directory has more than one description.")
                seen_dir_desc = True
                if options.dir_desc:
                    data.desc = content

    if group is not None:
        data.files.extend(group.entries())

    return data


def read_sidecar(
    filepath: str,
    options: LoaderOptions = LoaderOptions(),
    formats: bool = False,
) -> DirData:
    """Read and parse a sidecar file, adding implicit tags.

    The directory's implicit tags come from the name of the directory that
    holds the sidecar; each entry's implicit tags come from its pattern.

    Args:
        filepath: Path of the sidecar file
        options: Parts of the file to keep
        formats: Also infer format tags

    Returns:
        Parsed DirData

    Raises:
        SidecarReadError: If the file cannot be read or decoded
        SidecarParseError: If the file is malformed
    """
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SidecarReadError(filepath, e)

    data = parse_sidecar(text, filepath, options)

    dir_name = os.path.basename(os.path.dirname(os.path.abspath(filepath)))
    if options.dir_tags:
        data.implicit_tags = infer_implicit_tags(dir_name, formats=False)
    if options.file_tags:
        for entry in data.files:
            entry.implicit_tags = infer_implicit_tags(entry.path, formats=formats)

    return data


def render_sidecar(data: DirData) -> str:
    """Serialize DirData back to sidecar text.

    Implicit tags are not written. Entries sharing a group are written under
    one ``[path]`` header.
    """
    sections: List[str] = []
    if data.tags:
        sections.append("[tags]\n" + " ".join(data.tags))
    if data.desc:
        sections.append("[desc]\n" + data.desc)
    for entries in data.groups():
        sections.append("[path]\n" + "\n".join(entry.path for entry in entries))
        first = entries[0]
        if first.tags:
            sections.append("[tags]\n" + " ".join(first.tags))
        if first.desc:
            sections.append("[desc]\n" + first.desc)
    return "\n\n".join(sections) + "\n" if sections else ""


def get_sidecar_path(
    path: str,
    names: SidecarNames = DEFAULT_SIDECAR_NAMES,
    must_exist: bool = True,
) -> Optional[str]:
    """Locate the sidecar file for a path.

    A directory's sidecar is its child; a file's sidecar is its sibling. The
    primary name takes precedence over the legacy name.

    Args:
        path: Directory or file path
        names: Sidecar file names
        must_exist: Return None instead of the primary candidate when no
            sidecar exists

    Returns:
        Sidecar path, or None if the path doesn't exist (or, with
        ``must_exist``, no sidecar exists)
    """
    if not os.path.exists(path):
        return None

    dir_path = path if os.path.isdir(path) else os.path.dirname(os.path.abspath(path))
    for name in names.candidates:
        candidate = os.path.join(dir_path, name)
        if os.path.isfile(candidate):
            return candidate

    if must_exist:
        return None
    return os.path.join(dir_path, names.primary)


def get_backup_path(path: str, names: SidecarNames = DEFAULT_SIDECAR_NAMES) -> str:
    """Path of the backup sidecar for a directory or file path."""
    dir_path = path if os.path.isdir(path) else os.path.dirname(os.path.abspath(path))
    return os.path.join(dir_path, names.backup)


class Loader:
    """Loads sidecar files with fixed options.

    Example:
        >>> loader = Loader(LoaderOptions.tags_only())
        >>> data = loader.load("/photos/.ftag")
    """

    def __init__(self, options: LoaderOptions = LoaderOptions(), formats: bool = False):
        """Initialize loader.

        Args:
            options: Parts of each file to keep
            formats: Also infer format tags for file entries
        """
        self.options = options
        self.formats = formats

    def load(self, filepath: str) -> DirData:
        """Load one sidecar file; see ``read_sidecar``."""
        return read_sidecar(filepath, self.options, self.formats)
