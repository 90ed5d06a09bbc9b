"""Shared pytest fixtures for tagtree tests."""
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator

import pytest
import yaml

from tagtree.infrastructure.logger import Logger, LogLevel, set_global_logger

ROOT_SIDECAR = """[tags]
project

[desc]
Project root.

[path]
notes.txt

[tags]
misc
"""

DOCS_SIDECAR = """[tags]
draft

[path]
report.pdf

[tags]
report

[desc]
Quarterly report.

[path]
missing.txt

[tags]
ghost
"""

PHOTOS_SIDECAR = """[tags]
photos

[path]
*.jpg

[tags]
image travel

[desc]
Holiday pictures.
"""


def build_tree(root: Path, layout: Dict[str, Any]) -> Path:
    """Create files (str values) and directories (dict values) under root."""
    root.mkdir(parents=True, exist_ok=True)
    for name, content in layout.items():
        if isinstance(content, dict):
            build_tree(root / name, content)
        else:
            (root / name).write_text(content)
    return root


@pytest.fixture(autouse=True)
def quiet_logger() -> Generator[Logger, None, None]:
    """Install a global logger that only reports errors."""
    logger = Logger("tagtree", level=LogLevel.ERROR)
    set_global_logger(logger)
    yield logger


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def tagged_tree(tmp_path: Path) -> Path:
    """A small tagged archive.

    archive/            [project]
      notes.txt         misc
      stray.bin         (untracked)
      docs/             [draft]
        report.pdf      report
        2021_summary.txt (untracked)
        missing.txt     (declared, absent)
      photos/           [photos]
        1998_beach.jpg  image travel
        city.jpg        image travel
        raw/            (no sidecar)
          img.cr2
    """
    return build_tree(
        tmp_path / "archive",
        {
            ".ftag": ROOT_SIDECAR,
            "notes.txt": "notes",
            "stray.bin": "\x00",
            "docs": {
                ".ftag": DOCS_SIDECAR,
                "report.pdf": "%PDF",
                "2021_summary.txt": "summary",
            },
            "photos": {
                ".ftag": PHOTOS_SIDECAR,
                "1998_beach.jpg": "jpg",
                "city.jpg": "jpg",
                "raw": {"img.cr2": "raw"},
            },
        },
    )


@pytest.fixture
def sample_config() -> Dict[str, Any]:
    """Provide a sample tagtree configuration."""
    return {
        "tagtree": {
            "sidecar": {
                "primary": ".tags",
                "legacy": ".fstore",
                "backup": ".tags.bak",
            },
            "index": {"formats": True},
            "logging": {"level": "DEBUG", "file": None},
        }
    }


@pytest.fixture
def config_file(temp_dir: Path, sample_config: Dict[str, Any]) -> Path:
    """Create a configuration file."""
    config_path = temp_dir / "tagtree.yaml"
    with open(config_path, "w") as f:
        yaml.dump(sample_config, f)
    return config_path


@pytest.fixture
def clean_env(monkeypatch) -> None:
    """Remove TAGTREE_* variables from the environment."""
    for key in list(os.environ):
        if key.startswith("TAGTREE_"):
            monkeypatch.delenv(key)


@pytest.fixture
def make_tree():
    """Return the tree builder: make_tree(root, {"name": "content" or {...}})."""
    return build_tree
