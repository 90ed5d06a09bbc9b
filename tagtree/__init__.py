"""tagtree - sidecar-file tagging and boolean tag queries over directory trees."""

from tagtree.core.constants import TAGTREE_VERSION

__version__ = TAGTREE_VERSION
