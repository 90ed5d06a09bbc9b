"""tagtree Core - Shared constants, errors and validators.

Import specific names from submodules:
    from tagtree.core.constants import ErrorCode, SidecarNames
    from tagtree.core.errors import TagTreeError, InvalidPathError
    from tagtree.core.validators import validate_root_path
"""

from tagtree.core import constants, errors, validators

__all__ = [
    "constants",
    "errors",
    "validators",
]
