"""Filter expressions and query execution.

The executor lives in ``tagtree.query.executor``; it is not re-exported here
because the tag table itself depends on the filter nodes.
"""

from .filter import And, FalseTag, Filter, Not, Or, Tag, TrueTag, negate, parse_filter

__all__ = [
    "Filter",
    "Tag",
    "And",
    "Or",
    "Not",
    "TrueTag",
    "FalseTag",
    "negate",
    "parse_filter",
]
