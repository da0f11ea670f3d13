"""Token normalization, grouping, resolution and naming."""

from .grouping import SegmentCache, compute_groups, group_segments, selected_sets, token_filter
from .naming import NameRegistry
from .normalizer import load_document, normalize_document
from .resolver import flatten_tokens

__all__ = [
    "NameRegistry",
    "SegmentCache",
    "compute_groups",
    "flatten_tokens",
    "group_segments",
    "load_document",
    "normalize_document",
    "selected_sets",
    "token_filter",
]
