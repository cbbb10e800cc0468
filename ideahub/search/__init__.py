"""
Search module.

Pure filtering over the in-memory idea list.
"""

from ideahub.search.filters import (
    ALL_STATUSES,
    IdeaFilter,
    filter_ideas,
    matches_query,
    matches_status,
    matches_tags,
    collect_tags,
    count_by_status,
)

__all__ = [
    "ALL_STATUSES",
    "IdeaFilter",
    "filter_ideas",
    "matches_query",
    "matches_status",
    "matches_tags",
    "collect_tags",
    "count_by_status",
]
