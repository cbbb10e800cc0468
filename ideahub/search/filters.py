"""
Idea search and filtering.

All functions here are pure: they never mutate their inputs and always
return ideas in the order they were given (newest-first when fed from the
repository).

A filter combines three predicates with AND:

    search  - query is a case-insensitive substring of title OR description
    status  - "all", or an exact status match
    tags    - no tags selected, or the idea has at least one selected tag (OR)
"""

from collections import Counter
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Sequence, Tuple

from ideahub.models.idea import Idea, IDEA_STATUSES

ALL_STATUSES = "all"


def _check_status(status: str) -> None:
    if status != ALL_STATUSES and status not in IDEA_STATUSES:
        raise ValueError(f"Unknown status filter: {status!r}")


def matches_query(idea: Idea, query: str) -> bool:
    if not query:
        return True
    needle = query.lower()
    return needle in idea.title.lower() or needle in (idea.description or "").lower()


def matches_status(idea: Idea, status: str) -> bool:
    return status == ALL_STATUSES or idea.status == status


def matches_tags(idea: Idea, tags: Iterable[str]) -> bool:
    selected = set(tags)
    if not selected:
        return True
    return any(tag in selected for tag in idea.tags)


def filter_ideas(
    ideas: Sequence[Idea],
    query: str = "",
    status: str = ALL_STATUSES,
    tags: Iterable[str] = (),
) -> List[Idea]:
    """
    Return the ideas that satisfy search AND status AND tags.

    Args:
        ideas: Source list; its order is preserved.
        query: Substring to look for in title or description (case-insensitive).
        status: "all" or one of IDEA_STATUSES.
        tags: Selected tags; an idea needs any one of them.

    Raises:
        ValueError: If status is not "all" or a known status.
    """
    _check_status(status)
    selected = frozenset(tags)
    return [
        idea for idea in ideas
        if matches_query(idea, query)
        and matches_status(idea, status)
        and matches_tags(idea, selected)
    ]


def collect_tags(ideas: Iterable[Idea]) -> List[str]:
    """Sorted list of distinct tags used by any idea."""
    return sorted({tag for idea in ideas for tag in idea.tags})


def count_by_status(ideas: Iterable[Idea]) -> Dict[str, int]:
    """Count per status, every status present (zero if unused)."""
    counts = Counter(idea.status for idea in ideas)
    return {status: counts.get(status, 0) for status in IDEA_STATUSES}


@dataclass(frozen=True)
class IdeaFilter:
    """The current search box, status dropdown and tag selection."""

    query: str = ""
    status: str = ALL_STATUSES
    tags: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _check_status(self.status)

    @property
    def has_active_filters(self) -> bool:
        return bool(self.query) or self.status != ALL_STATUSES or bool(self.tags)

    def toggle_tag(self, tag: str) -> "IdeaFilter":
        """Select the tag if unselected, otherwise unselect it."""
        if tag in self.tags:
            return replace(self, tags=tuple(t for t in self.tags if t != tag))
        return replace(self, tags=self.tags + (tag,))

    def cleared(self) -> "IdeaFilter":
        return IdeaFilter()

    def apply(self, ideas: Sequence[Idea]) -> List[Idea]:
        return filter_ideas(ideas, self.query, self.status, self.tags)
