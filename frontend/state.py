"""
Search view state and its transitions.

All UI state for one session lives in a single SearchState. It only changes
through the functions below:

    run_search        start_search → resolve_search
    resolve_search    fetch → search_succeeded / search_failed → finish_search
    toggle_sort       same column flips direction, a new column starts ascending
    toggle_expansion  at most one row open at a time

sorted_results() derives the display order on every render and never
touches state.results. Row indices used by toggle_expansion refer to that
displayed order.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from frontend.client import GENERIC_ERROR_MESSAGE, SearchError

Recommendation = dict[str, Any]

NOT_AVAILABLE = "N/A"
NO_DESCRIPTION = "No description available"
PROMPT_MESSAGE = "Enter a search term and click Search to find solutions."
NO_RESULTS_MESSAGE = "No results found. Try a different search term."

_MARKDOWN_SPECIALS = re.compile(r"([\\`*_{}\[\]()#+\-.!|~<>$])")


class SortDirection(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"

    def flipped(self) -> "SortDirection":
        if self is SortDirection.ASCENDING:
            return SortDirection.DESCENDING
        return SortDirection.ASCENDING


def _text(item: Recommendation, key: str) -> str:
    value = item.get(key)
    return str(value) if value else ""


class SortField(str, Enum):
    NAME = "name"
    TEST_TYPES = "test_types"
    REMOTE_TESTING = "remote_testing"

    @property
    def label(self) -> str:
        return _LABELS[self]

    def value_of(self, item: Recommendation) -> str:
        """String used for ordering; missing or empty fields sort as ""."""
        return _ACCESSORS[self](item)


_LABELS = {
    SortField.NAME: "Name",
    SortField.TEST_TYPES: "Test Types",
    SortField.REMOTE_TESTING: "Remote Testing",
}

_ACCESSORS: dict[SortField, Callable[[Recommendation], str]] = {
    SortField.NAME: lambda item: _text(item, "name"),
    SortField.TEST_TYPES: lambda item: _text(item, "test_types"),
    SortField.REMOTE_TESTING: lambda item: _text(item, "remote_testing"),
}

# Fields shown under "Key Details" in the expanded panel
DETAIL_FIELDS = (
    ("Duration", "duration"),
    ("Job Levels", "job_levels"),
    ("Adaptive IRT", "adaptive_irt"),
    ("Languages", "languages"),
)


@dataclass
class SearchState:
    query: str = ""
    results: list[Recommendation] = field(default_factory=list)
    loading: bool = False
    error: str | None = None
    sort_key: SortField | None = None
    sort_direction: SortDirection = SortDirection.ASCENDING
    expanded_index: int | None = None


# ---------------------------------------------------------------------------
# Search lifecycle
# ---------------------------------------------------------------------------

def can_search(state: SearchState) -> bool:
    return not state.loading and bool(state.query.strip())


def start_search(state: SearchState) -> None:
    state.error = None
    state.loading = True


def search_succeeded(state: SearchState, results: list[Recommendation] | None) -> None:
    state.results = list(results or [])
    state.error = None
    state.expanded_index = None


def search_failed(state: SearchState, message: str | None) -> None:
    state.error = message or GENERIC_ERROR_MESSAGE
    state.results = []
    state.expanded_index = None


def finish_search(state: SearchState) -> None:
    state.loading = False


def run_search(
    state: SearchState,
    fetch: Callable[[str], list[Recommendation]],
) -> bool:
    """
    Run one search attempt for state.query.

    Returns False without calling fetch when the query is blank or a search
    is already in flight. Otherwise fetch is called exactly once and loading
    is cleared whatever the outcome.
    """
    if not can_search(state):
        return False

    start_search(state)
    resolve_search(state, fetch)
    return True


def resolve_search(
    state: SearchState,
    fetch: Callable[[str], list[Recommendation]],
) -> None:
    """Finish a search that start_search opened: fetch once, record the outcome, clear loading."""
    try:
        results = fetch(state.query)
    except SearchError as exc:
        search_failed(state, str(exc))
    else:
        search_succeeded(state, results)
    finally:
        finish_search(state)


# ---------------------------------------------------------------------------
# Sorting + expansion
# ---------------------------------------------------------------------------

def toggle_sort(state: SearchState, sort_field: SortField) -> None:
    if state.sort_key is sort_field:
        state.sort_direction = state.sort_direction.flipped()
    else:
        state.sort_key = sort_field
        state.sort_direction = SortDirection.ASCENDING


def sorted_results(state: SearchState) -> list[Recommendation]:
    if state.sort_key is None:
        return list(state.results)
    # sorted() is stable in both directions, so ties keep received order
    return sorted(
        state.results,
        key=state.sort_key.value_of,
        reverse=state.sort_direction is SortDirection.DESCENDING,
    )


def toggle_expansion(state: SearchState, index: int) -> None:
    state.expanded_index = None if state.expanded_index == index else index


# ---------------------------------------------------------------------------
# Presentation helpers
# ---------------------------------------------------------------------------

def display_value(item: Recommendation, key: str) -> str:
    return _text(item, key) or NOT_AVAILABLE


def description_text(item: Recommendation) -> str:
    return _text(item, "description") or NO_DESCRIPTION


def downloads_of(item: Recommendation) -> list[dict[str, Any]]:
    return list(item.get("downloads") or [])


def visit_url(item: Recommendation) -> str | None:
    """Target of the Visit action, or None when the item has no url."""
    return item.get("url") or None


def empty_message(state: SearchState) -> str:
    return NO_RESULTS_MESSAGE if state.query.strip() else PROMPT_MESSAGE


def escape_markdown(text: str) -> str:
    """Backslash-escape Markdown punctuation so upstream text renders literally."""
    return _MARKDOWN_SPECIALS.sub(r"\\\1", text)
