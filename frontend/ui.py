"""
Streamlit frontend for Solution Finder.

Posts the query to the proxy (POST http://localhost:8000/api/recommend by
default, see API_URL) and shows the recommendations as a table. Column
headers sort, the Details button expands one row at a time.

    streamlit run frontend/ui.py
"""

import sys
from pathlib import Path

import streamlit as st

# Ensure project root is on sys.path when launched via `streamlit run`
sys.path.insert(0, str(Path(__file__).parent.parent))

from frontend.client import fetch_recommendations
from frontend.state import (
    DETAIL_FIELDS,
    SearchState,
    SortDirection,
    SortField,
    Recommendation,
    can_search,
    description_text,
    display_value,
    downloads_of,
    empty_message,
    escape_markdown,
    resolve_search,
    sorted_results,
    start_search,
    toggle_expansion,
    toggle_sort,
    visit_url,
)

QUERY_KEY = "query_input"
COLUMN_WIDTHS = [4, 3, 2, 1, 1]


def _state() -> SearchState:
    if "search" not in st.session_state:
        st.session_state.search = SearchState()
    return st.session_state.search


def _clear_query() -> None:
    st.session_state[QUERY_KEY] = ""
    _state().query = ""


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _render_search_form(state: SearchState) -> None:
    with st.form("search_form", border=False):
        query_col, button_col = st.columns([5, 1], vertical_alignment="bottom")
        query = query_col.text_input(
            "Search query",
            key=QUERY_KEY,
            placeholder="Enter your search query...",
        )
        # Enter inside the text input submits the form too. Form inputs only
        # reach session state on submit, so blank queries are refused below
        # rather than by disabling the button.
        submitted = button_col.form_submit_button(
            "Search", disabled=state.loading
        )

    if st.session_state.get(QUERY_KEY):
        st.button("Clear", on_click=_clear_query)

    if submitted:
        state.query = query
        if not can_search(state):
            st.warning("Please enter a search query.")
            return
        # Rerun so the form is drawn disabled while the request is in flight
        start_search(state)
        st.rerun()


def _resolve_pending_search(state: SearchState) -> None:
    with st.spinner("Searching…"):
        resolve_search(state, fetch_recommendations)
    st.rerun()


def _sort_label(state: SearchState, sort_field: SortField) -> str:
    if state.sort_key is not sort_field:
        return sort_field.label
    arrow = "▲" if state.sort_direction is SortDirection.ASCENDING else "▼"
    return f"{sort_field.label} {arrow}"


def _render_header(state: SearchState) -> None:
    cols = st.columns(COLUMN_WIDTHS)
    for col, sort_field in zip(cols, SortField):
        col.button(
            _sort_label(state, sort_field),
            key=f"sort_{sort_field.value}",
            on_click=toggle_sort,
            args=(state, sort_field),
        )
    cols[3].markdown("**Actions**")


def _render_details(item: Recommendation) -> None:
    with st.container(border=True):
        left, right = st.columns(2)

        left.markdown("**Description**")
        left.markdown(escape_markdown(description_text(item)))
        left.markdown("**Key Details**")
        for label, key in DETAIL_FIELDS:
            left.markdown(f"{label}: {escape_markdown(display_value(item, key))}")

        downloads = downloads_of(item)
        if downloads:
            right.markdown("**Downloads**")
            right.markdown("\n".join(_download_link(d) for d in downloads))


def _download_link(download: dict) -> str:
    text = escape_markdown(f"{download.get('title', '')} ({download.get('language', '')})")
    # Angle brackets let the url contain parentheses and spaces
    return f"- [{text}](<{download.get('url', '')}>)"


def _render_row(state: SearchState, index: int, item: Recommendation) -> None:
    expanded = state.expanded_index == index
    name_col, types_col, remote_col, visit_col, details_col = st.columns(COLUMN_WIDTHS)

    name_col.markdown(escape_markdown(str(item.get("name", ""))))
    types_col.markdown(escape_markdown(display_value(item, "test_types")))
    remote_col.markdown(escape_markdown(display_value(item, "remote_testing")))

    url = visit_url(item)
    visit_col.link_button("Visit", url or "#", disabled=url is None)
    details_col.button(
        "Hide" if expanded else "Details",
        key=f"expand_{index}",
        on_click=toggle_expansion,
        args=(state, index),
    )

    if expanded:
        _render_details(item)


def _render_results(state: SearchState) -> None:
    if state.error:
        st.error(f"Error: {state.error}")

    if state.results:
        _render_header(state)
        for index, item in enumerate(sorted_results(state)):
            _render_row(state, index, item)
    elif not state.loading:
        st.info(empty_message(state))


def main() -> None:
    st.set_page_config(page_title="Solution Finder", layout="wide")
    st.title("Solution Finder")

    state = _state()
    _render_search_form(state)
    _render_results(state)

    if state.loading:
        _resolve_pending_search(state)


if __name__ == "__main__":
    main()
