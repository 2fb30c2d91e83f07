"""Tests for the dashboard filter state machine."""
import pytest

from weblauncher.modules.dashboard import (
    ALL_CATEGORIES_ID,
    UNCATEGORIZED_ID,
    DashboardFilter,
    EmptyState,
)


def _bookmark(description, url, categories=(), pinned=False):
    return {
        "description": description,
        "url": url,
        "categories": [{"id": cid, "name": name} for cid, name in categories],
        "pinned": pinned,
    }


@pytest.fixture
def github():
    return _bookmark("GitHub", "https://github.com", pinned=True)


@pytest.fixture
def docs():
    return _bookmark("Docs", "https://go.dev", categories=[("dev", "Dev")])


@pytest.fixture
def dashboard(github, docs):
    return DashboardFilter([github, docs])


def _descriptions(view):
    return [b["description"] for b in view.bookmarks]


class TestInitialState:

    def test_everything_visible_in_store_order(self, dashboard):
        assert _descriptions(dashboard.view) == ["GitHub", "Docs"]

    def test_available_ids_include_uncategorized_sentinel_last(self, dashboard):
        assert dashboard.available_category_ids == ("dev", UNCATEGORIZED_ID)

    def test_starts_with_full_selection(self, dashboard):
        assert dashboard.selected_category_ids == frozenset({"dev", UNCATEGORIZED_ID})
        assert dashboard.view.all_selected

    def test_available_ids_sorted_by_category_name(self):
        dashboard = DashboardFilter([
            _bookmark("a", "https://a.example", categories=[("b", "beta"), ("i10", "item 10")]),
            _bookmark("b", "https://b.example", categories=[("A", "Alpha"), ("i2", "Item 2")]),
        ])
        assert dashboard.available_category_ids == ("A", "b", "i2", "i10")

    def test_no_sentinel_when_every_bookmark_has_categories(self, docs):
        dashboard = DashboardFilter([docs])
        assert UNCATEGORIZED_ID not in dashboard.available_category_ids


class TestSearch:

    def test_search_matches_url(self, dashboard):
        view = dashboard.set_search_term("git")
        assert _descriptions(view) == ["GitHub"]

    def test_search_is_trimmed_and_case_insensitive(self, dashboard):
        view = dashboard.set_search_term("  DOCS ")
        assert dashboard.search_term == "docs"
        assert _descriptions(view) == ["Docs"]

    def test_empty_search_matches_everything(self, dashboard):
        dashboard.set_search_term("git")
        view = dashboard.set_search_term("")
        assert _descriptions(view) == ["GitHub", "Docs"]

    def test_none_search_term_is_empty(self, dashboard):
        view = dashboard.set_search_term(None)
        assert view.search_term == ""
        assert len(view.bookmarks) == 2


class TestCategorySelection:

    def test_selecting_only_dev_excludes_uncategorized(self, dashboard):
        view = dashboard.toggle_category(UNCATEGORIZED_ID)
        assert dashboard.selected_category_ids == frozenset({"dev"})
        assert _descriptions(view) == ["Docs"]
        assert not view.all_selected

    def test_uncategorized_only(self, dashboard):
        view = dashboard.toggle_category("dev")
        assert _descriptions(view) == ["GitHub"]

    def test_toggling_last_selected_category_resets_to_full(self, dashboard):
        dashboard.toggle_category(UNCATEGORIZED_ID)
        view = dashboard.toggle_category("dev")
        assert view.selected_category_ids == frozenset(dashboard.available_category_ids)
        assert _descriptions(view) == ["GitHub", "Docs"]

    def test_toggle_back_on(self, dashboard):
        dashboard.toggle_category(UNCATEGORIZED_ID)
        view = dashboard.toggle_category(UNCATEGORIZED_ID)
        assert view.all_selected

    def test_all_forces_full_selection(self, dashboard):
        dashboard.toggle_category(UNCATEGORIZED_ID)
        view = dashboard.toggle_category(ALL_CATEGORIES_ID)
        assert view.all_selected

    def test_all_cannot_be_unchecked(self, dashboard):
        assert dashboard.view.all_selected
        view = dashboard.toggle_category(ALL_CATEGORIES_ID)
        assert view.all_selected
        assert len(view.bookmarks) == 2

    def test_unknown_category_is_ignored(self, dashboard):
        view = dashboard.toggle_category("missing")
        assert "missing" not in view.selected_category_ids
        assert view.all_selected

    def test_select_categories_replaces_selection(self, dashboard):
        view = dashboard.select_categories(["dev"])
        assert _descriptions(view) == ["Docs"]

    def test_select_categories_empty_or_unknown_is_full(self, dashboard):
        assert dashboard.select_categories([]).all_selected
        assert dashboard.select_categories(["missing"]).all_selected
        assert dashboard.select_categories(["all"]).all_selected
        assert dashboard.select_categories(None).all_selected

    def test_search_and_category_combine(self, dashboard):
        dashboard.toggle_category(UNCATEGORIZED_ID)
        view = dashboard.set_search_term("git")
        assert view.bookmarks == ()
        assert view.empty_state is EmptyState.NO_MATCHES


class TestMatchesCategory:

    def test_uncategorized_matches_iff_sentinel_selected(self, dashboard, github):
        assert dashboard.matches_category(github)
        dashboard.toggle_category(UNCATEGORIZED_ID)
        assert not dashboard.matches_category(github)
        dashboard.toggle_category(UNCATEGORIZED_ID)
        assert dashboard.matches_category(github)

    def test_any_overlap_matches(self):
        shared = _bookmark("shared", "https://s.example", categories=[("a", "A"), ("b", "B")])
        only_b = _bookmark("b", "https://b.example", categories=[("b", "B")])
        dashboard = DashboardFilter([shared, only_b])
        view = dashboard.toggle_category("b")
        assert _descriptions(view) == ["shared"]

    def test_no_categories_at_all_matches_everything(self):
        dashboard = DashboardFilter()
        assert dashboard.matches_category(_bookmark("x", "https://x.example"))


class TestRecompute:

    def test_recompute_is_idempotent(self, dashboard):
        dashboard.set_search_term("o")
        dashboard.toggle_category("dev")
        first = dashboard.recompute()
        second = dashboard.recompute()
        assert first == second

    def test_render_callback_receives_every_view(self, github, docs):
        rendered = []
        dashboard = DashboardFilter([github, docs], on_render=rendered.append)
        dashboard.set_search_term("docs")
        assert len(rendered) == 2
        assert rendered[-1] is dashboard.view
        assert _descriptions(rendered[-1]) == ["Docs"]

    def test_empty_state_no_bookmarks(self):
        view = DashboardFilter().view
        assert view.empty_state is EmptyState.NO_BOOKMARKS
        assert view.available_category_ids == ()

    def test_empty_state_no_matches(self, dashboard):
        view = dashboard.set_search_term("nothing-matches-this")
        assert view.empty_state is EmptyState.NO_MATCHES

    def test_empty_state_none_when_visible(self, dashboard):
        assert dashboard.view.empty_state is None


class TestSetBookmarks:

    def test_full_selection_stays_full_after_refresh(self, dashboard, github, docs):
        ops = _bookmark("Ops", "https://ops.example", categories=[("ops", "Ops")])
        view = dashboard.set_bookmarks([github, docs, ops])
        assert view.all_selected
        assert "ops" in view.selected_category_ids

    def test_partial_selection_survives_refresh(self, dashboard, github, docs):
        dashboard.toggle_category(UNCATEGORIZED_ID)
        ops = _bookmark("Ops", "https://ops.example", categories=[("ops", "Ops")])
        view = dashboard.set_bookmarks([github, docs, ops])
        assert view.selected_category_ids == frozenset({"dev"})
        assert _descriptions(view) == ["Docs"]

    def test_selection_falls_back_to_full_when_categories_disappear(self, dashboard, github):
        dashboard.toggle_category(UNCATEGORIZED_ID)
        view = dashboard.set_bookmarks([github])
        assert view.all_selected
        assert _descriptions(view) == ["GitHub"]

    def test_refresh_keeps_search_term(self, dashboard, github, docs):
        dashboard.set_search_term("git")
        view = dashboard.set_bookmarks([docs, github])
        assert _descriptions(view) == ["GitHub"]
