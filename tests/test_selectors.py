from __future__ import annotations

from sfbrowser.automation import selectors as sel


def test_query_css_joins_candidates_in_order() -> None:
    q = sel.query("thing", "a.one", "b.two")
    assert q.css == "a.one, b.two"
    assert list(q) == ["a.one", "b.two"]
    assert len(q) == 2


def test_label_scoped_queries_escape_quotes() -> None:
    q = sel.input_by_label('Say "Hi"')
    assert all('label:text-is("Say \\"Hi\\"")' in candidate for candidate in q)
    assert all(candidate.endswith(" input") for candidate in q)


def test_field_queries_prefer_semantic_component_tags() -> None:
    assert sel.input_by_label("Name").candidates[0].startswith("lightning-input-field:has(")
    assert sel.picklist_by_label("Stage").candidates[0].startswith("lightning-combobox:has(")
    assert sel.checkbox_by_label("Active").candidates[0].endswith('input[type="checkbox"]')


def test_button_by_label_puts_attribute_match_before_text_match() -> None:
    candidates = sel.button_by_label("Save").candidates
    assert candidates.index('button[title="Save"]') < candidates.index('button:has-text("Save")')


def test_app_launcher_entries_cover_data_label_and_title() -> None:
    candidates = sel.app_launcher_entries("Sales").candidates
    assert candidates[0] == 'one-app-launcher-menu-item a[data-label="Sales"]'
    assert 'a[title="Sales"]' in candidates


def test_app_launcher_search_inputs_try_scoped_inputs_before_bare_ones() -> None:
    candidates = sel.app_launcher_search_inputs().candidates
    assert candidates[0].startswith("one-app-launcher-modal ")
    assert candidates[-len(sel.APP_LAUNCHER_SEARCH):] == sel.APP_LAUNCHER_SEARCH.candidates


def test_shell_markers_include_setup_and_generic_aura_root() -> None:
    assert "one-app" in sel.APP_SHELL
    assert "setup-root" in sel.APP_SHELL.candidates
    assert "div[data-aura-rendered-by]" in sel.APP_SHELL.candidates


def test_attribute_builders() -> None:
    assert sel.attr_selector("title", "New") == '[title="New"]'
    assert sel.attr_selector("title", "Ne", partial=True) == '[title*="Ne"]'
    assert sel.data_selector("field", "Name") == '[data-field="Name"]'


def test_every_label_family_escapes_its_label() -> None:
    builders = (
        sel.app_launcher_item,
        sel.lookup_option,
        sel.path_stage,
        sel.utility_bar_item,
        sel.setup_tree_item,
        sel.flexipage_component,
        sel.rich_text_by_label,
        sel.list_view_cell,
        sel.list_view_header,
        sel.related_list,
    )
    for build in builders:
        q = build('A "B"')
        assert q.candidates
        assert all('A \\"B\\"' in candidate for candidate in q), build.__name__


def test_list_view_and_component_lookups() -> None:
    assert sel.list_view_cell("Name").candidates == ('td[data-label="Name"]', 'th[data-label="Name"]')
    assert sel.list_view_header("Name").candidates[0] == 'th[data-label="Name"]'
    assert sel.lwc_component("c-account-card").candidates == (
        "c-account-card",
        '[data-component-id*="c-account-card"]',
    )
    assert sel.aura_component("force:record").css == '[data-aura-rendered-by*="force:record"]'


def test_related_list_action_is_scoped_to_the_list() -> None:
    (candidate,) = sel.related_list_action("Contacts", "Change Owner").candidates
    assert 'h2:text-is("Contacts")' in candidate
    assert candidate.endswith('lightning-menu-item:has-text("Change Owner")')
