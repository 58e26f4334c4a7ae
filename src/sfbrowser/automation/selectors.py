"""
Selector registry for Lightning Experience pages.

Each UI concept is a ``Query``: an ordered tuple of alternative selectors,
most stable first. Semantic attributes (name, title, data-*, aria) and
framework tag names come before text matches, and text matches come before
generated class names. The composite ``css`` form lets the engine pick the
first structural match; ``resolver.first_visible`` walks the same order
candidate by candidate.

Everything here is pure string building and never raises.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple


@dataclass(frozen=True)
class Query:
    name: str
    candidates: Tuple[str, ...]

    @property
    def css(self) -> str:
        return ", ".join(self.candidates)

    def __iter__(self) -> Iterator[str]:
        return iter(self.candidates)

    def __len__(self) -> int:
        return len(self.candidates)

    def __str__(self) -> str:
        return self.css


def query(name: str, *candidates: str) -> Query:
    return Query(name, tuple(candidates))


def _q(text: str) -> str:
    """Escape a label for use inside a double-quoted selector string."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def attr_selector(attr: str, value: str, partial: bool = False) -> str:
    if partial:
        return f'[{attr}*="{_q(value)}"]'
    return f'[{attr}="{_q(value)}"]'


def data_selector(data_attr: str, value: str) -> str:
    return f'[data-{data_attr}="{_q(value)}"]'


def _scoped(tags: Sequence[str], label: str, suffix: str = "") -> Tuple[str, ...]:
    """``tag:has(label:text-is("…"))`` for each component family, in order."""
    label = _q(label)
    return tuple(f'{tag}:has(label:text-is("{label}")){suffix}' for tag in tags)


# Global navigation
APP_LAUNCHER_BUTTON = query(
    "app launcher button",
    "one-app-launcher-header button",
    "button.slds-icon-waffle_container",
    "div.appLauncher button",
)
APP_LAUNCHER_PANEL = query(
    "app launcher panel",
    "one-app-launcher-modal",
    "one-app-launcher-menu",
    "div.appLauncherMenu",
)
APP_LAUNCHER_SEARCH = query(
    "app launcher search",
    'input[placeholder*="Search apps"]',
    'input[placeholder*="Search Apps"]',
)
GLOBAL_SEARCH = query("global search", 'button[class*="search-button"]', 'input[placeholder*="Search"]')
GLOBAL_SEARCH_INPUT = query(
    "global search input",
    'lightning-input[class*="search"] input',
    'input[class*="search-input"]',
)


def app_launcher_search_inputs() -> Query:
    """Search inputs scoped to the launcher container first, bare inputs last."""
    return query(
        "app launcher search input",
        'one-app-launcher-modal input[placeholder*="Search"]',
        'one-app-launcher-menu input[placeholder*="Search"]',
        'div.appLauncherMenu input[placeholder*="Search"]',
        "one-app-launcher-search-input input",
        "input.appLauncherSearch",
        *APP_LAUNCHER_SEARCH.candidates,
    )


def app_launcher_item(app_name: str) -> Query:
    name = _q(app_name)
    return query(
        f"app launcher item {app_name}",
        f'one-app-launcher-menu-item a[data-label="{name}"]',
        f'lightning-formatted-text[title="{name}"]',
        f'a[title="{name}"]',
    )


def app_launcher_entries(app_name: str) -> Query:
    """Every candidate for an app entry in the launcher results."""
    name = _q(app_name)
    return query(
        f"app launcher entry {app_name}",
        f'one-app-launcher-menu-item a[data-label="{name}"]',
        f'one-app-launcher-menu-item:has-text("{name}")',
        f'lightning-formatted-text[title="{name}"]',
        f'a[title="{name}"]',
        f'a:has-text("{name}")',
        f'[data-label="{name}"]',
    )


# Buttons
PRIMARY_BUTTON = query("primary button", 'lightning-button[variant="brand"] button', "button.slds-button_brand")
SAVE_BUTTON = query(
    "save button",
    'button[name="SaveEdit"]',
    'button[title="Save"]',
    'button:has-text("Save"):not(:has-text("Save &"))',
)
SAVE_AND_NEW_BUTTON = query("save and new button", 'button[name="SaveAndNew"]', 'button:has-text("Save & New")')
CANCEL_BUTTON = query("cancel button", 'button[name="CancelEdit"]', 'button:has-text("Cancel")')
EDIT_BUTTON = query("edit button", 'button[name="Edit"]', 'button:has-text("Edit")')
DELETE_BUTTON = query("delete button", 'button[name="Delete"]', 'button:has-text("Delete")')
CLONE_BUTTON = query("clone button", 'button[name="Clone"]', 'button:has-text("Clone")')
NEW_BUTTON = query("new button", 'a[title="New"]', 'button:has-text("New")', 'lightning-button:has-text("New")')
NEW_USER_BUTTON = query(
    "new user button",
    'input[name="new"]',
    'a:has-text("New User")',
    'button:has-text("New User")',
)


def button_by_label(label: str) -> Query:
    text = _q(label)
    return query(
        f"button {label}",
        f'lightning-button-icon-stateful[title="{text}"]',
        f'button[title="{text}"]',
        f'button:has-text("{text}")',
        f'lightning-button:has-text("{text}")',
        f'a.slds-button:has-text("{text}")',
    )


# Forms and fields
FIELD_TAGS = (
    "lightning-input-field",
    "lightning-input",
    "lightning-combobox",
    "lightning-textarea",
    "lightning-lookup",
    "lightning-grouped-combobox",
)


def form_field_by_label(label: str) -> Query:
    return Query(f"field {label}", _scoped(FIELD_TAGS, label))


def input_by_label(label: str) -> Query:
    return Query(
        f"input {label}",
        _scoped(("lightning-input-field", "lightning-input", "lightning-primitive-input-simple"), label, " input"),
    )


def textarea_by_label(label: str) -> Query:
    return Query(
        f"textarea {label}",
        _scoped(("lightning-textarea", "lightning-input-field"), label, " textarea"),
    )


def picklist_by_label(label: str) -> Query:
    return Query(
        f"picklist {label}",
        _scoped(("lightning-combobox", 'lightning-input-field[data-field-type="Picklist"]'), label),
    )


PICKLIST_DROPDOWN = query("picklist dropdown", 'lightning-base-combobox[role="combobox"]')
COMBOBOX_ITEM = query("combobox item", "lightning-base-combobox-item")
LOOKUP_RESULT = query("lookup result", "lightning-base-combobox-item", "lightning-grouped-combobox-option")


def picklist_option(value: str) -> Query:
    text = _q(value)
    return query(
        f"picklist option {value}",
        f'lightning-base-combobox-item[data-value="{text}"]',
        f'lightning-base-combobox-item:text-is("{text}")',
    )


def lookup_by_label(label: str) -> Query:
    return Query(
        f"lookup {label}",
        _scoped(
            ("lightning-lookup", "lightning-grouped-combobox", 'lightning-input-field[data-field-type="Lookup"]'),
            label,
        ),
    )


LOOKUP_SEARCH_INPUT = query(
    "lookup search input",
    'lightning-base-combobox input[role="combobox"]',
    'input[placeholder*="Search"]',
)


def lookup_option(text: str) -> Query:
    value = _q(text)
    return query(
        f"lookup option {text}",
        f'lightning-base-combobox-item:has-text("{value}")',
        f'lightning-base-combobox-formatted-text:has-text("{value}")',
    )


def checkbox_by_label(label: str) -> Query:
    return Query(
        f"checkbox {label}",
        _scoped(
            ('lightning-input[data-field-type="Boolean"]', "lightning-input"),
            label,
            ' input[type="checkbox"]',
        ),
    )


def date_picker_by_label(label: str) -> Query:
    return Query(
        f"date {label}",
        _scoped(
            ('lightning-input-field[data-field-type="Date"]', "lightning-datepicker", 'lightning-input[type="date"]'),
            label,
        ),
    )


def datetime_picker_by_label(label: str) -> Query:
    return Query(
        f"datetime {label}",
        _scoped(('lightning-input-field[data-field-type="DateTime"]', "lightning-datetimepicker"), label),
    )


def rich_text_by_label(label: str) -> Query:
    return Query(f"rich text {label}", _scoped(("lightning-input-rich-text",), label))


FIELD_DISPLAY_VALUE = query(
    "field display value",
    "lightning-formatted-text",
    "lightning-formatted-name",
    "span.test-id__field-value",
)

# Record page
RECORD_FORM = query("record form", "records-record-edit-form", "lightning-record-edit-form", "records-lwc-detail-panel")
RECORD_HIGHLIGHTS = query(
    "record highlights",
    "records-highlights2",
    "records-lwc-highlights-panel",
    "force-highlights-panel",
)
RECORD_DETAIL_SECTION = query("record detail section", "records-record-layout-section", "lightning-accordion-section")
RECORD_NAME = query(
    "record name",
    'lightning-formatted-text[slot="primaryField"]',
    "records-lwc-highlights-panel h1",
    ".slds-page-header__title",
)
RECORD_LAYOUT_ITEM = query("record layout item", "records-record-layout-item", "lightning-output-field")
RECORD_ITEM_LABEL = query("record item label", "label", 'span[class*="label"]')
RECORD_ITEM_VALUE = query(
    "record item value",
    "lightning-formatted-text",
    "lightning-formatted-name",
    "lightning-formatted-phone",
    "lightning-formatted-email",
    "lightning-formatted-url",
    "lightning-formatted-number",
    'span[class*="value"]',
)


def related_list(name: str) -> Query:
    text = _q(name)
    return query(
        f"related list {name}",
        f'lst-related-list-single-app-builder-mapper:has(h2:text-is("{text}"))',
        f'article:has(h2:text-is("{text}"))',
    )


def related_list_new_button(list_name: str) -> Query:
    text = _q(list_name)
    return query(
        f"related list new {list_name}",
        f'lst-related-list-single-app-builder-mapper:has(h2:text-is("{text}")) button[title="New"]',
        f'article:has(h2:text-is("{text}")) a[title="New"]',
    )


def related_list_view_all(list_name: str) -> Query:
    text = _q(list_name)
    return query(
        f"related list view all {list_name}",
        f'lst-related-list-single-app-builder-mapper:has(h2:text-is("{text}")) a:has-text("View All")',
    )


def related_list_action(list_name: str, action_name: str) -> Query:
    text = _q(list_name)
    action = _q(action_name)
    return query(
        f"related list action {list_name}/{action_name}",
        f'lst-related-list-single-app-builder-mapper:has(h2:text-is("{text}")) '
        f'lightning-button-menu lightning-menu-item:has-text("{action}")',
    )


# Modals and dialogs
MODAL = query("modal", 'section[role="dialog"]', 'div[role="dialog"]', "div.slds-modal__container")
MODAL_HEADER = query("modal header", "header.slds-modal__header h2", ".slds-modal__header h2")
MODAL_FOOTER = query("modal footer", "footer.slds-modal__footer", ".slds-modal__footer")
MODAL_CLOSE = query("modal close", 'lightning-button-icon[title="Close"]', "button.slds-modal__close")
MODAL_CONTENT = query("modal content", ".slds-modal__content")
MODAL_CONFIRM_DELETE = query("confirm delete", 'button[title="Delete"]', 'button:has-text("Delete")')

# Toast notifications
TOAST_CONTAINER = query("toast", "lightning-notif-log", "div.slds-notify-container", "div.toastContainer")
TOAST_MESSAGE = query("toast message", ".toastMessage", ".slds-notify__content", "lightning-primitive-formatted-text")
TOAST_SUCCESS = query("toast success", 'lightning-icon[icon-name="utility:success"]', ".slds-theme_success")
TOAST_ERROR = query("toast error", 'lightning-icon[icon-name="utility:error"]', ".slds-theme_error")
TOAST_WARNING = query("toast warning", 'lightning-icon[icon-name="utility:warning"]', ".slds-theme_warning")
TOAST_CLOSE = query("toast close", 'lightning-button-icon[title="Close"]', "button.slds-notify__close")

# Spinners, stencils and overlays
SPINNER = query(
    "spinner",
    "lightning-spinner",
    'div.slds-spinner_container:not([class*="slds-hide"])',
    "div.slds-spinner",
    "lightning-primitive-spinner",
)
LOADING_INDICATOR = query("loading indicator", ".is-loading", ".slds-is-loading", '[class*="loading"]')
STENCIL = query("stencil", ".stencil", '[class*="stencil"]', ".slds-is-loading")
BACKDROP = query("backdrop", ".slds-backdrop_open", ".slds-backdrop")

# Application shell markers: any one visible means the app has bootstrapped
APP_SHELL = query(
    "lightning app container",
    "one-app",
    "div.desktop.container",
    "div.oneContent",
    "setup-root",
    ".setupcontent",
    ".slds-template__container",
    "div[data-aura-rendered-by]",
)
LOGGED_IN_MARKER = query("logged in marker", "one-app", "div.desktop")

FORM_MARKERS = query(
    "record form",
    *RECORD_FORM.candidates,
    "lightning-record-form",
    "records-lwc-record-layout",
    "records-record-layout-event-broker",
    "force-record-layout-block",
    "div.modal-body lightning-input",
    "div.modal-body lightning-input-field",
    "section.slds-modal lightning-input",
    "lightning-input-field",
)
RECORD_PAGE_MARKERS = query(
    "record page",
    "records-lwc-highlights-panel",
    "records-highlights2",
    "records-lwc-detail-panel",
    "records-record-layout-event-broker",
)
LIST_VIEW_MARKERS = query(
    "list view",
    "lst-list-view-manager-header",
    "lightning-datatable",
    "force-list-view-manager-presented",
)
SETUP_PAGE_MARKERS = query("setup page", "setup-split-view-panel", ".setupcontent", '[class*="setup"]')
FLOW_BUILDER_CANVAS = query("flow builder", ".flowBuilderRoot", ".canvas", ".flow-canvas")

# Setup
SETUP_SIDEBAR = query("setup sidebar", "one-setup-side-nav", "setup-split-view-panel", ".setupcontent .sidebar")
SETUP_QUICK_FIND = query(
    "setup quick find",
    'input[placeholder*="Quick Find"]',
    'input[type="search"][placeholder*="Quick"]',
    "input.filter-box",
)


def setup_menu_item(text: str) -> Query:
    value = _q(text)
    return query(
        f"setup menu item {text}",
        f'one-setup-side-nav-item a:text-is("{value}")',
        f'setup-split-view-panel a:text-is("{value}")',
        f'.setupLeaf a:text-is("{value}")',
    )


def setup_tree_item(text: str) -> Query:
    value = _q(text)
    return query(
        f"setup tree item {text}",
        f'lightning-tree-item:has-text("{value}")',
        f'.slds-tree__item:has-text("{value}")',
    )


def link_by_text(text: str) -> Query:
    value = _q(text)
    return query(f"link {text}", f'a[title="{value}"]', f'a:text-is("{value}")', f'a:has-text("{value}")')


# Tables and lists
LIST_VIEW_TABLE = query("list view table", "lightning-datatable table", "table.slds-table")
LIST_VIEW_ROW = query("list view row", "lightning-datatable tbody tr", "table.slds-table tbody tr")
LIST_VIEW_CHECKBOX = query("list view checkbox", 'td lightning-primitive-cell-checkbox input[type="checkbox"]')
LIST_VIEW_ACTIONS = query("list view actions", "td lightning-primitive-cell-actions button")


def list_view_cell(column_label: str) -> Query:
    text = _q(column_label)
    return query(f"list view cell {column_label}", f'td[data-label="{text}"]', f'th[data-label="{text}"]')


def list_view_header(column_label: str) -> Query:
    text = _q(column_label)
    return query(f"list view header {column_label}", f'th[data-label="{text}"]', f'th:has-text("{text}")')


# Tab navigation
TAB_BAR = query("tab bar", "one-app-nav-bar", 'ul[role="tablist"]', "lightning-tabset")
TAB_OVERFLOW_MENU = query("tab overflow", 'button[title="More Tabs"]', "one-app-nav-bar-menu-button")


def tab_item(label: str) -> Query:
    text = _q(label)
    return query(
        f"tab {label}",
        f'one-app-nav-bar-item-root a[title="{text}"]',
        f'li[role="presentation"] a:has-text("{text}")',
        f'lightning-tab-bar li:has-text("{text}")',
    )


# Path component
PATH_COMPONENT = query("path", "lightning-path")
PATH_MARK_COMPLETE = query(
    "path mark complete",
    'button:has-text("Mark Status as Complete")',
    'button:has-text("Mark as Complete")',
)
PATH_SELECT_CLOSED = query("path select closed", 'button:has-text("Select Closed Stage")')


def path_stage(stage_name: str) -> Query:
    text = _q(stage_name)
    return query(
        f"path stage {stage_name}",
        f'lightning-path-item:has-text("{text}")',
        f'.slds-path__item:has-text("{text}")',
    )


# Activity timeline, chatter and utility bar
ACTIVITY_TIMELINE = query("activity timeline", "lightning-activity-timeline", "activity-timeline")
ACTIVITY_ITEM = query("activity item", "lightning-activity-timeline-item", "activity-timeline-item")
LOG_A_CALL = query("log a call", 'button:has-text("Log a Call")')
NEW_TASK = query("new task", 'button:has-text("New Task")')
NEW_EVENT = query("new event", 'button:has-text("New Event")')
CHATTER_PUBLISHER = query("chatter publisher", "lightning-publisher", ".publisherComponent")
CHATTER_POST_INPUT = query(
    "chatter post input",
    'lightning-input-rich-text[class*="publisher"]',
    ".publisherShareButton",
)
CHATTER_POST_BUTTON = query("chatter post", 'button:has-text("Share")', 'button:has-text("Post")')
FEED_ITEM = query("feed item", "lightning-feed-item", "article.feeditem")
UTILITY_BAR = query("utility bar", "one-appnav-bar-utilities", "lightning-utility-bar-item")


def utility_bar_item(label: str) -> Query:
    text = _q(label)
    return query(
        f"utility bar item {label}",
        f'lightning-utility-bar-item[title="{text}"]',
        f'one-appnav-bar-utilities button:has-text("{text}")',
    )


# Raw component lookups
def lwc_component(name: str) -> Query:
    return query(f"lwc {name}", name, f'[data-component-id*="{_q(name)}"]')


def aura_component(name: str) -> Query:
    return query(f"aura {name}", f'[data-aura-rendered-by*="{_q(name)}"]')


def flexipage_component(label: str) -> Query:
    text = _q(label)
    return query(
        f"flexipage component {label}",
        f'laf-component:has(span:text-is("{text}"))',
        f'lightning-card:has(span:text-is("{text}"))',
    )
