"""Composite Lightning interactions built from selector queries and waits."""
import asyncio
import logging
from enum import Enum
from typing import Dict, Iterable, List, Optional

from ..core.errors import ElementNotFoundError, WaitTimeoutError
from . import selectors as sel
from .polling import Deadline
from .resolver import first_visible
from .types import SaveOutcome, SaveStatus, Toast, ToastType
from .waits import LightningWaits

logger = logging.getLogger(__name__)

# Fixed settle delays where Lightning exposes no readiness marker
PICKLIST_SETTLE_MS = 200
LOOKUP_SETTLE_MS = 300
QUICK_FIND_SETTLE_MS = 500
LAUNCHER_FALLBACK_MS = 2000
LAUNCHER_SEARCH_TIMEOUT_MS = 2000
LAUNCHER_RESULTS_TIMEOUT_MS = 5000

TRUE_VALUES = ("true", "1", "yes", "on")


class FieldType(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    PICKLIST = "picklist"
    LOOKUP = "lookup"
    DATE = "date"
    DATETIME = "datetime"
    CHECKBOX = "checkbox"
    NUMBER = "number"


class ModalAction(str, Enum):
    SAVE = "save"
    CANCEL = "cancel"
    CLOSE = "close"


MODAL_BUTTONS = {
    ModalAction.SAVE: sel.SAVE_BUTTON,
    ModalAction.CANCEL: sel.CANCEL_BUTTON,
    ModalAction.CLOSE: sel.MODAL_CLOSE,
}


def closest_option(options: List[str], value: str) -> Optional[int]:
    """Index of the option matching ``value`` case-insensitively, else the first containing it."""
    wanted = value.strip().lower()
    cleaned = [option.strip().lower() for option in options]
    for index, option in enumerate(cleaned):
        if option == wanted:
            return index
    for index, option in enumerate(cleaned):
        if wanted and wanted in option:
            return index
    return None


def _sleep_ms(ms: float):
    return asyncio.sleep(ms / 1000)


class LightningPatterns:
    def __init__(self, page, waits: Optional[LightningWaits] = None):
        self.page = page
        self.waits = waits or LightningWaits(page)

    @property
    def config(self):
        return self.waits.config

    async def resolve(self, query: Iterable[str], action: str, target: str, timeout_ms: Optional[float] = None):
        timeout_ms = self.config.element_timeout_ms if timeout_ms is None else timeout_ms
        locator = await first_visible(self.page, query, timeout_ms, self.config.poll_interval_ms)
        if locator is None:
            raise ElementNotFoundError(action, target)
        return locator

    # Field handlers

    async def select_picklist_value(self, field_label: str, value: str) -> str:
        """Open a picklist and choose ``value``; returns the option text clicked."""
        field = await self.resolve(sel.picklist_by_label(field_label), "open picklist", field_label)
        await field.click()

        try:
            await self.waits.wait_for_picklist_options()
        except WaitTimeoutError:
            raise ElementNotFoundError(
                "select picklist value",
                field_label,
                f'Picklist "{field_label}" did not show any options',
            )

        # one scan in candidate order; a substring match must not beat an exact one
        exact = await first_visible(self.page, sel.picklist_option(value), 0, self.config.poll_interval_ms)
        if exact is not None:
            chosen = ((await exact.text_content()) or value).strip()
            await exact.click()
        else:
            items = self.page.locator(sel.COMBOBOX_ITEM.css)
            texts = await items.all_text_contents()
            index = closest_option(texts, value)
            if index is None:
                raise ElementNotFoundError(
                    "select picklist value",
                    field_label,
                    f'Option "{value}" not found in picklist "{field_label}"',
                )
            chosen = texts[index].strip()
            logger.debug(f'Using closest picklist option "{chosen}" for "{value}"')
            await items.nth(index).click()

        await _sleep_ms(PICKLIST_SETTLE_MS)
        return chosen

    async def select_lookup_value(self, field_label: str, search_term: str, select_index: int = 0) -> int:
        """Search a lookup and pick result ``select_index``, or the first one if out of range.

        Returns the index actually clicked.
        """
        field = await self.resolve(sel.lookup_by_label(field_label), "open lookup", field_label)
        await field.click()

        # forms hold several comboboxes; type into the one inside this field
        search_input = field.locator(sel.LOOKUP_SEARCH_INPUT.css).first
        if not await search_input.is_visible():
            search_input = self.page.locator(sel.LOOKUP_SEARCH_INPUT.css).first
        await search_input.fill(search_term)

        try:
            await self.waits.wait_for_lookup_results()
        except WaitTimeoutError:
            logger.debug(f'No lookup results for "{search_term}"')

        options = self.page.locator(sel.LOOKUP_RESULT.css)
        count = await options.count()
        if count == 0:
            raise ElementNotFoundError(
                "select lookup value",
                search_term,
                f'No lookup options found for "{search_term}" in field "{field_label}"',
            )

        index = select_index if 0 <= select_index < count else 0
        await options.nth(index).click()
        await _sleep_ms(LOOKUP_SETTLE_MS)
        return index

    async def set_checkbox(self, field_label: str, checked: bool) -> bool:
        """Returns True when a click was needed."""
        checkbox = await self.resolve(sel.checkbox_by_label(field_label), "set checkbox", field_label)
        if await checkbox.is_checked() == checked:
            return False
        await checkbox.click()
        return True

    async def fill_date_field(self, field_label: str, date_value: str) -> None:
        container = await self.resolve(sel.date_picker_by_label(field_label), "fill date", field_label)
        date_input = container.locator("input").first
        await date_input.fill(date_value)
        # date components only commit on blur
        await date_input.blur()

    async def fill_datetime_field(self, field_label: str, date_value: str, time_value: Optional[str] = None) -> None:
        container = await self.resolve(sel.datetime_picker_by_label(field_label), "fill datetime", field_label)
        inputs = container.locator('input[type="text"]')
        date_input = inputs.first
        await date_input.fill(date_value)
        if time_value:
            await inputs.nth(1).fill(time_value)
        await date_input.blur()

    async def fill_form_field(self, field_label: str, value: str, field_type: FieldType = FieldType.TEXT) -> None:
        field_type = FieldType(field_type)
        if field_type in (FieldType.TEXT, FieldType.NUMBER):
            field = await self.resolve(sel.input_by_label(field_label), "fill field", field_label)
            await field.fill(value)
        elif field_type == FieldType.TEXTAREA:
            field = await self.resolve(sel.textarea_by_label(field_label), "fill field", field_label)
            await field.fill(value)
        elif field_type == FieldType.PICKLIST:
            await self.select_picklist_value(field_label, value)
        elif field_type == FieldType.LOOKUP:
            await self.select_lookup_value(field_label, value)
        elif field_type == FieldType.DATE:
            await self.fill_date_field(field_label, value)
        elif field_type == FieldType.DATETIME:
            await self.fill_datetime_field(field_label, value)
        elif field_type == FieldType.CHECKBOX:
            await self.set_checkbox(field_label, value.strip().lower() in TRUE_VALUES)

    async def get_field_value(self, field_label: str) -> str:
        for query in (sel.input_by_label(field_label), sel.textarea_by_label(field_label)):
            locator = self.page.locator(query.css).first
            if await locator.is_visible():
                return (await locator.input_value()) or ""

        container = self.page.locator(sel.form_field_by_label(field_label).css).first
        if await container.is_visible():
            text = await container.locator(sel.FIELD_DISPLAY_VALUE.css).first.text_content()
            return (text or "").strip()
        return ""

    # Modals, buttons and toasts

    async def interact_with_modal(self, action: ModalAction) -> None:
        action = ModalAction(action)
        await self.waits.wait_for_modal()
        modal = self.page.locator(sel.MODAL.css).first
        await modal.locator(MODAL_BUTTONS[action].css).first.click()
        await self.waits.wait_for_modal_close()

    async def click_button(self, label: str, timeout_ms: Optional[float] = None) -> None:
        button = await self.resolve(sel.button_by_label(label), "click button", label, timeout_ms)
        await button.click()

    async def get_toast_message(self, timeout_ms: Optional[float] = None) -> Toast:
        return await self.waits.wait_for_toast(timeout_ms)

    async def close_toast(self) -> bool:
        close = self.page.locator(sel.TOAST_CLOSE.css).first
        if await close.is_visible():
            await close.click()
            return True
        return False

    # Records

    async def save_record(self) -> SaveOutcome:
        """Click Save and report what the page says about it.

        Without a toast, landing on a ``/view`` URL is taken as a successful
        save. This has no structural confirmation behind it.
        """
        await self.click_save()

        outcome = await self.waits.toast_outcome(self.config.save_toast_timeout_ms)
        if isinstance(outcome, Toast):
            status = SaveStatus.SAVED if outcome.type == ToastType.SUCCESS else SaveStatus.FAILED
            return SaveOutcome(status, outcome.message, toast=outcome)

        if "/view" in self.page.url:
            return SaveOutcome(SaveStatus.SAVED, "Record saved successfully")
        return SaveOutcome(SaveStatus.UNVERIFIED, "Save operation completed but could not verify result")

    async def click_save(self) -> None:
        save = await self.resolve(sel.SAVE_BUTTON, "save record", "Save")
        await save.click()

    async def cancel_edit(self) -> None:
        cancel = await self.resolve(sel.CANCEL_BUTTON, "cancel edit", "Cancel")
        await cancel.click()
        await self.waits.wait_for_no_spinners()

    async def open_related_list_new(self, related_list: str) -> None:
        button = await self.resolve(sel.related_list_new_button(related_list), "open related list", related_list)
        await button.click()
        await self.waits.wait_for_modal()

    async def view_all_related_list(self, related_list: str) -> None:
        link = await self.resolve(sel.related_list_view_all(related_list), "view related list", related_list)
        await link.click()
        await self.waits.wait_for_navigation()

    async def get_record_name(self) -> str:
        text = await self.page.locator(sel.RECORD_NAME.css).first.text_content()
        return (text or "").strip()

    async def get_record_details(self) -> Dict[str, str]:
        details = {"recordName": await self.get_record_name()}
        for section in await self.page.locator(sel.RECORD_DETAIL_SECTION.css).all():
            for item in await section.locator(sel.RECORD_LAYOUT_ITEM.css).all():
                try:
                    label = await item.locator(sel.RECORD_ITEM_LABEL.css).first.text_content()
                    value = await item.locator(sel.RECORD_ITEM_VALUE.css).first.text_content()
                except Exception as e:
                    logger.debug(f"Skipping layout item: {e}")
                    continue
                if label and value:
                    details[label.strip()] = value.strip()
        return details

    async def select_list_view_rows(self, indices: Iterable[int]) -> int:
        checkboxes = await self.page.locator(sel.LIST_VIEW_CHECKBOX.css).all()
        selected = 0
        for index in indices:
            if 0 <= index < len(checkboxes):
                await checkboxes[index].click()
                selected += 1
        return selected

    async def get_page_text(self, selector: Optional[str] = None) -> str:
        text = await self.page.locator(selector or "body").first.text_content()
        return (text or "").strip()

    # Navigation

    async def open_app(self, app_name: str, timeout_ms: Optional[float] = None) -> None:
        """Open an app through the App Launcher search."""
        timeout_ms = self.config.navigation_timeout_ms if timeout_ms is None else timeout_ms
        deadline = Deadline(timeout_ms)

        launcher = await self.resolve(sel.APP_LAUNCHER_BUTTON, "open App Launcher", "App Launcher", deadline.remaining_ms)
        await launcher.click()

        panel_timeout = min(deadline.remaining_ms, self.config.launcher_timeout_ms)
        if not await self.waits.poll_visible(sel.APP_LAUNCHER_PANEL, Deadline(panel_timeout)):
            # the panel markers are not reliable across releases
            logger.debug("App Launcher panel not detected, falling back to a fixed delay")
            await _sleep_ms(min(LAUNCHER_FALLBACK_MS, deadline.remaining_ms))

        search = await first_visible(
            self.page,
            sel.app_launcher_search_inputs(),
            min(deadline.remaining_ms, LAUNCHER_SEARCH_TIMEOUT_MS),
            self.config.poll_interval_ms,
        )
        if search is None:
            raise ElementNotFoundError("open app", app_name, "Could not find App Launcher search input")
        await search.fill(app_name)

        await self.waits.wait_for_no_spinners(min(deadline.remaining_ms, LAUNCHER_RESULTS_TIMEOUT_MS))
        entry = await first_visible(
            self.page,
            sel.app_launcher_entries(app_name),
            deadline.share(),
            self.config.poll_interval_ms,
        )
        if entry is None:
            raise ElementNotFoundError("open app", app_name, f'Could not find app "{app_name}" in App Launcher')
        await entry.click()

        await self.waits.wait_for_navigation(max(deadline.remaining_ms, 1000))

    async def click_tab(self, tab_name: str) -> None:
        tab = await self.resolve(sel.tab_item(tab_name), "click tab", tab_name)
        await tab.click()
        await self.waits.wait_for_navigation()

    async def setup_quick_find(self, search_term: str, click_result: bool = False) -> bool:
        """Type into Setup Quick Find; optionally open the matching entry.

        Returns True when a result was clicked.
        """
        quick_find = await self.resolve(sel.SETUP_QUICK_FIND, "use Quick Find", "Quick Find")
        await quick_find.fill(search_term)
        # results are debounced client side
        await _sleep_ms(QUICK_FIND_SETTLE_MS)
        if not click_result:
            return False

        candidates = sel.setup_menu_item(search_term).candidates + sel.link_by_text(search_term).candidates
        result = await self.resolve(candidates, "open Quick Find result", search_term)
        await result.click()
        await self.waits.wait_for_navigation()
        return True

    async def click_setup_menu_item(self, text: str) -> None:
        item = await self.resolve(sel.setup_menu_item(text), "click setup menu item", text)
        await item.click()
        await self.waits.wait_for_navigation()
