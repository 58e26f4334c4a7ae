from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional

from sfbrowser.automation import selectors as sel
from sfbrowser.automation.session import SessionConfig, SessionManager
from sfbrowser.core.errors import SCREENSHOT_HINT, ErrorCode
from sfbrowser.core.org_manager import OrgManager
from sfbrowser.tools import TOOLS, Toolbox, list_tools

from .fakes import INSTANCE_URL, FakeEngine, FakePage, FakeSource, fast_config

EXPECTED = {
    "session": ["sf_session_start", "sf_session_status", "sf_session_refresh", "sf_session_close", "sf_list_orgs"],
    "navigation": [
        "sf_navigate_home", "sf_navigate_setup", "sf_navigate_setup_search", "sf_navigate_object",
        "sf_navigate_app", "sf_navigate_url", "sf_navigate_record", "sf_navigate_tab",
    ],
    "interaction": [
        "sf_click", "sf_click_button", "sf_fill", "sf_fill_field", "sf_select_picklist", "sf_select_lookup",
        "sf_check_checkbox", "sf_fill_date", "sf_hover", "sf_press_key", "sf_scroll", "sf_wait_for_element",
    ],
    "record": [
        "sf_record_new", "sf_record_edit", "sf_record_save", "sf_record_cancel", "sf_record_delete", "sf_record_clone",
    ],
    "setup": [
        "sf_setup_quick_find", "sf_setup_create_user", "sf_setup_permission_set", "sf_setup_profile",
        "sf_setup_object_manager", "sf_setup_flow",
    ],
    "capture": [
        "sf_screenshot", "sf_get_page_text", "sf_get_element_text", "sf_get_field_value", "sf_get_record_details",
        "sf_get_toast_message", "sf_get_current_url", "sf_evaluate_js", "sf_wait_for_spinner",
        "sf_wait_for_navigation",
    ],
}


def make_toolbox(page: Optional[FakePage] = None) -> Toolbox:
    engine = FakeEngine(page or FakePage(url="about:blank"))
    return Toolbox(SessionManager(OrgManager(FakeSource()), engine, fast_config()))


def with_session(toolbox: Toolbox, body: Callable[[Toolbox], Awaitable[Any]]) -> Any:
    async def run() -> Any:
        await toolbox.session.start_session(SessionConfig(org_alias="dev"))
        try:
            return await body(toolbox)
        finally:
            await toolbox.session.close_session()

    return asyncio.run(run())


def call(toolbox: Toolbox, name: str, args: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return with_session(toolbox, lambda tb: tb.call(name, args)).to_dict()


def test_every_operation_is_registered_in_its_group() -> None:
    for group, names in EXPECTED.items():
        assert [spec.name for spec in list_tools(group)] == names
    assert len(TOOLS) == sum(len(names) for names in EXPECTED.values())


def test_describe_exposes_camel_case_schemas() -> None:
    described = {item["name"]: item for item in make_toolbox().describe()}
    schema = described["sf_navigate_object"]["inputSchema"]
    assert "objectApiName" in schema["properties"]
    assert schema["required"] == ["objectApiName"]


def test_unknown_tool_and_bad_arguments() -> None:
    toolbox = make_toolbox()
    unknown = asyncio.run(toolbox.call("sf_teleport", {}))
    assert unknown.error == ErrorCode.INVALID_ARGUMENTS

    missing = asyncio.run(toolbox.call("sf_session_start", {}))
    assert missing.error == ErrorCode.INVALID_ARGUMENTS
    assert not missing.success

    wrong = asyncio.run(toolbox.call("sf_scroll", {"direction": "sideways"}))
    assert wrong.error == ErrorCode.INVALID_ARGUMENTS


def test_operations_before_a_session_report_not_started() -> None:
    result = asyncio.run(make_toolbox().call("sf_navigate_home"))
    assert result.error == ErrorCode.SESSION_NOT_STARTED
    assert "sf_session_start" in result.suggestion


def test_session_lifecycle_through_operations() -> None:
    toolbox = make_toolbox()

    async def run() -> list:
        started = await toolbox.call("sf_session_start", {"orgAlias": "dev", "headless": True})
        status = await toolbox.call("sf_session_status")
        closed = await toolbox.call("sf_session_close")
        after = await toolbox.call("sf_session_status")
        return [r.to_dict() for r in (started, status, closed, after)]

    started, status, closed, after = asyncio.run(run())
    assert started["success"] and started["instanceUrl"] == INSTANCE_URL
    assert started["message"] == "Session started for org: Acme"
    assert status["status"] == "connected" and status["orgAlias"] == "dev"
    assert closed["success"]
    assert after["status"] == "disconnected"


def test_unknown_org_through_session_start() -> None:
    result = asyncio.run(make_toolbox().call("sf_session_start", {"orgAlias": "qa"})).to_dict()
    assert result["error"] == "ORG_NOT_FOUND"


def test_list_orgs() -> None:
    result = asyncio.run(make_toolbox().call("sf_list_orgs")).to_dict()
    assert result["count"] == 1
    assert result["orgs"][0]["alias"] == "dev"


def test_navigate_object_with_list_view() -> None:
    page = FakePage(url="about:blank", visible={"one-app", "lightning-datatable"})
    result = call(make_toolbox(page), "sf_navigate_object", {"objectApiName": "Account", "listViewName": "Recent"})
    assert result["success"]
    assert result["currentUrl"] == INSTANCE_URL + "/lightning/o/Account/list?filterName=Recent"


def test_navigation_readiness_timeout_is_navigation_timeout() -> None:
    result = call(make_toolbox(), "sf_navigate_object", {"objectApiName": "Account"})
    assert result["error"] == "NAVIGATION_TIMEOUT"


def test_click_timeout_is_element_not_found() -> None:
    page = FakePage(url="about:blank")
    page.click_timeouts.add("#missing")
    result = call(make_toolbox(page), "sf_click", {"selector": "#missing", "timeout": 50})
    assert result["error"] == "ELEMENT_NOT_FOUND"
    assert result["suggestion"] == SCREENSHOT_HINT


def test_fill_field_by_label() -> None:
    field = sel.input_by_label("Account Name").candidates[0]
    page = FakePage(url="about:blank", visible={"one-app", field})
    result = call(make_toolbox(page), "sf_fill_field", {"fieldLabel": "Account Name", "value": "Acme"})
    assert result == {"success": True, "field": "Account Name", "value": "Acme", "fieldType": "text"}
    assert page.fills == [(field, "Acme")]


def test_scroll_page_and_element() -> None:
    page = FakePage(url="about:blank")
    toolbox = make_toolbox(page)

    async def body(tb: Toolbox) -> None:
        await tb.call("sf_scroll", {"direction": "up", "amount": 120})
        await tb.call("sf_scroll", {"direction": "right", "selector": "div.scroller"})

    with_session(toolbox, body)
    assert page.wheels == [(0, -120)]
    assert page.scripts[-1][0] == "div.scroller"
    assert page.scripts[-1][2] == {"dx": 300, "dy": 0}


def test_missing_toast_is_a_normal_result() -> None:
    result = call(make_toolbox(), "sf_get_toast_message", {"timeout": 20})
    assert result["success"] is True
    assert result["found"] is False


def test_delete_requires_confirmation() -> None:
    page = FakePage(url="about:blank", visible={"one-app", 'button[name="Delete"]', 'section[role="dialog"]'})
    confirm = f"{sel.MODAL.css} {sel.MODAL_CONFIRM_DELETE.css}"

    result = call(make_toolbox(page), "sf_record_delete")
    assert result["success"]
    assert "confirm=true" in result["message"]
    assert confirm not in page.clicks

    result = call(make_toolbox(page), "sf_record_delete", {"confirm": True})
    assert result == {"success": True, "message": "Delete operation completed"}
    assert page.clicks[-1] == confirm


def test_save_reports_verification() -> None:
    page = FakePage(url="about:blank", visible={"one-app", 'button[name="SaveEdit"]'})
    result = call(make_toolbox(page), "sf_record_save")
    assert result["success"] is True
    assert result["verified"] is False


def test_page_text_is_truncated() -> None:
    page = FakePage(url="about:blank")
    page.texts["body"] = "x" * 12000
    result = call(make_toolbox(page), "sf_get_page_text")
    assert len(result["text"]) == 10000
    assert result["truncated"] is True


def test_screenshot_is_base64_png() -> None:
    result = call(make_toolbox(), "sf_screenshot", {"fullPage": True})
    assert result["image"] == {"data": "ZnVsbC1wbmc=", "mimeType": "image/png"}


def test_setup_object_manager_defaults_to_details() -> None:
    page = FakePage(url="about:blank", visible={"one-app", "setup-split-view-panel"})
    result = call(make_toolbox(page), "sf_setup_object_manager", {"objectApiName": "Account"})
    assert result["section"] == "Details"
    assert result["currentUrl"].endswith("/lightning/setup/ObjectManager/Account")


def test_flow_builder_without_canvas_still_succeeds() -> None:
    page = FakePage(url="about:blank")
    result = call(make_toolbox(page), "sf_setup_flow", {"flowApiName": "301000000000001"})
    assert result["success"]
    assert result["currentUrl"].endswith("flowBuilder.app?flowId=301000000000001")
