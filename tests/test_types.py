from __future__ import annotations

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from sfbrowser.automation.types import ImagePayload, SaveOutcome, SaveStatus, ToolResult
from sfbrowser.core.errors import SCREENSHOT_HINT, ErrorCode, OrgNotFoundError, WaitTimeoutError


def test_tool_result_to_dict_flattens_data() -> None:
    result = ToolResult.ok("done", currentUrl="https://x")
    assert result.to_dict() == {"success": True, "message": "done", "currentUrl": "https://x"}


def test_tool_result_image_payload() -> None:
    result = ToolResult(success=True, image=ImagePayload("aGk="))
    assert result.to_dict()["image"] == {"data": "aGk=", "mimeType": "image/png"}


def test_salesforce_errors_pass_through_verbatim() -> None:
    result = ToolResult.from_exception(OrgNotFoundError("qa"), "start session")
    assert result.error == ErrorCode.ORG_NOT_FOUND
    assert '"qa"' in result.message
    assert result.suggestion


def test_wait_timeout_keeps_its_own_code() -> None:
    exc = WaitTimeoutError("lightning app container", 30000, ErrorCode.NAVIGATION_TIMEOUT)
    result = ToolResult.from_exception(exc, "navigate home", ErrorCode.ELEMENT_NOT_FOUND)
    assert result.error == ErrorCode.NAVIGATION_TIMEOUT
    assert "30000ms" in result.message


def test_playwright_timeouts_map_to_the_group_code() -> None:
    exc = PlaywrightTimeoutError("Timeout 10000ms exceeded.")
    nav = ToolResult.from_exception(exc, "navigate to URL", ErrorCode.NAVIGATION_TIMEOUT)
    assert nav.error == ErrorCode.NAVIGATION_TIMEOUT
    click = ToolResult.from_exception(exc, "click", ErrorCode.ELEMENT_NOT_FOUND)
    assert click.error == ErrorCode.ELEMENT_NOT_FOUND
    assert click.suggestion == SCREENSHOT_HINT


def test_other_failures_name_the_action() -> None:
    result = ToolResult.from_exception(ValueError("boom"), "save record")
    assert result.error == ErrorCode.UNKNOWN_ERROR
    assert result.message == "Failed to save record: boom"


def test_unverified_save_is_not_a_failure() -> None:
    assert SaveOutcome(SaveStatus.UNVERIFIED, "?").success
    assert not SaveOutcome(SaveStatus.FAILED, "x").success


def test_readiness_timeouts_inside_navigation_are_navigation_timeouts() -> None:
    exc = WaitTimeoutError("list view", 20000)
    assert exc.code == ErrorCode.ELEMENT_NOT_FOUND
    result = ToolResult.from_exception(exc, "navigate to object", ErrorCode.NAVIGATION_TIMEOUT)
    assert result.error == ErrorCode.NAVIGATION_TIMEOUT
    assert "list view" in result.message
