"""
Unit tests for screenshots and script execution.
"""

import asyncio
import base64
import time
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from chrome_tools.errors import InvalidParametersError, ScriptError, ScriptTimeoutError
from chrome_tools.service import ToolSession
from chrome_tools.tools import (
    RunScriptParams,
    TakeScreenshotParams,
    invoke_tool,
    run_script,
    take_screenshot,
)
from chrome_tools.tools.script import LogCollector

from conftest import PNG_BYTES


class TestTakeScreenshot:

    def test_width_out_of_range_rejected_by_params(self):
        with pytest.raises(ValidationError):
            TakeScreenshotParams(url="https://example.com", screen_width=2000)
        with pytest.raises(ValidationError):
            TakeScreenshotParams(url="https://example.com", screen_width=299)

    @pytest.mark.asyncio
    async def test_width_out_of_range_never_acquires_browser(self, chrome):
        result = await invoke_tool(
            "chrome_take_screenshot",
            {"url": "https://example.com", "screen_width": 2000},
            chrome.service,
        )

        assert not result.success
        assert result.error.startswith("[chrome_take_screenshot] Invalid parameters: screen_width")
        assert chrome.starts == 0

    @pytest.mark.asyncio
    async def test_unvalidated_width_still_rejected(self, chrome):
        params = TakeScreenshotParams.model_construct(url="https://example.com", screen_width=2000)

        with pytest.raises(InvalidParametersError, match=r"^\[chrome_take_screenshot\] screen_width"):
            await take_screenshot(chrome.service, params)

        assert chrome.starts == 0

    @pytest.mark.asyncio
    async def test_viewport_and_capture(self, chrome):
        result = await take_screenshot(
            chrome.service, TakeScreenshotParams(url="https://example.com", screen_width=800)
        )

        chrome.browser.new_page.assert_awaited_once_with(viewport={"width": 800, "height": 768})
        chrome.page.goto.assert_awaited_once_with("https://example.com", wait_until="load", timeout=20000)
        chrome.page.screenshot.assert_awaited_once_with(type="png", full_page=False)
        assert result.data == PNG_BYTES
        assert (result.width, result.height) == (800, 768)
        chrome.assert_released_once()

    @pytest.mark.asyncio
    async def test_payload_is_base64_media(self, chrome):
        result = await invoke_tool("chrome_take_screenshot", {"url": "https://example.com"}, chrome.service)

        payload = result.to_payload()
        assert payload["type"] == "media"
        assert payload["mime_type"] == "image/png"
        assert base64.b64decode(payload["data"]) == PNG_BYTES
        assert payload["width"] == 1024

    @pytest.mark.asyncio
    async def test_capture_failure(self, chrome):
        chrome.page.screenshot.side_effect = RuntimeError("Target closed")

        result = await invoke_tool("chrome_take_screenshot", {"url": "https://example.com"}, chrome.service)

        assert result.error == "[chrome_take_screenshot] Failed to take screenshot: Target closed"
        chrome.assert_released_once()


class TestLogCollector:

    def test_joins_arguments(self):
        logs = LogCollector()
        logs("count", 3, {"ok": True})
        assert logs.lines == ['count 3 {"ok": true}']

    def test_console_messages_are_tagged(self):
        logs = LogCollector()
        logs.on_console(SimpleNamespace(type="warning", text="deprecated"))
        assert logs.lines == ["[browser] warning: deprecated"]


class TestRunScript:

    @pytest.mark.asyncio
    async def test_async_callable_logs_and_result(self, chrome):
        async def script(page, browser, console_log):
            console_log("L1")
            console_log("L2")
            return "V"

        result = await run_script(chrome.service, RunScriptParams(script=script))

        assert result.result == "V"
        assert result.logs == ["L1", "L2"]
        chrome.assert_released_once()

    @pytest.mark.asyncio
    async def test_sync_callable_gets_page_and_browser(self, chrome):
        seen = {}

        def script(page, browser, console_log):
            seen["page"] = page
            seen["browser"] = browser
            return 42

        result = await run_script(chrome.service, RunScriptParams(script=script))

        assert result.result == 42
        assert seen == {"page": chrome.page, "browser": chrome.browser}

    @pytest.mark.asyncio
    async def test_timeout_releases_once(self, chrome):
        async def script(page, browser, console_log):
            console_log("started")
            await asyncio.sleep(10)

        params = RunScriptParams.model_construct(script=script, navigate_to=None, timeout_seconds=0.1)

        with pytest.raises(ScriptTimeoutError) as exc_info:
            await run_script(chrome.service, params)

        assert str(exc_info.value).startswith("[chrome_run_script] Script timed out")
        chrome.assert_released_once()

    @pytest.mark.asyncio
    async def test_blocking_sync_callable_times_out(self, chrome):
        def script(page, browser, console_log):
            console_log("blocking")
            time.sleep(0.5)
            return "late"

        params = RunScriptParams.model_construct(script=script, navigate_to=None, timeout_seconds=0.1)

        started = time.monotonic()
        with pytest.raises(ScriptTimeoutError, match=r"^\[chrome_run_script\] Script timed out"):
            await run_script(chrome.service, params)

        assert time.monotonic() - started < 0.45
        chrome.assert_released_once()

    @pytest.mark.asyncio
    async def test_timeout_on_remote_browser_keeps_it_running(self, remote_chrome):
        async def script(page, browser, console_log):
            await asyncio.sleep(10)

        params = RunScriptParams.model_construct(script=script, navigate_to=None, timeout_seconds=0.1)

        with pytest.raises(ScriptTimeoutError):
            await run_script(remote_chrome.service, params)

        remote_chrome.assert_released_once()

    @pytest.mark.asyncio
    async def test_script_error_is_wrapped(self, chrome):
        def script(page, browser, console_log):
            raise RuntimeError("boom")

        with pytest.raises(ScriptError) as exc_info:
            await run_script(chrome.service, RunScriptParams(script=script))

        assert str(exc_info.value) == "[chrome_run_script] boom"
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        chrome.assert_released_once()

    @pytest.mark.asyncio
    async def test_javascript_source_runs_in_page(self, chrome):
        chrome.page.evaluate.return_value = "Example Domain"
        source = "async () => { await consoleLog('reading title'); return document.title; }"

        result = await run_script(chrome.service, RunScriptParams(script=source))

        assert result.result == "Example Domain"
        name, collector = chrome.page.expose_function.await_args.args
        assert name == "consoleLog"
        assert isinstance(collector, LogCollector)
        chrome.page.evaluate.assert_awaited_once_with(source)

    @pytest.mark.asyncio
    async def test_browser_console_is_captured(self, chrome):
        def script(page, browser, console_log):
            page.emit("console", SimpleNamespace(type="log", text="hi"))
            console_log("after")

        result = await run_script(chrome.service, RunScriptParams(script=script))

        assert result.logs == ["[browser] log: hi", "after"]

    @pytest.mark.asyncio
    async def test_navigate_first(self, chrome):
        await run_script(
            chrome.service,
            RunScriptParams(script=lambda **_: None, navigate_to="https://example.com/app"),
        )

        chrome.page.goto.assert_awaited_once_with(
            "https://example.com/app", wait_until="load", timeout=20000
        )

    @pytest.mark.asyncio
    async def test_no_navigation_by_default(self, chrome):
        await run_script(chrome.service, RunScriptParams(script=lambda **_: None))

        chrome.page.goto.assert_not_awaited()


class TestRunScriptApproval:

    @pytest.mark.asyncio
    async def test_requires_approval(self, chrome):
        result = await invoke_tool("chrome_run_script", {"script": "() => 1"}, chrome.service)

        assert result.error == "[chrome_run_script] Execution was not approved for this session"
        assert chrome.starts == 0

    @pytest.mark.asyncio
    async def test_denied_by_session(self, chrome):
        session = ToolSession(approve=lambda name, args: False)

        result = await invoke_tool("chrome_run_script", {"script": "() => 1"}, chrome.service, session)

        assert not result.success
        assert chrome.starts == 0

    @pytest.mark.asyncio
    async def test_approved_by_session(self, chrome):
        chrome.page.evaluate.return_value = 1
        calls = []
        session = ToolSession(approve=lambda name, args: calls.append((name, args)) or True)

        result = await invoke_tool("chrome_run_script", {"script": "() => 1"}, chrome.service, session)

        assert result.success
        assert result.to_payload() == {"result": 1, "logs": []}
        assert calls == [("chrome_run_script", {"script": "() => 1"})]
