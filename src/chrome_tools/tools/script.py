"""
Script Execution Tool

Runs caller-supplied code against a fresh page.

Trust boundary: a script can drive the full page and browser APIs
(navigate anywhere, read cookies, fill forms). The tool is registered with
``requires_approval=True`` so invoke_tool() only runs it when the calling
session approves, the same gate the host applies to other sensitive tools.

Two script forms are accepted:
- a Python callable, called as ``script(page=..., browser=..., console_log=...)``
  (sync or async). This is the preferred form for Python callers. Sync
  callables run in a worker thread so the timeout can fire while they block;
  they may use ``console_log`` but must not call the async ``page`` API.
  A timed-out thread is abandoned, not killed.
- JavaScript function source (what arrives from a tool call). It is
  evaluated inside the page sandbox, where ``consoleLog(...)`` is bound to
  the same log collector. Await consoleLog calls to keep log order.
"""

import asyncio
import inspect
import json
import logging
from typing import Any, Callable

from ..browser import PageSession, WaitCondition
from ..errors import ScriptError, ScriptTimeoutError
from .base import tool
from .models import RunScriptParams, ScriptResult

logger = logging.getLogger(__name__)

NAME = "chrome_run_script"

NAVIGATION_TIMEOUT = 20000


class LogCollector:
    """Collects script log lines and browser console output in arrival order."""

    def __init__(self):
        self.lines: list[str] = []

    def __call__(self, *args: Any) -> None:
        self.lines.append(
            " ".join(arg if isinstance(arg, str) else json.dumps(arg, default=str) for arg in args)
        )

    def on_console(self, message) -> None:
        self.lines.append(f"[browser] {message.type}: {message.text}")


async def _call_script(scope: PageSession, script, console_log: Callable[..., None]) -> Any:
    try:
        if callable(script):
            kwargs = {"page": scope.page, "browser": scope.browser.browser, "console_log": console_log}
            if inspect.iscoroutinefunction(script):
                result = await script(**kwargs)
            else:
                result = await asyncio.to_thread(script, **kwargs)
            if inspect.isawaitable(result):
                result = await result
            return result

        await scope.page.expose_function("consoleLog", console_log)
        return await scope.page.evaluate(script)
    except Exception as e:
        raise ScriptError(str(e) or type(e).__name__) from e


@tool(
    name=NAME,
    description=(
        "Run a script with access to a browser page. Accepts a JavaScript function as a "
        "string, evaluates it in the page (call consoleLog(...) to record log lines), and "
        "returns its result together with the captured logs."
    ),
    params=RunScriptParams,
    requires_approval=True,
)
async def run_script(service, params: RunScriptParams, session=None) -> ScriptResult:
    logs = LogCollector()

    async with service.open_page(session, NAME) as scope:
        scope.page.on("console", logs.on_console)

        if params.navigate_to:
            await scope.navigate(params.navigate_to, WaitCondition.LOAD, NAVIGATION_TIMEOUT)

        scope.extracting()
        try:
            result = await asyncio.wait_for(
                _call_script(scope, params.script, logs),
                timeout=params.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise ScriptTimeoutError(
                f"Script timed out after {params.timeout_seconds}s"
            ) from e

    logger.debug("[%s] script finished with %d log lines", NAME, len(logs.lines))
    return ScriptResult(result=result, logs=list(logs.lines))
