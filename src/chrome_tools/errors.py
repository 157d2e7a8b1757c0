"""
Tool Errors

Every fatal condition of a Chrome tool is raised as a ToolError whose
message carries the operation name as a prefix, e.g.
``[chrome_take_screenshot] Navigation timeout after 20000ms``.

Nothing here is retried; retry policy belongs to the caller.
"""

from typing import Optional


class ToolError(Exception):
    """
    Base error for all tool operations.

    Attributes:
        operation: Tool name the error belongs to (e.g. "chrome_fetch_page")
        message: Error message without the operation prefix
    """

    def __init__(self, message: str, operation: Optional[str] = None):
        self.message = message
        self.operation = operation
        super().__init__(self._format())

    def _format(self) -> str:
        if self.operation:
            return f"[{self.operation}] {self.message}"
        return self.message

    def for_operation(self, operation: str) -> "ToolError":
        """Attach an operation name if the error does not carry one yet."""
        if self.operation is None:
            self.operation = operation
            self.args = (self._format(),)
        return self

    def __str__(self) -> str:
        return self._format()


class BrowserAcquisitionError(ToolError):
    """Browser could not be launched or connected to."""


class NavigationError(ToolError):
    """Navigation failed or timed out."""


class ExtractionError(ToolError):
    """Expected DOM marker or element was not found."""


class OperationTimeoutError(ToolError):
    """The operation did not finish within its wall-clock timeout."""


class ScriptTimeoutError(OperationTimeoutError):
    """User script did not finish before the timeout."""


class ScriptError(ToolError):
    """User script raised an error."""


class InvalidParametersError(ToolError):
    """Tool arguments failed schema validation."""


class ApprovalRequiredError(ToolError):
    """Tool requires approval that the calling session did not grant."""
