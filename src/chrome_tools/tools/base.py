"""
Base Tool Infrastructure

Provides the foundation for the Chrome tools:
- Tool decorator for registration
- ToolResult for standardized responses
- Tool registry for discovery and schema export
- invoke_tool() for host frameworks: validation, approval, error wrapping
"""

import logging
from functools import wraps
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Optional

from pydantic import BaseModel, ValidationError

from ..errors import ApprovalRequiredError, InvalidParametersError, ToolError

if TYPE_CHECKING:
    from ..service import ChromeService, ToolSession

logger = logging.getLogger(__name__)


@dataclass
class ToolResult:
    """
    Standardized result from tool execution.

    Attributes:
        success: Whether the tool executed successfully
        data: Result model (varies by tool)
        error: Error message if failed, prefixed with the tool name
        metadata: Additional context (tool name, arguments)
    """

    success: bool
    data: Any = None
    error: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> Any:
        """Plain JSON-ready value of ``data``."""
        data = self.data
        if hasattr(data, "to_payload"):
            return data.to_payload()
        if isinstance(data, BaseModel):
            return data.model_dump(mode="json")
        return data

    def __str__(self) -> str:
        if self.success:
            return f"Success: {self.data}"
        return f"Error: {self.error}"


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    params: type[BaseModel]
    function: Callable
    requires_approval: bool = False

    @property
    def input_schema(self) -> dict[str, Any]:
        return self.params.model_json_schema()


# Static tool metadata, filled at import time by @tool
_TOOL_REGISTRY: dict[str, ToolDefinition] = {}


def tool(
    name: str,
    description: str,
    params: type[BaseModel],
    requires_approval: bool = False,
):
    """
    Decorator to register a coroutine as a Chrome tool.

    The decorated function keeps its signature
    ``(service, params, session=None)`` and raises ToolError on failure;
    errors are tagged with ``name`` on the way out.

    Args:
        name: Tool identifier (e.g., "chrome_fetch_page")
        description: Human-readable description of what the tool does
        params: Pydantic model the tool arguments are validated against
        requires_approval: Refuse invocation unless the session approves it

    Example:
        >>> @tool(
        ...     name="chrome_page_title",
        ...     description="Return the page title",
        ...     params=FetchPageParams,
        ... )
        ... async def page_title(service, params, session=None) -> str:
        ...     async with service.open_page(session, "chrome_page_title") as scope:
        ...         await scope.navigate(params.url)
        ...         return await scope.page.title()
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(service, params, session=None):
            try:
                return await func(service, params, session)
            except ToolError as e:
                raise e.for_operation(name)

        wrapper.tool_name = name

        _TOOL_REGISTRY[name] = ToolDefinition(
            name=name,
            description=description,
            params=params,
            function=wrapper,
            requires_approval=requires_approval,
        )
        return wrapper

    return decorator


def get_tool(name: str) -> Optional[ToolDefinition]:
    """Get a tool by name from the registry."""
    return _TOOL_REGISTRY.get(name)


def get_all_tools() -> dict[str, ToolDefinition]:
    """Get all registered tools."""
    return _TOOL_REGISTRY.copy()


def get_tool_schemas() -> list[dict[str, Any]]:
    """
    Get tool schemas in a format suitable for LLM function calling.

    Returns list of tool definitions with name, description, and input schema.
    """
    return [
        {
            "name": definition.name,
            "description": definition.description,
            "input_schema": definition.input_schema,
        }
        for definition in _TOOL_REGISTRY.values()
    ]


def _format_validation_error(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "arguments"
        problems.append(f"{location}: {item['msg']}")
    return "Invalid parameters: " + "; ".join(problems)


async def invoke_tool(
    name: str,
    arguments: dict[str, Any],
    service: "ChromeService",
    session: Optional["ToolSession"] = None,
) -> ToolResult:
    """
    Validate arguments, check approval and run a registered tool.

    Never raises for tool failures; every failure becomes a ToolResult with
    a single error string prefixed by the tool name.
    """
    definition = get_tool(name)
    if definition is None:
        return ToolResult(success=False, error=f"Unknown tool: {name}")

    metadata = {"tool": name, "arguments": arguments}

    try:
        params = definition.params.model_validate(arguments)
    except ValidationError as e:
        error = InvalidParametersError(_format_validation_error(e), name)
        return ToolResult(success=False, error=str(error), metadata=metadata)

    if definition.requires_approval:
        approve = session.approve if session is not None else None
        if approve is None or not approve(name, arguments):
            error = ApprovalRequiredError("Execution was not approved for this session", name)
            return ToolResult(success=False, error=str(error), metadata=metadata)

    try:
        data = await definition.function(service, params, session)
    except ToolError as e:
        logger.info("%s", e)
        return ToolResult(success=False, error=str(e.for_operation(name)), metadata=metadata)
    except Exception as e:
        logger.exception("[%s] unexpected failure", name)
        return ToolResult(success=False, error=f"[{name}] {e!s}", metadata=metadata)

    return ToolResult(success=True, data=data, metadata=metadata)
