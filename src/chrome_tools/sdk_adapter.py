"""
SDK Adapter Layer

Exposes the Chrome tools to the Claude Agent SDK.
This module provides:
- tool_result_to_sdk_format(): Convert ToolResult to SDK response format
- adapt_tool_for_sdk(): Wrap a registered tool for the SDK
- create_chrome_server(): Create an in-process MCP server with all Chrome tools
"""

import json
from typing import Any, Optional

from claude_agent_sdk import create_sdk_mcp_server, tool as sdk_tool

from chrome_tools.service import ChromeService, ToolSession
from chrome_tools.tools.base import ToolDefinition, ToolResult, get_all_tools, invoke_tool


def tool_result_to_sdk_format(result: ToolResult) -> dict[str, Any]:
    """
    Convert ToolResult to SDK response format.

    Screenshots become image content blocks; everything else is JSON text.

    Args:
        result: ToolResult from invoke_tool()

    Returns:
        SDK-compatible response dict with content blocks and is_error flag
    """
    if not result.success:
        return {
            "content": [{"type": "text", "text": result.error or "Unknown error occurred"}],
            "is_error": True,
        }

    payload = result.to_payload()

    if isinstance(payload, dict) and payload.get("type") == "media":
        return {
            "content": [
                {"type": "image", "data": payload["data"], "mimeType": payload["mime_type"]}
            ],
            "is_error": False,
        }

    if payload is None:
        text = "Operation completed successfully"
    elif isinstance(payload, str):
        text = payload
    else:
        text = json.dumps(payload, indent=2, default=str)

    return {"content": [{"type": "text", "text": text}], "is_error": False}


def adapt_tool_for_sdk(
    definition: ToolDefinition,
    service: ChromeService,
    session: Optional[ToolSession] = None,
):
    """
    Wrap a registered tool as an SDK tool.

    Arguments are validated and approval is enforced by invoke_tool(), so
    the SDK sees exactly the same errors as any other host.
    """

    async def adapted_tool(args: dict[str, Any]) -> dict[str, Any]:
        result = await invoke_tool(definition.name, args, service, session)
        return tool_result_to_sdk_format(result)

    return sdk_tool(definition.name, definition.description, definition.input_schema)(adapted_tool)


def create_chrome_server(
    service: ChromeService,
    session: Optional[ToolSession] = None,
    server_name: str = "chrome",
    server_version: str = "1.0.0",
):
    """
    Create an MCP server with all Chrome tools.

    Tool naming convention: mcp__<server_name>__<tool_name>
    Example: mcp__chrome__chrome_fetch_page

    Args:
        service: ChromeService providing browsers
        session: Calling session (config overrides, approval callback)
        server_name: Name for the MCP server (default: "chrome")
        server_version: Version string (default: "1.0.0")

    Returns:
        SDK MCP server configuration to use with ClaudeAgentOptions

    Example:
        >>> server = create_chrome_server(ChromeService(), ToolSession(approve=lambda *_: True))
        >>> options = ClaudeAgentOptions(
        ...     mcp_servers={"chrome": server},
        ...     allowed_tools=get_allowed_tools()
        ... )
    """
    adapted_tools = [
        adapt_tool_for_sdk(definition, service, session)
        for definition in get_all_tools().values()
    ]

    return create_sdk_mcp_server(
        name=server_name,
        version=server_version,
        tools=adapted_tools,
    )


def get_allowed_tools(server_name: str = "chrome") -> list[str]:
    """
    Get list of allowed tool names for ClaudeAgentOptions.

    Returns tool names in the SDK format: mcp__<server_name>__<tool_name>
    """
    return [f"mcp__{server_name}__{name}" for name in get_all_tools().keys()]
