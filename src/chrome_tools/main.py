"""
chrome-tools CLI Entry Point

Runs a single Chrome tool from the command line.

Usage:
    chrome-tools search "python asyncio tutorial"
    chrome-tools text https://example.com --selector "#content"
    chrome-tools screenshot https://example.com --width 800 -o example.png
    chrome-tools --connect ws://127.0.0.1:9222/devtools/browser/<id> fetch https://example.com
"""

import argparse
import asyncio
import json
import logging
import sys
from contextlib import nullcontext
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from rich.prompt import Confirm

from chrome_tools.browser import BrowserConfig
from chrome_tools.config import configure_logging
from chrome_tools.service import ChromeService, ToolSession
from chrome_tools.tools import ToolResult, invoke_tool
from chrome_tools.tui import (
    get_console,
    print_data_result,
    print_error,
    print_extracted_text,
    print_result,
    print_search_results,
)

load_dotenv()


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="chrome-tools",
        description="Run Chrome browser tools from the command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    chrome-tools search "python asyncio" --country us
    chrome-tools news "open source"
    chrome-tools metadata https://example.com
    chrome-tools script ./title.js --navigate-to https://example.com
        """,
    )

    parser.add_argument(
        "--connect",
        metavar="WS_ENDPOINT",
        default=None,
        help="Connect to a running browser instead of launching one",
    )
    parser.add_argument(
        "--headful",
        action="store_true",
        help="Show the launched browser window",
    )
    parser.add_argument(
        "--executable-path",
        default=None,
        help="Chrome/Chromium binary to launch",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the raw result as JSON",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    search = commands.add_parser("search", help="Google web search")
    search.add_argument("query")
    search.add_argument("--country", default=None, help="Two-letter country code")

    news = commands.add_parser("news", help="Google News search")
    news.add_argument("query")
    news.add_argument("--country", default=None, help="Two-letter country code")

    fetch = commands.add_parser("fetch", help="Fetch a page as markdown")
    fetch.add_argument("url")
    fetch.add_argument("--render", action="store_true", help="Wait for network idle")

    text = commands.add_parser("text", help="Extract page text")
    text.add_argument("url")
    text.add_argument("--selector", default=None, help="CSS selector tried before article/main/body")
    text.add_argument("--timeout", type=int, default=30, help="Timeout in seconds (5-180)")
    text.add_argument("--markdown", action="store_true", help="Return markdown instead of flat text")

    metadata = commands.add_parser("metadata", help="Extract <head> and JSON-LD")
    metadata.add_argument("url")
    metadata.add_argument("--timeout", type=int, default=30, help="Timeout in seconds (5-180)")

    screenshot = commands.add_parser("screenshot", help="Capture a viewport screenshot")
    screenshot.add_argument("url")
    screenshot.add_argument("--width", type=int, default=1024, help="Viewport width (300-1024)")
    screenshot.add_argument("--output", "-o", default="screenshot.png", help="PNG file to write")

    script = commands.add_parser("script", help="Run a JavaScript function in a page")
    script.add_argument("file", help="File containing the function source, or - for stdin")
    script.add_argument("--navigate-to", default=None, help="URL to open first")
    script.add_argument("--timeout", type=int, default=30, help="Timeout in seconds (5-180)")
    script.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> BrowserConfig:
    """Environment defaults overridden by command line flags."""
    config = BrowserConfig.from_env()
    if args.connect:
        return replace(config, launch=False, ws_endpoint=args.connect)
    changes: dict[str, Any] = {}
    if args.headful:
        changes["headless"] = False
    if args.executable_path:
        changes["executable_path"] = args.executable_path
    return replace(config, launch=True, **changes)


def build_request(args: argparse.Namespace) -> tuple[str, dict[str, Any]]:
    """Map a subcommand to a tool name and its arguments."""
    if args.command == "search":
        return "chrome_search_web", {"query": args.query, "country_code": args.country}
    if args.command == "news":
        return "chrome_search_news", {"query": args.query, "country_code": args.country}
    if args.command == "fetch":
        return "chrome_fetch_page", {"url": args.url, "render": args.render}
    if args.command == "text":
        return "chrome_scrape_page_text", {
            "url": args.url,
            "selector": args.selector,
            "timeout_seconds": args.timeout,
            "as_markdown": args.markdown,
        }
    if args.command == "metadata":
        return "chrome_scrape_page_metadata", {"url": args.url, "timeout_seconds": args.timeout}
    if args.command == "screenshot":
        return "chrome_take_screenshot", {"url": args.url, "screen_width": args.width}
    if args.command == "script":
        source = sys.stdin.read() if args.file == "-" else Path(args.file).read_text()
        return "chrome_run_script", {
            "script": source,
            "navigate_to": args.navigate_to,
            "timeout_seconds": args.timeout,
        }
    raise ValueError(f"Unknown command: {args.command}")


def confirm_tool(auto_approve: bool):
    """Approval callback asking on the terminal unless pre-approved."""

    def approve(tool_name: str, arguments: dict[str, Any]) -> bool:
        if auto_approve:
            return True
        console = get_console()
        console.print_action(
            f"{tool_name} will run arbitrary code with full access to the browser page.",
            title="[CONFIRM]",
        )
        return Confirm.ask("Run the script?", default=False, console=console.console)

    return approve


def display_result(args: argparse.Namespace, result: ToolResult) -> None:
    """Render a successful result."""
    data = result.data

    if args.command == "screenshot":
        path = Path(args.output)
        path.write_bytes(data.data)
        print_result(f"Saved {data.width}x{data.height} screenshot to {path.absolute()}")
        return

    if args.json:
        print(json.dumps(result.to_payload(), indent=2, default=str))
        return

    if args.command == "search":
        rows = [item.model_dump() for item in data.organic]
        print_search_results(rows, ["position", "title", "link"], title="[SEARCH]")
    elif args.command == "news":
        rows = [item.model_dump() for item in data.news]
        print_search_results(rows, ["position", "title", "source", "date", "link"], title="[NEWS]")
    elif args.command == "fetch":
        print_extracted_text(data.markdown, source=data.url)
    elif args.command == "text":
        print_extracted_text(data.text, source=data.source_selector)
    elif args.command == "metadata":
        print_data_result(
            {
                "url": data.url,
                "head_html": data.head_html,
                "json_ld": json.dumps(data.json_ld, default=str),
            },
            title="[METADATA]",
        )
    elif args.command == "script":
        print_data_result(
            {"result": json.dumps(data.result, default=str), "logs": "\n".join(data.logs)},
            truncate=0,
            title="[SCRIPT]",
        )


async def run_command(args: argparse.Namespace) -> bool:
    """
    Run the requested tool and display its result.

    Returns:
        True if the tool succeeded, False otherwise
    """
    tool_name, arguments = build_request(args)
    service = ChromeService(build_config(args))
    session = ToolSession(
        session_id="cli",
        approve=confirm_tool(getattr(args, "yes", False)),
    )

    # The spinner would hide the approval prompt
    progress = nullcontext() if args.command == "script" else get_console().status(f"Running {tool_name}...")
    with progress:
        result = await invoke_tool(tool_name, arguments, service, session)

    if not result.success:
        print_error(result.error or "Unknown error", error_type=tool_name)
        return False

    display_result(args, result)
    return True


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    configure_logging(level=logging.DEBUG if args.verbose else None, verbose=args.verbose)

    try:
        success = asyncio.run(run_command(args))
    except KeyboardInterrupt:
        get_console().print("\n[yellow]Interrupted[/yellow]")
        return 130

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
