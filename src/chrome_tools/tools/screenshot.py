"""
Screenshot Tools

Captures the visible viewport of a page as PNG.
"""

from ..browser import WaitCondition
from ..errors import InvalidParametersError, ToolError
from .base import tool
from .models import (
    MAX_SCREEN_WIDTH,
    MIN_SCREEN_WIDTH,
    SCREEN_HEIGHT,
    Screenshot,
    TakeScreenshotParams,
)

NAME = "chrome_take_screenshot"


def check_screen_width(width: int) -> int:
    """
    Reject widths outside [300, 1024].

    Out-of-range widths are an error, never clamped.
    """
    if not MIN_SCREEN_WIDTH <= width <= MAX_SCREEN_WIDTH:
        raise InvalidParametersError(
            f"screen_width must be between {MIN_SCREEN_WIDTH} and {MAX_SCREEN_WIDTH}, got {width}"
        )
    return width


@tool(
    name=NAME,
    description="Captures a visual screenshot of a web page at a specific width. Returns the image as base64 PNG data.",
    params=TakeScreenshotParams,
)
async def take_screenshot(service, params: TakeScreenshotParams, session=None) -> Screenshot:
    # model_construct() bypasses validation, so check again here
    width = check_screen_width(params.screen_width)
    viewport = {"width": width, "height": SCREEN_HEIGHT}

    async with service.open_page(session, NAME, viewport=viewport) as scope:
        await scope.navigate(params.url, WaitCondition.ALMOST_IDLE)

        scope.extracting()
        try:
            data = await scope.page.screenshot(type="png", full_page=False)
        except Exception as e:
            raise ToolError(f"Failed to take screenshot: {e!s}") from e

    return Screenshot(data=data, width=width, height=SCREEN_HEIGHT)
