"""
Browser Module

Playwright browser acquisition and per-call page scoping.
"""

from .controller import BrowserConfig, BrowserHandle, BrowserProvider
from .session import OperationState, PageSession, WaitCondition

__all__ = [
    "BrowserConfig",
    "BrowserHandle",
    "BrowserProvider",
    "OperationState",
    "PageSession",
    "WaitCondition",
]
