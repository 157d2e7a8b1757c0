"""
Unit tests for the command line interface.
"""

import pytest

from chrome_tools.main import build_config, build_request, confirm_tool, parse_args

from conftest import REMOTE_ENDPOINT


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("CHROME_LAUNCH", "CHROME_HEADLESS", "CHROME_EXECUTABLE_PATH", "CHROME_WS_ENDPOINT"):
        monkeypatch.delenv(name, raising=False)


class TestBuildConfig:

    def test_default_launches_headless(self):
        config = build_config(parse_args(["fetch", "https://example.com"]))
        assert config.launch is True
        assert config.headless is True

    def test_connect_flag(self):
        config = build_config(parse_args(["--connect", REMOTE_ENDPOINT, "fetch", "https://example.com"]))
        assert config.launch is False
        assert config.ws_endpoint == REMOTE_ENDPOINT

    def test_headful_with_executable(self):
        args = parse_args(["--headful", "--executable-path", "/usr/bin/chromium", "search", "python"])

        config = build_config(args)

        assert config.headless is False
        assert config.launch_options() == {"headless": False, "executable_path": "/usr/bin/chromium"}


class TestBuildRequest:

    def test_search(self):
        args = parse_args(["search", "python asyncio", "--country", "us"])
        assert build_request(args) == (
            "chrome_search_web",
            {"query": "python asyncio", "country_code": "us"},
        )

    def test_text(self):
        args = parse_args(["text", "https://example.com", "--selector", "#content", "--markdown"])
        assert build_request(args) == (
            "chrome_scrape_page_text",
            {"url": "https://example.com", "selector": "#content", "timeout_seconds": 30, "as_markdown": True},
        )

    def test_screenshot(self):
        args = parse_args(["screenshot", "https://example.com", "--width", "640"])
        assert build_request(args) == (
            "chrome_take_screenshot",
            {"url": "https://example.com", "screen_width": 640},
        )

    def test_script_from_file(self, tmp_path):
        source = tmp_path / "title.js"
        source.write_text("() => document.title")
        args = parse_args(["script", str(source), "--navigate-to", "https://example.com", "--timeout", "10"])

        assert build_request(args) == (
            "chrome_run_script",
            {"script": "() => document.title", "navigate_to": "https://example.com", "timeout_seconds": 10},
        )

    def test_command_required(self):
        with pytest.raises(SystemExit):
            parse_args([])


class TestConfirmTool:

    def test_auto_approve(self):
        assert confirm_tool(True)("chrome_run_script", {}) is True

    def test_prompt_answer_is_used(self, monkeypatch):
        monkeypatch.setattr("chrome_tools.main.Confirm.ask", lambda *args, **kwargs: False)
        assert confirm_tool(False)("chrome_run_script", {"script": "() => 1"}) is False
