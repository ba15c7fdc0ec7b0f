"""Tests for the process entry point."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from finscrape.__main__ import main, run


class TestEntryPoint:
    @patch("finscrape.__main__.PlaywrightBrowser.launch", new_callable=AsyncMock)
    def test_browser_launch_failure_is_fatal(self, mock_launch, test_config):
        mock_launch.side_effect = RuntimeError("Executable doesn't exist")
        assert asyncio.run(run(test_config)) == 1

    @patch("finscrape.__main__.ScraperEngine")
    @patch("finscrape.__main__.PlaywrightBrowser.launch", new_callable=AsyncMock)
    def test_engine_started_after_launch(self, mock_launch, mock_engine_cls, test_config):
        mock_engine_cls.return_value.start = AsyncMock()

        assert asyncio.run(run(test_config)) == 0
        mock_engine_cls.return_value.start.assert_awaited_once()

    def test_missing_config_exits(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("FINSCRAPE_CONFIG_PATH", str(tmp_path / "nope.yaml"))
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1
