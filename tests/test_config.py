"""Unit tests for configuration."""

import os
from unittest.mock import patch

from page_loader.config import Settings, get_settings


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self) -> None:
        s = Settings()
        assert s.timeout_total == 30.0
        assert s.follow_redirects is True
        assert s.show_progress is False
        assert s.max_concurrency is None
        assert s.page_max_attempts == 1
        assert s.verbose is False

    def test_env_prefix(self) -> None:
        with patch.dict(os.environ, {"PAGE_LOADER_TIMEOUT_TOTAL": "60.0"}):
            s = Settings()
            assert s.timeout_total == 60.0

    def test_env_concurrency_and_verbose(self) -> None:
        env = {"PAGE_LOADER_MAX_CONCURRENCY": "4", "PAGE_LOADER_VERBOSE": "true"}
        with patch.dict(os.environ, env):
            s = get_settings()
            assert s.max_concurrency == 4
            assert s.verbose is True

    def test_user_agent_default(self) -> None:
        s = Settings()
        assert "page-loader" in s.user_agent
