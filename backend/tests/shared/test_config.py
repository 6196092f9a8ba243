"""Tests for shared/config.py."""

import os
from unittest.mock import patch

from shared.config import Settings, get_settings


class TestSettings:
    def test_default_values(self):
        """Settings should have sensible defaults."""
        settings = Settings(_env_file=None)
        assert settings.app_name == "SparkTasks API"
        assert settings.app_version == "0.1.0"
        assert settings.debug is False
        assert settings.port == 8000
        assert settings.log_level == "INFO"

    def test_domain_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.default_section == "Inbox"
        assert settings.untitled_timer_description == "Untitled Action"
        assert settings.stopwatch_tick_interval == 0.01
        assert settings.connectivity_check_interval == 15.0

    def test_loads_from_env(self):
        """Settings should load from environment variables."""
        with patch.dict(os.environ, {"DEBUG": "true", "PORT": "9000", "DEFAULT_SECTION": "Today"}):
            settings = Settings(_env_file=None)
            assert settings.debug is True
            assert settings.port == 9000
            assert settings.default_section == "Today"

    def test_loads_supabase_config_from_env(self):
        with patch.dict(os.environ, {
            "SUPABASE_URL": "https://test.supabase.co",
            "SUPABASE_ANON_KEY": "anon",
            "SUPABASE_SERVICE_ROLE_KEY": "service",
            "SUPABASE_JWT_SECRET": "secret",
        }):
            settings = Settings(_env_file=None)
            assert settings.supabase_url == "https://test.supabase.co"
            assert settings.supabase_anon_key == "anon"
            assert settings.supabase_service_role_key == "service"
            assert settings.supabase_jwt_secret == "secret"


class TestGetSettings:
    def test_returns_cached_instance(self):
        get_settings.cache_clear()
        assert get_settings() is get_settings()
