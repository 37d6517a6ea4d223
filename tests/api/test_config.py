"""Tests for configuration classes."""

import os
import pytest
from unittest.mock import patch


class TestCORSConfig:
    """Tests for CORSConfig class."""

    def test_cors_default_origins(self):
        """Test that default CORS origins are set correctly."""
        with patch.dict(os.environ, {}, clear=True):
            from config import CORSConfig

            config = CORSConfig()

            assert config.allowed_origins == ["http://localhost:8000"]

    def test_cors_parses_env_var(self):
        """Test that CORS origins are parsed and stripped."""
        env_origins = "  http://example.com , http://localhost:3000,,"
        with patch.dict(os.environ, {"CORS_ORIGINS": env_origins}):
            from config import _parse_cors_origins

            assert _parse_cors_origins() == ["http://example.com", "http://localhost:3000"]


class TestRateLimitConfig:
    """Tests for RateLimitConfig class."""

    def test_rate_limit_defaults(self):
        """Test default rate limit values."""
        with patch.dict(os.environ, {}, clear=True):
            from config import RateLimitConfig

            config = RateLimitConfig()

            assert config.enabled is True
            assert config.requests_per_minute == 60

    def test_rate_limit_from_env(self):
        """Test rate limit configuration from environment."""
        with patch.dict(
            os.environ,
            {"RATE_LIMIT_ENABLED": "FALSE", "RATE_LIMIT_RPM": "120"},
        ):
            from config import RateLimitConfig

            config = RateLimitConfig()

            assert config.enabled is False
            assert config.requests_per_minute == 120


class TestSecurityConfig:
    """Tests for SecurityConfig class."""

    def test_secret_key_auto_generates(self):
        """Test that a secret key is generated when not in env."""
        with patch.dict(os.environ, {}, clear=True):
            from config import SecurityConfig

            assert len(SecurityConfig().secret_key) > 0

    def test_secret_key_from_env(self):
        """Test that secret key is read from environment."""
        with patch.dict(os.environ, {"SECRET_KEY": "my-super-secret-key-12345"}):
            from config import SecurityConfig

            assert SecurityConfig().secret_key == "my-super-secret-key-12345"


class TestRedisConfig:
    """Tests for RedisConfig class."""

    def test_redis_url_without_password(self):
        """Test Redis URL generation without password."""
        with patch.dict(os.environ, {}, clear=True):
            from config import RedisConfig

            assert RedisConfig().url == "redis://localhost:6379/0"

    def test_redis_url_with_password(self):
        """Test Redis URL generation with password."""
        with patch.dict(
            os.environ,
            {"REDIS_PASSWORD": "mypass", "REDIS_HOST": "cache", "REDIS_DB": "2"},
            clear=True,
        ):
            from config import RedisConfig

            assert RedisConfig().url == "redis://:mypass@cache:6379/2"


class TestStoreConfig:
    """Tests for StoreConfig and LockConfig."""

    def test_store_defaults(self):
        """Test the in-memory store is the default backend."""
        with patch.dict(os.environ, {}, clear=True):
            from config import StoreConfig

            config = StoreConfig()

            assert config.backend == "memory"
            assert config.key_prefix == "blackjack:"
            assert config.session_ttl == 6 * 60 * 60

    def test_store_backend_from_env(self):
        """Test the backend name is read case-insensitively."""
        with patch.dict(os.environ, {"STORE_BACKEND": "Redis", "SESSION_TTL": "60"}):
            from config import StoreConfig

            config = StoreConfig()

            assert config.backend == "redis"
            assert config.session_ttl == 60

    def test_lock_from_env(self):
        """Test lock timings from environment."""
        with patch.dict(os.environ, {"LOCK_TTL_MS": "500", "LOCK_TIMEOUT_MS": "250"}):
            from config import LockConfig

            config = LockConfig()

            assert config.ttl_ms == 500
            assert config.timeout_ms == 250
            assert config.initial_backoff_ms <= config.max_backoff_ms


class TestAppConfig:
    """Tests for AppConfig class."""

    def test_app_config_defaults(self):
        """Test default AppConfig values."""
        with patch.dict(os.environ, {}, clear=True):
            from config import AppConfig

            config = AppConfig()

            assert config.debug is False
            assert config.host == "0.0.0.0"
            assert config.port == 8000
            assert config.log_level == "INFO"

    def test_log_level_from_env(self):
        """Test the log level is normalised to upper case."""
        with patch.dict(os.environ, {"LOG_LEVEL": "debug"}):
            from config import AppConfig

            assert AppConfig().log_level == "DEBUG"


class TestGameConfig:
    """Tests for GameConfig class."""

    def test_game_config_defaults(self):
        """Test default game configuration values."""
        from config import GameConfig

        config = GameConfig()

        assert config.num_decks == 6
        assert config.min_bet == 10
        assert config.blackjack_payout == 1.5
        assert config.dealer_hits_soft_17 is True
        assert config.starting_chips == 1000
        assert config.solo_bots == 2

    def test_game_config_frozen(self):
        """Test that GameConfig is frozen (immutable)."""
        from dataclasses import FrozenInstanceError

        from config import GameConfig

        config = GameConfig()

        with pytest.raises(FrozenInstanceError):
            config.num_decks = 8
