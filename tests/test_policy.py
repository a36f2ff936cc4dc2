"""Tests for the enabled policies and deployment settings."""
import pytest

from server_timing.config import Settings
from server_timing.policy import always_enabled, default_enabled_check, never_enabled
from server_timing.response import bind_deployment, current_deployment


class TestSettings:
    """Test Settings."""

    def test_development_defaults(self):
        s = Settings(ENVIRONMENT="development")
        assert s.is_production is False
        assert s.DEBUG is True
        assert s.server_timing_enabled is True
        assert s.SERVER_TIMING_TOTAL is True

    @pytest.mark.parametrize("environment", ["production", "staging", "Production"])
    def test_production_like(self, environment):
        """Production-like environments disable timing and DEBUG."""
        s = Settings(ENVIRONMENT=environment)
        assert s.is_production is True
        assert s.DEBUG is False
        assert s.server_timing_enabled is False

    def test_explicit_override(self):
        """SERVER_TIMING_ENABLED wins over the environment."""
        assert Settings(ENVIRONMENT="production", SERVER_TIMING_ENABLED=True).server_timing_enabled
        assert not Settings(ENVIRONMENT="development", SERVER_TIMING_ENABLED=False).server_timing_enabled


class TestDefaultEnabledCheck:
    """Test default_enabled_check()."""

    def test_no_request_context(self):
        """Disabled outside of request processing."""
        assert current_deployment() is None
        assert default_enabled_check() is False

    def test_development_deployment(self):
        with bind_deployment(Settings(ENVIRONMENT="development")):
            assert default_enabled_check() is True

    def test_production_deployment(self):
        with bind_deployment(Settings(ENVIRONMENT="production")):
            assert default_enabled_check() is False

    def test_binding_is_reset(self):
        with bind_deployment(Settings(ENVIRONMENT="development")):
            pass
        assert default_enabled_check() is False


class TestFixedPolicies:
    def test_always_and_never(self):
        assert always_enabled() is True
        assert never_enabled() is False
