"""Tests for settings loading and logging setup."""

import logging
from unittest.mock import patch

import pytest

from teamthreads import observability
from teamthreads.errors import (
    AuthenticationError,
    AuthorizationError,
    InvalidCursorError,
    NoTeamSelectedError,
    NotFoundError,
    StateConflictError,
    TeamNotFoundError,
    TeamThreadsError,
    ThreadArchivedError,
)
from teamthreads.settings import Settings, load_settings


@pytest.mark.unit
class TestSettings:
    """Tests for Settings defaults and environment overrides."""

    def test_defaults(self, monkeypatch) -> None:
        monkeypatch.delenv("JWT_SECRET_KEY", raising=False)
        settings = Settings(_env_file=None)

        assert settings.jwt_algorithm == "HS256"
        assert settings.jwt_access_token_expire_minutes == 30
        assert settings.default_page_size == 20
        assert settings.logfire_service_name == "teamthreads"

    def test_environment_override(self, monkeypatch) -> None:
        monkeypatch.setenv("JWT_SECRET_KEY", "from-env")
        monkeypatch.setenv("MAX_PAGE_SIZE", "50")

        settings = load_settings()

        assert settings.jwt_secret_key == "from-env"
        assert settings.max_page_size == 50

    def test_invalid_value_wrapped_in_value_error(self, monkeypatch) -> None:
        monkeypatch.setenv("DATABASE_POOL_SIZE", "0")
        with pytest.raises(ValueError, match="Failed to load settings"):
            load_settings()


@pytest.mark.unit
class TestErrorTaxonomy:
    """Error families carry stable codes and HTTP statuses."""

    @pytest.mark.parametrize(
        "error_cls,family,status",
        [
            (AuthenticationError, TeamThreadsError, 401),
            (NoTeamSelectedError, AuthorizationError, 403),
            (TeamNotFoundError, NotFoundError, 404),
            (ThreadArchivedError, StateConflictError, 409),
            (InvalidCursorError, TeamThreadsError, 400),
        ],
    )
    def test_family_and_status(self, error_cls, family, status) -> None:
        error = error_cls()
        assert isinstance(error, family)
        assert error.http_status == status
        assert str(error) == error.message

    def test_custom_message_overrides_default(self) -> None:
        assert AuthenticationError("Token has expired").message == "Token has expired"


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_without_token_skips_logfire(self, test_settings) -> None:
        with patch.object(observability, "_logfire_configured", False):
            with patch("logfire.configure") as mock_configure:
                observability.configure_logging(test_settings)
                assert observability._logfire_configured is True

        mock_configure.assert_not_called()

    def test_with_token_configures_logfire_once(self, test_settings) -> None:
        test_settings.logfire_token = "token"
        root_handlers = list(logging.getLogger().handlers)

        try:
            with patch.object(observability, "_logfire_configured", False), patch(
                "logfire.configure"
            ) as mock_configure, patch(
                "logfire.LogfireLoggingHandler", return_value=logging.NullHandler()
            ):
                observability.configure_logging(test_settings)
                observability.configure_logging(test_settings)

            mock_configure.assert_called_once()
            assert mock_configure.call_args.kwargs["service_name"] == "teamthreads"
        finally:
            logging.getLogger().handlers[:] = root_handlers
