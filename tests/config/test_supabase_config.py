"""
Tests for cognita_gateway/config/supabase_config.py
"""

import logging
from unittest.mock import MagicMock, patch

from cognita_gateway.config.supabase_config import (
    close_supabase_client,
    get_supabase_client_for_token,
    log_configuration_status,
)


class TestGetSupabaseClientForToken:
    def test_returns_none_when_not_configured(self, settings):
        with patch("cognita_gateway.config.supabase_config.create_client") as mock_create:
            assert get_supabase_client_for_token(settings, "jwt") is None
        mock_create.assert_not_called()

    def test_builds_client_with_caller_token(self, supabase_settings):
        mock_client = MagicMock()
        with patch(
            "cognita_gateway.config.supabase_config.create_client", return_value=mock_client
        ) as mock_create:
            client = get_supabase_client_for_token(supabase_settings, "caller-jwt")

        assert client is mock_client
        kwargs = mock_create.call_args.kwargs
        assert kwargs["supabase_url"] == "https://test.supabase.co"
        assert kwargs["supabase_key"] == "anon-key"
        assert kwargs["options"].headers["Authorization"] == "Bearer caller-jwt"
        mock_client.postgrest.auth.assert_called_once_with("caller-jwt")

    def test_anonymous_client_keeps_anon_key(self, supabase_settings):
        mock_client = MagicMock()
        with patch(
            "cognita_gateway.config.supabase_config.create_client", return_value=mock_client
        ) as mock_create:
            get_supabase_client_for_token(supabase_settings, None)

        assert "Authorization" not in mock_create.call_args.kwargs["options"].headers
        mock_client.postgrest.auth.assert_not_called()


class TestCloseSupabaseClient:
    def test_closes_postgrest_and_auth_pools(self):
        client = MagicMock()

        close_supabase_client(client)

        client.postgrest.session.close.assert_called_once()
        client.auth._http_client.close.assert_called_once()

    def test_close_failure_is_logged(self, caplog):
        client = MagicMock()
        client.postgrest.session.close.side_effect = RuntimeError("already closed")

        with caplog.at_level(logging.WARNING):
            close_supabase_client(client)

        assert "Failed to close Supabase postgrest client" in caplog.text
        client.auth._http_client.close.assert_called_once()


class TestLogConfigurationStatus:
    def test_warns_when_missing(self, settings, caplog):
        with caplog.at_level(logging.WARNING):
            assert log_configuration_status(settings) is False
        assert "SUPABASE_URL" in caplog.text
        assert "SUPABASE_ANON_KEY" in caplog.text

    def test_configured(self, supabase_settings):
        assert log_configuration_status(supabase_settings) is True
