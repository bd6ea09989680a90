"""Tests for src/database/client.py — client factory and retry helper."""

from unittest.mock import MagicMock, patch

import pytest
from httpx import RemoteProtocolError

from src.database import client as client_module
from src.database.client import with_retry


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("src.database.client.time.sleep") as sleep:
        yield sleep


class TestWithRetry:
    def test_returns_first_success(self):
        fn = MagicMock(return_value=42)
        assert with_retry(fn, 1, key="x") == 42
        fn.assert_called_once_with(1, key="x")

    @patch("src.database.client.get_supabase_client")
    def test_retries_transient_error(self, mock_get_client, no_sleep):
        fn = MagicMock(side_effect=[RemoteProtocolError("dropped"), "ok"])

        assert with_retry(fn) == "ok"
        assert fn.call_count == 2
        mock_get_client.cache_clear.assert_called_once()
        no_sleep.assert_called_once_with(client_module.RETRY_DELAY)

    @patch("src.database.client.get_supabase_client")
    def test_gives_up_after_retries(self, mock_get_client):
        fn = MagicMock(side_effect=ConnectionError("down"))

        with pytest.raises(ConnectionError):
            with_retry(fn, retries=2)
        assert fn.call_count == 3

    def test_other_errors_propagate_immediately(self):
        fn = MagicMock(side_effect=ValueError("bad input"))

        with pytest.raises(ValueError, match="bad input"):
            with_retry(fn)
        fn.assert_called_once()

    @patch("src.database.client.get_supabase_client")
    def test_zero_retries(self, mock_get_client):
        fn = MagicMock(side_effect=OSError("reset"))

        with pytest.raises(OSError):
            with_retry(fn, retries=0)
        mock_get_client.cache_clear.assert_not_called()


class TestGetSupabaseClient:
    @patch("src.database.client.create_client")
    @patch("src.database.client.get_settings")
    def test_cached(self, mock_settings, mock_create):
        mock_settings.return_value.supabase_url = "https://example.supabase.co"
        mock_settings.return_value.supabase_anon_key = "anon"
        client_module.get_supabase_client.cache_clear()
        try:
            first = client_module.get_supabase_client()
            second = client_module.get_supabase_client()
        finally:
            client_module.get_supabase_client.cache_clear()

        assert first is second
        mock_create.assert_called_once_with("https://example.supabase.co", "anon")
