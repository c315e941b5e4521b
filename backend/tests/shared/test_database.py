"""Tests for shared/database.py."""

import pytest
from unittest.mock import patch, MagicMock

from shared.database import (
    get_database,
    get_mongo_client,
    reset_client_cache,
)


def configure(mock_settings, **overrides):
    values = {
        "mongo_uri": "mongodb://localhost:27017",
        "mongo_db_name": "wegonice",
        "mongo_user": "",
        "mongo_password": "",
        "mongo_auth_source": "",
        "db_operation_timeout": 10.0,
    }
    values.update(overrides)
    for key, value in values.items():
        setattr(mock_settings.return_value, key, value)


class TestMongoClient:
    def setup_method(self):
        """Reset cache before each test."""
        reset_client_cache()

    def teardown_method(self):
        reset_client_cache()

    @patch("shared.database.MongoClient")
    @patch("shared.database.get_settings")
    def test_get_mongo_client_creates_client(self, mock_settings, mock_client_cls):
        """Should create a timezone-aware client without credentials."""
        configure(mock_settings)

        client = get_mongo_client()

        mock_client_cls.assert_called_once_with(
            "mongodb://localhost:27017",
            tz_aware=True,
            serverSelectionTimeoutMS=10000,
        )
        assert client is mock_client_cls.return_value

    @patch("shared.database.MongoClient")
    @patch("shared.database.get_settings")
    def test_get_mongo_client_passes_credentials(self, mock_settings, mock_client_cls):
        """Should authenticate against the database when a user is configured."""
        configure(mock_settings, mongo_user="admin", mongo_password="secret")

        get_mongo_client()

        kwargs = mock_client_cls.call_args.kwargs
        assert kwargs["username"] == "admin"
        assert kwargs["password"] == "secret"
        assert kwargs["authSource"] == "wegonice"

    @patch("shared.database.MongoClient")
    @patch("shared.database.get_settings")
    def test_get_mongo_client_uses_auth_source(self, mock_settings, mock_client_cls):
        """An explicit auth source should override the database name."""
        configure(mock_settings, mongo_user="admin", mongo_password="secret", mongo_auth_source="admin")

        get_mongo_client()

        assert mock_client_cls.call_args.kwargs["authSource"] == "admin"

    @patch("shared.database.MongoClient")
    @patch("shared.database.get_settings")
    def test_get_mongo_client_caches_client(self, mock_settings, mock_client_cls):
        """Should cache the client and not recreate it."""
        configure(mock_settings)

        client1 = get_mongo_client()
        client2 = get_mongo_client()

        mock_client_cls.assert_called_once()
        assert client1 is client2

    @patch("shared.database.get_settings")
    def test_get_mongo_client_raises_without_uri(self, mock_settings):
        """Should raise if the URI is missing."""
        configure(mock_settings, mongo_uri="")

        with pytest.raises(RuntimeError, match="configuration missing"):
            get_mongo_client()

    @patch("shared.database.get_settings")
    def test_get_mongo_client_raises_without_db_name(self, mock_settings):
        """Should raise if the database name is missing."""
        configure(mock_settings, mongo_db_name="")

        with pytest.raises(RuntimeError, match="configuration missing"):
            get_mongo_client()


class TestGetDatabase:
    def setup_method(self):
        reset_client_cache()

    def teardown_method(self):
        reset_client_cache()

    @patch("shared.database.MongoClient")
    @patch("shared.database.get_settings")
    def test_get_database_selects_configured_name(self, mock_settings, mock_client_cls):
        """Should index the client by the configured database name."""
        configure(mock_settings)
        mock_client = MagicMock()
        mock_client_cls.return_value = mock_client

        db = get_database()

        mock_client.__getitem__.assert_called_once_with("wegonice")
        assert db is mock_client.__getitem__.return_value


class TestResetClientCache:
    def setup_method(self):
        reset_client_cache()

    @patch("shared.database.MongoClient")
    @patch("shared.database.get_settings")
    def test_reset_client_cache_closes_client(self, mock_settings, mock_client_cls):
        """Should close the cached client and allow new client creation."""
        configure(mock_settings)
        mock_client_cls.side_effect = [MagicMock(name="client1"), MagicMock(name="client2")]

        client1 = get_mongo_client()
        reset_client_cache()
        client2 = get_mongo_client()

        client1.close.assert_called_once()
        assert client1 is not client2
        assert mock_client_cls.call_count == 2
        reset_client_cache()

    def test_reset_without_client_is_noop(self):
        """Resetting an empty cache should not raise."""
        reset_client_cache()
        reset_client_cache()
