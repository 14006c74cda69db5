"""Tests for the source API client."""
from unittest.mock import patch

import pytest
import requests

from config import SourceApiConfig
from gristsync.api.source_client import SourceApiClient, extract_records
from gristsync.errors.catalog import ErrorKind
from gristsync.errors.exceptions import SourceFetchError

SOURCE_URL = "https://api.example.com/users"


class TestExtractRecords:
    """Test unwrapping of API response bodies."""

    def test_bare_list(self):
        """Test a bare list body."""
        assert extract_records([{"id": 1}]) == [{"id": 1}]

    @pytest.mark.parametrize("key", ["data", "results", "items"])
    def test_wrapped_list(self, key):
        """Test list bodies wrapped under a key."""
        assert extract_records({key: [{"id": 1}], "total": 1}) == [{"id": 1}]

    def test_single_object(self):
        """Test a single object body."""
        assert extract_records({"id": 1, "name": "Alice"}) == [{"id": 1, "name": "Alice"}]

    def test_wrapper_key_not_a_list(self):
        """Test a wrapper key holding an object."""
        assert extract_records({"data": {"id": 1}}) == [{"data": {"id": 1}}]


class TestSourceApiClient:
    """Test fetching from the source API."""

    @patch("requests.Session.get")
    def test_fetch_records(self, mock_get, make_response):
        """Test fetching records."""
        mock_get.return_value = make_response(200, {"results": [{"id": 1}, {"id": 2}]})

        records = SourceApiClient(SourceApiConfig(url=SOURCE_URL)).fetch_records()

        assert records == [{"id": 1}, {"id": 2}]
        assert mock_get.call_args[0][0] == SOURCE_URL
        assert "Authorization" not in mock_get.call_args[1]["headers"]

    @patch("requests.Session.get")
    def test_bearer_token(self, mock_get, make_response):
        """Test the bearer prefix on the default header."""
        mock_get.return_value = make_response(200, [])

        SourceApiClient(SourceApiConfig(url=SOURCE_URL, auth_token="abc")).fetch_records()

        assert mock_get.call_args[1]["headers"]["Authorization"] == "Bearer abc"

    @patch("requests.Session.get")
    def test_custom_header(self, mock_get, make_response):
        """Test a custom auth header."""
        mock_get.return_value = make_response(200, [])

        SourceApiClient(SourceApiConfig(url=SOURCE_URL, auth_header="X-API-Key", auth_token="abc")).fetch_records()

        assert mock_get.call_args[1]["headers"]["X-API-Key"] == "abc"

    @patch("requests.Session.get")
    def test_http_error_uses_source_wording(self, mock_get, make_response):
        """Test HTTP failures use source wording."""
        mock_get.return_value = make_response(404, text="no such endpoint")

        with pytest.raises(SourceFetchError) as exc_info:
            SourceApiClient(SourceApiConfig(url=SOURCE_URL)).fetch_records()

        diagnosis = exc_info.value.diagnosis
        assert diagnosis.kind == ErrorKind.NOT_FOUND
        assert str(exc_info.value) == "Document, table or URL not found - Check that the backend URL is correct"

    @patch("requests.Session.get")
    def test_network_error(self, mock_get):
        """Test network failures."""
        mock_get.side_effect = requests.ConnectionError("Connection refused")

        with pytest.raises(SourceFetchError) as exc_info:
            SourceApiClient(SourceApiConfig(url=SOURCE_URL)).fetch_records()

        assert exc_info.value.diagnosis.kind == ErrorKind.NETWORK


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
