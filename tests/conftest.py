"""Shared test fixtures."""
import json
from unittest.mock import Mock

import pytest

from config import GristConfig


def build_response(status_code=200, json_data=None, text=None, json_error=None):
    """Mock requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.url = "https://docs.getgrist.com/api/docs/doc123/tables/Users/records"
    response.text = text if text is not None else json.dumps(json_data)
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def make_response():
    """Factory for mocked HTTP responses."""
    return build_response


@pytest.fixture
def grist_config():
    """Config for a private Grist table."""
    return GristConfig(
        doc_id="doc123",
        table_id="Users",
        api_token="secret-token",
        api_base_url="https://docs.getgrist.com",
    )
