"""Tests for the command-line interface."""
import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from main import cli

CLEAN_ENV = {
    "GRIST_DOC_ID": "",
    "GRIST_TABLE_ID": "",
    "GRIST_API_KEY": "",
    "GRIST_API_URL": "https://docs.getgrist.com",
    "SOURCE_API_URL": "",
    "SOURCE_API_HEADER": "Authorization",
    "SOURCE_API_TOKEN": "",
}

GRIST_ARGS = ["--grist-url", "https://docs.getgrist.com/doc/doc123", "--table-id", "Users"]


@pytest.fixture
def runner():
    return CliRunner()


class TestCli:
    """Test CLI commands."""

    def test_parse_url(self, runner):
        """Test parsing a Grist URL from the command line."""
        result = runner.invoke(cli, ["parse-url", "https://grist.example.com/o/org/doc/abc/p/2"], env=CLEAN_ENV)

        assert result.exit_code == 0
        assert "abc" in result.output
        assert "https://grist.example.com" in result.output

    def test_parse_url_invalid(self, runner):
        """Test exit code for a URL without a document id."""
        result = runner.invoke(cli, ["parse-url", "https://example.com/"], env=CLEAN_ENV)
        assert result.exit_code == 1

    def test_missing_table_id(self, runner):
        """Test that a missing table id is reported."""
        result = runner.invoke(cli, ["test-connection", "--doc-id", "doc123"], env=CLEAN_ENV)

        assert result.exit_code != 0
        assert "table id" in result.output

    def test_sync_dry_run(self, runner, make_response):
        """Test dry run prints records without posting them."""
        with patch("requests.Session.get", return_value=make_response(200, {"data": [{"id": 1, "name": "Alice"}]})), \
                patch("requests.Session.post") as mock_post:
            result = runner.invoke(
                cli,
                ["sync", "--source-url", "https://api.example.com/users", *GRIST_ARGS, "--dry-run"],
                env=CLEAN_ENV,
            )

        assert result.exit_code == 0, result.output
        assert "[DRY RUN]" in result.output
        assert "'api_id': 1" in result.output
        mock_post.assert_not_called()

    def test_sync_with_mapping_file(self, runner, make_response, tmp_path):
        """Test sync using mappings loaded from a file."""
        mapping_file = tmp_path / "mappings.json"
        mapping_file.write_text(json.dumps([{"grist_column": "Name", "api_field": "name"}]), encoding="utf-8")

        with patch("requests.Session.get", return_value=make_response(200, [{"id": 1, "name": "Alice"}])), \
                patch("requests.Session.post", return_value=make_response(200, {"records": [{"id": 5}]})) as mock_post:
            result = runner.invoke(
                cli,
                [
                    "sync",
                    "--source-url", "https://api.example.com/users",
                    *GRIST_ARGS,
                    "--no-auto-columns",
                    "--mappings", str(mapping_file),
                ],
                env=CLEAN_ENV,
            )

        assert result.exit_code == 0, result.output
        assert "1 record(s) inserted into Users" in result.output
        assert mock_post.call_args[1]["json"] == {"records": [{"fields": {"Name": "Alice"}}]}

    def test_sync_failure_shows_diagnosis(self, runner, make_response):
        """Test that a failed fetch prints the diagnosis."""
        with patch("requests.Session.get", return_value=make_response(503, text="down")):
            result = runner.invoke(
                cli,
                ["sync", "--source-url", "https://api.example.com/users", *GRIST_ARGS],
                env=CLEAN_ENV,
            )

        assert result.exit_code == 1
        assert "503 - Server error" in result.output
        assert "Solutions" in result.output

    def test_generate_mappings(self, runner, make_response, tmp_path):
        """Test generating a mapping file from a sample record."""
        output = tmp_path / "mappings.json"

        with patch("requests.Session.get", return_value=make_response(200, [{"id": 1, "user": {"email": "a@x.com"}}])):
            result = runner.invoke(
                cli,
                ["generate-mappings", "--source-url", "https://api.example.com/users", "-o", str(output)],
                env=CLEAN_ENV,
            )

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        columns = [m["grist_column"] for m in data["mappings"]]
        assert columns == ["api_id", "user", "user_email"]

    def test_validate_token(self, runner, make_response):
        """Test token validation on a private document."""
        with patch("requests.Session.get", return_value=make_response(401, text="")):
            result = runner.invoke(cli, ["validate-token", *GRIST_ARGS], env=CLEAN_ENV)

        assert result.exit_code == 1
        assert "API token required" in result.output

    def test_suggest(self, runner, make_response):
        """Test suggesting source fields for a query."""
        sample = [{"id": 1, "user": {"email": "a@x.com", "name": "Alice"}}]
        with patch("requests.Session.get", return_value=make_response(200, sample)):
            result = runner.invoke(
                cli,
                ["suggest", "email", "--source-url", "https://api.example.com/users"],
                env=CLEAN_ENV,
            )

        assert result.exit_code == 0, result.output
        assert "user.email" in result.output

    def test_columns(self, runner, make_response):
        """Test listing table columns."""
        payload = {"columns": [{"id": "Name", "fields": {"colId": "Name", "label": "Full name", "type": "Text"}}]}
        with patch("requests.Session.get", return_value=make_response(200, payload)):
            result = runner.invoke(cli, ["columns", *GRIST_ARGS], env=CLEAN_ENV)

        assert result.exit_code == 0, result.output
        assert "Full name" in result.output

    def test_columns_unexpected_body(self, runner, make_response):
        """Test a columns response that is not an object."""
        with patch("requests.Session.get", return_value=make_response(200, [1, 2])):
            result = runner.invoke(cli, ["columns", *GRIST_ARGS], env=CLEAN_ENV)

        assert result.exit_code == 1
        assert "Data format error" in result.output


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
