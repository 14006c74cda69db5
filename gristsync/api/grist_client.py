"""
Grist API client.

Inserts records into a Grist table, creating missing columns first, and
reports every failure through the error classifier.
"""
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlsplit

import requests

from config import DEFAULT_GRIST_API_URL, GristConfig
from gristsync.errors.catalog import SYNC_TO_DESTINATION
from gristsync.errors.classifier import classify_error, format_error_short
from gristsync.errors.exceptions import EmptyRecordsError, GristSyncError, HttpStatusError

logger = logging.getLogger(__name__)

# (message, level) with level one of "info", "success", "warning", "error"
LogSink = Callable[[str, str], None]

DOC_PATH_PATTERN = re.compile(r"/doc/([^/?#]+)")


@dataclass
class GristColumn:
    """A column of a Grist table."""

    id: str
    label: Optional[str] = None
    type: str = "Text"

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "GristColumn":
        """Build from a {id, fields: {label, type, colId}} object."""
        fields = data.get("fields") or {}
        return cls(
            id=fields.get("colId") or data.get("id", ""),
            label=fields.get("label"),
            type=fields.get("type") or "Text",
        )


@dataclass
class ParsedGristUrl:
    """Document id and API base URL read from a Grist document URL."""

    doc_id: Optional[str]
    api_base_url: Optional[str]

    @property
    def is_valid(self) -> bool:
        return self.doc_id is not None and self.api_base_url is not None


@dataclass
class TokenValidation:
    """Result of an API token check."""

    valid: bool
    message: str
    needs_auth: bool


def parse_grist_url(url: str) -> ParsedGristUrl:
    """
    Parse a Grist document URL.

    Examples:
        parse_grist_url("https://docs.getgrist.com/doc/abc123xyz")
        # ParsedGristUrl(doc_id="abc123xyz", api_base_url="https://docs.getgrist.com")

        parse_grist_url("https://grist.example.com/o/myorg/doc/myDocId/p/5")
        # ParsedGristUrl(doc_id="myDocId", api_base_url="https://grist.example.com")
    """
    try:
        parts = urlsplit((url or "").strip())
    except ValueError:
        return ParsedGristUrl(None, None)

    if not parts.scheme or not parts.netloc:
        return ParsedGristUrl(None, None)

    match = DOC_PATH_PATTERN.search(parts.path)
    if not match:
        return ParsedGristUrl(None, None)

    return ParsedGristUrl(doc_id=match.group(1), api_base_url=f"{parts.scheme}://{parts.netloc}")


def is_valid_grist_url(url: str) -> bool:
    """True if the URL holds a document id."""
    return parse_grist_url(url).is_valid


class GristClient:
    """Client for one table of a Grist document."""

    DEFAULT_COLUMN_TYPE = "Text"
    TYPE_SAMPLE_SIZE = 10
    DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}")

    def __init__(
        self,
        config: GristConfig,
        on_log: Optional[LogSink] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize client.

        Args:
            config: Grist destination config (read, never modified)
            on_log: Optional progress sink called as on_log(message, level)
            session: HTTP session to reuse
        """
        self.config = config
        self.on_log = on_log
        self.session = session or requests.Session()

    def _log(self, message: str, level: str = "info") -> None:
        """Send a message to the progress sink, if any."""
        if self.on_log is None:
            return
        try:
            self.on_log(message, level)
        except Exception as e:
            logger.debug(f"Log sink failed: {e}")

    def _build_api_url(self, endpoint: str) -> str:
        """Full table URL for an endpoint such as "/records"."""
        base_url = (self.config.api_base_url or DEFAULT_GRIST_API_URL).rstrip("/")
        return f"{base_url}/api/docs/{self.config.doc_id}/tables/{self.config.table_id}{endpoint}"

    def _build_headers(self) -> Dict[str, str]:
        """JSON headers, plus a bearer token when one is configured."""
        headers = {"Content-Type": "application/json"}
        if self.config.api_token:
            headers["Authorization"] = f"Bearer {self.config.api_token}"
        return headers

    @staticmethod
    def _check_response(response: requests.Response) -> None:
        if not response.ok:
            raise HttpStatusError(response.status_code, response.text, url=response.url)

    @staticmethod
    def _json_object(response: requests.Response) -> Dict[str, Any]:
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in the response, got {type(data).__name__}")
        return data

    def _classified(self, error: Exception, log: bool) -> GristSyncError:
        """Turn a failure into a GristSyncError with an actionable message."""
        diagnosis = classify_error(error, SYNC_TO_DESTINATION)
        if log:
            self._log(f"{diagnosis.title}: {diagnosis.message}", "error")
            if diagnosis.remediation_steps:
                self._log(f"💡 {diagnosis.remediation_steps[0]}", "error")
            logger.error(f"{diagnosis.title}: {diagnosis.technical_detail}")
        return GristSyncError(format_error_short(diagnosis), diagnosis=diagnosis)

    def add_records(self, records: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Insert records into the table.

        Args:
            records: Flat records keyed by Grist column name

        Returns:
            Grist's response, e.g. {"records": [{"id": 10}, {"id": 11}]}

        Raises:
            EmptyRecordsError: If there is nothing to insert
            GristSyncError: If the request fails

        Example:
            client = GristClient(config)
            client.add_records([
                {"Name": "Alice", "Email": "alice@example.com"},
                {"Name": "Bob", "Email": "bob@example.com"},
            ])
        """
        if not records:
            raise EmptyRecordsError()

        if self.config.auto_create_columns is not False:
            self.ensure_columns_exist(records)

        url = self._build_api_url("/records")
        body = {"records": [{"fields": fields} for fields in records]}

        try:
            response = self.session.post(
                url, json=body, headers=self._build_headers(), timeout=self.config.timeout
            )
            self._check_response(response)
            result = response.json()
        except Exception as e:
            raise self._classified(e, log=True) from e

        logger.info(f"Inserted {len(records)} record(s) into {self.config.table_id}")
        return result

    def get_records(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Fetch existing records of the table.

        Args:
            limit: Maximum number of records to fetch

        Raises:
            GristSyncError: If the request fails
        """
        params = {"limit": limit} if limit else None

        try:
            response = self.session.get(
                self._build_api_url("/records"),
                params=params,
                headers=self._build_headers(),
                timeout=self.config.timeout,
            )
            self._check_response(response)
            records = self._json_object(response).get("records") or []
        except Exception as e:
            raise self._classified(e, log=False) from e

        return records

    def get_columns(self) -> List[GristColumn]:
        """
        Fetch the columns of the table.

        Raises:
            GristSyncError: If the request fails
        """
        try:
            response = self.session.get(
                self._build_api_url("/columns"),
                headers=self._build_headers(),
                timeout=self.config.timeout,
            )
            self._check_response(response)
            data = self._json_object(response)
            columns = [GristColumn.from_api(column) for column in data.get("columns") or []]
        except Exception as e:
            raise self._classified(e, log=False) from e

        return columns

    def add_columns(self, columns: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Create columns in the table.

        Args:
            columns: [{"id": ..., "label": optional, "type": optional}]; type
                defaults to Text and label to the id

        Raises:
            GristSyncError: If the request fails
        """
        if not columns:
            return {"columns": []}

        body = {
            "columns": [
                {
                    "id": column["id"],
                    "fields": {
                        "colId": column["id"],
                        "label": column.get("label") or column["id"],
                        "type": column.get("type") or self.DEFAULT_COLUMN_TYPE,
                    },
                }
                for column in columns
            ]
        }

        try:
            response = self.session.post(
                self._build_api_url("/columns"),
                json=body,
                headers=self._build_headers(),
                timeout=self.config.timeout,
            )
            self._check_response(response)
            return response.json()
        except Exception as e:
            raise self._classified(e, log=True) from e

    def ensure_columns_exist(self, records: List[Dict[str, Any]]) -> None:
        """
        Create the columns the records need but the table lacks.

        Never raises: a user may be allowed to add rows without being allowed
        to add columns, so failures are logged as warnings and the insertion
        goes on with the existing columns.
        """
        if not records:
            return

        try:
            self._log("🔍 Checking existing columns...", "info")
            existing_columns = self.get_columns()
            existing_ids = {column.id for column in existing_columns}
            self._log(f"✓ {len(existing_columns)} existing column(s) found", "success")

            required: List[str] = []
            for record in records:
                for key in record:
                    if key not in required:
                        required.append(key)

            missing = [column_id for column_id in required if column_id not in existing_ids]

            if not missing:
                self._log("✓ All required columns already exist", "success")
                return

            self._log(f"➕ Creating {len(missing)} missing column(s): {', '.join(missing)}", "info")
            self.add_columns(
                [
                    {"id": column_id, "label": column_id, "type": self.infer_column_type(records, column_id)}
                    for column_id in missing
                ]
            )
            self._log("✅ Columns created", "success")
        except Exception as e:
            self._log(f"⚠️ Automatic column creation failed: {e}", "warning")
            logger.warning(f"Automatic column creation failed: {e}")

    def infer_column_type(self, records: List[Dict[str, Any]], column_name: str) -> str:
        """
        Guess a Grist column type from the first non-null value.

        Only the first TYPE_SAMPLE_SIZE records are looked at.
        """
        for record in records[: self.TYPE_SAMPLE_SIZE]:
            value = record.get(column_name)
            if value is None:
                continue

            if isinstance(value, bool):
                return "Bool"

            if isinstance(value, int):
                return "Int"

            if isinstance(value, float):
                return "Int" if value.is_integer() else "Numeric"

            if isinstance(value, str) and self.DATE_PATTERN.match(value):
                return "DateTime"

            return self.DEFAULT_COLUMN_TYPE

        return self.DEFAULT_COLUMN_TYPE

    def test_connection(self) -> bool:
        """True if the table can be read."""
        try:
            self.get_records(1)
            return True
        except Exception as e:
            logger.debug(f"Connection test failed: {e}")
            return False

    def validate_api_token(self) -> TokenValidation:
        """Check the configured token against the records endpoint."""
        try:
            response = self.session.get(
                self._build_api_url("/records"),
                params={"limit": 1},
                headers=self._build_headers(),
                timeout=self.config.timeout,
            )
        except Exception as e:
            return TokenValidation(valid=False, message=str(e) or "Connection error", needs_auth=False)

        if response.status_code == 401:
            return TokenValidation(valid=False, message="Private document - API token required", needs_auth=True)

        if response.status_code == 403:
            return TokenValidation(
                valid=False, message="Invalid API token or insufficient permissions", needs_auth=True
            )

        if response.ok:
            if self.config.api_token:
                return TokenValidation(valid=True, message="API token valid and authenticated", needs_auth=False)
            return TokenValidation(valid=True, message="Public document - no authentication required", needs_auth=False)

        return TokenValidation(valid=False, message=f"HTTP error {response.status_code}", needs_auth=False)


def insert_records_to_grist(records: List[Dict[str, Any]], config: GristConfig) -> Dict[str, Any]:
    """
    Insert records with a one-off client.

    Example:
        insert_records_to_grist(
            [{"Name": "Alice", "Email": "alice@example.com"}],
            GristConfig(doc_id="abc123", table_id="Users"),
        )
    """
    return GristClient(config).add_records(records)
