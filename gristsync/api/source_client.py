"""Fetch records from the source JSON API."""
import logging
from typing import Any, Dict, List, Optional

import requests

from config import SourceApiConfig
from gristsync.errors.catalog import FETCH_FROM_SOURCE
from gristsync.errors.classifier import classify_error, format_error_short
from gristsync.errors.exceptions import HttpStatusError, SourceFetchError

logger = logging.getLogger(__name__)

# Keys under which list-wrapping APIs usually put their records
RECORD_LIST_KEYS = ("data", "results", "items")


def extract_records(payload: Any) -> List[Any]:
    """
    Pull the record list out of an API response body.

    Accepts a bare list, or an object holding the list under "data",
    "results" or "items". Anything else is treated as a single record.
    """
    if isinstance(payload, list):
        return payload

    if isinstance(payload, dict):
        for key in RECORD_LIST_KEYS:
            if isinstance(payload.get(key), list):
                return payload[key]

    return [payload]


class SourceApiClient:
    """Client for an arbitrary JSON API."""

    def __init__(self, config: SourceApiConfig, session: Optional[requests.Session] = None):
        """Initialize client."""
        self.config = config
        self.session = session or requests.Session()

    def _build_headers(self) -> Dict[str, str]:
        """Accept JSON, plus the auth header when a token is configured."""
        headers = {"Accept": "application/json"}
        if self.config.auth_token:
            header = self.config.auth_header or "Authorization"
            token = self.config.auth_token
            if header.lower() == "authorization" and not token.lower().startswith("bearer "):
                token = f"Bearer {token}"
            headers[header] = token
        return headers

    def fetch_records(self) -> List[Any]:
        """
        GET the source URL and return its records.

        Raises:
            SourceFetchError: With a diagnosis, if the request fails
        """
        try:
            response = self.session.get(
                self.config.url, headers=self._build_headers(), timeout=self.config.timeout
            )
            if not response.ok:
                raise HttpStatusError(response.status_code, response.text, url=self.config.url)
            payload = response.json()
        except Exception as e:
            diagnosis = classify_error(e, FETCH_FROM_SOURCE)
            logger.error(f"{diagnosis.title}: {diagnosis.technical_detail}")
            raise SourceFetchError(format_error_short(diagnosis), diagnosis=diagnosis) from e

        records = extract_records(payload)
        logger.info(f"Fetched {len(records)} record(s) from {self.config.url}")
        return records
