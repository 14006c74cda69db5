"""
Static diagnosis texts, keyed by error kind and call-site context.

Texts may hold a "{status}" placeholder filled with the HTTP status code.
"""
from enum import Enum
from typing import Dict, List, TypedDict

FETCH_FROM_SOURCE = "fetch-from-source"
SYNC_TO_DESTINATION = "sync-to-destination"
GENERAL = "general"

CONTEXTS = (FETCH_FROM_SOURCE, SYNC_TO_DESTINATION, GENERAL)


class ErrorKind(str, Enum):
    """Kind of failure found by the classifier."""

    CORS = "cors"
    NETWORK = "network"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    UNPROCESSABLE = "unprocessable"
    SERVER_ERROR = "server_error"
    INVALID_JSON = "invalid_json"
    TIMEOUT = "timeout"
    UNKNOWN_HTTP = "unknown_http"
    UNKNOWN = "unknown"


class CatalogEntry(TypedDict):
    title: str
    message: str
    explanation: str
    remediation: List[str]


def _same_for_all(entry: CatalogEntry) -> Dict[str, CatalogEntry]:
    return {context: entry for context in CONTEXTS}


CATALOG: Dict[ErrorKind, Dict[str, CatalogEntry]] = {
    ErrorKind.CORS: {
        FETCH_FROM_SOURCE: {
            "title": "CORS error (Cross-Origin Resource Sharing)",
            "message": "The request was blocked by the cross-origin policy",
            "explanation": (
                "Your backend does not accept requests from this origin. "
                "Browsers and proxies block cross-origin requests for security reasons."
            ),
            "remediation": [
                "Configure your backend to allow CORS requests from this origin",
                "Add the appropriate CORS headers: Access-Control-Allow-Origin",
                "For local development, use a proxy or configure your server",
                "Avoid disabling CORS checks in production",
            ],
        },
        SYNC_TO_DESTINATION: {
            "title": "CORS error (Cross-Origin Resource Sharing)",
            "message": "The request was blocked by the cross-origin policy",
            "explanation": "The Grist API does not accept requests from this origin.",
            "remediation": [
                "Check that the Grist API URL points to the document's server, not a proxy",
                "For self-hosted Grist, allow this origin in the server's CORS settings",
                "For local development, use a proxy or configure your server",
                "Avoid disabling CORS checks in production",
            ],
        },
        GENERAL: {
            "title": "CORS error (Cross-Origin Resource Sharing)",
            "message": "The request was blocked by the cross-origin policy",
            "explanation": "The remote API does not accept requests from this origin.",
            "remediation": [
                "Configure the remote server to allow CORS requests from this origin",
                "Add the appropriate CORS headers: Access-Control-Allow-Origin",
                "Avoid disabling CORS checks in production",
            ],
        },
    },
    ErrorKind.NETWORK: _same_for_all({
        "title": "Network connection error",
        "message": "Unable to connect to the server",
        "explanation": (
            "The server cannot be reached. The internet connection may be down, "
            "the URL may be wrong, or the server may be offline."
        ),
        "remediation": [
            "Check your internet connection",
            "Check that the URL is correct and reachable",
            "Check that the server is online",
            "Check that no firewall is blocking the connection",
        ],
    }),
    ErrorKind.UNAUTHORIZED: {
        FETCH_FROM_SOURCE: {
            "title": "401 - Unauthorized",
            "message": "Authentication required or invalid token",
            "explanation": "The API requires authentication that your backend must handle.",
            "remediation": [
                "Check that your backend handles authentication correctly",
                "Check the authentication header name and token",
                "Check that the token has not expired",
            ],
        },
        SYNC_TO_DESTINATION: {
            "title": "401 - Unauthorized",
            "message": "Authentication required or invalid token",
            "explanation": "The Grist document is private and needs an API token, or your token is invalid.",
            "remediation": [
                "Add a valid Grist API token to the configuration",
                "Check that the token has not expired",
                "Check the token's permissions",
            ],
        },
        GENERAL: {
            "title": "401 - Unauthorized",
            "message": "Authentication required or invalid token",
            "explanation": "The server requires authentication, or the credentials sent were rejected.",
            "remediation": [
                "Provide valid credentials",
                "Check that the token has not expired",
                "Check the token's permissions",
            ],
        },
    },
    ErrorKind.FORBIDDEN: {
        FETCH_FROM_SOURCE: {
            "title": "403 - Forbidden",
            "message": "Insufficient permissions",
            "explanation": "Your backend or the remote API refuses access to this resource.",
            "remediation": [
                "Check that you have access rights to this resource",
                "Contact the API administrator to get the permissions",
                "Make sure the right token is being used",
            ],
        },
        SYNC_TO_DESTINATION: {
            "title": "403 - Forbidden",
            "message": "Insufficient permissions",
            "explanation": (
                "Your Grist API token does not have the permissions needed to "
                "modify this document or table."
            ),
            "remediation": [
                "Check that you have access rights to the document/table",
                "Check the API token's permissions in the Grist settings",
                "Make sure the right token is being used",
            ],
        },
        GENERAL: {
            "title": "403 - Forbidden",
            "message": "Insufficient permissions",
            "explanation": "The server refuses access to this resource.",
            "remediation": [
                "Check that you have access rights to this resource",
                "Make sure the right token is being used",
            ],
        },
    },
    ErrorKind.NOT_FOUND: {
        FETCH_FROM_SOURCE: {
            "title": "404 - Not found",
            "message": "Document, table or URL not found",
            "explanation": "The backend URL is wrong or the resource does not exist.",
            "remediation": [
                "Check that the backend URL is correct",
                "Check that the endpoint exists",
                "Test the URL in a browser or with a tool such as curl",
            ],
        },
        SYNC_TO_DESTINATION: {
            "title": "404 - Not found",
            "message": "Document, table or URL not found",
            "explanation": (
                "The Document ID or Table ID does not exist, or the Grist API URL is wrong."
            ),
            "remediation": [
                "Check that the Document ID is correct (it appears in the Grist URL)",
                "Check that the Table ID matches the table name exactly (case sensitive)",
                "Run the Grist connection test",
            ],
        },
        GENERAL: {
            "title": "404 - Not found",
            "message": "Resource or URL not found",
            "explanation": "The URL is wrong or the resource does not exist.",
            "remediation": [
                "Check that the URL is correct",
                "Check that the resource exists",
            ],
        },
    },
    ErrorKind.UNPROCESSABLE: {
        FETCH_FROM_SOURCE: {
            "title": "422 - Invalid data",
            "message": "Data validation error",
            "explanation": "The request does not match the format the API expects.",
            "remediation": [
                "Check the query parameters sent to the API",
                "Check the API documentation for the expected request format",
            ],
        },
        SYNC_TO_DESTINATION: {
            "title": "422 - Invalid data",
            "message": "Data validation error",
            "explanation": "The data sent does not match the format expected by the API.",
            "remediation": [
                "Check that the data types match (text, number, date, etc.)",
                "Check that the Grist columns exist and are configured correctly",
                "Check the field mapping between the API and Grist",
                "Check the sync log for more details",
            ],
        },
        GENERAL: {
            "title": "422 - Invalid data",
            "message": "Data validation error",
            "explanation": "The data sent does not match the format expected by the API.",
            "remediation": [
                "Check that the data types match (text, number, date, etc.)",
                "Check the API documentation for the expected format",
            ],
        },
    },
    ErrorKind.SERVER_ERROR: {
        FETCH_FROM_SOURCE: {
            "title": "{status} - Server error",
            "message": "The server encountered an error",
            "explanation": "Your backend or the remote API encountered an internal error.",
            "remediation": [
                "Try again in a few moments",
                "Check the status of your backend",
                "Check the server logs for more information",
                "If the problem persists, contact support",
            ],
        },
        SYNC_TO_DESTINATION: {
            "title": "{status} - Server error",
            "message": "The server encountered an error",
            "explanation": "The Grist server encountered an internal error. This may be temporary.",
            "remediation": [
                "Try again in a few moments",
                "Check the status of the Grist service",
                "If the problem persists, contact support",
            ],
        },
        GENERAL: {
            "title": "{status} - Server error",
            "message": "The server encountered an error",
            "explanation": "The remote server encountered an internal error.",
            "remediation": [
                "Try again in a few moments",
                "If the problem persists, contact support",
            ],
        },
    },
    ErrorKind.INVALID_JSON: _same_for_all({
        "title": "Data format error",
        "message": "The server response is not valid JSON",
        "explanation": "The server returned data that cannot be read as JSON.",
        "remediation": [
            "Check that the URL points to a JSON API",
            "Check that the server returns JSON and not HTML or plain text",
            "Run with --verbose to see the raw response",
        ],
    }),
    ErrorKind.TIMEOUT: _same_for_all({
        "title": "Request timed out",
        "message": "The server is taking too long to respond",
        "explanation": "The request took too long and was aborted.",
        "remediation": [
            "Check that the server is working properly",
            "Try again later",
            "Check for performance problems on the server side",
        ],
    }),
    ErrorKind.UNKNOWN_HTTP: _same_for_all({
        "title": "HTTP error {status}",
        "message": "The server returned error {status}",
        "explanation": "An unexpected HTTP error occurred.",
        "remediation": [
            "Check the API documentation",
            "Run with --verbose for more details",
            "Contact support if needed",
        ],
    }),
    ErrorKind.UNKNOWN: _same_for_all({
        "title": "Unexpected error",
        "message": "An unknown error occurred",
        "explanation": "An unforeseen error occurred. See the technical details below.",
        "remediation": [
            "Run with --verbose for more details",
            "Try the operation again",
            "Contact support if the problem persists",
        ],
    }),
}


def lookup(kind: ErrorKind, context: str) -> CatalogEntry:
    """Catalog entry for a kind, using the general wording for unknown contexts."""
    entries = CATALOG[kind]
    return entries.get(context, entries[GENERAL])
