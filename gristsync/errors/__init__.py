"""
Error Diagnosis Module

Classifies network and API failures and explains how to fix them.
"""

from .catalog import FETCH_FROM_SOURCE, SYNC_TO_DESTINATION, ErrorKind
from .classifier import ErrorDiagnosis, classify_error, format_error_long, format_error_short
from .exceptions import EmptyRecordsError, GristSyncError, HttpStatusError, SourceFetchError

__all__ = [
    "FETCH_FROM_SOURCE",
    "SYNC_TO_DESTINATION",
    "ErrorKind",
    "ErrorDiagnosis",
    "classify_error",
    "format_error_long",
    "format_error_short",
    "EmptyRecordsError",
    "GristSyncError",
    "HttpStatusError",
    "SourceFetchError",
]
