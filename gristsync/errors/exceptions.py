"""Grist sync exceptions."""


class GristSyncError(Exception):
    """Base exception for sync errors. Carries the diagnosis when one was made."""

    def __init__(self, message: str, diagnosis=None):
        super().__init__(message)
        self.message = message
        self.diagnosis = diagnosis


class HttpStatusError(GristSyncError):
    """A request got a non-success HTTP status."""

    def __init__(self, status_code: int, body: str = "", url: str = None):
        super().__init__(f"HTTP {status_code}: {body}")
        self.status_code = status_code
        self.body = body
        self.url = url


class EmptyRecordsError(GristSyncError):
    """Nothing to insert."""

    def __init__(self, message: str = "No records to add"):
        super().__init__(message)


class SourceFetchError(GristSyncError):
    """The source API could not be read."""

    pass
