"""
Exceptions raised around the cleaning core.

Parsing never raises and transform errors propagate unwrapped; these cover
the upload and session edges.
"""

from typing import Optional


class CleanerError(Exception):
    """Base error; ``message`` is what gets shown to the user."""

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class UnsupportedFormatError(CleanerError):
    def __init__(self, file_name: Optional[str]):
        self.file_name = file_name
        super().__init__("Only CSV files are supported", status_code=422)


class UploadTooLargeError(CleanerError):
    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"Upload is {size} bytes, limit is {limit}", status_code=413)


class SessionNotFoundError(CleanerError):
    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}", status_code=404)
