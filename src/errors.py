"""
Service-level exceptions. Route handlers map these to HTTP responses in index.create_app.
"""


class LicensingError(Exception):
    """Base error carrying a short machine-readable code for the JSON response."""

    code = "error"

    def __init__(self, code=None, message=None):
        self.code = code or self.code
        super().__init__(message or self.code)


class InvalidArgument(LicensingError):
    """Bad machine id, day count or other caller input. Never retried."""

    code = "invalid_argument"


class StorageUnavailable(LicensingError):
    """MySQL unreachable or misconfigured. Propagated to the caller as a 5xx."""

    code = "storage_unavailable"
