"""Error taxonomy for the remote collaborator"""

AUTH_MISSING_MESSAGE = "Authorization token missing"


class CatalogAPIError(Exception):
    """Base error for remote collaborator calls"""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status


class AuthorizationMissingError(CatalogAPIError):
    """No bearer credential available; detected before any network I/O"""

    def __init__(self, path: str = ""):
        super().__init__(AUTH_MISSING_MESSAGE)
        self.path = path


class RemoteError(CatalogAPIError):
    """The remote answered with a structured error carrying a message"""


class TransportError(CatalogAPIError):
    """Connection failure, timeout or an unstructured error response"""


def describe_error(exc: BaseException, *, auth_message: str, fallback: str) -> str:
    """Map an exception to the single human-readable error a component stores"""
    if isinstance(exc, AuthorizationMissingError):
        return auth_message
    if isinstance(exc, RemoteError) and exc.message:
        return exc.message
    return fallback
