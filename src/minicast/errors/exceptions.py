"""Custom exception classes for the Minicast API."""


class MinicastError(Exception):
    """Base exception for Minicast."""

    def __init__(self, code: str, message: str, details=None, status_code: int = 500):
        self.code = code
        self.message = message
        self.details = details
        self.status_code = status_code
        super().__init__(message)


class ValidationError(MinicastError):
    """Malformed input: bad address, URL, contract format or missing field."""

    def __init__(self, message: str, details=None):
        super().__init__("VALIDATION_ERROR", message, details, status_code=400)


class InvalidSignatureError(MinicastError):
    """Recovered signer does not match the claimed wallet."""

    def __init__(self, message: str = "Signature does not match wallet address"):
        super().__init__("INVALID_SIGNATURE", message, status_code=400)


class NotFoundError(MinicastError):
    """Resource not found."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            "NOT_FOUND",
            f"{resource} '{resource_id}' not found",
            status_code=404,
        )


class AuthenticationError(MinicastError):
    """No identity attached to the request."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__("AUTHENTICATION_ERROR", message, status_code=401)


class AuthorizationError(MinicastError):
    """Insufficient admin role."""

    def __init__(self, message: str = "Admin access required"):
        super().__init__("AUTHORIZATION_ERROR", message, status_code=403)


class ConflictError(MinicastError):
    """Resource state conflict."""

    def __init__(self, message: str, details=None):
        super().__init__("CONFLICT", message, details, status_code=409)


class ChallengeNotFoundError(MinicastError):
    def __init__(self, message: str = "No pending domain challenge; start domain verification first"):
        super().__init__("CHALLENGE_NOT_FOUND", message, status_code=400)


class ChallengeExpiredError(MinicastError):
    def __init__(self, message: str = "Domain challenge expired; start domain verification again"):
        super().__init__("CHALLENGE_EXPIRED", message, status_code=400)


class ContentMismatchError(MinicastError):
    def __init__(self, message: str = "Verification file content does not match the issued token"):
        super().__init__("CONTENT_MISMATCH", message, status_code=400)


class FetchFailedError(MinicastError):
    """The verification file on the claimed domain could not be fetched."""

    def __init__(self, message: str, details=None):
        super().__init__("FETCH_FAILED", message, details, status_code=502)


class StorageUnavailableError(MinicastError):
    """Persistence layer down; retryable."""

    def __init__(self, message: str = "Database temporarily unavailable. Please try again later."):
        super().__init__("STORAGE_UNAVAILABLE", message, status_code=503)


class RemoteUnavailable(Exception):
    """Raised inside the fetcher when a remote resource cannot be read.

    Never rendered to clients directly; callers map it to a degraded
    decision input or to FetchFailedError.
    """
