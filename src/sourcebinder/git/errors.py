"""Git module error types."""

from sourcebinder.core.errors import ErrorCode, SourceBinderError


class GitError(SourceBinderError):
    """Base error for git database operations."""

    code = ErrorCode.GIT_ERROR


class NotADatabaseError(GitError):
    """Database path exists but does not hold a git object database."""

    code = ErrorCode.NOT_A_DATABASE

    def __init__(self, path: str) -> None:
        super().__init__(f"Not a git database: {path}")
        self.path = path


class DatabaseLockedError(GitError):
    """Timed out waiting for another process to release a database."""

    code = ErrorCode.DATABASE_LOCKED

    def __init__(self, path: str, timeout: float) -> None:
        super().__init__(f"Database {path} is locked by another process (waited {timeout}s)")
        self.path = path
        self.timeout = timeout


# =============================================================================
# Fetch Errors
# =============================================================================


class FetchError(GitError):
    """Fetching from the remote into a database failed."""

    code = ErrorCode.FETCH_FAILED

    def __init__(self, url: str, message: str) -> None:
        super().__init__(message)
        self.url = url


class NetworkError(FetchError):
    """Transport-level failure talking to the remote."""

    code = ErrorCode.NETWORK_ERROR

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(url, f"Failed to fetch from {url}: {reason}")
        self.reason = reason


class AuthRequiredError(FetchError):
    """Remote rejected the request or no usable credentials were found."""

    code = ErrorCode.AUTH_REQUIRED

    def __init__(self, url: str) -> None:
        super().__init__(url, f"Authentication required for {url}")


class ReferenceNotFoundError(FetchError):
    """Requested branch, tag or revision does not exist on the remote."""

    code = ErrorCode.REFERENCE_NOT_FOUND

    def __init__(self, url: str, reference: str) -> None:
        super().__init__(url, f"Reference {reference} not found on {url}")
        self.reference = reference


# =============================================================================
# Checkout Errors
# =============================================================================


class CheckoutError(GitError):
    """Resolving a reference to a single commit failed."""

    code = ErrorCode.CHECKOUT_FAILED

    def __init__(self, reference: str, message: str) -> None:
        super().__init__(message)
        self.reference = reference


class AmbiguousReferenceError(CheckoutError):
    """Reference resolves to more than one candidate commit."""

    code = ErrorCode.AMBIGUOUS_REFERENCE

    def __init__(self, reference: str, candidates: list[str]) -> None:
        super().__init__(
            reference,
            f"Reference {reference!r} is ambiguous: {', '.join(candidates)}",
        )
        self.candidates = candidates


class ObjectNotFoundError(CheckoutError):
    """Reference does not name a commit in the database after fetching."""

    code = ErrorCode.OBJECT_NOT_FOUND

    def __init__(self, reference: str) -> None:
        super().__init__(reference, f"Revision not found in database: {reference}")


# =============================================================================
# Extraction Errors
# =============================================================================


class ExtractionError(GitError):
    """Materializing a tree into a destination failed."""

    code = ErrorCode.EXTRACTION_FAILED


class IdentifierNotInDatabaseError(ExtractionError):
    """Object id is not present in the database being extracted from."""

    code = ErrorCode.IDENTIFIER_NOT_IN_DATABASE

    def __init__(self, oid: str, database: str) -> None:
        super().__init__(f"Object {oid} is not in database {database}")
        self.oid = oid
        self.database = database


class ExtractionIOError(ExtractionError):
    """Filesystem failure while writing the extracted tree."""

    code = ErrorCode.EXTRACTION_IO_ERROR

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to write {path}: {reason}")
        self.path = path
        self.reason = reason
