"""Git database cache, reference resolution and tree extraction."""

from sourcebinder.git.credentials import FetchCallbacks
from sourcebinder.git.database import ExtractionSummary, GitDatabase
from sourcebinder.git.errors import (
    AmbiguousReferenceError,
    AuthRequiredError,
    CheckoutError,
    DatabaseLockedError,
    ExtractionError,
    ExtractionIOError,
    FetchError,
    GitError,
    IdentifierNotInDatabaseError,
    NetworkError,
    NotADatabaseError,
    ObjectNotFoundError,
    ReferenceNotFoundError,
)
from sourcebinder.git.reference import Branch, DefaultBranch, GitReference, Rev, Tag
from sourcebinder.git.remote import FetchOutcome, GitRemote, database_path_for

__all__ = [
    # Remote / database
    "GitRemote",
    "GitDatabase",
    "FetchOutcome",
    "ExtractionSummary",
    "database_path_for",
    "FetchCallbacks",
    # References
    "GitReference",
    "Branch",
    "Tag",
    "Rev",
    "DefaultBranch",
    # Errors
    "GitError",
    "NotADatabaseError",
    "DatabaseLockedError",
    "FetchError",
    "NetworkError",
    "AuthRequiredError",
    "ReferenceNotFoundError",
    "CheckoutError",
    "AmbiguousReferenceError",
    "ObjectNotFoundError",
    "ExtractionError",
    "ExtractionIOError",
    "IdentifierNotInDatabaseError",
]
