from .errors import (
    ResumeProcessingError,
    UnsupportedFileTypeError,
    DocumentExtractionError,
    LLMNotConfiguredError,
    LLMRequestError,
    EmptyModelOutputError,
    ResponseParseError,
    SchemaMismatchError
)
from .dates import canonicalize_date
from .auth import (
    AuthenticatedUser,
    get_current_user,
    fetch_supabase_user
)

__all__ = [
    # Errors
    "ResumeProcessingError",
    "UnsupportedFileTypeError",
    "DocumentExtractionError",
    "LLMNotConfiguredError",
    "LLMRequestError",
    "EmptyModelOutputError",
    "ResponseParseError",
    "SchemaMismatchError",
    # Dates
    "canonicalize_date",
    # Auth
    "AuthenticatedUser",
    "get_current_user",
    "fetch_supabase_user"
]
