"""
Exit codes for Takify CLI.

Semantic exit codes so scripts can tell what happened.
"""

from takify.models.exceptions import (
    AuthError,
    SessionRequiredError,
    StoreError,
    SubscriptionError,
    TakifyError,
    ValidationError,
)

# Success
SUCCESS = 0

# General error (unspecified)
ERROR_GENERAL = 1

# Invalid arguments or validation error
ERROR_INVALID_ARGS = 2

# Authentication failure (not logged in, invalid credentials, etc.)
ERROR_AUTH_FAILURE = 3

# Store or network error (server unreachable, write rejected, etc.)
ERROR_NETWORK = 4


def exit_code_for(error: TakifyError) -> int:
    """Map an application error to its exit code."""
    if isinstance(error, ValidationError):
        return ERROR_INVALID_ARGS
    if isinstance(error, (AuthError, SessionRequiredError)):
        return ERROR_AUTH_FAILURE
    if isinstance(error, (StoreError, SubscriptionError)):
        return ERROR_NETWORK
    return ERROR_GENERAL
