"""Process exit codes for the a2a-registry CLI."""

from a2a_registry.errors import ErrorKind

SUCCESS = 0
GENERAL_ERROR = 1
USAGE_ERROR = 2  # click's own code for bad arguments
NOT_FOUND = 3
ALREADY_EXISTS = 4
INVALID_AGENT_CARD = 5
FETCH_FAILED = 6

FOR_KIND = {
    ErrorKind.ALREADY_EXISTS: ALREADY_EXISTS,
    ErrorKind.VALIDATION: INVALID_AGENT_CARD,
    ErrorKind.FETCH: FETCH_FAILED,
    ErrorKind.STORAGE: GENERAL_ERROR,
}
