"""
Exit codes for IntervalPro CLI.

Semantic exit codes so scripts wrapping the CLI can tell what happened.
"""

# Success
SUCCESS = 0

# General error (unspecified)
ERROR_GENERAL = 1

# Invalid arguments or validation error
ERROR_INVALID_ARGS = 2

# Local storage could not be read or written
ERROR_STORAGE = 3

# Workout or history record not found
ERROR_NOT_FOUND = 5

# Run was stopped before the workout finished
RUN_ABORTED = 7


def get_exit_code_name(code: int) -> str:
    """Get the name of an exit code for display purposes."""
    code_names = {
        SUCCESS: "SUCCESS",
        ERROR_GENERAL: "ERROR_GENERAL",
        ERROR_INVALID_ARGS: "ERROR_INVALID_ARGS",
        ERROR_STORAGE: "ERROR_STORAGE",
        ERROR_NOT_FOUND: "ERROR_NOT_FOUND",
        RUN_ABORTED: "RUN_ABORTED",
    }
    return code_names.get(code, f"UNKNOWN({code})")
