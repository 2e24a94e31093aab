"""
Standard exit codes for gitplumb commands.

Following Unix/POSIX conventions for command-line tools.
"""

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
NO_REPOSITORY = 64       # No metadata directory found
OBJECT_NOT_FOUND = 65    # Requested object is not in the store
CONFIG_ERROR = 66        # Configuration file error
PERMISSION_ERROR = 67    # Insufficient permissions
ALREADY_EXISTS = 68      # Object or repository already present
UNSUPPORTED = 69         # Unsupported repository format version
DATA_ERROR = 70          # Corrupt object or malformed input
IO_ERROR = 74            # Underlying filesystem failure
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for exceptions raised outside the gitplumb hierarchy
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'PermissionError': PERMISSION_ERROR,
    'ValueError': DATA_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: BaseException) -> int:
    """
    Get the appropriate exit code for an exception.

    gitplumb errors carry their own ``exit_code``; anything else is looked
    up by class name.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    code = getattr(exc, 'exit_code', None)
    if isinstance(code, int):
        return code
    return EXCEPTION_EXIT_CODES.get(exc.__class__.__name__, GENERAL_ERROR)
