"""
Standard exit codes and error types for please commands.

Following Unix/POSIX conventions for command-line tools.
"""
from typing import Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
NOT_FOUND = 64           # No package matched the requested name
API_ERROR = 65           # Container registry call failed
CONFIG_ERROR = 66        # Configuration or manifest declaration error
PERMISSION_ERROR = 67    # Insufficient permissions
NETWORK_ERROR = 68       # Network connection failed
AUTH_ERROR = 69          # Authentication/authorization failed
DATA_ERROR = 70          # Archive, JSON or pattern error
PARTIAL_SUCCESS = 71     # Some catalogs answered, some failed
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'PermissionError': PERMISSION_ERROR,
    'ConnectionError': NETWORK_ERROR,
    'TimeoutError': NETWORK_ERROR,
    'ValueError': DATA_ERROR,
    'KeyError': DATA_ERROR,
    'JSONDecodeError': DATA_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: Exception) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    if isinstance(exc, CommandError):
        return exc.exit_code
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


# ── Catalog archive errors ───────────────────────────────────────────


class ArchiveError(CommandError):
    """Base class for problems reading a manifest archive.

    Always fatal to the current operation; never retried.
    """
    def __init__(self, message: str, path: Optional[str] = None, exit_code: int = DATA_ERROR):
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message, exit_code)
        self.path = path


class MissingFileError(ArchiveError):
    """Raised when the archive path does not exist."""
    def __init__(self, path: str):
        super().__init__("manifest archive not found", path, GENERAL_ERROR)


class UnreadableArchiveError(ArchiveError):
    """Raised when the archive path exists but cannot be opened."""
    def __init__(self, path: str, reason: OSError):
        exit_code = PERMISSION_ERROR if isinstance(reason, PermissionError) else GENERAL_ERROR
        super().__init__(f"cannot open manifest archive: {reason.strerror or reason}", path, exit_code)


class CorruptArchiveError(ArchiveError):
    """Raised on bad gzip or tar framing."""


class NoStructuredMemberError(ArchiveError):
    """Raised when no JSON member sits at the archive root."""
    def __init__(self, path: str):
        super().__init__("no JSON file found at root of archive", path)


class DecodeError(ArchiveError):
    """Raised on malformed or truncated JSON inside the archive."""


class UnexpectedTokenError(DecodeError):
    """Raised when the JSON has the wrong shape at an expected position."""
    def __init__(self, expected: str, got: object, path: Optional[str] = None):
        super().__init__(f"expected {expected}, got {got!r}", path)
        self.expected = expected
        self.got = got


class PackageNotFoundError(CommandError):
    """Raised when no manifest matches the requested package name."""
    def __init__(self, name: str, message: Optional[str] = None):
        super().__init__(message or f"package with name '{name}' not found", NOT_FOUND)
        self.name = name


# ── Version discovery errors ─────────────────────────────────────────


class PatternError(CommandError):
    """Raised when a version filter pattern does not compile."""
    def __init__(self, pattern: str, reason: str):
        super().__init__(f"invalid version pattern {pattern!r}: {reason}", DATA_ERROR)
        self.pattern = pattern


class AuthError(CommandError):
    """Raised when a registry bearer token cannot be obtained."""
    def __init__(self, message: str):
        super().__init__(message, AUTH_ERROR)


class RegistryError(CommandError):
    """Raised when listing tags from a registry fails."""
    def __init__(self, message: str):
        super().__init__(message, API_ERROR)


class ConfigError(CommandError):
    """Raised when there's a configuration error."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class PartialSuccessError(CommandError):
    """Raised when some operations succeed and some fail."""
    def __init__(self, message: str, succeeded: int = 0, failed: int = 0):
        super().__init__(message, PARTIAL_SUCCESS)
        self.succeeded = succeeded
        self.failed = failed
