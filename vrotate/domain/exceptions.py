"""
Defines custom exception types for vrotate.

All exceptions inherit from ``RotateException``. They fall into two groups:

- Fatal: the run cannot continue (``ToolNotFoundException``,
  ``RootPathUnreadableException``, ``ConfigurationException``). These are
  raised up to ``main()``, which logs them and exits with a non-zero status.
- Per file (``FileProcessingException`` and subclasses): the current file is
  abandoned, the failure is logged, and the walk moves on to the next file.
"""


class RotateException(Exception):
    """Base class for all custom exceptions in vrotate."""

    pass


# --- Fatal ---
class ToolNotFoundException(RotateException):
    """
    Raised when a required external executable (ffprobe or ffmpeg) cannot be
    found on the PATH or in any fallback directory.
    """

    def __init__(self, name: str, searched=()):
        self.name = name
        self.searched = tuple(searched)
        locations = ", ".join(str(p) for p in self.searched) or "no fallback directories"
        super().__init__(f"Executable '{name}' not found in PATH or {locations}")


class RootPathUnreadableException(RotateException):
    """Raised when the input root cannot be stat'ed or listed."""

    pass


class ConfigurationException(RotateException):
    """Raised for an unreadable or malformed user configuration."""

    pass


# --- Per file ---
class FileProcessingException(RotateException):
    """Base class for failures that only affect the file being processed."""

    def __init__(self, path, message: str):
        self.path = path
        super().__init__(message)


class ProbeFailureException(FileProcessingException):
    """
    Raised when ffprobe exits non-zero, cannot be started, or returns output
    that is not the expected JSON document. Such an input is treated as
    "not a recognized media file".
    """

    pass


class NoStreamsFoundException(ProbeFailureException):
    """Raised when the probe succeeded but reported no video stream."""

    pass


class DirectoryCreateException(FileProcessingException):
    """Raised when the output sub-directory cannot be created."""

    pass


class SpawnFailureException(FileProcessingException):
    """Raised when the encoder process cannot be started."""

    pass


class EncodeRuntimeException(FileProcessingException):
    """
    Raised when the encoder exits with a non-zero status or is killed after
    exceeding the configured timeout.
    """

    def __init__(self, path, message: str, returncode=None):
        self.returncode = returncode
        super().__init__(path, message)
