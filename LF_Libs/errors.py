"""
Error types raised by the Logo Forge imaging core.

Invalid arguments keep raising the builtin ValueError / TypeError. The
classes here mark the failure kinds callers need to tell apart when an
export goes wrong.

Classes:
    LogoForgeError: Base class for all Logo Forge errors
    EncodingError: A pixel buffer could not be encoded to the target format
    ExportIOError: A directory or file could not be written during export
"""

from pathlib import Path
from typing import Optional, Union


class LogoForgeError(Exception):
    """Base class for all Logo Forge errors."""


class EncodingError(LogoForgeError, ValueError):
    """Raised when an image cannot be encoded (e.g. to PNG)."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class ExportIOError(LogoForgeError, OSError):
    """
    Raised when export cannot create a directory or write a file.

    Attributes:
        bundle: Name of the bundle being exported when the failure happened
        path: File or directory that could not be written
    """

    def __init__(self, message: str, bundle: Optional[str], path: Union[str, Path]):
        super().__init__(message)
        self.bundle = bundle
        self.path = Path(path)

    def __str__(self) -> str:
        if self.bundle is None:
            return f"{self.args[0]} (path '{self.path}')"
        return f"{self.args[0]} (bundle '{self.bundle}', path '{self.path}')"
