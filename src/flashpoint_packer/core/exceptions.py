"""
Exception hierarchy for the Flashpoint packer.

Provides structured error handling with specific error types for each stage
of the archive build and a ``fatal`` flag separating conditions that abort
the run from those that are recorded and skipped.
"""

from typing import Any, Dict, Optional


class PackerError(Exception):
    """Base exception for all packer errors."""

    fatal: bool = True

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        component: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.component = component

    def __str__(self) -> str:
        """String representation of the error."""
        base_msg = f"[{self.component or 'Packer'}] {self.message}"
        if self.error_code:
            base_msg = f"[{self.error_code}] {base_msg}"
        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "component": self.component,
            "details": self.details,
            "fatal": self.fatal,
        }


class ConfigurationError(PackerError):
    """Exception raised when configuration is unreadable, malformed or incomplete."""

    pass


class DataSourceError(PackerError):
    """Exception raised when the catalogue database cannot be opened or queried."""

    def __init__(self, query: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            f"Data source query failed ({query}): {reason}",
            error_code="DATA_SOURCE_ERROR",
            details={"query": query, "reason": reason},
            **kwargs,
        )


class SourceTreeError(PackerError):
    """Exception raised when a source tree cannot be walked."""

    def __init__(self, root: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            f"{root} cannot be accessed: {reason}",
            error_code="SOURCE_TREE_ERROR",
            details={"root": root, "reason": reason},
            **kwargs,
        )


class ArchiveWriteError(PackerError):
    """Exception raised when an archive cannot be created, written or finalized."""

    def __init__(self, archive: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            f"Failed to write archive {archive}: {reason}",
            error_code="ARCHIVE_WRITE_ERROR",
            details={"archive": archive, "reason": reason},
            **kwargs,
        )


class ManifestWriteError(PackerError):
    """Exception raised when the manifest cannot be serialized or written."""

    def __init__(self, path: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            f"Failed to write manifest {path}: {reason}",
            error_code="MANIFEST_WRITE_ERROR",
            details={"path": path, "reason": reason},
            **kwargs,
        )


class IntegrityError(PackerError):
    """Exception raised when an archive cannot be hashed or fails verification."""

    def __init__(self, archive: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            f"Integrity check failed for {archive}: {reason}",
            error_code="INTEGRITY_ERROR",
            details={"archive": archive, "reason": reason},
            **kwargs,
        )


class MissingSourceFileError(PackerError):
    """A referenced source file does not exist. Recorded and skipped."""

    fatal = False

    def __init__(self, path: str, archive: str, **kwargs: Any) -> None:
        super().__init__(
            f"{path} does not exist",
            error_code="MISSING_SOURCE_FILE",
            details={"path": path, "archive": archive},
            **kwargs,
        )
