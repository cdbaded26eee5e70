"""Error hierarchy shared by the scanning, translation, and publishing layers."""

from __future__ import annotations


class L10nError(Exception):
    """Base class for every failure raised by l10nbot."""


class NoResourceFilesFound(L10nError):
    """Raised when a repository tree holds no readable string resource files."""

    def __init__(self, message: str = "No translatable string files found in repository") -> None:
        super().__init__(message)


class ResourceParseError(L10nError):
    """Raised when resource markup cannot be turned into string entries."""


class SourceTreeError(L10nError):
    """Base class for source-tree provider failures."""


class FileReadError(SourceTreeError):
    """Raised when a single file cannot be fetched from the source tree."""

    def __init__(self, path: str, message: str | None = None) -> None:
        self.path = path
        super().__init__(message or f"Failed to fetch file: {path}")


class FileMissingError(FileReadError):
    """Raised when the requested file does not exist at the given ref."""

    def __init__(self, path: str, message: str | None = None) -> None:
        super().__init__(path, message or f"File not found: {path}")


class WriteError(SourceTreeError):
    """Raised when a file cannot be created or updated."""

    def __init__(self, path: str, message: str | None = None) -> None:
        self.path = path
        super().__init__(message or f"Failed to create/update file: {path}")


class BranchError(SourceTreeError):
    """Raised when branches cannot be listed or created."""


class PullRequestError(SourceTreeError):
    """Raised when opening a pull request fails."""


class ProviderError(L10nError):
    """Raised when the translation provider is unreachable or rejects the call."""


class ProviderResponseError(ProviderError):
    """Raised when the provider replied but no translation mapping could be read."""


class OperationTimedOut(L10nError):
    """Raised when a caller-level timeout expires."""

    def __init__(self, message: str = "operation timed out") -> None:
        super().__init__(message)
