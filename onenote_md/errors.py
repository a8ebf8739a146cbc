"""Exceptions raised while exporting a notebook."""


class ExportError(Exception):
    """Base exception for export errors."""

    def __init__(self, message: str, page: str = "", asset: str = "") -> None:
        super().__init__(message)
        self.page = page
        self.asset = asset


class ConversionFailed(ExportError):
    """Raised when the external converter fails on a page."""
    pass


class AssetCopyFailed(ExportError):
    """Raised when a media file cannot be renamed or copied."""
    pass


class ReferenceRewriteFailed(ExportError):
    """Raised when media references in a page cannot be rewritten."""
    pass


class MalformedTimestamp(ExportError):
    """Raised when a page timestamp does not match the expected format."""
    pass


class FilesystemUnavailable(ExportError):
    """Raised when the destination root is missing or not writable."""
    pass
