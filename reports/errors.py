class ReportError(Exception):
    """Base exception for all report pipeline errors."""


class UnsupportedFormatError(ReportError):
    """Raised when a directory entry is not an .xml, .zip or .gz file."""


class FileReadError(ReportError):
    """Raised when a report file cannot be read, unpacked or decoded.

    The original exception is kept on ``cause`` (and chained via ``__cause__``).
    """

    def __init__(self, path, cause: Exception) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to read '{path}': {cause}")


class NoXmlMemberError(ReportError):
    """Raised when a ZIP archive holds no member that looks like a report."""


class ParseError(ReportError):
    """Raised when the decoded report text is not well-formed XML."""


class ValidationError(ReportError):
    """Raised when a parsed document lacks the required DMARC structure."""


class DirectoryError(ReportError):
    """Raised when the report directory is missing, unreadable or empty."""
