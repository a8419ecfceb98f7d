"""Package-specific exception types."""

from __future__ import annotations


class TocError(ValueError):
    """Base class for table-of-contents errors.

    Attributes:
        fatal: Whether the condition should be reported as a failure rather
            than a no-op notice.
    """

    fatal = False


class NoMatchingHeadings(TocError):
    """Raised when no heading below the cursor falls in the depth band.

    Args:
        minimum_depth: Smallest heading level that was eligible.
        maximum_depth: Largest heading level that was eligible.
    """

    def __init__(self, minimum_depth: int, maximum_depth: int):
        self.minimum_depth = minimum_depth
        self.maximum_depth = maximum_depth
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return (
            "No headings below cursor matched settings "
            f"(min: {self.minimum_depth}) (max: {self.maximum_depth})"
        )


class NoExistingToc(TocError):
    """Raised when an update is requested but no heading carries the title.

    Args:
        title: ToC title that was searched for.
    """

    def __init__(self, title: str):
        self.title = title
        super().__init__("No ToC in this file to update")


class MalformedDocumentStructure(TocError):
    """Raised when the sections around the ToC heading cannot be located.

    Args:
        reason: Description of the structural problem.
    """

    fatal = True

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Cannot update ToC: {reason}")


class OutlineError(ValueError):
    """Raised when a host outline snapshot cannot be decoded.

    Args:
        message: Description of the problem.
        index: Zero-based index of the offending entry, if any.
    """

    def __init__(self, message: str, index: int | None = None):
        self.index = index
        if index is not None:
            message = f"Entry {index}: {message}"
        super().__init__(message)
