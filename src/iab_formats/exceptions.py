"""IAB formats exception hierarchy.

Two kinds of document failure are surfaced to callers: the document could not
be turned into a tree at all (``ParsingError``), or the tree was built but it
breaks a field-level or cross-field rule (``ValidationError``). Caller misuse of
the document handles is reported separately and is never about the document.

Exception Hierarchy:
    IABFormatError (base)
    ├── ParsingError
    ├── StructuralError
    ├── ValidationError
    └── InvalidUsageError
"""

from dataclasses import dataclass
from typing import Optional


class IABFormatError(Exception):
    """Base exception for all IAB formats errors.

    All library exceptions inherit from this class to allow catching
    every document error with a single except clause.
    """

    def __init__(self, message: str, context: Optional[dict] = None):
        """Initialize IAB format exception.

        Args:
            message: Error message
            context: Optional context dictionary for debugging
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return string representation with context."""
        if self.context:
            context_str = "; ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ParsingError(IABFormatError):
    """Raised when a document cannot be turned into a VAST/VMAP tree.

    Covers malformed XML as well as structural violations detected while
    mapping (missing root, ambiguous ad type, duplicated containers...).

    Attributes:
        parsing_error: The underlying exception, always present
        xml_preview: First characters of the raw document, if any
    """

    default_message = "Document could not be parsed"

    def __init__(
        self,
        cause: BaseException,
        message: Optional[str] = None,
        xml_preview: Optional[str] = None,
        context: Optional[dict] = None,
    ):
        """Initialize parsing error.

        Args:
            cause: The underlying exception
            message: Error message, defaults to a generic one
            xml_preview: Preview of the problematic XML
            context: Additional context

        Raises:
            TypeError: If cause is not an exception or message is not a string
        """
        if not isinstance(cause, BaseException):
            raise TypeError("ParsingError requires the underlying exception as cause")
        if message is not None and not isinstance(message, str):
            raise TypeError("ParsingError message must be a string")
        if context is None:
            context = {}
        if xml_preview:
            context["xml_preview"] = xml_preview[:200]
        super().__init__(message or self.default_message, context)
        self.parsing_error = cause
        self.xml_preview = xml_preview


class StructuralError(IABFormatError):
    """Raised by the mappers when the tree shape breaks the format.

    Attributes:
        path: Location of the offending element (e.g. ``VAST/Ad[0]``)
    """

    def __init__(self, message: str, path: Optional[str] = None, context: Optional[dict] = None):
        if context is None:
            context = {}
        if path:
            context["path"] = path
        super().__init__(message, context)
        self.path = path


@dataclass(frozen=True)
class ValidationIssue:
    """A single rule violation."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path or '<document>'}: {self.message}"


class ValidationError(IABFormatError):
    """Raised when a mapped document violates the schema rules.

    Attributes:
        details: Every violation found, not only the first one
    """

    default_message = "Document does not validate schema"

    def __init__(
        self,
        details: list[ValidationIssue],
        message: Optional[str] = None,
        context: Optional[dict] = None,
    ):
        """Initialize validation error.

        Args:
            details: Non-empty list of violations
            message: Error message, defaults to a generic one
            context: Additional context

        Raises:
            TypeError: If details is not a non-empty list of ValidationIssue
        """
        if (
            not isinstance(details, list)
            or not details
            or not all(isinstance(issue, ValidationIssue) for issue in details)
        ):
            raise TypeError("ValidationError requires a non-empty list of ValidationIssue")
        if message is not None and not isinstance(message, str):
            raise TypeError("ValidationError message must be a string")
        if context is None:
            context = {}
        context["violations"] = len(details)
        super().__init__(message or self.default_message, context)
        self.details = details

    def describe(self) -> str:
        """Return every violation on its own line."""
        return "\n".join(str(issue) for issue in self.details)


class InvalidUsageError(IABFormatError):
    """Raised when a document handle is misused by its caller.

    Constructing a handle without a document, reading the document before
    parsing or validating without a schema are programming errors.
    """

    def __init__(self, message: str, context: Optional[dict] = None):
        super().__init__(message, context)


__all__ = [
    "IABFormatError",
    "ParsingError",
    "StructuralError",
    "ValidationIssue",
    "ValidationError",
    "InvalidUsageError",
]
