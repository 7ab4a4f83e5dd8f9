"""Document handle shared by the VAST and VMAP parsers.

A handle wraps one document and walks it through an explicit state machine::

    UNPARSED --parse()--> PARSED --validate()--> VALIDATED

Both transitions are memoized: parsing or validating again is a no-op that
returns the current result.
"""

from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Any

from lxml import etree
from pydantic import BaseModel

from ..config import ParserConfig
from ..events import ParserEvents
from ..exceptions import (
    IABFormatError,
    InvalidUsageError,
    ParsingError,
    StructuralError,
    ValidationError,
)
from ..helpers import prune
from ..log_config import DocumentContext, get_context_logger
from ..schema import to_document
from ..xml import xml_to_tree


class ParserState(str, Enum):
    """Lifecycle of a document handle."""

    UNPARSED = "unparsed"
    PARSED = "parsed"
    VALIDATED = "validated"


class BaseParser:
    """Base document handle.

    Subclasses provide the document ``kind``, a mapper factory and the schema
    validator. The source is either raw XML (``str`` or ``bytes``) or an
    attributed tree built beforehand.

    Example:
        >>> parser = VastParser(xml)
        >>> document = parser.parse()
        >>> parser.is_valid
        True
    """

    kind = "IAB"
    schema: Callable[[Any], BaseModel] | None = None

    def __init__(self, source: str | bytes | dict[str, Any], config: ParserConfig | None = None):
        """Initialize the document handle.

        Args:
            source: Raw XML document or attributed tree
            config: Parser configuration

        Raises:
            InvalidUsageError: If no document is given
        """
        if source is None or (isinstance(source, (str, bytes)) and not source):
            raise InvalidUsageError(f"A {self.kind} document is required")
        if not isinstance(source, (str, bytes, dict)):
            raise InvalidUsageError(
                f"Unsupported {self.kind} document type: {type(source).__name__}"
            )
        self.config = config or ParserConfig()
        self.logger = get_context_logger(f"{self.kind.lower()}_parser")
        self._source = source
        self._state = ParserState.UNPARSED
        self._document: dict[str, Any] | None = None
        self._model: BaseModel | None = None

    @classmethod
    def from_file(cls, path: str | Path, config: ParserConfig | None = None) -> "BaseParser":
        """Create a handle for a document stored on disk.

        The file is read as bytes so that the XML declaration decides the encoding.
        """
        return cls(Path(path).read_bytes(), config=config)

    def create_mapper(self):
        """Return the mapper turning the attributed tree into a document."""
        raise NotImplementedError

    @property
    def state(self) -> ParserState:
        return self._state

    @property
    def is_valid(self) -> bool:
        """Whether the document went through validation successfully."""
        return self._state is ParserState.VALIDATED

    @property
    def document(self) -> dict[str, Any]:
        """Parsed document tree.

        Raises:
            InvalidUsageError: If the document has not been parsed yet
        """
        if self._state is ParserState.UNPARSED:
            raise InvalidUsageError(f"{self.kind} document must be parsed first")
        return self._document

    @property
    def model(self) -> BaseModel:
        """Typed document, available once validated.

        Raises:
            InvalidUsageError: If the document has not been validated yet
        """
        if self._state is not ParserState.VALIDATED:
            raise InvalidUsageError(f"{self.kind} document must be validated first")
        return self._model

    def parse(self, skip_validation: bool = False) -> dict[str, Any]:
        """Parse the document, then validate it unless asked not to.

        Args:
            skip_validation: Only map the document, leaving it unvalidated

        Returns:
            Document tree (the same object on every later call)

        Raises:
            ParsingError: If the XML is malformed or the tree has a bad structure
            ValidationError: If the document breaks the schema rules
        """
        if self._state is not ParserState.UNPARSED:
            self.logger.debug(ParserEvents.PARSE_MEMOIZED, kind=self.kind, state=self._state.value)
            return self._document

        with DocumentContext(document_kind=self.kind):
            self.logger.debug(
                ParserEvents.PARSE_STARTED, source_type=type(self._source).__name__
            )
            tree = self._build_tree()
            try:
                document = prune(self.create_mapper().map(tree))
            except StructuralError as e:
                self.logger.warning(ParserEvents.STRUCTURE_INVALID, error=e.message, path=e.path)
                raise ParsingError(
                    e,
                    message=f"{self.kind} document structure is invalid: {e.message}",
                    xml_preview=self._preview(),
                ) from e
            except IABFormatError:
                raise
            except (ValueError, TypeError, AttributeError, KeyError) as e:
                self.logger.error(ParserEvents.PARSE_FAILED, error=str(e))
                raise ParsingError(
                    e,
                    message=f"{self.kind} document could not be mapped: {e}",
                    xml_preview=self._preview(),
                ) from e

            self._document = document
            self._state = ParserState.PARSED
            self.logger.info(ParserEvents.PARSE_COMPLETED, skip_validation=skip_validation)

        if not skip_validation:
            self.validate()
        return self._document

    def validate(self) -> None:
        """Validate the parsed document.

        On success the document is replaced by its normalized form (defaults
        applied). Validating an already valid document does nothing.

        Raises:
            InvalidUsageError: If the document is not parsed or has no schema
            ValidationError: With every violation found
        """
        if self._state is ParserState.UNPARSED:
            raise InvalidUsageError(f"{self.kind} document must be parsed before validation")
        if self._state is ParserState.VALIDATED:
            return
        if self.schema is None:
            raise InvalidUsageError(f"No schema defined for {self.kind} documents")

        with DocumentContext(document_kind=self.kind):
            self.logger.debug(ParserEvents.VALIDATION_STARTED)
            try:
                model = self.schema(self._document)
            except ValidationError as e:
                self.logger.warning(
                    ParserEvents.VALIDATION_FAILED,
                    violations=len(e.details),
                    first_violation=str(e.details[0]),
                )
                raise

            self._model = model
            self._document = to_document(model)
            self._state = ParserState.VALIDATED
            self.logger.info(ParserEvents.VALIDATION_SUCCESS)

    def _build_tree(self) -> dict[str, Any]:
        if isinstance(self._source, dict):
            return self._source
        try:
            tree = xml_to_tree(self._source, self.config)
        except etree.XMLSyntaxError as e:
            self.logger.error(ParserEvents.PARSE_FAILED, error=str(e), xml_preview=self._preview())
            raise ParsingError(
                e, message=f"Failed to parse {self.kind} XML: {e}", xml_preview=self._preview()
            ) from e
        except (UnicodeError, LookupError, ValueError) as e:
            self.logger.error(ParserEvents.PARSE_FAILED, error=str(e), xml_preview=self._preview())
            raise ParsingError(
                e,
                message=f"Failed to decode or parse {self.kind} XML: {e}",
                xml_preview=self._preview(),
            ) from e
        self.logger.debug(ParserEvents.XML_CONVERTED, root=next(iter(tree), None))
        return tree

    def _preview(self) -> str | None:
        if isinstance(self._source, bytes):
            return self._source[: self.config.preview_length].decode("utf-8", errors="replace")
        if isinstance(self._source, str):
            return self._source[: self.config.preview_length]
        return None


__all__ = ["ParserState", "BaseParser"]
