"""
Exceptions raised by the indexing pipeline and the index reader.

Query-time errors derive from LookupError so callers can treat an unknown
document or term like a missing key; the reader's print_* helpers catch them
and report a "not found" message instead of aborting.
"""


class PosIndexError(Exception):
    """Base class for all posindex errors."""


class DocumentDecodeError(PosIndexError, ValueError):
    """A source document could not be decoded with any fallback encoding."""


class MissingArtifactError(PosIndexError, FileNotFoundError):
    """An index artifact required by the reader does not exist."""


class OutputDirectoryError(PosIndexError, OSError):
    """The output directory could not be created or cleared."""


class QueryError(PosIndexError, LookupError):
    """A lookup against a loaded index failed."""


class DocumentNotFoundError(QueryError):
    def __init__(self, doc_name: str) -> None:
        super().__init__(f"Document not found: {doc_name}")
        self.doc_name = doc_name


class TermNotFoundError(QueryError):
    def __init__(self, term: str) -> None:
        super().__init__(f"Term not found: {term}")
        self.term = term


class UnstemmableTermError(QueryError):
    def __init__(self, term: str) -> None:
        super().__init__(f"Unable to stem term: {term}")
        self.term = term


class TermNotInDocumentError(QueryError):
    def __init__(self, term: str, doc_name: str) -> None:
        super().__init__(f"Term {term!r} not found in document: {doc_name}")
        self.term = term
        self.doc_name = doc_name
