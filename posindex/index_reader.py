"""
Index reader: answers document, term and term-in-document queries against an
index directory.

The id maps, term_info.txt and the forward doc_index.txt are loaded eagerly.
term_index.txt is never loaded; a term-in-document query opens it, seeks to
the byte offset recorded in term_info.txt, reads one line and closes it.

Query terms go through the same normalize() the indexer used, so "Running"
finds the term stored as "run".
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, TypeVar

from .errors import (
    DocumentNotFoundError,
    MissingArtifactError,
    QueryError,
    TermNotFoundError,
    TermNotInDocumentError,
    UnstemmableTermError,
)
from .paths import IndexPaths
from .posting import (
    TermInfo,
    decode_term_line,
    iter_gap_pairs,
    parse_doc_index_line,
    parse_term_info_line,
)
from .tokenizer import normalize

logger = logging.getLogger(__name__)

ENCODING = "utf-8"

T = TypeVar("T")


@dataclass
class DocInfo:
    doc_name: str
    doc_id: int
    distinct_terms: int
    total_terms: int


@dataclass
class TermStats:
    term: str
    term_id: int
    doc_count: int
    total_occurrences: int
    offset: int


@dataclass
class TermDocInfo:
    term: str
    doc_name: str
    term_id: int
    doc_id: int
    positions: list[int]

    @property
    def tf(self) -> int:
        return len(self.positions)


def _read_lines(path: Path) -> list[tuple[int, str]]:
    """Non-blank lines of path with their 1-based line numbers."""
    with open(path, "r", encoding=ENCODING) as f:
        return [(n, line.rstrip("\n")) for n, line in enumerate(f, start=1) if line.strip()]


class IndexReader:
    """
    Random-access reader over the five artifacts of one index directory.
    Raises MissingArtifactError if any artifact is absent.
    """

    def __init__(self, index_dir: Path | IndexPaths, stop_words: frozenset[str] | set[str]) -> None:
        self.paths = index_dir if isinstance(index_dir, IndexPaths) else IndexPaths(Path(index_dir))
        self.stop_words = stop_words

        for path in self.paths.all():
            if not path.exists():
                raise MissingArtifactError(f"Index file not found: {path}")

        self.doc_ids: dict[str, int] = {}
        self.terms: dict[int, str] = {}
        self.term_ids: dict[str, int] = {}
        self.term_info: dict[int, TermInfo] = {}
        self.doc_index: dict[int, dict[int, list[int]]] = {}
        self.term_index_path = self.paths.term_index

        self._load_doc_ids(self.paths.doc_ids)
        self._load_term_ids(self.paths.term_ids)
        self._load_term_info(self.paths.term_info)
        self._load_doc_index(self.paths.doc_index)

    # --- loading ---

    def _skip(self, path: Path, line_no: int, line: str, reason: object) -> None:
        logger.warning("Skipping malformed line %d in %s: %r (%s)", line_no, path.name, line, reason)

    def _load_doc_ids(self, path: Path) -> None:
        for line_no, line in _read_lines(path):
            parts = line.split("\t", 1)
            if len(parts) < 2:
                self._skip(path, line_no, line, "too few fields")
                continue
            try:
                doc_id = int(parts[0].strip())
            except ValueError as e:
                self._skip(path, line_no, line, e)
                continue
            self.doc_ids[parts[1].strip()] = doc_id

    def _load_term_ids(self, path: Path) -> None:
        for line_no, line in _read_lines(path):
            parts = line.split("\t")
            if len(parts) < 2:
                self._skip(path, line_no, line, "too few fields")
                continue
            try:
                term_id = int(parts[0].strip())
            except ValueError as e:
                self._skip(path, line_no, line, e)
                continue
            term = parts[1].strip()
            self.terms[term_id] = term
            self.term_ids[term] = term_id

    def _load_term_info(self, path: Path) -> None:
        for line_no, line in _read_lines(path):
            try:
                term_id, info = parse_term_info_line(line)
            except ValueError as e:
                self._skip(path, line_no, line, e)
                continue
            self.term_info[term_id] = info

    def _load_doc_index(self, path: Path) -> None:
        for line_no, line in _read_lines(path):
            try:
                doc_id, term_id, positions = parse_doc_index_line(line)
            except ValueError as e:
                self._skip(path, line_no, line, e)
                continue
            self.doc_index.setdefault(doc_id, {}).setdefault(term_id, []).extend(positions)

    # --- lookups ---

    def resolve_doc(self, doc_name: str) -> int:
        doc_id = self.doc_ids.get(doc_name)
        if doc_id is None:
            raise DocumentNotFoundError(doc_name)
        return doc_id

    def resolve_term(self, term: str) -> int:
        """Normalize term and return the id of its first stem."""
        stems = normalize(term, self.stop_words)
        if not stems:
            raise UnstemmableTermError(term)
        term_id = self.term_ids.get(stems[0])
        if term_id is None or term_id not in self.term_info:
            raise TermNotFoundError(term)
        return term_id

    def read_term_line(self, term_id: int) -> str:
        """
        Seek to the term's offset in term_index.txt and return that one line.
        Raises OSError on I/O failure and ValueError if the line found there
        does not belong to term_id.
        """
        offset = self.term_info[term_id].offset
        with open(self.term_index_path, "rb") as f:
            f.seek(offset)
            line = f.readline().decode(ENCODING).rstrip("\n")
        echo = line.split("\t", 1)[0].strip()
        if echo != str(term_id):
            raise ValueError(f"term_index.txt offset {offset} holds term {echo!r}, expected {term_id}")
        return line

    def read_postings(self, term_id: int) -> dict[int, list[int]]:
        """Decode the full posting list of term_id: doc_id -> positions."""
        return decode_term_line(self.read_term_line(term_id))[1]

    def doc_info(self, doc_name: str) -> DocInfo:
        doc_id = self.resolve_doc(doc_name)
        term_positions = self.doc_index.get(doc_id, {})
        return DocInfo(
            doc_name=doc_name,
            doc_id=doc_id,
            distinct_terms=len(term_positions),
            total_terms=sum(len(p) for p in term_positions.values()),
        )

    def term_stats(self, term: str) -> TermStats:
        term_id = self.resolve_term(term)
        info = self.term_info[term_id]
        return TermStats(
            term=term,
            term_id=term_id,
            doc_count=info.doc_count,
            total_occurrences=info.total_occurrences,
            offset=info.offset,
        )

    def term_doc_info(self, term: str, doc_name: str) -> TermDocInfo:
        """
        Positions of term within doc_name, read from term_index.txt.
        Walks the gap-encoded pairs and keeps the run whose decoded doc id
        matches; doc ids are ascending so the walk stops once past it.
        """
        term_id = self.resolve_term(term)
        doc_id = self.resolve_doc(doc_name)
        fields = self.read_term_line(term_id).split("\t")[1:]

        positions: list[int] = []
        for entry_doc, pos in iter_gap_pairs(f for f in fields if f):
            if entry_doc == doc_id:
                positions.append(pos)
            elif entry_doc > doc_id:
                break
        if not positions:
            raise TermNotInDocumentError(term, doc_name)
        return TermDocInfo(term=term, doc_name=doc_name, term_id=term_id, doc_id=doc_id, positions=positions)

    # --- printing ---

    def _query(self, fn: Callable[[], T]) -> T | None:
        try:
            return fn()
        except QueryError as e:
            print(e, file=sys.stderr)
        except OSError as e:
            logger.error("Failed to read inverted list: %s", e)
        except ValueError as e:
            logger.error("Corrupt inverted list: %s", e)
        return None

    def print_doc_info(self, doc_name: str) -> None:
        info = self._query(lambda: self.doc_info(doc_name))
        if info is None:
            return
        print(f"Listing for document: {info.doc_name}")
        print(f"DOCID: {info.doc_id}")
        print(f"Distinct terms: {info.distinct_terms}")
        print(f"Total terms: {info.total_terms}")

    def print_term_info(self, term: str) -> None:
        stats = self._query(lambda: self.term_stats(term))
        if stats is None:
            return
        print(f"Listing for term: {stats.term}")
        print(f"TERMID: {stats.term_id}")
        print(f"Number of documents containing term: {stats.doc_count}")
        print(f"Term frequency in corpus: {stats.total_occurrences}")
        print(f"Inverted list offset: {stats.offset}")

    def print_term_doc_info(self, term: str, doc_name: str) -> None:
        info = self._query(lambda: self.term_doc_info(term, doc_name))
        if info is None:
            return
        print(f"Inverted list for term: {info.term}")
        print(f"In document: {info.doc_name}")
        print(f"TERMID: {info.term_id}")
        print(f"DOCID: {info.doc_id}")
        print(f"Term frequency in document: {info.tf}")
        print(f"Positions: {', '.join(str(p) for p in info.positions)}")
