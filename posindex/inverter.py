"""
Index inverter: turns the document-major doc_index.txt into the term-major
term_index.txt plus the term_info.txt sidecar.

term_info.txt records, for every term, the byte offset of its line in
term_index.txt so the reader can seek straight to one posting list without
loading the rest.
"""

import logging
from pathlib import Path

from .posting import TermInfo, encode_term_line, parse_doc_index_line

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


class IndexInverter:
    """
    Two-phase inversion: build() regroups doc_index lines by term,
    write() gap encodes each term and records its offset and statistics.
    """

    def __init__(self) -> None:
        # term_id -> doc_id -> positions
        self.inverted: dict[int, dict[int, list[int]]] = {}
        self.term_info: dict[int, TermInfo] = {}

    def add(self, doc_id: int, term_id: int, positions: list[int]) -> None:
        """Append positions for (doc_id, term_id); repeated pairs are concatenated."""
        self.inverted.setdefault(term_id, {}).setdefault(doc_id, []).extend(positions)

    def build(self, doc_index_path: Path) -> None:
        """
        Read doc_index.txt line by line. Malformed lines are skipped with a
        warning.
        """
        with open(doc_index_path, "r", encoding=ENCODING) as f:
            for line_no, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    doc_id, term_id, positions = parse_doc_index_line(line)
                except ValueError as e:
                    logger.warning(
                        "Skipping malformed line %d in %s: %r (%s)",
                        line_no, doc_index_path, line.rstrip("\n"), e,
                    )
                    continue
                self.add(doc_id, term_id, positions)

    def write(self, term_index_path: Path, term_info_path: Path) -> dict[int, TermInfo]:
        """
        Write term_index.txt in ascending term id order, then term_info.txt
        in the same order. Returns term_id -> TermInfo.
        """
        self.term_info = {}
        offset = 0
        with open(term_index_path, "w", encoding=ENCODING, newline="\n") as f:
            for term_id in sorted(self.inverted):
                postings = self.inverted[term_id]
                line = encode_term_line(term_id, postings)
                f.write(line)
                self.term_info[term_id] = TermInfo(
                    offset=offset,
                    total_occurrences=sum(len(p) for p in postings.values()),
                    doc_count=len(postings),
                )
                offset += len(line.encode(ENCODING))

        with open(term_info_path, "w", encoding=ENCODING, newline="\n") as f:
            for term_id, info in self.term_info.items():
                f.write(info.to_line(term_id))

        logger.info("Wrote %d terms to %s", len(self.term_info), term_index_path)
        return self.term_info

    def __len__(self) -> int:
        return len(self.inverted)
