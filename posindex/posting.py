"""
Posting data structures and the on-disk line grammar of the index files.

doc_index.txt   <docid>\t<termid>\t<p1> <p2> ... <pN>
term_index.txt  <termid>\t<d>:<p>\t<ddoc>:<dpos>\t...
term_info.txt   <termid>\t<offset>\t<total_occurrences>\t<doc_count>

A term_index line is gap encoded. The first pair is absolute. Each later pair
holds the distance to the previous document, and the distance to the previous
position in the same document. When the document gap is non-zero the
position gap is measured from 0, i.e. the first position of every document
is written as-is.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator


@dataclass(frozen=True)
class TermInfo:
    """
    Per-term statistics stored in term_info.txt.
    - offset: byte offset of the term's line in term_index.txt
    - total_occurrences: number of positions across all documents
    - doc_count: number of distinct documents containing the term
    """

    offset: int
    total_occurrences: int
    doc_count: int

    def to_line(self, term_id: int) -> str:
        return f"{term_id}\t{self.offset}\t{self.total_occurrences}\t{self.doc_count}\n"


def format_doc_index_line(doc_id: int, term_id: int, positions: Iterable[int]) -> str:
    return f"{doc_id}\t{term_id}\t{' '.join(str(p) for p in positions)}\n"


def parse_doc_index_line(line: str) -> tuple[int, int, list[int]]:
    """
    Parse one doc_index.txt line into (doc_id, term_id, positions).
    Raises ValueError on too few fields or a non-integer value.
    """
    parts = line.rstrip("\n").split("\t")
    if len(parts) < 3:
        raise ValueError(f"expected 3 tab-separated fields, got {len(parts)}")
    doc_id = int(parts[0].strip())
    term_id = int(parts[1].strip())
    positions = [int(p) for p in parts[2].split()]
    if not positions:
        raise ValueError("empty position list")
    return doc_id, term_id, positions


def parse_term_info_line(line: str) -> tuple[int, TermInfo]:
    parts = line.rstrip("\n").split("\t")
    if len(parts) < 4:
        raise ValueError(f"expected 4 tab-separated fields, got {len(parts)}")
    term_id, offset, total, doc_count = (int(p.strip()) for p in parts[:4])
    return term_id, TermInfo(offset=offset, total_occurrences=total, doc_count=doc_count)


def encode_term_line(term_id: int, postings: dict[int, list[int]]) -> str:
    """
    Gap encode the postings of one term into a term_index.txt line
    (newline included). Documents and positions are written in ascending order.
    """
    fields: list[str] = []
    last_doc: int | None = None
    for doc_id in sorted(postings):
        last_pos = 0
        for pos in sorted(postings[doc_id]):
            if last_doc is None:
                fields.append(f"{doc_id}:{pos}")
            else:
                fields.append(f"{doc_id - last_doc}:{pos - last_pos}")
            last_doc = doc_id
            last_pos = pos
    return "\t".join([str(term_id)] + fields) + "\n"


def iter_gap_pairs(fields: Iterable[str]) -> Iterator[tuple[int, int]]:
    """
    Decode "<ddoc>:<dpos>" gap fields into absolute (doc_id, position) pairs.
    Raises ValueError on a malformed field.
    """
    cur_doc: int | None = None
    cur_pos = 0
    for entry in fields:
        doc_part, sep, pos_part = entry.partition(":")
        if not sep:
            raise ValueError(f"malformed posting entry: {entry!r}")
        doc_gap = int(doc_part)
        pos_gap = int(pos_part)
        if cur_doc is None:
            cur_doc, cur_pos = doc_gap, pos_gap
        else:
            if doc_gap != 0:
                cur_doc += doc_gap
                cur_pos = 0
            cur_pos += pos_gap
        yield cur_doc, cur_pos


def decode_term_line(line: str) -> tuple[int, dict[int, list[int]]]:
    """
    Decode a term_index.txt line into (term_id, {doc_id: positions}).
    The leading field is the term id echo, not a posting.
    """
    parts = line.rstrip("\n").split("\t")
    term_id = int(parts[0].strip())
    postings: dict[int, list[int]] = {}
    for doc_id, pos in iter_gap_pairs(p for p in parts[1:] if p):
        postings.setdefault(doc_id, []).append(pos)
    return term_id, postings
