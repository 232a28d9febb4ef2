"""
Forward index builder: assigns document and term ids and records the
position of every normalized token.

The forward index maps doc_id -> term_id -> positions. Ids are dense and
1-based, handed out in first-seen order. It is flushed once into docids.txt,
termids.txt and doc_index.txt, which the inverter then turns into the
term-major index.
"""

import logging
from pathlib import Path
from typing import Callable

from .errors import DocumentDecodeError
from .inverter import IndexInverter
from .paths import IndexPaths, prepare_output_dir
from .posting import format_doc_index_line
from .tokenizer import extract_document_text, normalize, read_document_file

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class ForwardIndexer:
    """
    Owns the id counters and the in-memory forward index for one build.
    """

    def __init__(self, stop_words: frozenset[str] | set[str]) -> None:
        self.stop_words = stop_words
        self.doc_ids: dict[str, int] = {}
        self.term_ids: dict[str, int] = {}
        self.forward: dict[int, dict[int, list[int]]] = {}

    def _doc_id(self, doc_name: str) -> int:
        doc_id = self.doc_ids.get(doc_name)
        if doc_id is None:
            doc_id = len(self.doc_ids) + 1
            self.doc_ids[doc_name] = doc_id
        return doc_id

    def _term_id(self, term: str) -> int:
        term_id = self.term_ids.get(term)
        if term_id is None:
            term_id = len(self.term_ids) + 1
            self.term_ids[term] = term_id
        return term_id

    def index_document(self, doc_name: str, text: str) -> int:
        """
        Normalize text and append each term's 1-based position under the
        document's id. Returns the document id.

        A document name is indexed only once; later documents with the same
        name are skipped so position lists stay strictly increasing.
        """
        if doc_name in self.doc_ids:
            logger.warning("Skipping duplicate document name: %s", doc_name)
            return self.doc_ids[doc_name]

        tokens = normalize(text, self.stop_words)
        doc_id = self._doc_id(doc_name)
        term_positions = self.forward.setdefault(doc_id, {})
        for position, token in enumerate(tokens, start=1):
            term_id = self._term_id(token)
            term_positions.setdefault(term_id, []).append(position)
        return doc_id

    @property
    def num_docs(self) -> int:
        return len(self.doc_ids)

    @property
    def num_terms(self) -> int:
        return len(self.term_ids)

    def write(self, paths: IndexPaths) -> None:
        write_forward_index(self, paths)


def write_forward_index(indexer: ForwardIndexer, paths: IndexPaths) -> None:
    """Write docids.txt, termids.txt and doc_index.txt."""
    with open(paths.doc_ids, "w", encoding="utf-8", newline="\n") as f:
        for doc_name, doc_id in sorted(indexer.doc_ids.items(), key=lambda x: x[1]):
            f.write(f"{doc_id}\t{doc_name}\n")

    with open(paths.term_ids, "w", encoding="utf-8", newline="\n") as f:
        for term, term_id in sorted(indexer.term_ids.items(), key=lambda x: x[1]):
            f.write(f"{term_id:<4}\t{term}\n")

    with open(paths.doc_index, "w", encoding="utf-8", newline="\n") as f:
        for doc_id, terms in indexer.forward.items():
            for term_id, positions in terms.items():
                if positions:
                    f.write(format_doc_index_line(doc_id, term_id, positions))


def list_corpus_files(corpus_dir: Path) -> list[Path]:
    """All regular, non-hidden files under corpus_dir, in sorted path order."""
    corpus_dir = Path(corpus_dir)
    return sorted(
        (p for p in corpus_dir.rglob("*") if p.is_file() and not p.name.startswith(".")),
        key=lambda p: str(p),
    )


def build_forward_index_from_directory(
    corpus_dir: Path,
    stop_words: frozenset[str] | set[str],
    *,
    progress: ProgressCallback | None = None,
) -> ForwardIndexer:
    """
    Index every document under corpus_dir (recursive) by base filename.
    Documents whose name or content cannot be decoded are skipped with a
    warning.
    """
    indexer = ForwardIndexer(stop_words)
    files = list_corpus_files(corpus_dir)
    total = len(files)
    for done, filepath in enumerate(files, start=1):
        try:
            filepath.name.encode("utf-8")
            content = read_document_file(filepath)
        except UnicodeEncodeError as e:
            logger.warning("Skipping %s: file name is not valid UTF-8 (%s)", filepath, e)
        except (DocumentDecodeError, OSError) as e:
            logger.warning("Could not read %s: %s", filepath, e)
        else:
            indexer.index_document(filepath.name, extract_document_text(content))
        if progress is not None:
            progress(done, total)
    return indexer


def build_all(
    corpus_dir: Path,
    output_dir: Path,
    stop_words: frozenset[str] | set[str],
    *,
    progress: ProgressCallback | None = None,
) -> IndexPaths:
    """
    Run the whole pipeline: forward index, its three files, then inversion
    into term_index.txt and term_info.txt. Returns the artifact paths.
    """
    paths = prepare_output_dir(output_dir)
    indexer = build_forward_index_from_directory(corpus_dir, stop_words, progress=progress)
    indexer.write(paths)
    logger.info("Indexed %d documents, %d terms", indexer.num_docs, indexer.num_terms)

    inverter = IndexInverter()
    inverter.build(paths.doc_index)
    inverter.write(paths.term_index, paths.term_info)
    return paths
